"""Provider/runtime configuration for the image-generation layer.

Architectural role:
    Centralizes provider endpoints, fixed generation parameters and credential
    lookup for `app.image.client`, `app.image.dalle_client` and
    `app.image.providers`.

Model call flow integration:
    - `providers.build_default_providers` reads `PROVIDER_ORDER`.
    - `client.send_stability_request` consumes `STABILITY_URL` and
      `STABILITY_PARAMS`.
    - `dalle_client.send_dalle_request` consumes `DALLE_MODEL` and
      `DALLE_PARAMS`.

Determinism:
    Deterministic for a fixed process environment and key files. Values are
    resolved at import time, except credentials which are read per call by
    `load_key` so that a key added at runtime is picked up.

Failure behavior:
    Missing key material is represented as `None`. Provider adapters convert it
    into a `ProviderConfigurationError`; it is never a startup error.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# Static fallback shown for failed providers and the reserved future slot.
PLACEHOLDER_URL = "/placeholder.svg?height=1024&width=1024"
PLACEHOLDER_MARKER = "placeholder.svg"

FUTURE_PROVIDER_LABEL = "Future Provider"
FAILED_SUFFIX = " (Failed)"

# Provider invocation order. Result entries follow this order.
PROVIDER_ORDER = ["dalle", "stability"]

IMAGE_PROVIDERS = {

    "dalle": {
        "label": "DALL-E",
        "key_file": "config/openai.key"
    },

    "stability": {
        "label": "Stability AI",
        "url": (
            "https://api.stability.ai/v1/generation/"
            "stable-diffusion-xl-1024-v1-0/text-to-image"
        ),
        "key_file": "config/stability.key"
    }

}

STABILITY_URL = IMAGE_PROVIDERS["stability"]["url"]

# Fixed SDXL generation parameters.
STABILITY_PARAMS = {
    "cfg_scale": 7,
    "steps": 30,
    "width": 1024,
    "height": 1024,
    "samples": 1,
}

DALLE_MODEL = os.getenv("DALLE_MODEL", "dall-e-2")

DALLE_PARAMS = {
    "n": 1,
    "size": "1024x1024",
    "response_format": "b64_json",
}

# Opt-in concurrent provider calls; output order is unaffected.
PARALLEL_PROVIDERS = os.getenv("IMAGE_PROVIDERS_PARALLEL", "false").strip().lower() in (
    "1", "true", "yes"
)


def key_env_name(path):
    """Return the environment variable that overrides a key file.

    `config/openai.key` -> `OPENAI_API_KEY`.
    """
    return os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/stability.key` -> `STABILITY_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing or blank file returns `None`.
    """
    if not path:
        return None
    env_value = os.getenv(key_env_name(path))
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None
