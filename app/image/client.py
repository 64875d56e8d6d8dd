"""Stability AI text-to-image HTTP client.

Processing flow:
    1. Resolve the Stability credential from env or key file.
    2. Submit the prompt with fixed SDXL generation parameters.
    3. Raise on non-2xx status or a response without image data.
    4. Return the first artifact's base64 payload.

Base64 and temporary files:
    - The payload is returned undecoded.
    - No temporary files are created.

Error handling strategy:
    - Missing credential -> `ProviderConfigurationError`.
    - Non-2xx status, unparsable body or missing artifact ->
      `ProviderResponseError`.
    - Transport failures propagate as `requests` exceptions; the orchestrator
      treats them like any other provider failure.

Security considerations:
    - The provider's error body is logged, the credential is not.
"""

import logging

import requests

from app.image.errors import ProviderConfigurationError, ProviderResponseError
from app.image.provider_config import (
    IMAGE_PROVIDERS,
    STABILITY_PARAMS,
    STABILITY_URL,
    key_env_name,
    load_key,
)

logger = logging.getLogger(__name__)


def build_stability_payload(prompt: str) -> dict:
    """Return the SDXL request body for `prompt`."""
    return {
        "text_prompts": [{"text": prompt, "weight": 1}],
        **STABILITY_PARAMS,
    }


def send_stability_request(prompt: str) -> str:
    """Generate one image with Stability AI.

    Args:
        prompt: Text prompt for generation.

    Returns:
        Base64-encoded PNG payload.

    Error handling:
        - Missing API key -> `ProviderConfigurationError`
        - Non-2xx HTTP response -> `ProviderResponseError`
        - Missing `artifacts[0].base64` -> `ProviderResponseError`
    """
    key_file = IMAGE_PROVIDERS["stability"]["key_file"]
    api_key = load_key(key_file)
    if not api_key:
        raise ProviderConfigurationError(f"{key_env_name(key_file)} is not configured")

    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    response = requests.post(
        STABILITY_URL,
        json=build_stability_payload(prompt),
        headers=headers,
    )

    if not response.ok:
        logger.error("Stability AI error response (%s): %s", response.status_code, response.text)
        raise ProviderResponseError(f"Stability AI error: {response.reason}")

    try:
        data = response.json()
    except ValueError as exc:
        raise ProviderResponseError("No image data received from Stability AI") from exc

    artifacts = data.get("artifacts") if isinstance(data, dict) else None
    payload = artifacts[0].get("base64") if artifacts and isinstance(artifacts[0], dict) else None
    if not payload:
        raise ProviderResponseError("No image data received from Stability AI")

    return payload
