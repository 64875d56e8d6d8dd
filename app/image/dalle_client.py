"""DALL-E image client built on the OpenAI Python SDK.

Processing flow:
    1. Resolve the OpenAI credential from env or key file.
    2. Build an SDK client for this call.
    3. Request one base64 JSON image.
    4. Return the first image's `b64_json` payload.

Error handling strategy:
    - Missing credential -> `ProviderConfigurationError`.
    - Response without image data -> `ProviderResponseError`.
    - SDK errors (`openai.APIError` and subclasses) propagate unchanged and
      are handled by the orchestrator like any other provider failure.
"""

import logging

from openai import OpenAI

from app.image.errors import ProviderConfigurationError, ProviderResponseError
from app.image.provider_config import (
    DALLE_MODEL,
    DALLE_PARAMS,
    IMAGE_PROVIDERS,
    key_env_name,
    load_key,
)

logger = logging.getLogger(__name__)


def get_openai_client() -> OpenAI:
    """Return an SDK client for the configured key or raise when missing."""
    key_file = IMAGE_PROVIDERS["dalle"]["key_file"]
    api_key = load_key(key_file)
    if not api_key:
        raise ProviderConfigurationError(f"{key_env_name(key_file)} is not configured")
    return OpenAI(api_key=api_key)


def send_dalle_request(prompt: str) -> str:
    """Generate one image with DALL-E.

    Args:
        prompt: Text prompt for generation.

    Returns:
        Base64-encoded PNG payload.
    """
    client = get_openai_client()
    logger.info("Generating with DALL-E (model=%s)", DALLE_MODEL)

    response = client.images.generate(
        model=DALLE_MODEL,
        prompt=prompt,
        **DALLE_PARAMS,
    )

    data = getattr(response, "data", None) or []
    payload = getattr(data[0], "b64_json", None) if data else None
    if not payload:
        raise ProviderResponseError("No image data received from DALL-E")

    return payload
