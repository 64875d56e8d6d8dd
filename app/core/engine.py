"""Core request orchestration for awareness image generation.

Architectural role:
    Provides the execution pipeline used by the HTTP API to turn one
    city/issue pair into an ordered list of gallery entries.

Control-flow model:
    1. Validate that city and issue are present.
    2. Build one prompt shared by every provider.
    3. Invoke each configured provider in order, each inside its own guard.
    4. Convert every provider failure into a failed placeholder entry.
    5. Append the reserved future-provider placeholder entry.

Ordering guarantee:
    Entries follow the configured provider order, then the future-provider
    slot. This holds in the optional parallel mode as well, regardless of
    which provider finishes first.

Error handling strategy:
    Provider failures never propagate. They are logged and rendered as data
    (an entry with `error`). Only request validation raises
    (`GenerationRequestError`), and the API adapter maps anything else that
    escapes to a 500 envelope.

Side effects:
    - Outbound provider calls, each executed in a worker thread via
      `asyncio.to_thread`.
    - Log output per provider attempt.

Determinism:
    Validation, prompt assembly and entry ordering are deterministic. Provider
    output is not.
"""

import asyncio
import logging
from typing import Any, Sequence

from app.core.result_types import (
    GenerationRequest,
    GenerationResponse,
    ImageResult,
    utc_timestamp,
)
from app.image.provider_config import (
    FAILED_SUFFIX,
    FUTURE_PROVIDER_LABEL,
    PARALLEL_PROVIDERS,
    PLACEHOLDER_URL,
)
from app.image.providers import ImageProvider, build_default_providers
from app.prompting.prompt_builder import build_awareness_prompt


logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "City and issue are required"
DATA_URL_PREFIX = "data:image/png;base64,"


class GenerationRequestError(ValueError):
    """Raised when a generation request lacks a city or an issue."""


_DEFAULT_PROVIDERS: list[ImageProvider] | None = None


def set_image_providers(providers: Sequence[ImageProvider] | None) -> None:
    """Override or clear the default provider list.

    Args:
        providers: Ordered providers, or `None` to fall back to the configured
            defaults on next use.
    """
    global _DEFAULT_PROVIDERS
    _DEFAULT_PROVIDERS = list(providers) if providers is not None else None


def get_image_providers() -> list[ImageProvider]:
    """Return the active provider list, building defaults lazily."""
    global _DEFAULT_PROVIDERS
    if _DEFAULT_PROVIDERS is None:
        _DEFAULT_PROVIDERS = build_default_providers()
    return _DEFAULT_PROVIDERS


def validate_generation_request(body: Any) -> GenerationRequest:
    """Extract city and issue from a parsed JSON body.

    Args:
        body: Decoded request JSON. Must be an object.

    Returns:
        Validated `GenerationRequest`.

    Raises:
        GenerationRequestError: Missing, blank or non-string city/issue.
        TypeError: Body is not a JSON object (treated as malformed upstream).
    """
    if not isinstance(body, dict):
        raise TypeError("Request body must be a JSON object")

    city = body.get("city")
    issue = body.get("issue")

    if not isinstance(city, str) or not isinstance(issue, str):
        raise GenerationRequestError(MISSING_FIELDS_MESSAGE)
    if not city.strip() or not issue.strip():
        raise GenerationRequestError(MISSING_FIELDS_MESSAGE)

    return GenerationRequest(city=city, issue=issue)


def placeholder_result(provider: str, error: str | None = None) -> ImageResult:
    """Return a placeholder entry for a failed or unimplemented provider."""
    return ImageResult(url=PLACEHOLDER_URL, provider=provider, error=error)


def _error_text(exc: Exception, provider_name: str) -> str:
    return str(exc) or f"{provider_name} generation failed"


async def attempt_provider(provider: ImageProvider, prompt: str) -> ImageResult:
    """Run one provider and normalize its outcome into an `ImageResult`.

    Important behavior:
        - Runs the blocking provider call in a worker thread.
        - Never raises for provider failures; cancellation still propagates.

    Edge cases:
        - Exceptions with empty messages get a generic
          `"<provider> generation failed"` text.
    """
    logger.info("Attempting %s generation", provider.name)
    try:
        payload = await asyncio.to_thread(provider.generate, prompt)
    except Exception as exc:
        logger.exception("%s generation failed", provider.name)
        return placeholder_result(
            provider.name + FAILED_SUFFIX,
            error=_error_text(exc, provider.name),
        )

    logger.info("%s generation successful", provider.name)
    return ImageResult(url=DATA_URL_PREFIX + payload, provider=provider.name)


async def generate_awareness_images(
    city: str,
    issue: str,
    providers: Sequence[ImageProvider] | None = None,
    parallel: bool | None = None,
) -> list[ImageResult]:
    """Generate one entry per provider plus the future-provider placeholder.

    Args:
        city: Selected city.
        issue: Selected climate issue.
        providers: Ordered providers; defaults to `get_image_providers()`.
        parallel: Run provider calls concurrently. Defaults to the
            `IMAGE_PROVIDERS_PARALLEL` setting.

    Returns:
        `len(providers) + 1` entries in provider order, future slot last.
    """
    if providers is None:
        providers = get_image_providers()
    if parallel is None:
        parallel = PARALLEL_PROVIDERS

    prompt = build_awareness_prompt(city, issue)
    logger.info("Generating images for city=%r issue=%r", city, issue)

    if parallel:
        # gather preserves argument order, not completion order
        images = list(await asyncio.gather(
            *(attempt_provider(provider, prompt) for provider in providers)
        ))
    else:
        images = []
        for provider in providers:
            images.append(await attempt_provider(provider, prompt))

    images.append(placeholder_result(FUTURE_PROVIDER_LABEL))

    failed = sum(1 for image in images[:-1] if image.failed)
    if failed:
        logger.warning("%d of %d providers failed", failed, len(images) - 1)

    return images


async def process_generation(
    body: Any,
    providers: Sequence[ImageProvider] | None = None,
) -> GenerationResponse:
    """Validate a request body and build the success envelope.

    Top-level `success` is `True` whenever the entry list was built, even if
    every provider failed.

    Raises:
        GenerationRequestError: Missing city or issue. No provider is called.
    """
    request = validate_generation_request(body)
    images = await generate_awareness_images(request.city, request.issue, providers=providers)
    logger.info("Returning response with %d images", len(images))
    return GenerationResponse(success=True, images=images, timestamp=utc_timestamp())
