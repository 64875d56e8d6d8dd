"""Image provider capability and default provider registry.

Role in pipeline:
    - Wraps each provider client behind one small interface: a display `name`
      and `generate(prompt) -> base64 payload`.
    - Builds the ordered provider list consumed by core orchestration.

Extending:
    A new provider is a new `ImageProvider` subclass registered in
    `PROVIDER_CLASSES` and listed in `PROVIDER_ORDER`; the orchestration loop is unchanged.

Error handling strategy:
    - Provider exceptions propagate to the orchestrator, which converts them
      into failed result entries.
"""

from app.image.client import send_stability_request
from app.image.dalle_client import send_dalle_request
from app.image.provider_config import IMAGE_PROVIDERS, PROVIDER_ORDER


class ImageProvider:
    """A text-to-image backend identified by its display name."""

    name: str = ""

    def generate(self, prompt: str) -> str:
        """Return a base64-encoded image for `prompt` or raise."""
        raise NotImplementedError


class DalleProvider(ImageProvider):
    name = IMAGE_PROVIDERS["dalle"]["label"]

    def generate(self, prompt: str) -> str:
        return send_dalle_request(prompt)


class StabilityProvider(ImageProvider):
    name = IMAGE_PROVIDERS["stability"]["label"]

    def generate(self, prompt: str) -> str:
        return send_stability_request(prompt)


PROVIDER_CLASSES: dict[str, type[ImageProvider]] = {
    "dalle": DalleProvider,
    "stability": StabilityProvider,
}


def build_default_providers() -> list[ImageProvider]:
    """Instantiate providers in configured invocation order."""
    return [PROVIDER_CLASSES[key]() for key in PROVIDER_ORDER]
