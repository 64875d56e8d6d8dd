"""Provider-level failure types.

Every exception defined here is caught per provider by
`app.core.engine.generate_awareness_images` and rendered as a failed result
entry. None of them reaches the HTTP layer.
"""


class ProviderError(RuntimeError):
    """Base class for a single provider's generation failure."""


class ProviderConfigurationError(ProviderError):
    """Raised when a provider credential is missing."""


class ProviderResponseError(ProviderError):
    """Raised for non-success HTTP status or a response without image data."""
