"""Generation data contracts shared by the HTTP API and the console.

Architectural role:
    Defines the request, result-entry and response envelopes exchanged over
    `POST /generate`. The server builds them in `app.core.engine`; the console
    validates incoming bodies against the same models.

Serialization:
    `ImageResult.error` is omitted from JSON when unset, so a successful entry
    carries no `error` key at all. Clients count successes by that absence.

Determinism:
    Purely structural. Timestamps are supplied by callers.
"""

from datetime import datetime, timezone

from pydantic import BaseModel


class GenerationRequest(BaseModel):
    """City/issue pair selected in the console."""

    city: str
    issue: str


class ImageResult(BaseModel):
    """One gallery entry, success or failure.

    Attributes:
        url: Base64 data URL on success, placeholder path otherwise.
        provider: Provider display name, `" (Failed)"`-suffixed on error.
        error: Failure message; present only on failure.
    """

    url: str
    provider: str
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class GenerationResponse(BaseModel):
    """Envelope returned by `POST /generate`.

    Success bodies carry `images` and `timestamp`; error bodies carry `error`
    and usually `timestamp`.
    """

    success: bool
    images: list[ImageResult] | None = None
    timestamp: str | None = None
    error: str | None = None

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
