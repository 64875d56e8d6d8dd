"""Outbound HTTP transport for the console, bounded by a cancellation token.

Timeout model:
    The console enforces a single wall-clock timeout for the whole request
    (not per provider). The timeout is expressed as a `CancellationToken`
    passed into `post_generation`: `cancel_after` arms it, and tests can call
    `cancel()` directly without real delays.

Cancellation behavior:
    When the token fires first, the in-flight request task is cancelled, which
    closes the underlying connection. The server observes a dropped request
    and its provider work is orphaned.

Error handling strategy:
    - Token fired -> `ClientTimeoutError`.
    - Transport errors (`httpx.RequestError`) propagate to the caller.
"""

import asyncio
import contextlib
import logging

import httpx

logger = logging.getLogger(__name__)

GENERATE_PATH = "/generate"


class ClientTimeoutError(Exception):
    """The console aborted the request after its timeout."""


class GenerationFailedError(Exception):
    """The server answered, but not with a usable generation result."""


class CancellationToken:
    """One-shot cancellation signal shared between a timer and a request."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def cancel_after(self, seconds: float) -> asyncio.TimerHandle:
        """Schedule `cancel()` on the running loop; returns the timer handle."""
        loop = asyncio.get_running_loop()
        return loop.call_later(seconds, self.cancel)


async def post_generation(
    client: httpx.AsyncClient,
    city: str,
    issue: str,
    token: CancellationToken,
) -> httpx.Response:
    """Send one `POST /generate` that is abandoned when `token` fires.

    Args:
        client: Client whose `base_url` points at the API server.
        city: Selected city.
        issue: Selected issue.
        token: Cancellation signal; checked before sending and raced against
            the request.

    Returns:
        The raw HTTP response, whatever its status.

    Raises:
        ClientTimeoutError: The token fired before a response arrived.
    """
    if token.cancelled:
        raise ClientTimeoutError("Request cancelled before sending")

    request_task = asyncio.ensure_future(
        client.post(GENERATE_PATH, json={"city": city, "issue": issue})
    )
    cancel_task = asyncio.ensure_future(token.wait())

    try:
        done, _ = await asyncio.wait(
            {request_task, cancel_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        cancel_task.cancel()
        # also reached when the caller itself is cancelled mid-wait
        if not request_task.done():
            request_task.cancel()

    if request_task in done:
        return request_task.result()

    logger.warning("Aborting generation request for city=%r issue=%r", city, issue)
    with contextlib.suppress(asyncio.CancelledError, httpx.HTTPError):
        await request_task
    raise ClientTimeoutError("Request took too long")
