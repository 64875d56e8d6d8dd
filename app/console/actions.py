"""Console event handlers: generate, download and share.

Every handler takes the explicit `ConsoleState` and a `NotificationLog`
instead of reading ambient globals, so transitions can be exercised directly in
tests.

Generate flow:
    1. Clear prior results and set loading.
    2. `POST /generate` bounded by a cancellation token armed with the
       console timeout.
    3. Map failures to notifications (timeout, HTTP error, unparsable body,
       `success: false`).
    4. On success replace the gallery and report how many entries succeeded.
    5. Clear loading on every path.

Download flow:
    - Placeholder entries are blocked with a notification.
    - Data URLs are decoded and written directly.
    - Other URLs are fetched first into a transient temporary file that is moved
      into place; the temporary file is always released.

Share flow:
    - Placeholder entries are blocked with a notification.
    - Otherwise a platform share-intent URL for the current page is opened in a
      new browser tab. The image itself is not uploaded.
"""

import base64
import binascii
import logging
import os
import tempfile
import time
import webbrowser
from pathlib import Path
from typing import Callable
from urllib.parse import quote

import httpx

from app.console.notifications import NotificationLog
from app.console.state import ConsoleState
from app.console.transport import (
    CancellationToken,
    ClientTimeoutError,
    GenerationFailedError,
    post_generation,
)
from app.core.result_types import GenerationResponse
from app.image.provider_config import PLACEHOLDER_MARKER

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to generate images"
DEFAULT_TIMEOUT_SECONDS = 60.0

SHARE_PLATFORMS = ("twitter", "facebook", "instagram")


def is_placeholder(url: str) -> bool:
    return PLACEHOLDER_MARKER in url


def _encode_component(value: str) -> str:
    # same reserved set as JavaScript's encodeURIComponent
    return quote(value, safe="-_.!~*'()")


# =========================================================
# GENERATE
# =========================================================

async def trigger_generation(
    state: ConsoleState,
    client: httpx.AsyncClient,
    notifier: NotificationLog,
    token: CancellationToken | None = None,
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
) -> bool:
    """Run one generation round trip and update `state`.

    Args:
        state: Console state; must allow generation.
        client: HTTP client bound to the API server.
        notifier: Receives exactly one outcome notification.
        token: Optional caller-owned cancellation token.
        timeout: Seconds before the token fires; `None` disables the timer.

    Returns:
        `True` when the gallery was replaced with server results.
    """
    if not state.can_generate:
        return False

    state.begin_generation()
    token = token or CancellationToken()
    timer = token.cancel_after(timeout) if timeout is not None else None

    try:
        response = await post_generation(client, state.city, state.issue, token)

        if not response.is_success:
            logger.error("Server error response (%s): %s", response.status_code, response.text)
            raise GenerationFailedError(GENERIC_FAILURE)

        try:
            data = GenerationResponse.model_validate(response.json())
        except ValueError as exc:
            logger.error("Failed to parse response: %s", exc)
            raise GenerationFailedError("Invalid response from server") from exc

        if not data.success:
            raise GenerationFailedError(data.error or GENERIC_FAILURE)
        if data.images is None:
            logger.error("Success response without images: %s", response.text)
            raise GenerationFailedError("Invalid response from server")

        state.finish_generation(data.images)

    except ClientTimeoutError:
        notifier.notify("Timeout", "Request took too long. Please try again.", "destructive")
        return False

    except Exception as exc:
        logger.exception("Error during image generation")
        notifier.notify("Error", str(exc) or GENERIC_FAILURE, "destructive")
        return False

    finally:
        if timer is not None:
            timer.cancel()
        state.loading = False

    succeeded = [image for image in state.images if image.error is None]
    if succeeded:
        notifier.notify("Success", f"Generated {len(succeeded)} image(s) successfully.")
    else:
        notifier.notify(
            "Warning",
            "Could not generate any images. Please try again.",
            "destructive",
        )
    return True


# =========================================================
# DOWNLOAD
# =========================================================

def download_filename(now: float | None = None) -> str:
    millis = int((time.time() if now is None else now) * 1000)
    return f"climate-awareness-{millis}.png"


def decode_data_url(url: str) -> bytes:
    """Return the bytes of a base64 `data:` URL.

    Raises:
        ValueError: Not a base64 data URL or undecodable payload.
    """
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError("Invalid base64 payload") from exc


async def _fetch_to_file(client: httpx.AsyncClient, url: str, target: Path) -> None:
    response = await client.get(url)
    response.raise_for_status()

    fd, tmp_path = tempfile.mkstemp(dir=target.parent, suffix=".part")
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(response.content)
        os.replace(tmp_path, target)
    finally:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)


async def download_image(
    url: str,
    notifier: NotificationLog,
    client: httpx.AsyncClient,
    download_dir: str | os.PathLike = ".",
    now: float | None = None,
) -> Path | None:
    """Save one gallery entry to `download_dir`.

    Returns:
        Path of the written file, or `None` when blocked or failed.
    """
    if is_placeholder(url):
        notifier.notify("Cannot Download", "This is a placeholder image.", "destructive")
        return None

    target = Path(download_dir) / download_filename(now)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if url.startswith("data:image"):
            target.write_bytes(decode_data_url(url))
        else:
            await _fetch_to_file(client, url, target)
    except Exception:
        logger.exception("Download error")
        notifier.notify("Error", "Failed to download image.", "destructive")
        return None

    notifier.notify("Success", "Image downloaded successfully.")
    return target


# =========================================================
# SHARE
# =========================================================

def share_text(city: str, issue: str) -> str:
    return f"Check out this climate change awareness image for {city}'s {issue} issue!"


def build_share_url(platform: str, city: str, issue: str, page_url: str) -> str:
    """Return the share-intent URL for `platform`.

    Raises:
        ValueError: Unsupported platform.
    """
    text = _encode_component(share_text(city, issue))
    page = _encode_component(page_url)

    if platform == "twitter":
        return f"https://twitter.com/intent/tweet?text={text}&url={page}"
    if platform == "facebook":
        return f"https://www.facebook.com/sharer/sharer.php?u={page}"
    if platform == "instagram":
        return "https://instagram.com"
    raise ValueError(f"Unsupported share platform: {platform}")


def share_image(
    state: ConsoleState,
    url: str,
    platform: str,
    notifier: NotificationLog,
    page_url: str,
    opener: Callable[[str], object] | None = None,
) -> str | None:
    """Open a share-intent tab for one gallery entry.

    Returns:
        The opened share URL, or `None` when blocked.
    """
    if is_placeholder(url):
        notifier.notify("Cannot Share", "This is a placeholder image.", "destructive")
        return None

    share_url = build_share_url(platform, state.city, state.issue, page_url)
    (opener or webbrowser.open_new_tab)(share_url)
    return share_url
