"""Tests for console generate/download/share handlers."""

import asyncio
import base64
import json

import httpx
import pytest

from app.console.actions import (
    build_share_url,
    decode_data_url,
    download_image,
    share_image,
    trigger_generation,
)
from app.console.notifications import NotificationLog
from app.console.state import ConsoleState
from app.console.transport import CancellationToken, ClientTimeoutError, post_generation
from app.core.result_types import ImageResult

BASE_URL = "http://greengitch.test"
PLACEHOLDER = "/placeholder.svg?height=1024&width=1024"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"
DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


@pytest.fixture
def state():
    state = ConsoleState()
    state.select_city("Tokyo")
    state.select_issue("Typhoons")
    return state


@pytest.fixture
def notifier():
    return NotificationLog()


def success_body(images):
    return {"success": True, "images": images, "timestamp": "2026-01-01T00:00:00.000Z"}


# =========================================================
# GENERATE
# =========================================================

@pytest.mark.asyncio
async def test_generation_populates_gallery(state, notifier, respx_mock):
    route = respx_mock.post(f"{BASE_URL}/generate").mock(return_value=httpx.Response(200, json=success_body([
        {"url": PLACEHOLDER, "provider": "DALL-E (Failed)", "error": "OPENAI_API_KEY is not configured"},
        {"url": DATA_URL, "provider": "Stability AI"},
        {"url": PLACEHOLDER, "provider": "Future Provider"},
    ])))

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        assert await trigger_generation(state, client, notifier)

    assert route.called
    sent = route.calls.last.request
    assert json.loads(sent.content) == {"city": "Tokyo", "issue": "Typhoons"}
    assert [image.provider for image in state.images] == ["DALL-E (Failed)", "Stability AI", "Future Provider"]
    assert not state.loading
    # the future-provider placeholder has no error field, so it counts
    assert notifier.latest.title == "Success"
    assert notifier.latest.description == "Generated 2 image(s) successfully."


@pytest.mark.asyncio
async def test_all_entries_failed_is_a_warning(state, notifier, respx_mock):
    respx_mock.post(f"{BASE_URL}/generate").mock(return_value=httpx.Response(200, json=success_body([
        {"url": PLACEHOLDER, "provider": "A (Failed)", "error": "x"},
        {"url": PLACEHOLDER, "provider": "B (Failed)", "error": "y"},
    ])))

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        await trigger_generation(state, client, notifier)

    assert len(state.images) == 2
    assert notifier.latest.title == "Warning"
    assert notifier.latest.destructive


@pytest.mark.asyncio
async def test_http_error_status(state, notifier, respx_mock):
    respx_mock.post(f"{BASE_URL}/generate").mock(
        return_value=httpx.Response(500, json={"success": False, "error": "boom"})
    )

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        assert not await trigger_generation(state, client, notifier)

    assert state.images == []
    assert not state.loading
    assert notifier.latest.title == "Error"
    assert notifier.latest.description == "Failed to generate images"


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"images": []}),
    httpx.Response(200, json={"success": True, "images": [{"provider": "A"}]}),
    httpx.Response(200, json={"success": True}),
    httpx.Response(200, json={"success": True, "images": None}),
])
async def test_unparsable_body(state, notifier, respx_mock, response):
    respx_mock.post(f"{BASE_URL}/generate").mock(return_value=response)

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        assert not await trigger_generation(state, client, notifier)

    assert notifier.latest.description == "Invalid response from server"


@pytest.mark.asyncio
async def test_success_false_surfaces_error_text(state, notifier, respx_mock):
    respx_mock.post(f"{BASE_URL}/generate").mock(
        return_value=httpx.Response(200, json={"success": False, "error": "Quota exceeded"})
    )

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        await trigger_generation(state, client, notifier)

    assert notifier.latest.title == "Error"
    assert notifier.latest.description == "Quota exceeded"


@pytest.mark.asyncio
async def test_previous_results_cleared_on_failure(state, notifier, respx_mock):
    respx_mock.post(f"{BASE_URL}/generate").mock(return_value=httpx.Response(502))
    state.images = [ImageResult(url=DATA_URL, provider="Stability AI")]

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        await trigger_generation(state, client, notifier)

    assert state.images == []


@pytest.mark.asyncio
@pytest.mark.respx(assert_all_called=False)
async def test_cancelled_token_reports_timeout(state, notifier, respx_mock):
    route = respx_mock.post(f"{BASE_URL}/generate").mock(return_value=httpx.Response(200, json=success_body([])))
    token = CancellationToken()
    token.cancel()

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        assert not await trigger_generation(state, client, notifier, token=token)

    assert not route.called
    assert not state.loading
    assert notifier.latest.title == "Timeout"
    assert notifier.latest.description == "Request took too long. Please try again."


@pytest.mark.asyncio
async def test_timeout_aborts_in_flight_request(state, notifier):
    started = asyncio.Event()

    async def slow_handler(request):
        started.set()
        await asyncio.sleep(10)
        return httpx.Response(200, json=success_body([]))

    transport = httpx.MockTransport(slow_handler)
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        assert not await trigger_generation(state, client, notifier, timeout=0.05)

    assert started.is_set()
    assert notifier.latest.title == "Timeout"


@pytest.mark.asyncio
async def test_post_generation_raises_when_token_fires():
    async def slow_handler(request):
        await asyncio.sleep(10)
        return httpx.Response(200)

    token = CancellationToken()
    transport = httpx.MockTransport(slow_handler)
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        asyncio.get_running_loop().call_later(0.01, token.cancel)
        with pytest.raises(ClientTimeoutError):
            await post_generation(client, "Tokyo", "Typhoons", token)


@pytest.mark.asyncio
async def test_caller_cancellation_aborts_request():
    started = asyncio.Event()
    aborted = asyncio.Event()

    async def slow_handler(request):
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            aborted.set()
            raise
        return httpx.Response(200)

    transport = httpx.MockTransport(slow_handler)
    async with httpx.AsyncClient(base_url=BASE_URL, transport=transport) as client:
        task = asyncio.ensure_future(post_generation(client, "Tokyo", "Typhoons", CancellationToken()))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.wait_for(aborted.wait(), timeout=1)


@pytest.mark.asyncio
@pytest.mark.respx(assert_all_called=False)
async def test_generation_refused_without_selection(notifier, respx_mock):
    route = respx_mock.post(f"{BASE_URL}/generate")

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        assert not await trigger_generation(ConsoleState(), client, notifier)

    assert not route.called
    assert notifier.entries == []


# =========================================================
# DOWNLOAD
# =========================================================

def test_decode_data_url():
    assert decode_data_url(DATA_URL) == PNG_BYTES

    with pytest.raises(ValueError):
        decode_data_url("https://example.com/a.png")


@pytest.mark.asyncio
async def test_download_placeholder_is_blocked(notifier, tmp_path):
    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        result = await download_image(PLACEHOLDER, notifier, client, tmp_path)

    assert result is None
    assert list(tmp_path.iterdir()) == []
    assert notifier.latest.title == "Cannot Download"
    assert notifier.latest.description == "This is a placeholder image."


@pytest.mark.asyncio
async def test_download_data_url(notifier, tmp_path):
    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        path = await download_image(DATA_URL, notifier, client, tmp_path, now=1700000000.123)

    assert path.name == "climate-awareness-1700000000123.png"
    assert path.read_bytes() == PNG_BYTES
    assert notifier.latest.description == "Image downloaded successfully."


@pytest.mark.asyncio
async def test_download_remote_url_releases_temp_file(notifier, tmp_path, respx_mock):
    respx_mock.get("https://cdn.example.com/image.png").mock(return_value=httpx.Response(200, content=PNG_BYTES))

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        path = await download_image("https://cdn.example.com/image.png", notifier, client, tmp_path)

    assert path.read_bytes() == PNG_BYTES
    assert [p.name for p in tmp_path.iterdir()] == [path.name]


@pytest.mark.asyncio
async def test_download_remote_failure(notifier, tmp_path, respx_mock):
    respx_mock.get("https://cdn.example.com/missing.png").mock(return_value=httpx.Response(404))

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        path = await download_image("https://cdn.example.com/missing.png", notifier, client, tmp_path)

    assert path is None
    assert list(tmp_path.iterdir()) == []
    assert notifier.latest.title == "Error"
    assert notifier.latest.description == "Failed to download image."


# =========================================================
# SHARE
# =========================================================

def test_share_urls():
    page = "http://127.0.0.1:8000"

    assert build_share_url("twitter", "Tokyo", "Typhoons", page) == (
        "https://twitter.com/intent/tweet?text=Check%20out%20this%20climate%20change%20"
        "awareness%20image%20for%20Tokyo's%20Typhoons%20issue!"
        "&url=http%3A%2F%2F127.0.0.1%3A8000"
    )
    assert build_share_url("facebook", "Tokyo", "Typhoons", page) == (
        "https://www.facebook.com/sharer/sharer.php?u=http%3A%2F%2F127.0.0.1%3A8000"
    )
    assert build_share_url("instagram", "Tokyo", "Typhoons", page) == "https://instagram.com"

    with pytest.raises(ValueError):
        build_share_url("myspace", "Tokyo", "Typhoons", page)


def test_share_opens_new_tab(state, notifier):
    opened = []

    url = share_image(state, DATA_URL, "facebook", notifier, "http://page", opener=opened.append)

    assert opened == [url]
    assert url == "https://www.facebook.com/sharer/sharer.php?u=http%3A%2F%2Fpage"
    assert notifier.entries == []


def test_share_placeholder_is_blocked(state, notifier):
    opened = []

    assert share_image(state, PLACEHOLDER, "twitter", notifier, "http://page", opener=opened.append) is None

    assert opened == []
    assert notifier.latest.title == "Cannot Share"
