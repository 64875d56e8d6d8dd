"""
HTTP API adapter for GreenGitch image generation.

Architectural role:
- Expose the generation endpoint consumed by the console.
- Enforce adapter-level input validation.
- Delegate provider orchestration to `app.core.engine.process_generation`.
- Shape engine output and failures into the JSON envelope contract.

Endpoint responsibilities:
- `POST /generate`: parse body, validate, generate, return entries.
- `GET /generate`: liveness payload.
- `GET /placeholder.svg`: static fallback image used by failed entries.

API request lifecycle (`POST /generate`):
1. Parse request JSON.
2. Validate `city` and `issue` (HTTP 400 when missing).
3. Invoke every configured provider in order via the engine.
4. Return `{success, images, timestamp}`.

Error handling strategy:
- Missing fields -> HTTP 400 `{success: false, error}`; no provider is called.
- Malformed body or any unexpected exception -> HTTP 500
  `{success: false, error, timestamp}`.
- Provider failures never reach this layer; they arrive as entries with
  `error`.

Side effects:
- Outbound provider calls through the engine.
- Loads environment variables at import time via `load_dotenv()`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response

from app.core.engine import GenerationRequestError, process_generation
from app.core.result_types import GenerationResponse, utc_timestamp

logger = logging.getLogger(__name__)

app = FastAPI(title="GreenGitch")

PLACEHOLDER_SVG_TEMPLATE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
    'viewBox="0 0 {width} {height}">'
    '<rect width="100%" height="100%" fill="#e5e7eb"/>'
    '<text x="50%" y="50%" fill="#6b7280" font-family="sans-serif" '
    'font-size="{font_size}" text-anchor="middle" dominant-baseline="middle">'
    "{width}x{height}</text></svg>"
)


# ============================================================
# Generation
# ============================================================

@app.get("/generate")
def generation_status():
    """Return a fixed liveness payload."""
    return {
        "status": "ok",
        "message": "Image generation endpoint is live. Use POST to generate images.",
    }


@app.post("/generate")
async def generate(request: Request):
    """
    Generate awareness images for one city/issue pair.

    Input validation behavior:
    - Returns HTTP 400 when `city` or `issue` is missing, blank or not a string.

    Error handling strategy:
    - Invalid JSON and non-object bodies are malformed requests and yield the
      500 envelope with the parser's message.
    - Top-level `success` stays `true` when individual providers fail.
    """
    try:
        body = await request.json()
        response = await process_generation(body)

    except GenerationRequestError as exc:
        return JSONResponse(
            status_code=400,
            content=GenerationResponse(success=False, error=str(exc)).to_json(),
        )

    except Exception as exc:
        logger.exception("Generation route error")
        return JSONResponse(
            status_code=500,
            content=GenerationResponse(
                success=False,
                error=str(exc) or "An unexpected error occurred",
                timestamp=utc_timestamp(),
            ).to_json(),
        )

    return response.to_json()


# ============================================================
# Static placeholder
# ============================================================

@app.get("/placeholder.svg")
def placeholder_image(
    height: int = Query(1024, ge=1, le=4096),
    width: int = Query(1024, ge=1, le=4096),
):
    """Serve a neutral SVG of the requested size."""
    svg = PLACEHOLDER_SVG_TEMPLATE.format(
        width=width,
        height=height,
        font_size=max(12, min(width, height) // 16),
    )
    return Response(content=svg, media_type="image/svg+xml")
