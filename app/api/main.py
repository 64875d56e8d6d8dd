"""
Server entrypoint for the GreenGitch generation API.

Architectural role:
- Configures process-wide logging from `LOG_LEVEL`.
- Serves `app.api.http_api:app` with uvicorn.

Side effects:
- Loads environment variables via `load_dotenv()`.
- Binds `HOST:PORT` (defaults `127.0.0.1:8000`).
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

import uvicorn


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the server process."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)


def main():
    """Run the API server until interrupted."""
    configure_logging()

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "app.api.http_api:app",
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO").lower(),
    )


if __name__ == "__main__":
    main()
