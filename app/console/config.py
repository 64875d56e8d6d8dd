"""Runtime configuration for the generation console.

Fields are read from environment variables when a `ConsoleConfig` is created,
after `load_dotenv()`. A malformed `GREENGITCH_TIMEOUT_SECONDS` raises
`ValueError` from the constructor.

Relevant environment variables:
    - `GREENGITCH_SERVER_URL`
    - `GREENGITCH_TIMEOUT_SECONDS`
    - `GREENGITCH_DOWNLOAD_DIR`
    - `GREENGITCH_PAGE_URL`
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_server_url() -> str:
    return os.getenv("GREENGITCH_SERVER_URL", "http://127.0.0.1:8000").strip().rstrip("/")


def _env_timeout_seconds() -> float:
    return float(os.getenv("GREENGITCH_TIMEOUT_SECONDS", "60"))


def _env_download_dir() -> str:
    return os.getenv("GREENGITCH_DOWNLOAD_DIR", ".").strip() or "."


def _env_page_url() -> str:
    return os.getenv("GREENGITCH_PAGE_URL", "").strip()


@dataclass(frozen=True)
class ConsoleConfig:
    """Console connection, timeout and output settings.

    `page_url` is the link shared to social platforms; it falls back to the
    server URL when unset.
    """

    server_url: str = field(default_factory=_env_server_url)
    timeout_seconds: float = field(default_factory=_env_timeout_seconds)
    download_dir: str = field(default_factory=_env_download_dir)
    page_url: str = field(default_factory=_env_page_url)

    @property
    def share_page_url(self) -> str:
        return self.page_url or self.server_url
