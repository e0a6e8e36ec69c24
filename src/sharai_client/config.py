"""Client configuration read from the environment (and a local .env file)."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .api_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

load_dotenv()

DEFAULT_BATCH_SIZE = 50


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


@dataclass
class Settings:
    api_url: str = DEFAULT_BASE_URL
    api_timeout: float = DEFAULT_TIMEOUT
    import_batch_size: int = DEFAULT_BATCH_SIZE
    theme: Optional[str] = None
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None


def load_settings() -> Settings:
    batch_size = _parse_int(os.getenv("SHARAI_IMPORT_BATCH_SIZE"), DEFAULT_BATCH_SIZE)
    return Settings(
        api_url=os.getenv("SHARAI_API_URL", DEFAULT_BASE_URL),
        api_timeout=_parse_float(os.getenv("SHARAI_API_TIMEOUT"), DEFAULT_TIMEOUT),
        import_batch_size=batch_size if batch_size > 0 else DEFAULT_BATCH_SIZE,
        theme=os.getenv("SHARAI_THEME") or None,
        admin_username=os.getenv("SHARAI_ADMIN_USERNAME") or None,
        admin_password=os.getenv("SHARAI_ADMIN_PASSWORD") or None,
    )
