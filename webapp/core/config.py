from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables once so both Streamlit and tests share the same defaults.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")
load_dotenv()


@dataclass(frozen=True)
class AppConfig:
    """Webapp configuration derived from the environment."""

    share_url: str
    accepted_extensions: Tuple[str, ...] = ("json", "txt")
    max_upload_mb: int = 200
    redirect_delay_seconds: float = 0.5


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Return the cached application configuration."""
    share_url = os.getenv("ANALYZER_SHARE_URL", "http://localhost:8501").strip() or "http://localhost:8501"
    max_upload_mb = int(os.getenv("ANALYZER_MAX_UPLOAD_MB", "200"))
    return AppConfig(share_url=share_url.rstrip("/"), max_upload_mb=max_upload_mb)
