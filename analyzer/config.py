"""Configuration helpers for the chat pattern analyzer."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a .env file if present.
load_dotenv()


DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

# Resolve the data directory eagerly so downstream code can rely on absolute paths.
DATA_DIR = Path(os.getenv("ANALYZER_DATA_DIR", str(DEFAULT_DATA_DIR))).resolve()

# OpenAI Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_API_BASE = os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1").rstrip("/")
ANALYZER_MODEL = os.getenv("ANALYZER_MODEL", DEFAULT_OPENAI_MODEL).strip() or DEFAULT_OPENAI_MODEL
LLM_TIMEOUT_SECONDS = float(os.getenv("ANALYZER_LLM_TIMEOUT_SECONDS", "120"))

# Placeholder shipped in the sample .env; treated the same as a missing key.
PLACEHOLDER_API_KEY = "your_openai_api_key_here"


def get_openai_api_key() -> str:
    """Return the configured OpenAI API key, ignoring the sample placeholder."""
    key = OPENAI_API_KEY.strip()
    if key == PLACEHOLDER_API_KEY:
        return ""
    return key
