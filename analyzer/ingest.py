"""Merge an LLM analysis with upload metadata and persist it."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from .storage import AnalysisStorage

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileMeta:
    """Upload metadata the pipeline contributes to every record."""

    file_name: str
    total_messages: int


def format_date_range(today: Optional[date] = None) -> str:
    """Return the human-readable analysis date label, e.g. ``Analyzed 3/7/2025``."""
    today = today or date.today()
    return f"Analyzed {today.month}/{today.day}/{today.year}"


def ingest_analysis(
    llm_response: Any,
    file_meta: FileMeta,
    storage: AnalysisStorage,
    *,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Store the LLM's analysis alongside the upload metadata.

    The response is trusted as-is: field types and ranges (for example whether
    the sentiment percentages add up to 100) are not checked here and any
    mismatch only shows up when the record is rendered.
    """
    record: Dict[str, Any] = {
        "file_name": file_meta.file_name,
        "total_messages": file_meta.total_messages,
        "date_range": format_date_range(today),
    }
    if isinstance(llm_response, Mapping):
        record.update(llm_response)
    else:
        LOGGER.warning(
            "LLM analysis is a %s, not an object; storing upload metadata only",
            type(llm_response).__name__,
        )
    return storage.create(record)
