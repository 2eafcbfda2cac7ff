"""Local persistence for chat analysis records."""

from __future__ import annotations

import copy
import json
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import LocalStorageEntry, build_engine, session_scope

LOGGER = logging.getLogger(__name__)

STORAGE_KEY = "chat_analyses"
SORT_NEWEST_FIRST = "-created_date"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _created_sort_key(record: Mapping[str, Any]) -> datetime:
    raw = record.get("created_date")
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.min.replace(tzinfo=timezone.utc)


class AnalysisStorage(ABC):
    """Port through which the pipeline and pages read and append analyses."""

    @abstractmethod
    def list(self, sort: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return every stored analysis, optionally sorted newest first."""

    @abstractmethod
    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Persist ``data`` as a new analysis and return the stored record."""


class LocalAnalysisStorage(AnalysisStorage):
    """Keeps every analysis as one JSON list under a single storage key.

    The list is read in full and rewritten on every ``create``; there is no
    schema versioning and an absent key simply means no analyses yet. One
    instance is shared by every Streamlit session, so ``create`` holds a lock
    across the whole read-modify-write.
    """

    def __init__(self, engine: Optional[Engine] = None, key: str = STORAGE_KEY) -> None:
        self.engine = engine or build_engine()
        self.key = key
        self._lock = threading.Lock()

    def _read_raw(self) -> Optional[str]:
        with session_scope(self.engine) as session:
            entry = session.execute(
                select(LocalStorageEntry).where(LocalStorageEntry.key == self.key)
            ).scalar_one_or_none()
            return entry.value if entry is not None else None

    def _load(self) -> List[Dict[str, Any]]:
        raw = self._read_raw()
        if raw is None:
            return []
        analyses = json.loads(raw)
        if not isinstance(analyses, list):
            raise ValueError(f"Stored {self.key!r} value is a {type(analyses).__name__}, not a list")
        return analyses

    def list(self, sort: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            analyses = self._load()
        except (SQLAlchemyError, ValueError) as exc:
            LOGGER.error("Error listing analyses: %s", exc)
            return []

        if sort == SORT_NEWEST_FIRST:
            analyses.sort(key=_created_sort_key, reverse=True)
        elif sort:
            LOGGER.warning("Unsupported sort %r; returning analyses in stored order", sort)
        return analyses

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        new_analysis = copy.deepcopy(dict(data))
        new_analysis["id"] = str(uuid.uuid4())
        new_analysis["created_date"] = utc_timestamp()

        try:
            with self._lock, session_scope(self.engine) as session:
                entry = session.execute(
                    select(LocalStorageEntry).where(LocalStorageEntry.key == self.key)
                ).scalar_one_or_none()
                analyses = json.loads(entry.value) if entry is not None else []
                if not isinstance(analyses, list):
                    raise ValueError(f"Stored {self.key!r} value is not a list")
                analyses.insert(0, new_analysis)
                serialized = json.dumps(analyses, ensure_ascii=False)
                if entry is None:
                    session.add(LocalStorageEntry(key=self.key, value=serialized))
                else:
                    entry.value = serialized
        except (SQLAlchemyError, TypeError, ValueError):
            LOGGER.exception("Error creating analysis")
            raise

        LOGGER.info("Stored analysis %s (%d fields)", new_analysis["id"], len(new_analysis))
        return new_analysis
