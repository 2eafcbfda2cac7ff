from __future__ import annotations

from typing import Any, Dict, List

from analyzer.storage import SORT_NEWEST_FIRST, LocalAnalysisStorage
from webapp.utils.cache import cache_data, cache_resource


@cache_resource(show_spinner=False)
def get_storage() -> LocalAnalysisStorage:
    """Process-wide storage handle backed by the configured database."""
    return LocalAnalysisStorage()


@cache_data(show_spinner=False)
def load_analyses() -> List[Dict[str, Any]]:
    """Stored analyses, newest first. Call ``load_analyses.clear()`` after an upload."""
    return get_storage().list(SORT_NEWEST_FIRST)
