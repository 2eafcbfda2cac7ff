from __future__ import annotations

from typing import Any, Dict, Iterator

import pytest

from webapp.core import config as core_config


@pytest.fixture(autouse=True)
def reset_config_cache(monkeypatch) -> Iterator[None]:
    """Reset cached configuration and fix the share URL for tests."""
    monkeypatch.setenv("ANALYZER_SHARE_URL", "http://localhost:8501")
    core_config.get_config.cache_clear()
    yield
    core_config.get_config.cache_clear()


@pytest.fixture
def analysis_record() -> Dict[str, Any]:
    return {
        "id": "analysis-1",
        "created_date": "2025-03-04T05:06:07.890Z",
        "file_name": "conversations.json",
        "total_messages": 120,
        "date_range": "Analyzed 3/4/2025",
        "top_topics": [
            {"topic": "Career Development", "count": 12, "keywords": ["resume", "interview", "promotion"]},
            {"topic": "Python Debugging", "count": 8, "keywords": ["traceback", "pytest"]},
        ],
        "sentiment_breakdown": {"positive": 55, "neutral": 35, "negative": 10},
        "key_insights": [
            "Frequently asks for interview preparation help.",
            "Shows persistent interest in technical problem-solving.",
        ],
        "improvement_suggestions": [
            {"category": "Career Planning", "suggestion": "Write down interview goals.", "priority": "high"},
            {"category": "Learning Strategy", "suggestion": "Keep a pytest cheat sheet.", "priority": "low"},
        ],
        "patterns": {
            "peak_activity_time": "Late evenings 9-11 PM",
            "average_session_length": "20 minutes",
            "recurring_themes": ["self-improvement", "debugging"],
        },
    }
