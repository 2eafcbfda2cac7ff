from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from analyzer.db import build_engine
from analyzer.storage import LocalAnalysisStorage


@pytest.fixture
def storage(tmp_path) -> LocalAnalysisStorage:
    """Analysis storage backed by a throwaway SQLite file."""
    engine = build_engine(f"sqlite:///{tmp_path / 'analyses.db'}")
    return LocalAnalysisStorage(engine)


@pytest.fixture
def sample_analysis() -> Dict[str, Any]:
    return {
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


class RecordingLLM:
    """Stand-in for invoke_llm that records prompts and returns a canned analysis."""

    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response if response is not None else {}
        self.error = error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, prompt: str, schema: Dict[str, Any]) -> Any:
        self.calls.append((prompt, schema))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def recording_llm(sample_analysis) -> RecordingLLM:
    return RecordingLLM(response=sample_analysis)


@pytest.fixture
def make_llm():
    """Factory for RecordingLLM doubles with a custom response or error."""
    return RecordingLLM
