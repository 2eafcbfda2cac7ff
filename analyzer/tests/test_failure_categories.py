"""Unit tests for upload failure categorization heuristics."""

from __future__ import annotations

import pytest

from analyzer.llm import StructuredResponseError
from analyzer.pipeline import (
    ErrorCategory,
    NoMessagesFoundError,
    UnreadableUploadError,
    categorize_failure,
    describe_failure,
)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (RuntimeError("Input exceeds the context window"), ErrorCategory.CONTENT_TOO_LARGE),
        (RuntimeError("Request too large for gpt-4o-mini"), ErrorCategory.CONTENT_TOO_LARGE),
        (RuntimeError("maximum context length is 8192 tokens"), ErrorCategory.CONTENT_TOO_LARGE),
        (RuntimeError("Could not parse response"), ErrorCategory.UNPARSEABLE_FILE),
        (RuntimeError("Invalid JSON payload"), ErrorCategory.UNPARSEABLE_FILE),
        (RuntimeError("No messages found in the file"), ErrorCategory.NO_MESSAGES_FOUND),
        (NoMessagesFoundError(), ErrorCategory.NO_MESSAGES_FOUND),
        (UnreadableUploadError("bad bytes"), ErrorCategory.UNPARSEABLE_FILE),
        (StructuredResponseError("LLM returned malformed output: Expecting value"), ErrorCategory.UNKNOWN),
        (RuntimeError("Service unavailable"), ErrorCategory.UNKNOWN),
        (RuntimeError(""), ErrorCategory.UNKNOWN),
    ],
)
def test_categorize_failure(error: Exception, expected: ErrorCategory) -> None:
    """Ensure failures are categorized into the expected buckets."""
    assert categorize_failure(error) is expected


def test_size_wording_wins_over_parse_wording() -> None:
    error = RuntimeError("Unexpected token count while parsing")
    assert categorize_failure(error) is ErrorCategory.CONTENT_TOO_LARGE


def test_unknown_failures_show_underlying_message() -> None:
    assert describe_failure(ErrorCategory.UNKNOWN, "socket closed") == "Error analyzing file: socket closed"
    assert describe_failure(ErrorCategory.UNKNOWN, "") == "Error analyzing file: Unknown error occurred"


@pytest.mark.parametrize(
    "category",
    [
        ErrorCategory.CONTENT_TOO_LARGE,
        ErrorCategory.UNPARSEABLE_FILE,
        ErrorCategory.NO_MESSAGES_FOUND,
    ],
)
def test_known_categories_hide_raw_detail(category: ErrorCategory) -> None:
    assert "secret detail" not in describe_failure(category, "secret detail")
