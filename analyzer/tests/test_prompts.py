"""Tests for prompt assembly and the static response schemas."""

from __future__ import annotations

from analyzer.prompts import (
    ANALYSIS_RESPONSE_SCHEMA,
    SEGMENT_DELIMITER,
    assemble_prompt,
    build_action_plan_prompt,
)


def test_segments_are_joined_with_delimiter_lines() -> None:
    assembled = assemble_prompt(["a", "b", "c"], ["first", "second", "third"], 3)
    assert f"first{SEGMENT_DELIMITER}second{SEGMENT_DELIMITER}third" in assembled.prompt
    assert SEGMENT_DELIMITER == "\n---\n"


def test_header_reports_total_and_sample_size() -> None:
    assembled = assemble_prompt(["x"] * 40, ["x"] * 40, 1234)
    assert "- Total messages: 1234" in assembled.prompt
    assert "- Sample size: 40 messages" in assembled.prompt


def test_braces_in_messages_are_kept_verbatim() -> None:
    assembled = assemble_prompt([{}], ['{"content": "{literal}"}'], 1)
    assert '{"content": "{literal}"}' in assembled.prompt


def test_response_schema_is_the_static_contract() -> None:
    first = assemble_prompt(["a"], ["a"], 1)
    second = assemble_prompt(["b", "c"], ["b", "c"], 9)

    assert first.response_schema is ANALYSIS_RESPONSE_SCHEMA
    assert second.response_schema is ANALYSIS_RESPONSE_SCHEMA
    assert set(ANALYSIS_RESPONSE_SCHEMA["properties"]) == {
        "top_topics",
        "sentiment_breakdown",
        "key_insights",
        "improvement_suggestions",
        "patterns",
    }


def test_action_plan_prompt_includes_record_context(sample_analysis) -> None:
    record = {**sample_analysis, "total_messages": 250, "date_range": "Analyzed 1/2/2025"}
    suggestion = record["improvement_suggestions"][0]

    prompt = build_action_plan_prompt(record, suggestion)

    assert "Total Messages Analyzed: 250" in prompt
    assert "Peak Activity Time: Late evenings 9-11 PM" in prompt
    assert "1. Career Development (12 mentions) - Keywords: resume, interview, promotion" in prompt
    assert "Priority Level: HIGH" in prompt
    assert "Category: Career Planning" in prompt
    assert "High negative sentiment" not in prompt


def test_action_plan_prompt_flags_negative_sentiment() -> None:
    record = {"sentiment_breakdown": {"positive": 10, "neutral": 30, "negative": 60}}
    prompt = build_action_plan_prompt(record, {"category": "Mood", "suggestion": "Rest", "priority": "low"})

    assert "High negative sentiment detected" in prompt
    assert "TOP DISCUSSION TOPICS:\nNot available" in prompt
    assert "Peak Activity Time: Unknown" in prompt
