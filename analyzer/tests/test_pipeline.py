"""End-to-end tests for the upload pipeline with a fake LLM."""

from __future__ import annotations

import json
from typing import List, Tuple

import requests

from analyzer.pipeline import (
    ErrorCategory,
    PipelineStage,
    UploadPipeline,
)
from analyzer.sampling import MAX_SAMPLES


def test_successful_run_stores_record(storage, recording_llm, sample_analysis) -> None:
    pipeline = UploadPipeline(storage, recording_llm)
    payload = json.dumps({"messages": [{"content": "a"}, {"text": "b"}]}).encode()

    result = pipeline.run("export.json", payload)

    assert result.ok
    assert result.stage is PipelineStage.DONE
    assert result.progress == 100
    assert result.error_category is None
    stored = storage.list()
    assert [record["id"] for record in stored] == [result.record_id]
    assert stored[0]["total_messages"] == 2
    assert stored[0]["file_name"] == "export.json"
    assert stored[0]["key_insights"] == sample_analysis["key_insights"]


def test_messages_are_extracted_into_the_prompt(storage, recording_llm) -> None:
    pipeline = UploadPipeline(storage, recording_llm)
    pipeline.run("export.json", '{"messages": [{"content":"a"}, {"text":"b"}]}')

    prompt, schema = recording_llm.calls[0]
    assert "SAMPLE MESSAGES:\na\n---\nb\n" in prompt
    assert "top_topics" in schema["properties"]


def test_large_history_is_sampled(storage, recording_llm) -> None:
    lines = "\n".join(f"line {i}" for i in range(400))
    result = UploadPipeline(storage, recording_llm).run("chat.txt", lines)

    prompt = recording_llm.calls[0][0]
    assert result.ok
    assert "- Total messages: 400" in prompt
    assert f"- Sample size: {MAX_SAMPLES} messages" in prompt
    assert "line 0\n---\nline 10\n" in prompt
    assert storage.list()[0]["total_messages"] == 400


def test_progress_reported_at_each_stage(storage, recording_llm) -> None:
    events: List[Tuple[PipelineStage, int]] = []
    pipeline = UploadPipeline(storage, recording_llm, on_progress=lambda s, p: events.append((s, p)))

    pipeline.run("chat.txt", "hi\nthere")

    assert [stage for stage, _ in events] == [
        PipelineStage.READING,
        PipelineStage.PARSING,
        PipelineStage.SAMPLING,
        PipelineStage.EXTRACTING,
        PipelineStage.PROMPTING,
        PipelineStage.AWAITING_LLM,
        PipelineStage.INGESTING,
        PipelineStage.DONE,
    ]
    percents = [percent for _, percent in events]
    assert percents == sorted(percents)
    assert percents[-1] == 100


def test_empty_upload_skips_llm(storage, make_llm) -> None:
    llm = make_llm(response={})
    result = UploadPipeline(storage, llm).run("empty.json", '{"messages": []}')

    assert not result.ok
    assert result.stage is PipelineStage.FAILED
    assert result.error_category is ErrorCategory.NO_MESSAGES_FOUND
    assert llm.calls == []
    assert storage.list() == []


def test_blank_text_upload_is_no_messages(storage, make_llm) -> None:
    llm = make_llm(response={})
    result = UploadPipeline(storage, llm).run("blank.txt", b"\n \n")

    assert result.error_category is ErrorCategory.NO_MESSAGES_FOUND
    assert llm.calls == []


def test_context_window_error_is_content_too_large(storage, make_llm) -> None:
    llm = make_llm(error=RuntimeError("exceeded the context window of this model"))
    result = UploadPipeline(storage, llm).run("chat.txt", "hello")

    assert result.error_category is ErrorCategory.CONTENT_TOO_LARGE
    assert "too large" in result.user_message
    assert storage.list() == []


def test_http_token_error_is_content_too_large(storage, make_llm) -> None:
    error = requests.exceptions.HTTPError(
        "OpenAI API Error: This model's maximum context length is 128000 tokens."
    )
    result = UploadPipeline(storage, make_llm(error=error)).run("chat.txt", "hello")
    assert result.error_category is ErrorCategory.CONTENT_TOO_LARGE


def test_unexpected_error_keeps_message(storage, make_llm) -> None:
    llm = make_llm(error=ConnectionError("network unreachable"))
    result = UploadPipeline(storage, llm).run("chat.txt", "hello")

    assert result.error_category is ErrorCategory.UNKNOWN
    assert result.error_message == "network unreachable"
    assert result.user_message == "Error analyzing file: network unreachable"
    assert result.progress == 0


def test_undecodable_bytes_are_unparseable(storage, make_llm) -> None:
    llm = make_llm(response={})
    result = UploadPipeline(storage, llm).run("chat.txt", b"\xff\xfe\xfa")

    assert result.error_category is ErrorCategory.UNPARSEABLE_FILE
    assert llm.calls == []


def test_pipeline_can_retry_after_failure(storage, make_llm, sample_analysis) -> None:
    llm = make_llm(error=RuntimeError("boom"))
    pipeline = UploadPipeline(storage, llm)

    assert not pipeline.run("chat.txt", "hello").ok
    assert not pipeline.busy

    llm.error = None
    llm.response = sample_analysis
    assert pipeline.run("chat.txt", "hello").ok
    assert len(storage.list()) == 1


def test_busy_only_while_running(storage, make_llm, sample_analysis) -> None:
    observed: List[bool] = []
    pipeline = UploadPipeline(storage, make_llm(response=sample_analysis))
    pipeline.on_progress = lambda stage, percent: observed.append(pipeline.busy)

    pipeline.run("chat.txt", "hello")

    assert observed and all(observed)
    assert not pipeline.busy


def test_storage_failure_persists_nothing(storage, make_llm, sample_analysis, monkeypatch) -> None:
    def failing_create(data):
        raise OSError("disk full")

    monkeypatch.setattr(storage, "create", failing_create)
    result = UploadPipeline(storage, make_llm(response=sample_analysis)).run("chat.txt", "hello")

    assert result.error_category is ErrorCategory.UNKNOWN
    assert result.record is None
