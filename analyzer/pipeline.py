"""Upload pipeline: from an uploaded chat export to a stored analysis."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from .extraction import extract_content
from .ingest import FileMeta, ingest_analysis
from .llm import InvokeLLM, invoke_llm
from .parsing import parse_messages
from .prompts import assemble_prompt
from .sampling import MAX_SAMPLES, sample_messages
from .storage import AnalysisStorage

LOGGER = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    IDLE = "idle"
    READING = "reading"
    PARSING = "parsing"
    SAMPLING = "sampling"
    EXTRACTING = "extracting"
    PROMPTING = "prompting"
    AWAITING_LLM = "awaiting_llm"
    INGESTING = "ingesting"
    DONE = "done"
    FAILED = "failed"


# Coarse checkpoints for the progress bar; not a measure of work done.
STAGE_PROGRESS: Dict[PipelineStage, int] = {
    PipelineStage.IDLE: 0,
    PipelineStage.READING: 10,
    PipelineStage.PARSING: 30,
    PipelineStage.SAMPLING: 50,
    PipelineStage.EXTRACTING: 55,
    PipelineStage.PROMPTING: 60,
    PipelineStage.AWAITING_LLM: 70,
    PipelineStage.INGESTING: 90,
    PipelineStage.DONE: 100,
    PipelineStage.FAILED: 0,
}


class ErrorCategory(str, Enum):
    UNPARSEABLE_FILE = "UnparseableFile"
    NO_MESSAGES_FOUND = "NoMessagesFound"
    CONTENT_TOO_LARGE = "ContentTooLarge"
    UNKNOWN = "Unknown"


class PipelineError(RuntimeError):
    """Base class for failures detected by the pipeline itself."""


class NoMessagesFoundError(PipelineError):
    def __init__(self, message: str = "No messages found in the file") -> None:
        super().__init__(message)


class UnreadableUploadError(PipelineError):
    """Raised when the uploaded bytes cannot be decoded as text."""


_TOO_LARGE_MARKERS = ("too large", "token", "context window")
_PARSE_MARKERS = ("parse", "json", "unexpected token")
_NO_MESSAGES_MARKER = "no messages found"


def categorize_failure(exc: BaseException) -> ErrorCategory:
    """Map a pipeline failure to the category shown to the user.

    Remote LLM errors carry no structured kind, so they are recognised by the
    wording of their message. Size-related wording wins over parse wording.
    """
    if isinstance(exc, NoMessagesFoundError):
        return ErrorCategory.NO_MESSAGES_FOUND
    if isinstance(exc, UnreadableUploadError):
        return ErrorCategory.UNPARSEABLE_FILE

    text = str(exc).lower()
    if any(marker in text for marker in _TOO_LARGE_MARKERS):
        return ErrorCategory.CONTENT_TOO_LARGE
    if any(marker in text for marker in _PARSE_MARKERS):
        return ErrorCategory.UNPARSEABLE_FILE
    if _NO_MESSAGES_MARKER in text:
        return ErrorCategory.NO_MESSAGES_FOUND
    return ErrorCategory.UNKNOWN


def describe_failure(category: ErrorCategory, detail: str) -> str:
    """Return the message displayed for a failed upload."""
    if category is ErrorCategory.CONTENT_TOO_LARGE:
        return (
            "The file content is too large for AI analysis. Try a smaller chat history file "
            "or a file with fewer words per message."
        )
    if category is ErrorCategory.UNPARSEABLE_FILE:
        return "Could not parse file. Please ensure it's a valid JSON or plain text chat history."
    if category is ErrorCategory.NO_MESSAGES_FOUND:
        return "The uploaded file does not contain any recognizable chat messages."
    return f"Error analyzing file: {detail or 'Unknown error occurred'}"


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    stage: PipelineStage
    progress: int
    record: Optional[Dict[str, Any]] = None
    error_category: Optional[ErrorCategory] = None
    error_message: Optional[str] = None
    user_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.stage is PipelineStage.DONE

    @property
    def record_id(self) -> Optional[str]:
        if self.record is None:
            return None
        return self.record.get("id")


ProgressCallback = Callable[[PipelineStage, int], None]


class UploadPipeline:
    """Runs one upload at a time through parse, sample, prompt, LLM and storage.

    Callers are expected to gate re-entry with :attr:`busy`; the pipeline itself
    does not queue or reject concurrent runs.
    """

    def __init__(
        self,
        storage: AnalysisStorage,
        invoke: InvokeLLM = invoke_llm,
        *,
        max_samples: int = MAX_SAMPLES,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.storage = storage
        self.invoke = invoke
        self.max_samples = max_samples
        self.on_progress = on_progress
        self.stage = PipelineStage.IDLE
        self.progress = STAGE_PROGRESS[PipelineStage.IDLE]
        self._running = False

    @property
    def busy(self) -> bool:
        return self._running

    def _advance(self, stage: PipelineStage) -> None:
        self.stage = stage
        self.progress = STAGE_PROGRESS[stage]
        LOGGER.debug("Upload pipeline stage=%s progress=%d", stage.value, self.progress)
        if self.on_progress is not None:
            self.on_progress(stage, self.progress)

    def run(self, file_name: str, payload: Union[bytes, str]) -> PipelineResult:
        """Analyse one uploaded file; failures are returned, never raised."""
        self._running = True
        try:
            record = self._execute(file_name, payload)
        except Exception as exc:  # pylint: disable=broad-except
            category = categorize_failure(exc)
            detail = str(exc) or "Unknown error occurred"
            if isinstance(exc, PipelineError):
                LOGGER.warning("Analysis of %s failed: %s", file_name, detail)
            else:
                LOGGER.exception("Analysis error for %s", file_name)
            self._advance(PipelineStage.FAILED)
            return PipelineResult(
                stage=PipelineStage.FAILED,
                progress=self.progress,
                error_category=category,
                error_message=detail,
                user_message=describe_failure(category, detail),
            )
        finally:
            self._running = False

        return PipelineResult(stage=PipelineStage.DONE, progress=self.progress, record=record)

    def _execute(self, file_name: str, payload: Union[bytes, str]) -> Dict[str, Any]:
        self._advance(PipelineStage.READING)
        text = _decode_upload(payload)

        self._advance(PipelineStage.PARSING)
        parsed = parse_messages(text)
        messages = parsed.messages
        LOGGER.info(
            "Parsed %s as %s: %d messages",
            file_name,
            parsed.format,
            parsed.message_count,
        )
        if not messages:
            raise NoMessagesFoundError()

        self._advance(PipelineStage.SAMPLING)
        sampled = sample_messages(messages, self.max_samples)

        self._advance(PipelineStage.EXTRACTING)
        segments = [extract_content(message) for message in sampled]

        self._advance(PipelineStage.PROMPTING)
        assembled = assemble_prompt(sampled, segments, len(messages))

        self._advance(PipelineStage.AWAITING_LLM)
        analysis = self.invoke(assembled.prompt, assembled.response_schema)

        self._advance(PipelineStage.INGESTING)
        record = ingest_analysis(
            analysis,
            FileMeta(file_name=file_name, total_messages=len(messages)),
            self.storage,
        )

        self._advance(PipelineStage.DONE)
        LOGGER.info("Analysis %s stored for %s", record.get("id"), file_name)
        return record


def _decode_upload(payload: Union[bytes, str]) -> str:
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UnreadableUploadError(f"Could not parse file: upload is not UTF-8 text ({exc.reason})") from exc
