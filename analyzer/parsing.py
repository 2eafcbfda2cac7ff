"""Parse uploaded chat-history text into a list of raw messages."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Tuple

LOGGER = logging.getLogger(__name__)

FORMAT_JSON = "json"
FORMAT_PLAIN_TEXT = "text"


@dataclass
class ParsedUpload:
    """Raw messages recovered from an upload and the format they came from."""

    format: str
    messages: List[Any] = field(default_factory=list)

    @property
    def message_count(self) -> int:
        return len(self.messages)


def parse_messages(text: str) -> ParsedUpload:
    """Return the raw messages contained in ``text``.

    The text is first tried as structured JSON: a top-level array is the message
    list and an object contributes its ``messages`` array. Text that is not
    valid JSON, or is the bare literal ``null``, is read as plain text with one
    message per non-blank line.
    """
    is_json, payload = try_parse_json(text)
    # A JSON null has no message list to read, so it is treated like non-JSON text.
    if is_json and payload is not None:
        return ParsedUpload(format=FORMAT_JSON, messages=messages_from_json(payload))
    return ParsedUpload(format=FORMAT_PLAIN_TEXT, messages=split_plain_text(text))


def try_parse_json(text: str) -> Tuple[bool, Any]:
    """Attempt a structured parse, returning ``(succeeded, payload)``."""
    try:
        return True, json.loads(text)
    except ValueError as exc:
        LOGGER.debug("Upload is not JSON (%s); falling back to plain text", exc)
        return False, None


def messages_from_json(payload: Any) -> List[Any]:
    """Pull the message list out of a parsed JSON document."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        messages = payload.get("messages")
        if isinstance(messages, list):
            return messages
        if messages:
            LOGGER.warning(
                "Ignoring 'messages' value of type %s; expected a list",
                type(messages).__name__,
            )
    return []


def split_plain_text(text: str) -> List[str]:
    """Split plain text into messages, one per non-blank line."""
    return [line for line in text.split("\n") if line.strip()]
