"""Turn heterogeneous raw chat messages into bounded text segments."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional

MAX_CHARS = 300
UNEXTRACTABLE_PLACEHOLDER = "[Unextractable content]"

# Probed in order; the first populated field is treated as the message text.
TEXT_FIELDS = ("content", "text", "message", "value")


def extract_content(message: Any, max_chars: int = MAX_CHARS) -> str:
    """Return at most ``max_chars`` characters of text for one raw message.

    Strings are truncated directly. Mappings and objects are probed for the
    first populated field in :data:`TEXT_FIELDS`; when none is present the whole
    value is serialised as JSON instead. Scalars are coerced to their JSON
    literal form. This function never raises: a value that cannot be serialised
    yields :data:`UNEXTRACTABLE_PLACEHOLDER`.
    """
    if isinstance(message, str):
        return message[:max_chars]

    if _is_structured(message):
        field_value = _probe_text_field(message)
        if field_value is not None:
            return _to_text(field_value)[:max_chars]
        return _serialize(message)[:max_chars]

    return _scalar_to_text(message)[:max_chars]


def _is_structured(value: Any) -> bool:
    """Return True for values that behave like objects rather than scalars."""
    if value is None or isinstance(value, (bool, int, float, str, bytes)):
        return False
    return True


def _probe_text_field(message: Any) -> Optional[Any]:
    """Return the first populated text-bearing field, or None."""
    if isinstance(message, (list, tuple, set, frozenset)):
        return None
    for name in TEXT_FIELDS:
        try:
            if isinstance(message, Mapping):
                candidate = message.get(name)
            else:
                candidate = getattr(message, name, None)
            populated = bool(candidate)
        except Exception:  # pylint: disable=broad-except
            # Foreign objects may raise from properties or __bool__; treat them as absent.
            continue
        if populated:
            return candidate
    return None


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if _is_structured(value):
        return _serialize(value)
    return _scalar_to_text(value)


def _scalar_to_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _serialize(value: Any) -> str:
    try:
        # Values json cannot encode natively, such as dates, are written with str().
        return json.dumps(value, ensure_ascii=False, default=str)
    except Exception:  # pylint: disable=broad-except
        # Circular structures, or a __str__ that raises.
        return UNEXTRACTABLE_PLACEHOLDER
