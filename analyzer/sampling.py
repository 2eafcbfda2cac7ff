"""Evenly spaced sampling of chat histories before they are sent to the LLM."""

from __future__ import annotations

from typing import List, Sequence, TypeVar

MAX_SAMPLES = 40

T = TypeVar("T")


def sample_messages(messages: Sequence[T], max_samples: int = MAX_SAMPLES) -> List[T]:
    """Select at most ``max_samples`` messages spread across the whole history.

    Short histories are returned unchanged. Longer ones are walked with a fixed
    stride of ``len(messages) // max_samples`` starting at the first message, so
    the sample spans the full time range instead of favouring the oldest chats.

    Raises:
        ValueError: If ``max_samples`` is smaller than one.
    """
    if max_samples < 1:
        raise ValueError(f"max_samples must be at least 1, got {max_samples}")

    items = list(messages)
    if len(items) <= max_samples:
        return items

    step = max(1, len(items) // max_samples)
    return items[::step][:max_samples]
