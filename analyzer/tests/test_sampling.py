"""Tests for evenly spaced message sampling."""

from __future__ import annotations

import pytest

from analyzer.sampling import MAX_SAMPLES, sample_messages


@pytest.mark.parametrize("size", [0, 1, 17, MAX_SAMPLES])
def test_short_histories_are_returned_unchanged(size: int) -> None:
    messages = [f"m{i}" for i in range(size)]
    assert sample_messages(messages) == messages


@pytest.mark.parametrize("size", [41, 79, 80, 81, 1000, 12_345])
def test_long_histories_are_capped(size: int) -> None:
    messages = list(range(size))
    sampled = sample_messages(messages)

    assert len(sampled) == MAX_SAMPLES
    assert sampled[0] == 0
    assert sampled == sorted(sampled)


def test_sample_spreads_across_history() -> None:
    sampled = sample_messages(list(range(400)))
    assert sampled[:3] == [0, 10, 20]
    assert sampled[-1] == 390


def test_custom_sample_size() -> None:
    assert sample_messages(list("abcdefghij"), max_samples=3) == ["a", "d", "g"]


def test_accepts_any_sequence() -> None:
    assert sample_messages(tuple(range(5))) == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("max_samples", [0, -1])
def test_rejects_non_positive_sample_size(max_samples: int) -> None:
    with pytest.raises(ValueError):
        sample_messages(["a"], max_samples=max_samples)
