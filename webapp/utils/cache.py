from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

import streamlit as st

F = TypeVar("F", bound=Callable[..., Any])


def cache_data(*, ttl: Optional[int] = None, show_spinner: bool = False) -> Callable[[F], F]:
    """Wrap st.cache_data so pages share one caching policy for stored analyses."""

    def decorator(func: F) -> F:
        cached = st.cache_data(ttl=ttl, show_spinner=show_spinner)(func)
        return cached  # type: ignore[return-value]

    return decorator


def cache_resource(show_spinner: bool = False) -> Callable[[F], F]:
    """Wrap st.cache_resource for process-wide handles such as the storage engine."""

    def decorator(func: F) -> F:
        cached = st.cache_resource(show_spinner=show_spinner)(func)
        return cached  # type: ignore[return-value]

    return decorator
