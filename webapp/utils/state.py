from __future__ import annotations

from typing import List, Optional

import streamlit as st

from analyzer.action_plans import ActionPlanCache

SELECTED_ANALYSIS_KEY = "selected_analysis_id"
SELECTED_TOPIC_KEY = "selected_topic"
UPLOAD_PROCESSING_KEY = "upload_processing"
UPLOAD_ERROR_KEY = "upload_error"
ACTION_PLAN_CACHE_KEY = "action_plan_cache"
EXPANDED_PLAN_KEY = "expanded_action_plan"


def trigger_rerun() -> None:
    """Trigger a Streamlit rerun using the most compatible API."""
    rerun_fn = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if rerun_fn:
        rerun_fn()


def get_selected_analysis_id() -> Optional[str]:
    return st.session_state.get(SELECTED_ANALYSIS_KEY)


def set_selected_analysis_id(analysis_id: Optional[str]) -> None:
    st.session_state[SELECTED_ANALYSIS_KEY] = analysis_id


def set_selected_topic(topic: str, keywords: List[str], analysis_id: Optional[str]) -> None:
    st.session_state[SELECTED_TOPIC_KEY] = {
        "topic": topic,
        "keywords": list(keywords),
        "analysis_id": analysis_id,
    }


def get_selected_topic() -> Optional[dict]:
    return st.session_state.get(SELECTED_TOPIC_KEY)


def is_upload_processing() -> bool:
    return bool(st.session_state.get(UPLOAD_PROCESSING_KEY, False))


def set_upload_processing(active: bool) -> None:
    st.session_state[UPLOAD_PROCESSING_KEY] = active


def get_upload_error() -> Optional[str]:
    return st.session_state.get(UPLOAD_ERROR_KEY)


def set_upload_error(message: Optional[str]) -> None:
    st.session_state[UPLOAD_ERROR_KEY] = message


def get_action_plan_cache() -> ActionPlanCache:
    """Action plans live for the browser session only."""
    cache = st.session_state.get(ACTION_PLAN_CACHE_KEY)
    if cache is None:
        cache = ActionPlanCache()
        st.session_state[ACTION_PLAN_CACHE_KEY] = cache
    return cache


def get_expanded_plan() -> Optional[str]:
    return st.session_state.get(EXPANDED_PLAN_KEY)


def set_expanded_plan(cache_key: Optional[str]) -> None:
    st.session_state[EXPANDED_PLAN_KEY] = cache_key
