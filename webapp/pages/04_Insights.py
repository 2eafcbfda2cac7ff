from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

st.set_page_config(
    page_title="Insights | Chat Pattern Analyzer",
    page_icon="💬",
    layout="wide",
    initial_sidebar_state="expanded",
)

from analyzer.action_plans import ActionPlanCache
from webapp.core.processing import group_suggestions_by_priority, insights_share_description
from webapp.ui import components
from webapp.ui.page_state import ensure_analyses
from webapp.utils import state as app_state
from webapp.utils.logging import get_logger


LOGGER = get_logger("webapp.insights")

PRIORITY_HEADINGS = {
    "high": "🔴 High Priority",
    "medium": "🟡 Medium Priority",
    "low": "🟢 Low Priority",
}


def _render_suggestion_card(analysis, index: int, suggestion) -> None:
    cache = app_state.get_action_plan_cache()
    cache_key = ActionPlanCache.cache_key(analysis.get("id"), index)
    expanded = app_state.get_expanded_plan() == cache_key

    with st.container(border=True):
        components.render_suggestion(suggestion)
        label = "Hide action plan" if expanded else "Get action plan"
        if st.button(label, key=f"action_plan_{cache_key}"):
            app_state.set_expanded_plan(None if expanded else cache_key)
            app_state.trigger_rerun()

        if not expanded:
            return
        plan = cache.get(analysis.get("id"), index)
        if plan is None:
            with st.spinner("Generating your action plan..."):
                try:
                    plan = cache.get_or_generate(analysis, index, suggestion)
                except Exception as exc:  # pylint: disable=broad-except
                    LOGGER.error("Error generating guidance for %s: %s", cache_key, exc)
                    app_state.set_expanded_plan(None)
                    st.error("Could not generate an action plan right now. Please try again.")
                    return
        components.render_action_plan(plan)


def render_page() -> None:
    _, analysis = ensure_analyses("No insights yet")

    st.subheader("Growth Insights")
    components.render_share_panel("My Growth Insights", insights_share_description(analysis))
    st.caption("Click \"Get action plan\" on any suggestion to receive a comprehensive, AI-generated improvement strategy!")

    # Indexes refer to positions in the stored list so cache keys stay stable across groups.
    suggestions = list(analysis.get("improvement_suggestions") or [])
    positions = {id(suggestion): index for index, suggestion in enumerate(suggestions)}
    groups = group_suggestions_by_priority(suggestions)

    for priority, heading in PRIORITY_HEADINGS.items():
        items = groups[priority]
        if not items:
            continue
        st.markdown(f"### {heading}")
        for suggestion in items:
            _render_suggestion_card(analysis, positions[id(suggestion)], suggestion)

    st.divider()
    st.markdown("### Ready to level up?")
    st.write("Pick one high-priority suggestion and work through its quick wins this week.")


if __name__ == "__main__":
    render_page()
