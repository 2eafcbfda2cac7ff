from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from webapp.core.config import get_config
from webapp.core.processing import analysis_label, build_share_links, select_analysis
from webapp.utils import state as app_state

PRIORITY_BADGES = {
    "high": "🔴 High",
    "medium": "🟡 Medium",
    "low": "🟢 Low",
}

ACTION_PLAN_SECTIONS = (
    ("root_cause", "Root Cause Analysis"),
    ("why_matters", "Why This Matters"),
    ("quick_wins", "Quick Wins (Start Today!)"),
    ("action_steps", "Step-by-Step Action Plan"),
    ("long_term", "Long-term Strategy"),
    ("success_metrics", "Track Your Progress"),
)


def render_sidebar_branding(container: Optional[DeltaGenerator] = None) -> None:
    """Render a compact app title in the sidebar."""
    target = container or st.sidebar
    target.markdown(
        (
            "<div style=\"font-size:0.85rem;font-weight:600;color:#1f2937;"
            "letter-spacing:0.015em;margin:0.25rem 0 0.75rem 0;\">"
            "💬 Chat Pattern Analyzer"
            "</div>"
            "<hr/>"
        ),
        unsafe_allow_html=True,
    )


def render_analysis_selector(
    records: Sequence[Mapping[str, Any]],
    *,
    container: Optional[DeltaGenerator] = None,
) -> Optional[Mapping[str, Any]]:
    """Let the user pick a stored analysis; defaults to the newest one."""
    target = container or st.sidebar
    current = select_analysis(records, app_state.get_selected_analysis_id())
    if current is None:
        return None

    ids = [record.get("id") for record in records]
    labels = {record.get("id"): analysis_label(record) for record in records}
    chosen_id = target.selectbox(
        "Analysis",
        options=ids,
        index=ids.index(current.get("id")),
        format_func=lambda value: labels.get(value, str(value)),
        key="analysis_selector",
    )
    app_state.set_selected_analysis_id(chosen_id)
    return select_analysis(records, chosen_id)


def render_empty_state(title: str, message: str) -> None:
    st.markdown(f"### {title}")
    st.info(message)
    st.page_link("home.py", label="Upload a chat history", icon="📤")


def render_share_panel(
    title: str,
    description: str,
    *,
    container: Optional[DeltaGenerator] = None,
) -> None:
    """Links that open each network's share dialog for the app URL."""
    target = container or st
    links = build_share_links(get_config().share_url, title, description)
    with target.expander("📣 Share", expanded=False):
        st.caption(description)
        columns = st.columns(len(links))
        for column, (network, href) in zip(columns, links.items()):
            with column:
                st.link_button(network, href, use_container_width=True)


def render_suggestion(suggestion: Mapping[str, Any]) -> None:
    priority = str(suggestion.get("priority") or "").lower()
    badge = PRIORITY_BADGES.get(priority, priority.title() or "Unrated")
    st.markdown(f"**{suggestion.get('category') or 'General'}** · {badge}")
    st.write(suggestion.get("suggestion") or "")


def render_action_plan(plan: Dict[str, Any]) -> None:
    """Render the sections of a generated action plan that are present."""
    for key, heading in ACTION_PLAN_SECTIONS:
        value = plan.get(key)
        if not value:
            continue
        st.markdown(f"**{heading}**")
        if isinstance(value, list):
            numbered = key == "action_steps"
            for position, item in enumerate(value, start=1):
                prefix = f"{position}." if numbered else "-"
                st.markdown(f"{prefix} {item}")
        else:
            st.write(value)


def render_metric_row(metrics: Sequence[tuple]) -> None:
    columns = st.columns(len(metrics))
    for column, (label, value) in zip(columns, metrics):
        with column:
            st.metric(label=label, value=value)
