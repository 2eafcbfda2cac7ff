from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

st.set_page_config(
    page_title="Topic Detail | Chat Pattern Analyzer",
    page_icon="💬",
    layout="wide",
    initial_sidebar_state="expanded",
)

from webapp.core.processing import (
    find_related_content,
    find_topic,
    parse_topic_params,
    select_analysis,
    sentiment_frame,
)
from webapp.ui import components
from webapp.ui.charts import create_sentiment_chart
from webapp.ui.page_state import ensure_analyses
from webapp.utils import state as app_state


def _resolve_topic():
    topic, keywords, analysis_id = parse_topic_params(st.query_params.to_dict())
    if topic:
        return topic, keywords, analysis_id
    selected = app_state.get_selected_topic() or {}
    return selected.get("topic"), selected.get("keywords") or [], selected.get("analysis_id")


def render_page() -> None:
    records, current = ensure_analyses()
    topic_name, keywords, analysis_id = _resolve_topic()
    if not topic_name:
        st.info("Pick a topic on the Topics page to see its details.")
        st.page_link("pages/02_Topics.py", label="Back to topics", icon="⬅️")
        return

    analysis = select_analysis(records, analysis_id) if analysis_id else current
    topic = find_topic(analysis, topic_name)
    keywords = keywords or [str(keyword) for keyword in topic.get("keywords") or []]
    related = find_related_content(analysis, topic_name, keywords)

    st.page_link("pages/02_Topics.py", label="Back to topics", icon="⬅️")
    st.subheader(topic_name)
    if keywords:
        st.markdown(" ".join(f"`{keyword}`" for keyword in keywords))

    components.render_metric_row(
        [
            ("Mentions", topic.get("count") or 0),
            ("Related Insights", len(related.insights)),
            ("Improvement Areas", len(related.suggestions)),
            ("Recurring Themes", len(related.themes)),
        ]
    )

    patterns = analysis.get("patterns") if isinstance(analysis.get("patterns"), dict) else {}
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Overall Sentiment")
        st.plotly_chart(
            create_sentiment_chart(sentiment_frame(analysis)),
            use_container_width=True,
            key=f"topic_sentiment_{analysis.get('id')}",
        )
    with col2:
        st.markdown("### Behavioral Patterns")
        st.metric(label="Peak Activity Time", value=patterns.get("peak_activity_time") or "N/A")
        st.metric(label="Avg Session Length", value=patterns.get("average_session_length") or "N/A")
        if related.themes:
            st.markdown("**Related Themes**")
            st.markdown(" · ".join(f"`{theme}`" for theme in related.themes))

    if related.insights:
        st.markdown("### Related Insights")
        for insight in related.insights:
            st.markdown(f"- {insight}")

    if related.suggestions:
        st.markdown("### Improvement Suggestions")
        for suggestion in related.suggestions:
            with st.container(border=True):
                components.render_suggestion(suggestion)

    if related.is_empty:
        st.markdown("### Limited specific data")
        st.info(
            "No specific insights found for this topic in your analysis. "
            "Try exploring other topics or uploading more chat data!"
        )


if __name__ == "__main__":
    render_page()
