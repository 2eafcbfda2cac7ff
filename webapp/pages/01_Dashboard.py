from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

st.set_page_config(
    page_title="Dashboard | Chat Pattern Analyzer",
    page_icon="💬",
    layout="wide",
    initial_sidebar_state="expanded",
)

from webapp.core.processing import (
    dashboard_share_description,
    sentiment_frame,
    topics_frame,
)
from webapp.ui import components
from webapp.ui.charts import create_sentiment_chart, create_topics_chart
from webapp.ui.page_state import ensure_analyses


def render_page() -> None:
    _, analysis = ensure_analyses("No analyses yet")

    st.subheader(f"Analysis of {analysis.get('file_name') or 'your chat history'}")
    if analysis.get("date_range"):
        st.caption(analysis["date_range"])
    components.render_share_panel("My Chat Analysis Results", dashboard_share_description(analysis))

    patterns = analysis.get("patterns") if isinstance(analysis.get("patterns"), dict) else {}
    topics_df = topics_frame(analysis)
    components.render_metric_row(
        [
            ("Total Messages", analysis.get("total_messages") or 0),
            ("Peak Time", patterns.get("peak_activity_time") or "N/A"),
            ("Top Topics", len(topics_df)),
        ]
    )

    col1, col2 = st.columns(2)
    with col1:
        sentiment_fig = create_sentiment_chart(sentiment_frame(analysis))
        st.plotly_chart(sentiment_fig, use_container_width=True, key=f"dashboard_sentiment_{analysis.get('id')}")
    with col2:
        topics_fig = create_topics_chart(topics_df)
        st.plotly_chart(topics_fig, use_container_width=True, key=f"dashboard_topics_{analysis.get('id')}")

    insights = analysis.get("key_insights") or []
    if insights:
        st.markdown("### Key Insights")
        for insight in insights:
            st.markdown(f"- {insight}")

    st.markdown("### Behavioral Patterns")
    col1, col2 = st.columns(2)
    with col1:
        st.metric(label="Peak Activity Time", value=patterns.get("peak_activity_time") or "N/A")
    with col2:
        st.metric(label="Avg Session Length", value=patterns.get("average_session_length") or "N/A")
    themes = patterns.get("recurring_themes") or []
    if themes:
        st.markdown("**Recurring Themes**")
        st.markdown(" · ".join(f"`{theme}`" for theme in themes))


if __name__ == "__main__":
    render_page()
