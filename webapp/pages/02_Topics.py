from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

st.set_page_config(
    page_title="Topics | Chat Pattern Analyzer",
    page_icon="💬",
    layout="wide",
    initial_sidebar_state="expanded",
)

from webapp.core.processing import filter_topics, topics_frame, topics_share_description
from webapp.ui import components
from webapp.ui.page_state import ensure_analyses
from webapp.utils import state as app_state


def render_page() -> None:
    _, analysis = ensure_analyses("No topics yet")

    st.subheader("Topics")
    components.render_share_panel("My Chat Topics", topics_share_description(analysis))

    all_topics = filter_topics(analysis.get("top_topics") or [], "")
    search_term = st.text_input("Search topics", placeholder="Search topics or keywords...")
    matches = filter_topics(all_topics, search_term)

    if not matches:
        st.markdown("### No topics found")
        st.info("Try a different search term.")
    for position, topic in enumerate(matches):
        keywords = [str(keyword) for keyword in topic.get("keywords") or []]
        with st.container(border=True):
            col1, col2 = st.columns([4, 1])
            with col1:
                st.markdown(f"#### {topic.get('topic')}")
                st.caption(f"{topic.get('count') or 0} mentions")
                if keywords:
                    st.markdown(" ".join(f"`{keyword}`" for keyword in keywords))
            with col2:
                if st.button("Explore", key=f"explore_topic_{position}"):
                    app_state.set_selected_topic(str(topic.get("topic")), keywords, analysis.get("id"))
                    st.switch_page("pages/03_Topic_Detail.py")

    topics_df = topics_frame(analysis)
    if not topics_df.empty:
        st.markdown("### Topic Insights")
        most_discussed = topics_df.sort_values("count", ascending=False).iloc[0]["topic"]
        components.render_metric_row(
            [
                ("Total Topics", len(topics_df)),
                ("Most Discussed", most_discussed),
                ("Total Mentions", int(topics_df["count"].sum())),
            ]
        )


if __name__ == "__main__":
    render_page()
