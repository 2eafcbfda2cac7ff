from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

import streamlit as st

from webapp.ui import components
from webapp.ui.data_access import load_analyses
from webapp.utils.logging import get_logger


LOGGER = get_logger("webapp.page_state")


def ensure_analyses(empty_title: str = "No analyses yet") -> Tuple[List[Dict[str, Any]], Mapping[str, Any]]:
    """Load stored analyses and the selected one, or stop the page when none exist."""
    sidebar = st.sidebar
    components.render_sidebar_branding(sidebar)

    with st.spinner("🔄 Loading analyses..."):
        records = load_analyses()
    LOGGER.debug("Loaded %d stored analyses", len(records))

    selected = components.render_analysis_selector(records, container=sidebar)
    if selected is None:
        components.render_empty_state(
            empty_title,
            "Upload your chat history to discover patterns, topics and personalized insights.",
        )
        st.stop()

    return records, selected
