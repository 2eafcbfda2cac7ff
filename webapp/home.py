from __future__ import annotations

import sys
import time
from pathlib import Path

import streamlit as st

# Ensure the project root is available on sys.path for `webapp.*` and `analyzer.*` imports.
APP_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = APP_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from analyzer.logging_config import configure_logging
from analyzer.pipeline import PipelineStage, UploadPipeline
from webapp.core.config import get_config
from webapp.core.processing import has_accepted_extension
from webapp.ui import components
from webapp.ui.data_access import get_storage, load_analyses
from webapp.utils import state as app_state
from webapp.utils.logging import get_logger


LOGGER = get_logger("webapp.home")

STAGE_LABELS = {
    PipelineStage.READING: "📄 Reading file...",
    PipelineStage.PARSING: "🔍 Parsing messages...",
    PipelineStage.SAMPLING: "🎯 Sampling conversation history...",
    PipelineStage.EXTRACTING: "✂️ Extracting message content...",
    PipelineStage.PROMPTING: "📝 Preparing analysis request...",
    PipelineStage.AWAITING_LLM: "🧠 AI is analyzing your conversations...",
    PipelineStage.INGESTING: "💾 Saving results...",
    PipelineStage.DONE: "✅ Analysis complete!",
}


def _render_intro() -> None:
    st.title("Understand Your Chat Patterns")
    st.caption("🔒 Privacy first analysis")
    st.write(
        "Upload your ChatGPT history and get AI-powered insights about your conversations, "
        "topics, and growth opportunities."
    )
    col1, col2, col3 = st.columns(3)
    col1.markdown("**🛡️ 100% Private**  \nStored on this machine")
    col2.markdown("**⚡ AI Powered**  \nDeep insights")
    col3.markdown("**✨ Actionable**  \nGrowth tips")


def _render_help() -> None:
    st.subheader("How to export your chat history")
    st.markdown(
        """
        1. Go to ChatGPT Settings
        2. Click "Data Controls"
        3. Select "Export Data"
        4. Download your conversations.json file
        5. Upload it here for analysis!
        """
    )

    st.subheader("Share your insights")
    st.write("After analyzing your chat history, you can share your results with friends and colleagues!")
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**What you can share**")
        st.markdown(
            """
            - Your top discussion topics
            - Conversation sentiment breakdown
            - Key behavioral insights
            - Total message statistics
            """
        )
    with col2:
        st.markdown("**What stays private**")
        st.markdown(
            """
            - Your actual chat messages
            - Personal information
            - Conversation details
            - Original chat files
            """
        )
    st.caption("🔒 Look for the Share panel on the Dashboard, Topics, and Insights pages!")


def _analyze_upload(uploaded_file) -> bool:
    """Run the pipeline for one file; returns True when an analysis was stored."""
    progress_bar = st.progress(0)
    status = st.empty()

    def on_progress(stage: PipelineStage, progress: int) -> None:
        label = STAGE_LABELS.get(stage)
        if label is None:
            return
        progress_bar.progress(progress)
        status.info(label)

    pipeline = UploadPipeline(get_storage(), on_progress=on_progress)
    result = pipeline.run(uploaded_file.name, uploaded_file.getvalue())

    if not result.ok:
        progress_bar.empty()
        status.empty()
        LOGGER.warning("Upload of %s failed (%s)", uploaded_file.name, result.error_category)
        app_state.set_upload_error(result.user_message)
        return False

    app_state.set_upload_error(None)
    app_state.set_selected_analysis_id(result.record_id)
    load_analyses.clear()
    LOGGER.info("Stored analysis %s for %s", result.record_id, uploaded_file.name)
    return True


def _request_analysis() -> None:
    """Mark an analysis as pending and rerun so the widgets render disabled first."""
    app_state.set_upload_error(None)
    app_state.set_upload_processing(True)
    app_state.trigger_rerun()


def _run_pending_analysis(uploaded_file) -> None:
    """Run the analysis requested on the previous script run, then release the gate."""
    if uploaded_file is None:
        app_state.set_upload_processing(False)
        return

    stored = False
    try:
        stored = _analyze_upload(uploaded_file)
    finally:
        app_state.set_upload_processing(False)

    if stored:
        time.sleep(get_config().redirect_delay_seconds)
        st.switch_page("pages/01_Dashboard.py")
    else:
        app_state.trigger_rerun()


def main() -> None:
    st.set_page_config(
        page_title="Upload | Chat Pattern Analyzer",
        page_icon="💬",
        layout="wide",
        initial_sidebar_state="expanded",
    )
    configure_logging()

    config = get_config()
    processing = app_state.is_upload_processing()
    components.render_sidebar_branding(st.sidebar)
    _render_intro()
    st.divider()

    st.subheader("Drop your chat history")
    uploaded_file = st.file_uploader(
        "Supports JSON and TXT files",
        type=list(config.accepted_extensions),
        disabled=processing,
        key="chat_history_upload",
    )

    if uploaded_file is not None:
        if not has_accepted_extension(uploaded_file.name, config.accepted_extensions):
            app_state.set_upload_error("Please upload a JSON or TXT file containing your chat history")
        else:
            st.write(f"**{uploaded_file.name}** · {uploaded_file.size / 1024:.2f} KB")
            if st.button("Analyze chat history", type="primary", disabled=processing):
                _request_analysis()

    if processing:
        _run_pending_analysis(uploaded_file)

    error_message = app_state.get_upload_error()
    if error_message:
        st.error(error_message)

    st.divider()
    _render_help()


if __name__ == "__main__":
    main()
