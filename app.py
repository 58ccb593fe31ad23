"""
Semantic Nebula: query-reactive point cloud over a text corpus.
Main Streamlit application.

Run with: streamlit run app.py
"""

import logging
import os

import streamlit as st
from dotenv import load_dotenv

from semantic_nebula.core.nebula import Nebula
from semantic_nebula.loaders.base import get_loader
from semantic_nebula.ui import init_session_state, inject_styles, render_header
from semantic_nebula.ui import main_view, sidebar
import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(
    page_title="Semantic Nebula",
    page_icon="✨",
    layout="wide",
    initial_sidebar_state="expanded"
)


def get_nebula() -> Nebula:
    """Get or create this session's Nebula for the selected corpus."""
    if st.session_state.nebula is None:
        loader = get_loader(st.session_state.current_dataset)
        st.session_state.nebula = Nebula(dataset_loader=loader)
    return st.session_state.nebula


def main():
    """Main application entry point."""
    load_dotenv()
    init_session_state(config.DEFAULT_DATASET)
    inject_styles()
    render_header()

    if not os.getenv("OPENAI_API_KEY"):
        st.error("""
        **OpenAI API key not found!**

        Create a `.env` file in the project root:
        ```
        OPENAI_API_KEY=sk-your-key-here
        ```
        """)
        st.stop()

    if not get_loader(st.session_state.current_dataset).exists():
        st.warning(f"""
        **No corpus found!**

        Put one item per line in `{config.CORPUS_TEXT_PATH}`
        (the first {config.MAX_CORPUS_ITEMS} lines are used), or a CSV with a
        `text` column at `{config.CUSTOM_ITEMS_PATH}`.
        """)
        sidebar.render_dataset_switcher()
        st.stop()

    nebula = get_nebula()

    # Queries stay disabled until the layout is complete
    if not nebula.is_initialized:
        main_view.render_loading_screen(nebula)
        st.stop()

    sidebar.render_sidebar(nebula)

    main_view.render_status(nebula)
    main_view.render_search_bar(nebula)
    main_view.render_last_error()

    col_viz, col_details = st.columns([3, 1])

    with col_viz:
        snapshot = main_view.render_nebula(nebula)

    with col_details:
        main_view.render_hover_details(nebula, snapshot)
        main_view.render_matches(nebula)


if __name__ == "__main__":
    main()
