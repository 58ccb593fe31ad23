"""Sidebar UI components for Semantic Nebula."""

import logging
import streamlit as st
from typing import TYPE_CHECKING

from semantic_nebula.loaders.base import get_loader, list_loaders
from semantic_nebula.ui.state import AppState

if TYPE_CHECKING:
    from semantic_nebula.core.nebula import Nebula

logger = logging.getLogger(__name__)

# Wheel delta applied by the zoom buttons (one notch on most mice is ~100)
ZOOM_STEP = 250.0


def render_sidebar(nebula: "Nebula") -> None:
    """Render the complete sidebar."""
    with st.sidebar:
        render_dataset_switcher()
        st.markdown("---")
        render_corpus_info(nebula)
        st.markdown("---")
        render_camera_controls(nebula)
        st.markdown("---")
        render_canvas_size(nebula)
        st.markdown("---")
        render_cache_controls(nebula)


def render_dataset_switcher() -> None:
    """Pick the corpus loader among those whose data exists."""
    st.markdown("### Corpus")

    available = []
    for key in list_loaders():
        try:
            if get_loader(key).exists():
                available.append(key)
        except Exception as e:
            logger.debug(f"Loader {key} check failed: {e}")

    if not available:
        st.warning("No corpus found. Add data/corpus.txt (one item per line).")
        return

    current = st.session_state.current_dataset
    if current not in available:
        current = available[0]
        st.session_state.current_dataset = current

    selected = st.radio(
        "Select corpus:",
        available,
        index=available.index(current),
        key="dataset_radio",
    )

    if selected != current:
        st.session_state.current_dataset = selected
        AppState.reset_for_dataset_change()
        st.rerun()


def render_corpus_info(nebula: "Nebula") -> None:
    st.markdown("### Cloud")
    st.metric("Items", f"{nebula.n_items:,}")
    zoom = nebula.camera.zoom
    st.caption(f"Zoom {zoom:.2f}× (target {nebula.camera.zoom_target:.2f}×)")


def render_camera_controls(nebula: "Nebula") -> None:
    """Zoom in/out (wheel equivalent) and reset to overview."""
    st.markdown("### Camera")
    col1, col2 = st.columns(2)

    with col1:
        if st.button("Zoom in", use_container_width=True):
            nebula.zoom(-ZOOM_STEP)
            AppState.request_animation()
    with col2:
        if st.button("Zoom out", use_container_width=True):
            nebula.zoom(ZOOM_STEP)
            AppState.request_animation()

    if st.button("Reset view", use_container_width=True):
        nebula.reset_view()
        AppState.request_animation()


def render_canvas_size(nebula: "Nebula") -> None:
    """Viewport size; changing it re-fits the layout."""
    st.markdown("### Canvas")
    width = st.number_input("Width", 320, 2400, int(nebula.viewport.width), step=40)
    height = st.number_input("Height", 240, 1600, int(nebula.viewport.height), step=40)

    if (width, height) != (int(nebula.viewport.width), int(nebula.viewport.height)):
        nebula.resize(width, height)
        AppState.set_pointer(None)


def render_cache_controls(nebula: "Nebula") -> None:
    st.markdown("### Cache")
    info = nebula.get_cache_info()
    st.caption(f"Status: {info.get('status')} · {info.get('size_mb', 0)} MB")

    if st.button("Clear cache", use_container_width=True):
        nebula.clear_cache()
        AppState.reset_for_dataset_change()
        st.rerun()
