"""Main view UI components (search, nebula chart, matches, hover details)."""

import html
import logging
import streamlit as st
from typing import TYPE_CHECKING, Optional

from semantic_nebula.core.frame import FrameSnapshot
from semantic_nebula.core.points import NO_RANK
from semantic_nebula.core.ranker import SearchResult
from semantic_nebula.ui.state import AppState
from semantic_nebula.ui.styles import render_error, render_panel
from semantic_nebula.visualization.nebula_plot import NebulaPlotBuilder, truncate
import config

if TYPE_CHECKING:
    from semantic_nebula.core.nebula import Nebula

logger = logging.getLogger(__name__)

PLOT_KEY = "nebula_plot"


def render_status(nebula: "Nebula") -> None:
    """Header panel: best match of the active query, or a prompt."""
    result = nebula.result
    if result is None or result.best is None:
        render_panel(f"Enter a query and click Search!\nItems in cloud: {nebula.n_items}")
        return

    best = result.best
    render_panel(
        f"Best match:\n{truncate(best.text, config.HOVER_TEXT_MAX)}\n"
        f"Score: {best.score:.3f}    Items in cloud: {nebula.n_items}"
    )


def render_search_bar(nebula: "Nebula") -> None:
    """Render query input and handle search action."""
    query = st.text_area(
        "Query",
        placeholder="Type a feeling / scene / genre...",
        height=80,
        key="search_input",
        label_visibility="collapsed",
    )

    col1, col2 = st.columns([1, 1])
    with col1:
        search_clicked = st.button(
            "Search",
            type="primary",
            use_container_width=True,
            disabled=not nebula.is_initialized,
        )
    with col2:
        if st.button("Clear", use_container_width=True, disabled=nebula.result is None):
            nebula.clear_search()
            AppState.clear_search()
            st.rerun()

    if search_clicked and query.strip():
        _perform_search(nebula, query.strip())


def _perform_search(nebula: "Nebula", query: str) -> None:
    """Score the query and commit it; the status panel refreshes on rerun."""
    try:
        with st.spinner("Thinking..."):
            nebula.search(query)
    except Exception as e:
        logger.exception("Search failed")
        AppState.set_error(f"Search failed: {e}")
        return

    AppState.set_search(query)
    AppState.clear_error()
    st.rerun()


def _pointer_from_selection(nebula: "Nebula") -> Optional[tuple]:
    """Turn the last clicked chart point into a normalized pointer."""
    event = st.session_state.get(PLOT_KEY)
    if not event:
        return st.session_state.get("pointer")

    points = event.get("selection", {}).get("points", [])
    if not points:
        return st.session_state.get("pointer")

    x, y = points[0].get("x"), points[0].get("y")
    if x is None or y is None:
        return st.session_state.get("pointer")
    return nebula.viewport.screen_to_pointer(float(x), float(y))


def _settled(nebula: "Nebula") -> bool:
    return nebula.camera.is_settled(config.SETTLE_FOCUS_PX, zoom_tolerance=config.SETTLE_ZOOM)


def _collect_transition(nebula: "Nebula", pointer: Optional[tuple]) -> list[FrameSnapshot]:
    """Tick the camera until it settles (bounded) and keep every frame."""
    frames = [nebula.tick(pointer=pointer)]
    while len(frames) < config.MAX_ANIMATION_FRAMES and not _settled(nebula):
        frames.append(nebula.tick(pointer=pointer))
    return frames


def render_nebula(nebula: "Nebula") -> Optional[FrameSnapshot]:
    """Render the point cloud; returns the frame that is left on screen."""
    pointer = _pointer_from_selection(nebula)
    AppState.set_pointer(pointer)

    builder = NebulaPlotBuilder(nebula.viewport)
    texts = nebula.points.texts

    if AppState.consume_animation():
        frames = _collect_transition(nebula, pointer)
        fig = builder.build_animation(frames, texts)
        snapshot = frames[-1]
    else:
        snapshot = nebula.tick(pointer=pointer)
        fig = builder.build(snapshot, texts)

    st.plotly_chart(
        fig,
        use_container_width=False,
        key=PLOT_KEY,
        on_select="rerun",
        selection_mode="points",
        config={"displayModeBar": False},
    )
    return snapshot


def match_lines(result: SearchResult) -> list[str]:
    """Top matches as HTML rows; corpus text is escaped."""
    return [
        '<div class="sn-match">'
        + html.escape(truncate(f"#{i + 1} ({m.score:.3f}) {m.text}", config.MATCH_LINE_MAX))
        + "</div>"
        for i, m in enumerate(result.top_k)
    ]


def render_matches(nebula: "Nebula") -> None:
    """Top matches panel."""
    st.markdown("### Top matches")
    result = nebula.result
    if result is None:
        st.caption("No query yet.")
        return

    for line in match_lines(result):
        st.markdown(line, unsafe_allow_html=True)


def render_hover_details(nebula: "Nebula", snapshot: Optional[FrameSnapshot]) -> None:
    """Details for the point under the pointer."""
    if snapshot is None or snapshot.hover is None:
        return

    point = nebula.point(snapshot.hover.index)
    st.markdown("### Under pointer")
    render_panel(truncate(point.text, config.HOVER_TEXT_MAX))
    if point.rank != NO_RANK:
        st.caption(f"Rank #{point.rank + 1} · similarity {point.similarity:.3f}")


def render_last_error() -> None:
    if AppState.has_error():
        render_error(st.session_state.last_error)


def render_loading_screen(nebula: "Nebula") -> None:
    """Run the corpus load with a progress readout."""
    st.markdown("### Building the nebula")
    st.markdown("Embedding, projecting and laying out the corpus. Results are cached.")

    status_text = st.empty()

    try:
        nebula.initialize(progress_callback=status_text.text)
    except Exception as e:
        logger.exception("Initialization failed")
        st.error(f"Error during initialization: {e}")
        st.exception(e)
        return

    status_text.text("Done! Refreshing...")
    st.rerun()
