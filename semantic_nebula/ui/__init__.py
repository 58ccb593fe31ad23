"""UI components for the Semantic Nebula Streamlit application."""

from .state import AppState, init_session_state
from .styles import inject_styles, render_header, THEME
from . import sidebar
from . import main_view

__all__ = [
    "AppState",
    "init_session_state",
    "inject_styles",
    "render_header",
    "THEME",
    "sidebar",
    "main_view",
]
