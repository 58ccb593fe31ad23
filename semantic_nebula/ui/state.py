"""
Centralized session state management for Semantic Nebula.
Provides typed accessors and clear state transition methods.
"""

from dataclasses import dataclass
from typing import Optional, Any
import streamlit as st


@dataclass
class StateDefaults:
    """Default values for all session state variables."""
    nebula: Optional[Any] = None
    current_dataset: str = "lines"
    search_query: str = ""
    pointer: Optional[tuple] = None
    animate: bool = False
    last_error: Optional[str] = None


class AppState:
    """
    Wrapper around Streamlit session state with type hints and defaults.
    Provides clear API for state transitions.
    """

    @classmethod
    def init(cls, default_dataset: str = "lines") -> None:
        """Initialize all session state with defaults."""
        defaults = StateDefaults(current_dataset=default_dataset)
        for field_name in defaults.__dataclass_fields__:
            if field_name not in st.session_state:
                st.session_state[field_name] = getattr(defaults, field_name)

    @classmethod
    def reset_for_dataset_change(cls) -> None:
        """Clear transient state when switching corpora."""
        st.session_state.nebula = None
        st.session_state.search_query = ""
        st.session_state.pointer = None
        st.session_state.animate = False
        st.session_state.last_error = None

    @classmethod
    def set_search(cls, query: str) -> None:
        """Record a committed query and play the camera transition."""
        st.session_state.search_query = query
        st.session_state.animate = True

    @classmethod
    def clear_search(cls) -> None:
        st.session_state.search_query = ""
        st.session_state.animate = True

    @classmethod
    def request_animation(cls) -> None:
        """Play camera motion on the next render (zoom, reset)."""
        st.session_state.animate = True

    @classmethod
    def consume_animation(cls) -> bool:
        """Return and clear the pending-animation flag."""
        pending = st.session_state.get("animate", False)
        st.session_state.animate = False
        return pending

    @classmethod
    def set_pointer(cls, pointer: Optional[tuple]) -> None:
        st.session_state.pointer = pointer

    @classmethod
    def set_error(cls, message: str) -> None:
        """Record an error for display."""
        st.session_state.last_error = message

    @classmethod
    def clear_error(cls) -> None:
        st.session_state.last_error = None

    @staticmethod
    def has_error() -> bool:
        return st.session_state.get("last_error") is not None


def init_session_state(default_dataset: str = "lines") -> None:
    """Convenience function to initialize session state."""
    AppState.init(default_dataset)
