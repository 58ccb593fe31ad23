"""
Theme constants and CSS injection for Semantic Nebula.
"""

import html

import streamlit as st
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Central theme configuration."""
    bg_canvas: str = "#060606"
    bg_panel: str = "rgba(0, 0, 0, 0.6)"
    border_subtle: str = "rgba(255, 255, 255, 0.15)"

    text_primary: str = "#f5f5f5"
    text_secondary: str = "#bebebe"

    accent_hot: str = "#fff028"
    accent_cold: str = "#283ca0"


THEME = Theme()


def get_css() -> str:
    """Generate CSS using theme constants."""
    return f"""
<style>
    [data-testid="stAppViewContainer"] {{
        background: {THEME.bg_canvas};
    }}

    .sn-header {{
        font-family: 'JetBrains Mono', 'Fira Code', monospace;
        background: linear-gradient(90deg, {THEME.accent_cold} 0%, {THEME.accent_hot} 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        font-size: 2.2rem;
        font-weight: 700;
        margin-bottom: 0;
    }}

    .sn-subheader {{
        color: {THEME.text_secondary};
        font-family: monospace;
        margin-top: 0;
    }}

    .sn-panel {{
        background: {THEME.bg_panel};
        border: 1px solid {THEME.border_subtle};
        border-radius: 14px;
        padding: 0.75rem 1rem;
        margin: 0.5rem 0;
        font-family: monospace;
        color: {THEME.text_primary};
        white-space: pre-wrap;
    }}

    .sn-match {{
        font-family: monospace;
        font-size: 0.8rem;
        color: {THEME.text_secondary};
        margin: 0.1rem 0;
    }}

    .sn-error {{
        background: rgba(239, 68, 68, 0.1);
        border: 1px solid rgba(239, 68, 68, 0.4);
        border-radius: 8px;
        padding: 0.75rem 1rem;
        color: #fca5a5;
    }}

    [data-testid="stTextArea"] textarea {{
        background: rgba(0, 0, 0, 0.55);
        border-radius: 12px;
        font-family: monospace;
    }}
</style>
"""


def inject_styles() -> None:
    """Inject CSS styles into the Streamlit app."""
    st.markdown(get_css(), unsafe_allow_html=True)


def render_header() -> None:
    """Render the styled application header."""
    st.markdown('<h1 class="sn-header">Semantic Nebula</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sn-subheader">Type a feeling / scene / genre and watch the cloud light up</p>',
        unsafe_allow_html=True
    )


def render_panel(text: str) -> None:
    """Render text in a dark rounded panel."""
    st.markdown(f'<div class="sn-panel">{html.escape(text)}</div>', unsafe_allow_html=True)


def render_error(message: str) -> None:
    """Render a styled error message."""
    st.markdown(f'<div class="sn-error">{html.escape(message)}</div>', unsafe_allow_html=True)
