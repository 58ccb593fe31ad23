"""
Plotly rendering of nebula frames.
Paints a FrameSnapshot (screen-space positions in draw order) as layered scatter traces.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from semantic_nebula.core.frame import FrameSnapshot, Viewport
import config


def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def pop_curve(t: np.ndarray) -> np.ndarray:
    return np.power(np.clip(t, 0.0, 1.0), config.SIZE_POWER)


def color_by_pop(pop: np.ndarray) -> np.ndarray:
    """Dim blue → warm yellow ramp; returns (n, 3) RGB floats."""
    p = np.clip(pop, 0.0, 1.0)
    r = 40 + (255 - 40) * np.power(p, 0.85)
    g = 60 + (240 - 60) * np.power(p, 1.15)
    b = 160 + (40 - 160) * np.power(p, 0.95)
    return np.stack([r, g, b], axis=1)


def rgba(rgb: np.ndarray, alpha: np.ndarray) -> list[str]:
    return [
        f"rgba({int(c[0])},{int(c[1])},{int(c[2])},{a:.3f})"
        for c, a in zip(rgb, np.clip(alpha, 0.0, 1.0))
    ]


class NebulaPlotBuilder:
    """
    Builds Plotly figures for the point cloud.

    Layers, back to front:
    - haze: faint dots at the un-jittered anchors (fills the canvas)
    - glow: wide translucent halos for strong matches
    - points: sized and colored by intensity, in depth order
    - hover: outline and label for the point under the pointer
    """

    BACKGROUND = "rgb(6,6,6)"
    HAZE_COLOR = "rgba(140,170,255,0.04)"
    HAZE_SIZE = 2.3
    GLOW_MULT = 5.0
    GLOW_THRESHOLD = 0.30

    def __init__(self, viewport: Viewport):
        self.viewport = viewport

    def _layer_traces(self, snapshot: FrameSnapshot, texts: list[str]) -> list[go.Scatter]:
        order = snapshot.order
        xs = snapshot.screen[order, 0]
        ys = snapshot.screen[order, 1]
        pop = pop_curve(snapshot.intensity[order])
        rgb = color_by_pop(pop)
        sizes = snapshot.size[order]
        hover_text = [truncate(texts[i], config.HOVER_TEXT_MAX) for i in order]

        traces = [
            go.Scatter(
                x=snapshot.anchor[:, 0],
                y=snapshot.anchor[:, 1],
                mode="markers",
                marker=dict(color=self.HAZE_COLOR, size=self.HAZE_SIZE),
                hoverinfo="skip",
                name="haze",
            )
        ]

        glow = pop > self.GLOW_THRESHOLD
        glow_alpha = (10 + 160 * (pop - self.GLOW_THRESHOLD) / (1 - self.GLOW_THRESHOLD)) / 255
        traces.append(go.Scatter(
            x=xs[glow],
            y=ys[glow],
            mode="markers",
            marker=dict(
                color=rgba(rgb[glow], glow_alpha[glow]),
                size=sizes[glow] * self.GLOW_MULT,
                line=dict(width=0),
            ),
            hoverinfo="skip",
            name="glow",
        ))

        alpha = (10 + 240 * np.power(pop, 0.95)) / 255
        traces.append(go.Scatter(
            x=xs,
            y=ys,
            mode="markers",
            marker=dict(color=rgba(rgb, alpha), size=sizes, line=dict(width=0)),
            text=hover_text,
            customdata=order,
            hovertemplate="%{text}<extra></extra>",
            name="points",
        ))

        hover = snapshot.hover
        traces.append(go.Scatter(
            x=[hover.x] if hover else [],
            y=[hover.y] if hover else [],
            mode="markers+text",
            marker=dict(
                size=float(snapshot.size[hover.index]) * 2 + 6 if hover else 0,
                color="rgba(0,0,0,0)",
                line=dict(color="white", width=1.5),
            ),
            text=[truncate(texts[hover.index], config.HOVER_TEXT_MAX)] if hover else [],
            textposition="top right",
            textfont=dict(color="white", family="monospace", size=12),
            hoverinfo="skip",
            name="hover",
        ))
        return traces

    def _configure(self, fig: go.Figure) -> go.Figure:
        fig.update_layout(
            height=int(self.viewport.height),
            width=int(self.viewport.width),
            paper_bgcolor=self.BACKGROUND,
            plot_bgcolor=self.BACKGROUND,
            showlegend=False,
            margin=dict(l=0, r=0, t=0, b=0),
            xaxis=dict(
                range=[0, self.viewport.width],
                visible=False,
                fixedrange=True,
            ),
            # Screen space: y grows downwards
            yaxis=dict(
                range=[self.viewport.height, 0],
                visible=False,
                fixedrange=True,
            ),
            hovermode="closest",
            dragmode=False,
        )
        return fig

    def build(self, snapshot: FrameSnapshot, texts: list[str]) -> go.Figure:
        """Build a static figure for one frame."""
        fig = go.Figure(data=self._layer_traces(snapshot, texts))
        return self._configure(fig)

    def build_animation(
        self,
        snapshots: list[FrameSnapshot],
        texts: list[str],
        frame_ms: Optional[int] = None
    ) -> go.Figure:
        """
        Build an auto-playing figure from consecutive frames (camera transitions).

        Args:
            snapshots: Frames in playback order (at least one)
            texts: Point payloads for hover labels
            frame_ms: Frame duration in milliseconds (defaults to FRAME_DT)
        """
        if not snapshots:
            raise ValueError("build_animation needs at least one snapshot")

        frame_ms = frame_ms or int(config.FRAME_DT * 1000)
        fig = go.Figure(
            data=self._layer_traces(snapshots[0], texts),
            frames=[
                go.Frame(data=self._layer_traces(s, texts), name=str(i))
                for i, s in enumerate(snapshots)
            ],
        )
        fig = self._configure(fig)
        fig.update_layout(
            updatemenus=[dict(
                type="buttons",
                showactive=False,
                x=0.02,
                y=0.02,
                buttons=[dict(
                    label="Replay",
                    method="animate",
                    args=[None, dict(
                        frame=dict(duration=frame_ms, redraw=False),
                        transition=dict(duration=0),
                        fromcurrent=False,
                    )],
                )],
            )]
        )
        return fig
