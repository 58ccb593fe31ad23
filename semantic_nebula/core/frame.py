"""
Per-frame screen transform and pointer hit test.

screen = rect_center + (position - focus) * zoom + parallax(depth, pointer) + wander(seed, time)

Depth convention: depth is distance from the viewer in (0, 1]. Smaller depth
means nearer: near points shift more with the pointer (factor 1 - depth) and
are painted last. Draw order is therefore descending depth, ties by ascending
index, and the hit test prefers the point painted last.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from semantic_nebula.core.camera import CameraController
from semantic_nebula.core.layout import Rect
from semantic_nebula.core.points import NO_RANK, PointSet
from semantic_nebula.core.ranker import SearchResult
import config

# Per-axis noise offsets: (static jitter, drift)
_AXIS_OFFSETS = {0: (1000.0, 0.0), 1: (2000.0, 999.0)}


@dataclass(frozen=True)
class Viewport:
    """Canvas size plus the chrome that the layout must stay clear of."""
    width: float
    height: float
    margin: float = config.VIEW_MARGIN
    top_inset: float = config.VIEW_TOP_INSET
    bottom_inset: float = config.VIEW_BOTTOM_INSET

    @property
    def layout_rect(self) -> Rect:
        """Canvas minus margin and insets; never narrower than GEOMETRY_EPS."""
        left = self.margin
        top = self.margin + self.top_inset
        right = max(left + config.GEOMETRY_EPS, self.width - self.margin)
        bottom = max(top + config.GEOMETRY_EPS, self.height - self.margin - self.bottom_inset)
        return Rect(left=left, top=top, right=right, bottom=bottom)

    def pointer_to_screen(self, pointer: tuple[float, float]) -> tuple[float, float]:
        """Map a normalized pointer in [-1, 1]^2 to canvas pixels."""
        nx, ny = clamp_pointer(pointer)
        return (nx + 1.0) * 0.5 * self.width, (ny + 1.0) * 0.5 * self.height

    def screen_to_pointer(self, x: float, y: float) -> tuple[float, float]:
        """Inverse of pointer_to_screen, clamped to [-1, 1]^2."""
        nx = 2.0 * x / max(config.GEOMETRY_EPS, self.width) - 1.0
        ny = 2.0 * y / max(config.GEOMETRY_EPS, self.height) - 1.0
        return clamp_pointer((nx, ny))


@dataclass(frozen=True)
class Hover:
    """The single point under the pointer."""
    index: int
    x: float
    y: float


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the presentation layer needs to paint one frame."""
    screen: np.ndarray       # (n, 2) final positions
    anchor: np.ndarray       # (n, 2) camera + parallax only, no wander
    order: np.ndarray        # draw order, back to front
    intensity: np.ndarray    # (n,) t in [0, 1]
    rank: np.ndarray         # (n,) NO_RANK when no query is active
    depth: np.ndarray
    size: np.ndarray
    hover: Optional[Hover]
    zoom: float
    focus: tuple[float, float]
    time: float

    def __len__(self) -> int:
        return len(self.order)

    def rows(self) -> Iterator[tuple[int, float, float, float, int, float]]:
        """Yield (index, x, y, t, rank, depth) in draw order."""
        for i in self.order:
            yield (
                int(i),
                float(self.screen[i, 0]),
                float(self.screen[i, 1]),
                float(self.intensity[i]),
                int(self.rank[i]),
                float(self.depth[i]),
            )


def clamp_pointer(pointer: tuple[float, float]) -> tuple[float, float]:
    nx, ny = pointer
    nx = 0.0 if not np.isfinite(nx) else min(1.0, max(-1.0, float(nx)))
    ny = 0.0 if not np.isfinite(ny) else min(1.0, max(-1.0, float(ny)))
    return nx, ny


def _lattice(i: np.ndarray) -> np.ndarray:
    h = np.sin(i * 12.9898) * 43758.5453
    return h - np.floor(h)


def value_noise(x) -> np.ndarray:
    """Smooth 1D value noise in [0, 1), deterministic in x."""
    x = np.asarray(x, dtype=np.float64)
    i0 = np.floor(x)
    f = x - i0
    u = f * f * (3.0 - 2.0 * f)
    a = _lattice(i0)
    b = _lattice(i0 + 1.0)
    return a + (b - a) * u


def wander(
    seed,
    axis: int,
    time: float,
    jitter: float = config.JITTER,
    drift: float = config.DRIFT,
    rate: float = config.DRIFT_RATE
) -> np.ndarray:
    """Static jitter plus slow drift for one axis."""
    static_offset, drift_offset = _AXIS_OFFSETS[axis]
    seed = np.asarray(seed, dtype=np.float64)
    j = (value_noise(seed + static_offset) - 0.5) * jitter
    d = (value_noise(seed + drift_offset + time * rate) - 0.5) * drift
    return j + d


def animated_offset(seed: np.ndarray, time: float, **kwargs) -> np.ndarray:
    """Cosmetic per-point (dx, dy) offsets of shape (n, 2)."""
    return np.stack([wander(seed, 0, time, **kwargs), wander(seed, 1, time, **kwargs)], axis=1)


def parallax_offset(
    depth: np.ndarray,
    pointer: Optional[tuple[float, float]],
    strength: float = config.PARALLAX
) -> np.ndarray:
    """Pointer-driven shift, (1 - depth) * pointer * strength; zero without a pointer."""
    depth = np.asarray(depth, dtype=np.float64)
    if pointer is None:
        return np.zeros((len(depth), 2))
    nx, ny = clamp_pointer(pointer)
    par = (1.0 - depth) * strength
    return np.stack([par * nx, par * ny], axis=1)


def intensity(result: Optional[SearchResult], n: int) -> np.ndarray:
    """Normalized similarity, or the neutral level when no query is active."""
    if result is None or not result.has_range:
        return np.full(n, config.NEUTRAL_INTENSITY)
    return result.normalized()


def ranks(result: Optional[SearchResult], n: int) -> np.ndarray:
    if result is None:
        return np.full(n, NO_RANK, dtype=np.int64)
    return result.ranks


def point_size(t: np.ndarray, rank: np.ndarray) -> np.ndarray:
    """Rendered diameter: grows with t, boosted for the first ranks."""
    pop = np.power(np.clip(t, 0.0, 1.0), config.SIZE_POWER)
    span = max(1, config.RANK_EMPHASIS - 1)
    rank_factor = np.where(
        rank < config.RANK_EMPHASIS,
        config.RANK_SCALE_TOP + (rank / span) * (config.RANK_SCALE_BOTTOM - config.RANK_SCALE_TOP),
        config.RANK_SCALE_REST,
    )
    size = (config.SIZE_MIN + (config.SIZE_MAX - config.SIZE_MIN) * pop) * rank_factor
    return np.clip(size, config.SIZE_MIN, config.SIZE_MAX)


def draw_order(depth: np.ndarray) -> np.ndarray:
    """Back to front: farthest (largest depth) first."""
    return np.argsort(-np.asarray(depth), kind="stable")


def hit_test(
    screen: np.ndarray,
    size: np.ndarray,
    order: np.ndarray,
    pointer_px: tuple[float, float]
) -> Optional[Hover]:
    """
    Find the point under the pointer.

    A point qualifies when its distance to the pointer is below
    max(HIT_RADIUS_MIN, HIT_RADIUS_SCALE * size); among several the one
    painted last wins.
    """
    if len(order) == 0:
        return None

    dist = np.hypot(screen[:, 0] - pointer_px[0], screen[:, 1] - pointer_px[1])
    threshold = np.maximum(config.HIT_RADIUS_MIN, config.HIT_RADIUS_SCALE * size)
    hits = dist < threshold
    if not hits.any():
        return None

    drawn_at = np.empty(len(order), dtype=np.int64)
    drawn_at[order] = np.arange(len(order))
    winner = int(np.argmax(np.where(hits, drawn_at, -1)))
    return Hover(index=winner, x=float(screen[winner, 0]), y=float(screen[winner, 1]))


class FrameRenderer:
    """Maps layout positions and camera state to a FrameSnapshot."""

    def __init__(self, animate: bool = True):
        """
        Args:
            animate: Apply jitter/drift offsets (disable for static exports)
        """
        self.animate = animate

    def render(
        self,
        points: PointSet,
        camera: CameraController,
        result: Optional[SearchResult],
        viewport: Viewport,
        pointer: Optional[tuple[float, float]] = None,
        time: float = 0.0
    ) -> FrameSnapshot:
        n = len(points)
        cx, cy = viewport.layout_rect.center
        fx, fy = camera.focus
        zoom = camera.zoom

        anchor = np.empty((n, 2))
        anchor[:, 0] = cx + (points.positions[:, 0] - fx) * zoom
        anchor[:, 1] = cy + (points.positions[:, 1] - fy) * zoom
        anchor += parallax_offset(points.depth, pointer)

        screen = anchor + animated_offset(points.seed, time) if self.animate else anchor.copy()

        t = intensity(result, n)
        rank = ranks(result, n)
        size = point_size(t, rank)
        order = draw_order(points.depth)

        hover = None
        if pointer is not None:
            hover = hit_test(screen, size, order, viewport.pointer_to_screen(pointer))

        return FrameSnapshot(
            screen=screen,
            anchor=anchor,
            order=order,
            intensity=t,
            rank=rank,
            depth=points.depth,
            size=size,
            hover=hover,
            zoom=zoom,
            focus=(fx, fy),
            time=time,
        )
