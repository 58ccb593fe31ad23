"""
CameraController: smoothed pan + zoom over the layout.
Holds current/target zoom and focus and eases current toward target every frame.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from semantic_nebula.core.ranker import SearchResult
import config

logger = logging.getLogger(__name__)


@dataclass
class CameraState:
    """Snapshot of camera values (current and target)."""
    zoom: float = 1.0
    zoom_target: float = 1.0
    focus_x: float = 0.0
    focus_y: float = 0.0
    focus_x_target: float = 0.0
    focus_y_target: float = 0.0


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class CameraController:
    """
    Query-reactive camera.

    Features:
    - Exponential smoothing toward a target (no velocity state)
    - Retarget onto the weighted centroid of the best matches
    - Reset to an overview of all points
    - Wheel/pinch zoom on the target only
    """

    def __init__(
        self,
        zoom_min: float = config.ZOOM_MIN,
        zoom_max: float = config.ZOOM_MAX,
        lerp_factor: float = config.CAM_LERP,
        wheel_speed: float = config.WHEEL_ZOOM_SPEED,
        top_m: int = config.FOCUS_TOP_M,
        weight_power: float = config.FOCUS_WEIGHT_POWER,
        view_radius: float = 100.0
    ):
        """
        Initialize the camera.

        Args:
            zoom_min: Lower zoom bound
            zoom_max: Upper zoom bound
            lerp_factor: Fraction of the remaining gap closed per frame
            wheel_speed: Zoom sensitivity for apply_zoom_delta
            top_m: Number of best matches used for retargeting
            weight_power: Exponent applied to normalized similarity weights
            view_radius: Desired on-screen radius for a retargeted cluster
        """
        self.zoom_min = zoom_min
        self.zoom_max = zoom_max
        self.lerp_factor = lerp_factor
        self.wheel_speed = wheel_speed
        self.top_m = top_m
        self.weight_power = weight_power
        self.view_radius = view_radius

        self.state = CameraState(zoom=zoom_min, zoom_target=zoom_min)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def zoom(self) -> float:
        return self.state.zoom

    @property
    def zoom_target(self) -> float:
        return self.state.zoom_target

    @property
    def focus(self) -> tuple[float, float]:
        return self.state.focus_x, self.state.focus_y

    @property
    def focus_target(self) -> tuple[float, float]:
        return self.state.focus_x_target, self.state.focus_y_target

    def clamp_zoom(self, zoom: float) -> float:
        return min(self.zoom_max, max(self.zoom_min, zoom))

    def set_view_radius_from_rect(self, width: float, height: float) -> None:
        """Desired view radius is a fixed fraction of the smaller rect side."""
        self.view_radius = config.VIEW_RADIUS_FRACTION * min(width, height)

    # -------------------------------------------------------------------------
    # Per-frame update
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Move current zoom and focus a fixed fraction toward their targets."""
        s = self.state
        s.zoom = lerp(s.zoom, s.zoom_target, self.lerp_factor)
        s.focus_x = lerp(s.focus_x, s.focus_x_target, self.lerp_factor)
        s.focus_y = lerp(s.focus_y, s.focus_y_target, self.lerp_factor)

    def is_settled(self, tolerance: float = 1e-3, zoom_tolerance: Optional[float] = None) -> bool:
        """
        True once every current value is within tolerance of its target.

        Focus is in layout pixels and zoom is a small ratio, so the zoom gap can
        be checked against its own `zoom_tolerance` (defaults to `tolerance`).
        """
        s = self.state
        zoom_tolerance = tolerance if zoom_tolerance is None else zoom_tolerance
        return (
            abs(s.zoom - s.zoom_target) <= zoom_tolerance
            and abs(s.focus_x - s.focus_x_target) <= tolerance
            and abs(s.focus_y - s.focus_y_target) <= tolerance
        )

    def frames_to_settle(self, tolerance: float = 1e-3) -> int:
        """Upper bound on ticks until the largest current gap falls below `tolerance`."""
        s = self.state
        gap = max(
            abs(s.zoom - s.zoom_target),
            abs(s.focus_x - s.focus_x_target),
            abs(s.focus_y - s.focus_y_target),
        )
        if gap <= tolerance:
            return 0
        return math.ceil(math.log(tolerance / gap) / math.log(1.0 - self.lerp_factor))

    # -------------------------------------------------------------------------
    # Retargeting
    # -------------------------------------------------------------------------

    def retarget_from_query(
        self,
        positions: np.ndarray,
        result: SearchResult,
        view_radius: Optional[float] = None
    ) -> None:
        """
        Frame the best matches of a query.

        Focus target is the centroid of the top M points weighted by
        normalized_similarity ** weight_power; zoom target scales the mean
        distance of those points to the centroid onto `view_radius`.

        Args:
            positions: Layout positions of shape (n, 2)
            result: Active search result
            view_radius: Override for self.view_radius
        """
        view_radius = self.view_radius if view_radius is None else view_radius

        m = min(self.top_m, len(result.order))
        if m == 0:
            return

        top = result.order[:m]
        pts = positions[top]
        t = result.normalized()[top]
        weights = np.power(np.maximum(t, 0.0), self.weight_power) + config.FOCUS_WEIGHT_FLOOR

        centroid = (pts * weights[:, None]).sum(axis=0) / weights.sum()
        spread = float(np.mean(np.linalg.norm(pts - centroid, axis=1)))

        s = self.state
        s.focus_x_target = float(centroid[0])
        s.focus_y_target = float(centroid[1])
        s.zoom_target = self.clamp_zoom(view_radius / max(config.SPREAD_EPS, spread))

        logger.debug(
            f"Camera retarget: focus=({s.focus_x_target:.1f}, {s.focus_y_target:.1f}) "
            f"spread={spread:.2f} zoom={s.zoom_target:.2f}"
        )

    def reset_to_overview(self, positions: np.ndarray, snap: bool = True) -> None:
        """
        Target the unweighted centroid of all points at baseline zoom.

        Args:
            positions: Layout positions of shape (n, 2)
            snap: Also jump current values to the target (load/resize)
        """
        s = self.state
        if len(positions):
            cx, cy = positions.mean(axis=0)
        else:
            cx, cy = 0.0, 0.0

        s.zoom_target = self.clamp_zoom(1.0)
        s.focus_x_target = float(cx)
        s.focus_y_target = float(cy)

        if snap:
            s.zoom = s.zoom_target
            s.focus_x = s.focus_x_target
            s.focus_y = s.focus_y_target

    def apply_zoom_delta(self, delta: float) -> None:
        """Scale the zoom target by 2 ** (-delta * wheel_speed); focus is untouched."""
        if not math.isfinite(delta):
            return
        exponent = min(64.0, max(-64.0, -delta * self.wheel_speed))
        factor = math.pow(2.0, exponent)
        self.state.zoom_target = self.clamp_zoom(self.state.zoom_target * factor)
