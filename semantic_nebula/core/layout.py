"""
Layout engine: turns an unstable 2D projection into a stable canvas layout.

Pipeline (each step deterministic for identical inputs):
1. pca_align   - rotate about the mean so the principal axis lies along x
2. fit_to_rect - uniform scale + recenter into the padded target rectangle
3. relax       - local pairwise repulsion to declutter dense regions
4. fit_to_rect - re-fit so the bounds are exact after relaxation drift
"""

import logging
from dataclasses import dataclass

import numpy as np

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned target rectangle in canvas pixels (y grows downwards)."""
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.right) * 0.5, (self.top + self.bottom) * 0.5

    def padded(self, pad: float) -> "Rect":
        """Shrink about the center so each side is (1 - pad) of the original."""
        cx, cy = self.center
        half_w = self.width * (1.0 - pad) * 0.5
        half_h = self.height * (1.0 - pad) * 0.5
        return Rect(cx - half_w, cy - half_h, cx + half_w, cy + half_h)

    def contains(self, coords: np.ndarray, tol: float = 1e-6) -> bool:
        """Check that every point lies inside the rectangle (with tolerance)."""
        if len(coords) == 0:
            return True
        return bool(
            np.all(coords[:, 0] >= self.left - tol)
            and np.all(coords[:, 0] <= self.right + tol)
            and np.all(coords[:, 1] >= self.top - tol)
            and np.all(coords[:, 1] <= self.bottom + tol)
        )


def principal_angle(coords: np.ndarray) -> float:
    """
    Angle of the principal axis of a 2D point set.

    Args:
        coords: Array of shape (n, 2)

    Returns:
        theta = 0.5 * atan2(2 * covXY, covXX - covYY); 0.0 for fewer than 2 points
    """
    if len(coords) < 2:
        return 0.0

    centered = coords - coords.mean(axis=0)
    sxx = float(np.mean(centered[:, 0] * centered[:, 0]))
    syy = float(np.mean(centered[:, 1] * centered[:, 1]))
    sxy = float(np.mean(centered[:, 0] * centered[:, 1]))
    return 0.5 * float(np.arctan2(2.0 * sxy, sxx - syy))


def pca_align(coords: np.ndarray) -> np.ndarray:
    """
    Rotate points about their mean by -theta (see principal_angle).

    The projector's orientation is arbitrary between runs; aligning to the
    principal axis makes the layout reproducible.

    Args:
        coords: Array of shape (n, 2)

    Returns:
        Mean-centered, rotated array of shape (n, 2). Fewer than 2 points
        are returned unchanged.
    """
    coords = np.asarray(coords, dtype=np.float64)
    if len(coords) < 2:
        return coords.copy()

    theta = principal_angle(coords)
    ct, st = np.cos(-theta), np.sin(-theta)
    centered = coords - coords.mean(axis=0)

    rotated = np.empty_like(centered)
    rotated[:, 0] = centered[:, 0] * ct - centered[:, 1] * st
    rotated[:, 1] = centered[:, 0] * st + centered[:, 1] * ct
    return rotated


def fit_to_rect(
    coords: np.ndarray,
    rect: Rect,
    pad: float = config.LAYOUT_PAD,
    eps: float = config.GEOMETRY_EPS
) -> np.ndarray:
    """
    Uniformly scale and recenter points into a padded rectangle.

    Aspect ratio is preserved: the limiting axis spans exactly (1 - pad) of
    the rect, the other axis fits inside it.

    Args:
        coords: Array of shape (n, 2)
        rect: Target rectangle
        pad: Padding fraction in [0, 1)
        eps: Floor for zero-extent bounding boxes

    Returns:
        Array of shape (n, 2) in rect coordinates
    """
    coords = np.asarray(coords, dtype=np.float64)
    if len(coords) == 0:
        return coords.reshape(0, 2)

    min_xy = coords.min(axis=0)
    max_xy = coords.max(axis=0)
    box_w = max(eps, float(max_xy[0] - min_xy[0]))
    box_h = max(eps, float(max_xy[1] - min_xy[1]))

    target_w = rect.width * (1.0 - pad)
    target_h = rect.height * (1.0 - pad)
    scale = min(target_w / box_w, target_h / box_h)

    box_center = (min_xy + max_xy) * 0.5
    return np.asarray(rect.center) + (coords - box_center) * scale


def relax(
    coords: np.ndarray,
    iters: int = config.RELAX_ITERS,
    radius: float = config.RELAX_RADIUS,
    strength: float = config.RELAX_STRENGTH,
    min_dist: float = 1e-3
) -> np.ndarray:
    """
    Push apart points that sit closer than `radius`.

    Every pass computes all pairwise displacements from the positions at the
    start of the pass and applies them together (Jacobi update), so the
    result does not depend on point order. Forces are equal and opposite,
    which keeps the centroid fixed.

    Args:
        coords: Array of shape (n, 2)
        iters: Number of full passes (fixed budget, no convergence check)
        radius: Interaction radius
        strength: Displacement scale per pass
        min_dist: Pairs closer than this are coincident and exert no force

    Returns:
        Relaxed array of shape (n, 2)
    """
    pts = np.array(coords, dtype=np.float64)
    if len(pts) < 2 or iters <= 0 or radius <= 0:
        return pts

    r2 = radius * radius
    min_d2 = min_dist * min_dist

    for _ in range(iters):
        diff = pts[:, None, :] - pts[None, :, :]
        d2 = np.einsum("ijk,ijk->ij", diff, diff)
        active = (d2 > min_d2) & (d2 < r2)
        if not active.any():
            break

        dist = np.sqrt(np.where(active, d2, 1.0))
        push = np.where(active, (radius - dist) / radius, 0.0)
        force = np.einsum("ijk,ij->ik", diff, push / dist)
        pts += force * strength

    return pts


class LayoutEngine:
    """
    Runs the full align → fit → relax → re-fit pipeline.

    Features:
    - compute(): full pipeline, run once per corpus load
    - refit(): cheap fit-only pass used on viewport resize
    """

    def __init__(
        self,
        pad: float = config.LAYOUT_PAD,
        iters: int = config.RELAX_ITERS,
        radius: float = config.RELAX_RADIUS,
        strength: float = config.RELAX_STRENGTH
    ):
        self.pad = pad
        self.iters = iters
        self.radius = radius
        self.strength = strength

    def compute(self, raw_coords: np.ndarray, rect: Rect) -> np.ndarray:
        """
        Compute stable layout positions from raw projector output.

        Args:
            raw_coords: Raw 2D projection of shape (n, 2)
            rect: Target rectangle

        Returns:
            Layout positions of shape (n, 2), all inside rect.padded(pad)
        """
        logger.info(
            f"Computing layout for {len(raw_coords)} points "
            f"({self.iters} relaxation passes, radius {self.radius})"
        )
        aligned = pca_align(raw_coords)
        fitted = fit_to_rect(aligned, rect, self.pad)
        relaxed = relax(fitted, self.iters, self.radius, self.strength)
        return fit_to_rect(relaxed, rect, self.pad)

    def refit(self, positions: np.ndarray, rect: Rect) -> np.ndarray:
        """Re-fit existing layout positions into a new rectangle (no relaxation)."""
        return fit_to_rect(positions, rect, self.pad)
