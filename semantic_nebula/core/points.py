"""
Point store: one entry per corpus item, held as parallel NumPy arrays.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

import config

# Rank reported for every point while no query is active
NO_RANK = 9999


@dataclass(frozen=True)
class Point:
    """Read-only view of a single point for the presentation layer."""
    index: int
    text: str
    raw: tuple[float, float]
    position: tuple[float, float]
    depth: float
    seed: float
    similarity: float
    rank: int


class PointSet:
    """
    Array-backed point storage.

    text, raw projection, depth and seed are fixed at creation; `positions`
    is written by the layout engine (full compute once, re-fit on resize).
    """

    def __init__(
        self,
        texts: list[str],
        raw: np.ndarray,
        depth: np.ndarray,
        seed: np.ndarray
    ):
        raw = np.asarray(raw, dtype=np.float64).reshape(-1, 2)
        if not (len(texts) == len(raw) == len(depth) == len(seed)):
            raise ValueError(
                f"Point arrays disagree in length: texts={len(texts)}, raw={len(raw)}, "
                f"depth={len(depth)}, seed={len(seed)}"
            )

        self.texts = list(texts)
        self.raw = raw
        self.positions = raw.copy()
        self.depth = np.asarray(depth, dtype=np.float64)
        self.seed = np.asarray(seed, dtype=np.float64)

    @classmethod
    def create(
        cls,
        texts: list[str],
        raw: np.ndarray,
        rng: Optional[np.random.Generator] = None,
        depth_min: float = config.DEPTH_MIN,
        seed_range: float = config.SEED_RANGE
    ) -> "PointSet":
        """
        Create points with per-point depth in [depth_min, 1) and an animation seed.

        Args:
            texts: Item payloads
            raw: Raw projector output of shape (n, 2)
            rng: Random generator (defaults to one seeded with config.POINT_RNG_SEED)
            depth_min: Lower bound for depth
            seed_range: Upper bound for the animation seed

        Returns:
            New PointSet
        """
        rng = rng or np.random.default_rng(config.POINT_RNG_SEED)
        n = len(texts)
        seed = rng.uniform(0.0, seed_range, size=n)
        depth = rng.uniform(depth_min, 1.0, size=n)
        return cls(texts, raw, depth, seed)

    def __len__(self) -> int:
        return len(self.texts)

    @property
    def centroid(self) -> np.ndarray:
        """Unweighted centroid of layout positions (origin for an empty set)."""
        if len(self.positions) == 0:
            return np.zeros(2)
        return self.positions.mean(axis=0)
