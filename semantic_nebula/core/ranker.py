"""
Search ranker: per-query similarity scores to range, rank permutation and top-K.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

import config

logger = logging.getLogger(__name__)


class ScoreLengthError(ValueError):
    """Raised when a score vector does not match the number of points."""


@dataclass(frozen=True)
class Match:
    """One entry of the top-K list."""
    index: int
    score: float
    text: str


@dataclass(frozen=True)
class SearchResult:
    """
    Everything a frame needs about the active query, swapped in as one object.

    scores[i] and ranks[i] always come from the same query.
    """
    query: str
    scores: np.ndarray
    ranks: np.ndarray
    order: np.ndarray                 # point indices by descending score
    sim_min: float
    sim_max: float
    top_k: list[Match] = field(default_factory=list)

    @property
    def has_range(self) -> bool:
        """False when every score is (nearly) equal, e.g. a degenerate query."""
        return self.sim_max > self.sim_min + config.GEOMETRY_EPS

    @property
    def best(self) -> Optional[Match]:
        return self.top_k[0] if self.top_k else None

    def normalized(self) -> np.ndarray:
        """Scores mapped to [0, 1] over the global range."""
        span = self.sim_max - self.sim_min + config.GEOMETRY_EPS
        return np.clip((self.scores - self.sim_min) / span, 0.0, 1.0)


class SearchRanker:
    """
    Ranks externally supplied similarity scores.

    Ties are broken by ascending original index.
    """

    def __init__(self, top_k: int = config.TOP_K):
        self.top_k = top_k

    def rank(
        self,
        scores: Sequence[float],
        texts: Sequence[str],
        query: str = ""
    ) -> SearchResult:
        """
        Build a complete SearchResult for one query.

        Args:
            scores: One similarity per point
            texts: Point payloads (defines the expected length)
            query: Query text, recorded on the result

        Returns:
            New SearchResult

        Raises:
            ScoreLengthError: If len(scores) != len(texts)
            ValueError: If any score is not finite
        """
        scores = np.asarray(scores, dtype=np.float64).reshape(-1)
        if len(scores) != len(texts):
            raise ScoreLengthError(
                f"Got {len(scores)} scores for {len(texts)} points"
            )
        if len(scores) == 0:
            raise ScoreLengthError("Cannot rank an empty corpus")
        if not np.all(np.isfinite(scores)):
            raise ValueError("Similarity scores must be finite")

        # Stable sort on the negated scores keeps equal scores in index order
        order = np.argsort(-scores, kind="stable")
        ranks = np.empty(len(scores), dtype=np.int64)
        ranks[order] = np.arange(len(scores))

        k = min(self.top_k, len(scores))
        top = [
            Match(index=int(i), score=float(scores[i]), text=texts[i])
            for i in order[:k]
        ]

        logger.debug(f"Ranked {len(scores)} scores for query {query!r}")

        return SearchResult(
            query=query,
            scores=scores,
            ranks=ranks,
            order=order,
            sim_min=float(scores.min()),
            sim_max=float(scores.max()),
            top_k=top,
        )
