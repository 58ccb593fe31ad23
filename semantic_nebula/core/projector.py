"""
UMAP projection for dimensionality reduction.
Turns corpus embeddings into raw (orientation-unstable) 2D coordinates.
"""

import logging
import warnings
from typing import Optional

import numpy as np
import umap

import config

logger = logging.getLogger(__name__)


class UMAPProjector:
    """
    UMAP-based projector for the corpus point cloud.

    The output scale and orientation are arbitrary; the layout engine
    normalizes them.
    """

    def __init__(
        self,
        n_neighbors: int = config.UMAP_N_NEIGHBORS,
        min_dist: float = config.UMAP_MIN_DIST,
        metric: str = config.UMAP_METRIC,
        random_state: Optional[int] = config.UMAP_RANDOM_STATE
    ):
        """
        Initialize UMAP projector.

        Args:
            n_neighbors: Number of neighbors for local structure (default: 45)
            min_dist: Minimum distance between points (default: 0.35)
            metric: Distance metric (default: "cosine")
            random_state: Random seed for reproducibility
        """
        self.n_neighbors = n_neighbors
        self.min_dist = min_dist
        self.metric = metric
        self.random_state = random_state

    @property
    def name(self) -> str:
        return f"umap_n{self.n_neighbors}_d{self.min_dist}"

    def fit(self, embeddings: np.ndarray) -> np.ndarray:
        """
        Fit UMAP on embeddings and return raw 2D coordinates.

        Args:
            embeddings: Array of shape (n, embedding_dim)

        Returns:
            Array of shape (n, 2)
        """
        n_items = len(embeddings)
        if n_items < 3:
            # UMAP needs a neighbourhood graph; spread tiny corpora on a line
            return np.column_stack([np.arange(n_items), np.zeros(n_items)]).astype(np.float32)

        n_neighbors = min(self.n_neighbors, max(2, n_items - 1))
        logger.info(f"Fitting UMAP (2D) on {n_items} embeddings (n_neighbors={n_neighbors})...")

        model = umap.UMAP(
            n_neighbors=n_neighbors,
            min_dist=self.min_dist,
            metric=self.metric,
            n_components=2,
            random_state=self.random_state,
        )

        # Suppress spectral initialization warnings (common with small corpora)
        with warnings.catch_warnings():
            warnings.filterwarnings("ignore", message=".*Spectral initialisation failed.*")
            coords = model.fit_transform(embeddings)

        logger.info("UMAP fitting complete.")
        return coords.astype(np.float32)
