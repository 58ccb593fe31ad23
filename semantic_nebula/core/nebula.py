"""
Nebula: central orchestrator for Semantic Nebula.
Owns the points, the active search result, the camera and the frame clock.
"""

import logging
from pathlib import Path
from typing import Optional, Callable, Sequence

import numpy as np
import pandas as pd

from semantic_nebula.cache.manager import CacheManager
from semantic_nebula.core.camera import CameraController
from semantic_nebula.core.frame import FrameRenderer, FrameSnapshot, Viewport
from semantic_nebula.core.layout import LayoutEngine
from semantic_nebula.core.points import NO_RANK, Point, PointSet
from semantic_nebula.core.projector import UMAPProjector
from semantic_nebula.core.ranker import SearchRanker, SearchResult
from semantic_nebula.embedders.base import BaseEmbedder, get_embedder
from semantic_nebula.loaders.base import BaseDatasetLoader, get_loader
import config

logger = logging.getLogger(__name__)


class Nebula:
    """
    Interactive point cloud over a text corpus.

    Responsibilities:
    - Load the corpus, embed it and project it to raw 2D (cached on disk)
    - Run the layout pipeline once per load, re-fit on resize
    - Accept query scores as one atomic commit and retarget the camera
    - Produce a FrameSnapshot per host tick
    """

    def __init__(
        self,
        dataset_loader: Optional[BaseDatasetLoader] = None,
        embedder: Optional[BaseEmbedder] = None,
        projector: Optional[UMAPProjector] = None,
        viewport: Optional[Viewport] = None,
        layout_engine: Optional[LayoutEngine] = None,
        ranker: Optional[SearchRanker] = None,
        camera: Optional[CameraController] = None,
        renderer: Optional[FrameRenderer] = None,
        cache_dir: Optional[Path] = None,
        use_cache: bool = True,
        force_rebuild: bool = False,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize the Nebula.

        Args:
            dataset_loader: Corpus loader (defaults to the configured dataset)
            embedder: Scoring backend (defaults to the configured embedder)
            projector: 2D projector (defaults to UMAPProjector)
            viewport: Initial canvas size
            layout_engine: Layout pipeline
            ranker: Search ranker
            camera: Camera controller
            renderer: Frame renderer
            cache_dir: Root directory for the on-disk cache
            use_cache: Read/write the cache
            force_rebuild: Ignore any existing cache
            rng: Generator for point depth and seed
        """
        self.dataset_loader = dataset_loader or get_loader(config.DEFAULT_DATASET)
        self.embedder = embedder or get_embedder(config.DEFAULT_EMBEDDER)
        self.projector = projector or UMAPProjector()
        self.viewport = viewport or Viewport(config.PLOT_WIDTH, config.PLOT_HEIGHT)
        self.layout_engine = layout_engine or LayoutEngine()
        self.ranker = ranker or SearchRanker()
        self.camera = camera or CameraController()
        self.renderer = renderer or FrameRenderer()
        self.cache_dir = cache_dir
        self.use_cache = use_cache
        self.force_rebuild = force_rebuild
        self._rng = rng

        # Populated by initialize()
        self.items_df: Optional[pd.DataFrame] = None
        self.embeddings: Optional[np.ndarray] = None
        self.points: Optional[PointSet] = None

        self._result: Optional[SearchResult] = None
        self._time = 0.0
        self._initialized = False

    @property
    def cache_key(self) -> str:
        """Unique cache key for this corpus+embedder+projector combination."""
        projector_name = getattr(self.projector, "name", "projector")
        return f"{self.dataset_loader.name}_{self.embedder.name}_{projector_name}"

    @property
    def is_initialized(self) -> bool:
        """Queries are accepted only after the layout is complete."""
        return self._initialized

    @property
    def result(self) -> Optional[SearchResult]:
        """The active search result (None before the first query)."""
        return self._result

    @property
    def time(self) -> float:
        return self._time

    @property
    def n_items(self) -> int:
        return len(self.points) if self.points is not None else 0

    # -------------------------------------------------------------------------
    # Corpus load
    # -------------------------------------------------------------------------

    def initialize(self, progress_callback: Optional[Callable[[str], None]] = None) -> None:
        """
        Load, embed, project and lay out the corpus.

        Runs to completion as one batch step; search() raises until it returns.

        Args:
            progress_callback: Optional callable(message: str) for progress updates
        """
        if self._initialized:
            return

        def log(msg: str):
            if progress_callback:
                progress_callback(msg)
            logger.info(msg)

        cache = CacheManager(self.cache_key, self.cache_dir) if self.use_cache else None

        if cache is not None and cache.is_complete() and not self.force_rebuild:
            log("Loading from cache...")
            self.items_df = cache.load_items()
            self.embeddings, _ = cache.load_embeddings()
            raw = cache.load_projection()
        else:
            raw = self._build_from_scratch(cache, log)

        log("Computing layout...")
        self.points = PointSet.create(self.items_df["text"].tolist(), raw, rng=self._rng)
        self.points.positions = self.layout_engine.compute(
            self.points.raw, self.viewport.layout_rect
        )

        self._result = None
        self._fit_camera()
        self._initialized = True
        log(f"Ready! {self.n_items} items in the cloud.")

    def _build_from_scratch(
        self,
        cache: Optional[CacheManager],
        log: Callable[[str], None]
    ) -> np.ndarray:
        log(f"Loading {self.dataset_loader.name}...")
        self.items_df = self.dataset_loader.load()
        if self.items_df.empty:
            raise ValueError(f"Dataset '{self.dataset_loader.name}' has no items")
        log(f"Loaded {len(self.items_df)} items")

        log(f"Generating embeddings for {len(self.items_df)} texts...")
        self.embeddings = self.embedder.embed(self.items_df["text"].tolist())

        log("Fitting 2D projection...")
        raw = self.projector.fit(self.embeddings)

        if cache is not None:
            log("Saving to cache...")
            cache.save_items(self.items_df)
            cache.save_embeddings(self.embeddings, self.items_df["id"].tolist())
            cache.save_projection(raw)

        return raw

    def _fit_camera(self) -> None:
        rect = self.viewport.layout_rect
        self.camera.set_view_radius_from_rect(rect.width, rect.height)
        self.camera.reset_to_overview(self.points.positions, snap=True)

    def clear_cache(self) -> None:
        CacheManager(self.cache_key, self.cache_dir).clear()

    def get_cache_info(self) -> dict:
        return CacheManager(self.cache_key, self.cache_dir).get_cache_info()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Nebula not initialized. Call initialize() first.")

    def search(self, query: str) -> SearchResult:
        """
        Score a query with the embedder and commit the result.

        Raises:
            RuntimeError: If called before initialize() completes
        """
        self._require_initialized()
        scores = self.embedder.score(query, self.embeddings)
        return self.commit_scores(scores, query)

    def commit_scores(self, scores: Sequence[float], query: str = "") -> SearchResult:
        """
        Apply externally computed scores as one transaction.

        The full result is built first and swapped in with a single
        assignment, so a frame never sees scores and ranks from different
        queries. A rejected commit leaves the previous result in place.

        Raises:
            RuntimeError: If called before initialize() completes
            ScoreLengthError: If the score count doesn't match the point count
        """
        self._require_initialized()
        result = self.ranker.rank(scores, self.points.texts, query)

        self._result = result
        self.camera.retarget_from_query(self.points.positions, result)

        best = result.best
        logger.info(f"Query {query!r}: best match {best.score:.3f} at index {best.index}")
        return result

    def clear_search(self) -> None:
        """Drop the active result and ease back to the overview."""
        self._result = None
        if self.points is not None:
            self.camera.reset_to_overview(self.points.positions, snap=False)

    # -------------------------------------------------------------------------
    # Viewport and input
    # -------------------------------------------------------------------------

    def resize(self, width: float, height: float) -> None:
        """Re-fit the existing layout into a new viewport (no relaxation)."""
        self.viewport = Viewport(
            width,
            height,
            margin=self.viewport.margin,
            top_inset=self.viewport.top_inset,
            bottom_inset=self.viewport.bottom_inset,
        )
        if self.points is None:
            return

        self.points.positions = self.layout_engine.refit(
            self.points.positions, self.viewport.layout_rect
        )
        self._fit_camera()

    def zoom(self, delta: float) -> None:
        """Wheel/pinch input: adjust the zoom target only."""
        self.camera.apply_zoom_delta(delta)

    def reset_view(self) -> None:
        if self.points is not None:
            self.camera.reset_to_overview(self.points.positions, snap=False)

    # -------------------------------------------------------------------------
    # Frames
    # -------------------------------------------------------------------------

    def tick(
        self,
        dt: float = config.FRAME_DT,
        pointer: Optional[tuple[float, float]] = None
    ) -> FrameSnapshot:
        """
        Advance one display frame and return what to paint.

        Args:
            dt: Seconds since the previous frame (drives cosmetic drift)
            pointer: Normalized pointer in [-1, 1]^2, or None if off-canvas

        Returns:
            FrameSnapshot for this frame
        """
        self._require_initialized()
        self.camera.tick()
        self._time += max(0.0, dt)
        return self.snapshot(pointer)

    def snapshot(self, pointer: Optional[tuple[float, float]] = None) -> FrameSnapshot:
        """Render the current state without advancing the camera or clock."""
        self._require_initialized()
        return self.renderer.render(
            self.points, self.camera, self._result, self.viewport, pointer, self._time
        )

    def point(self, index: int) -> Point:
        """Read-only view of one point under the active result."""
        self._require_initialized()
        result = self._result
        return Point(
            index=index,
            text=self.points.texts[index],
            raw=tuple(float(v) for v in self.points.raw[index]),
            position=tuple(float(v) for v in self.points.positions[index]),
            depth=float(self.points.depth[index]),
            seed=float(self.points.seed[index]),
            similarity=float(result.scores[index]) if result is not None else 0.0,
            rank=int(result.ranks[index]) if result is not None else NO_RANK,
        )
