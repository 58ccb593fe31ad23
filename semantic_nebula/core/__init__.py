"""
Core components for Semantic Nebula.
"""

from .layout import LayoutEngine, Rect, fit_to_rect, pca_align, principal_angle, relax
from .points import NO_RANK, Point, PointSet
from .ranker import Match, ScoreLengthError, SearchRanker, SearchResult
from .camera import CameraController, CameraState
from .frame import FrameRenderer, FrameSnapshot, Hover, Viewport
from .projector import UMAPProjector
from .nebula import Nebula

__all__ = [
    "LayoutEngine",
    "Rect",
    "fit_to_rect",
    "pca_align",
    "principal_angle",
    "relax",
    "NO_RANK",
    "Point",
    "PointSet",
    "Match",
    "ScoreLengthError",
    "SearchRanker",
    "SearchResult",
    "CameraController",
    "CameraState",
    "FrameRenderer",
    "FrameSnapshot",
    "Hover",
    "Viewport",
    "UMAPProjector",
    "Nebula",
]
