"""
On-disk cache for corpus items, embeddings and the raw 2D projection.
One directory per dataset+embedder key.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

import config

logger = logging.getLogger(__name__)


class CacheManager:
    """
    File layout under CACHE_DIR/<cache_key>/:
    - items.pkl        corpus DataFrame
    - embeddings.npz   embeddings + item ids
    - projection.npy   raw 2D projector output
    """

    ITEMS_FILE = "items.pkl"
    EMBEDDINGS_FILE = "embeddings.npz"
    PROJECTION_FILE = "projection.npy"

    def __init__(self, cache_key: str, cache_dir: Optional[Path] = None):
        self.cache_key = cache_key
        self.cache_path = Path(cache_dir or config.CACHE_DIR) / cache_key

    def _ensure_cache_dir(self) -> None:
        self.cache_path.mkdir(parents=True, exist_ok=True)

    def exists(self) -> bool:
        """Check if any cache directory exists for this key."""
        return self.cache_path.exists()

    def has_embeddings(self) -> bool:
        return (self.cache_path / self.EMBEDDINGS_FILE).exists() and (
            self.cache_path / self.ITEMS_FILE
        ).exists()

    def has_projection(self) -> bool:
        return (self.cache_path / self.PROJECTION_FILE).exists()

    def is_complete(self) -> bool:
        """Items, embeddings and projection are all cached."""
        return self.has_embeddings() and self.has_projection()

    # -------------------------------------------------------------------------
    # Save / load
    # -------------------------------------------------------------------------

    def save_items(self, items_df: pd.DataFrame) -> None:
        self._ensure_cache_dir()
        items_df.to_pickle(self.cache_path / self.ITEMS_FILE)

    def load_items(self) -> pd.DataFrame:
        return pd.read_pickle(self.cache_path / self.ITEMS_FILE)

    def save_embeddings(self, embeddings: np.ndarray, ids: list[str]) -> None:
        self._ensure_cache_dir()
        np.savez_compressed(
            self.cache_path / self.EMBEDDINGS_FILE,
            embeddings=embeddings,
            ids=np.asarray(ids, dtype=str),
        )

    def load_embeddings(self) -> tuple[np.ndarray, list[str]]:
        data = np.load(self.cache_path / self.EMBEDDINGS_FILE)
        return data["embeddings"], data["ids"].tolist()

    def save_projection(self, coords: np.ndarray) -> None:
        self._ensure_cache_dir()
        np.save(self.cache_path / self.PROJECTION_FILE, coords)

    def load_projection(self) -> np.ndarray:
        return np.load(self.cache_path / self.PROJECTION_FILE)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def get_cache_info(self) -> dict:
        """Summary of what is cached, for display."""
        if not self.exists():
            return {"status": "empty", "path": str(self.cache_path)}

        files = {p.name: p.stat().st_size for p in self.cache_path.iterdir() if p.is_file()}
        return {
            "status": "complete" if self.is_complete() else "partial",
            "path": str(self.cache_path),
            "files": files,
            "size_mb": round(sum(files.values()) / 1e6, 2),
        }

    def clear(self) -> None:
        """Delete the cache directory for this key."""
        if self.cache_path.exists():
            logger.info(f"Clearing cache at {self.cache_path}")
            shutil.rmtree(self.cache_path)
