"""
Corpus loaders.

A loader yields the texts that become points in the nebula, one row per item,
plus whatever metadata its source carries.
"""

import logging
from abc import ABC, abstractmethod

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"id", "text", "source"}


class BaseDatasetLoader(ABC):
    """
    Interface for corpus sources.

    `load()` returns one row per item with at least:
    - id: stable string id (used to match cached embeddings)
    - text: what gets embedded and shown on hover
    - source: where the item came from ("corpus", "custom")
    """

    @abstractmethod
    def load(self) -> pd.DataFrame:
        """Read the source and return validated rows."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier folded into the cache key; changes when the item cap changes."""

    def exists(self) -> bool:
        return True

    def validate(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Enforce the column contract and drop rows without usable text.

        Raises:
            ValueError: If a required column is missing
        """
        missing = REQUIRED_COLUMNS.difference(df.columns)
        if missing:
            raise ValueError(f"Corpus is missing columns: {sorted(missing)}")

        has_text = df["text"].notna() & (df["text"].astype(str).str.strip() != "")
        kept = df.loc[has_text].copy()
        kept["id"] = kept["id"].astype(str)

        if len(kept) < len(df):
            logger.warning(f"{self.name}: dropped {len(df) - len(kept)} of {len(df)} rows with no text")
        logger.info(f"{self.name}: {len(kept)} items")

        return kept.reset_index(drop=True)


_LOADERS: dict[str, type[BaseDatasetLoader]] = {}


def register_loader(name: str):
    """
    Class decorator adding a loader under `name`.

    Raises:
        TypeError: If the class is not a BaseDatasetLoader
        ValueError: If `name` is taken by another class
    """
    def decorator(cls: type[BaseDatasetLoader]):
        if not issubclass(cls, BaseDatasetLoader):
            raise TypeError(f"{cls.__name__} must inherit from BaseDatasetLoader")
        existing = _LOADERS.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(f"Loader '{name}' already registered by {existing.__name__}")
        _LOADERS[name] = cls
        return cls
    return decorator


def get_loader(name: str, **kwargs) -> BaseDatasetLoader:
    """
    Build the loader registered as `name`.

    Raises:
        ValueError: If nothing is registered under `name`
    """
    try:
        cls = _LOADERS[name]
    except KeyError:
        raise ValueError(f"Unknown loader '{name}'. Available: {list_loaders()}") from None
    return cls(**kwargs)


def list_loaders() -> list[str]:
    # Registration order: the default corpus comes first in the UI
    return list(_LOADERS)
