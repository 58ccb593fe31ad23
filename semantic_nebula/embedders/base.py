"""
Scoring providers for the nebula.

An embedder maps corpus texts to unit vectors once per load, then scores each
query against those cached vectors. The nebula treats the resulting scores as
opaque relevance values.
"""

from abc import ABC, abstractmethod

import numpy as np


class BaseEmbedder(ABC):
    """
    Interface for text embedding backends.

    Subclasses provide `embed`, `dimension` and `name`; scoring against a
    cached corpus matrix comes for free.
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> np.ndarray:
        """
        Args:
            texts: Corpus items or a single query, in order

        Returns:
            Unit-length rows of shape (len(texts), dimension), same order as `texts`
        """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of each embedding vector."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier folded into the cache key."""

    def embed_single(self, text: str) -> np.ndarray:
        return self.embed([text])[0]

    def score(self, query: str, corpus_embeddings: np.ndarray) -> np.ndarray:
        """
        Similarity of `query` to every corpus item.

        Rows of `corpus_embeddings` are unit length, so the dot product is the
        cosine similarity. Returns shape (n,).
        """
        query_vector = self.embed_single(query).astype(corpus_embeddings.dtype, copy=False)
        return corpus_embeddings @ query_vector

    @staticmethod
    def normalize(vectors: np.ndarray) -> np.ndarray:
        """Scale rows to unit length; all-zero rows are left as zeros."""
        lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
        return vectors / np.where(lengths > 0, lengths, 1.0)


_EMBEDDERS: dict[str, type[BaseEmbedder]] = {}


def register_embedder(name: str):
    """
    Class decorator adding an embedder under `name`.

    Raises:
        ValueError: If `name` is taken by another class
    """
    def decorator(cls: type[BaseEmbedder]):
        existing = _EMBEDDERS.get(name)
        if existing is not None and existing is not cls:
            raise ValueError(f"Embedder '{name}' already registered by {existing.__name__}")
        _EMBEDDERS[name] = cls
        return cls
    return decorator


def get_embedder(name: str, **kwargs) -> BaseEmbedder:
    """
    Build the embedder registered as `name`.

    Raises:
        ValueError: If nothing is registered under `name`
    """
    try:
        cls = _EMBEDDERS[name]
    except KeyError:
        raise ValueError(f"Unknown embedder '{name}'. Available: {list_embedders()}") from None
    return cls(**kwargs)


def list_embedders() -> list[str]:
    return sorted(_EMBEDDERS)
