from pathlib import Path

import numpy as np
import pytest

from semantic_nebula.core.frame import Viewport
from semantic_nebula.core.layout import LayoutEngine
from semantic_nebula.core.nebula import Nebula
from semantic_nebula.embedders.base import BaseEmbedder
from semantic_nebula.loaders.text_lines import TextLinesLoader

CORPUS = [
    "rain on the window at night",
    "sunny beach party",
    "quiet snowy forest",
    "neon city drive",
    "campfire under the stars",
]

# Cross-shaped raw projection: origin plus four arms of length 10
CROSS = np.array([[0.0, 0.0], [10.0, 0.0], [-10.0, 0.0], [0.0, 10.0], [0.0, -10.0]])


class FakeEmbedder(BaseEmbedder):
    """One-hot embeddings for the corpus; queries embed as the text they name."""

    def __init__(self, texts: list[str]):
        self.texts = list(texts)
        self.calls = 0

    @property
    def name(self) -> str:
        return "fake"

    @property
    def dimension(self) -> int:
        return len(self.texts)

    def embed(self, texts: list[str]) -> np.ndarray:
        self.calls += 1
        vectors = np.zeros((len(texts), self.dimension), dtype=np.float32)
        for row, text in enumerate(texts):
            if text in self.texts:
                vectors[row, self.texts.index(text)] = 1.0
            else:
                vectors[row, :] = 1.0
        return self.normalize(vectors)


class FakeProjector:
    name = "fixed"

    def __init__(self, coords: np.ndarray):
        self.coords = np.asarray(coords, dtype=np.float32)
        self.calls = 0

    def fit(self, embeddings: np.ndarray) -> np.ndarray:
        self.calls += 1
        return self.coords.copy()


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    path = tmp_path / "corpus.txt"
    path.write_text("\n".join(CORPUS[:2] + ["", "   "] + CORPUS[2:]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder(CORPUS)


@pytest.fixture
def fake_projector() -> FakeProjector:
    return FakeProjector(CROSS)


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(100.0, 100.0, margin=0, top_inset=0, bottom_inset=0)


@pytest.fixture
def nebula(corpus_file, fake_embedder, fake_projector, viewport) -> Nebula:
    nb = Nebula(
        dataset_loader=TextLinesLoader(corpus_file),
        embedder=fake_embedder,
        projector=fake_projector,
        viewport=viewport,
        layout_engine=LayoutEngine(pad=0.1, iters=0),
        use_cache=False,
        rng=np.random.default_rng(0),
    )
    nb.initialize()
    return nb
