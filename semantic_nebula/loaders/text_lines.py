"""
Plain-text corpus loader: one item per line.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from .base import BaseDatasetLoader, register_loader
import config


@register_loader("lines")
class TextLinesLoader(BaseDatasetLoader):
    """Reads a UTF-8 text file, keeping the first `max_items` non-blank lines."""

    def __init__(
        self,
        path: Optional[Path] = None,
        max_items: Optional[int] = config.MAX_CORPUS_ITEMS
    ):
        self.path = Path(path) if path else config.CORPUS_TEXT_PATH
        self.max_items = max_items

    @property
    def name(self) -> str:
        suffix = f"_n{self.max_items}" if self.max_items else "_all"
        return f"lines_{self.path.stem}{suffix}"

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> pd.DataFrame:
        """
        Load lines as corpus items.

        Raises:
            FileNotFoundError: If the text file is missing
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Corpus file not found: {self.path}")

        with open(self.path, "r", encoding="utf-8") as f:
            lines = [line.strip() for line in f]
        lines = [line for line in lines if line]

        if self.max_items:
            lines = lines[: self.max_items]

        df = pd.DataFrame({
            "id": [f"line_{i}" for i in range(len(lines))],
            "text": lines,
            "source": config.SOURCE_CORPUS,
        })
        return self.validate(df)
