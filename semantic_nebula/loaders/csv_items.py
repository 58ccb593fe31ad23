"""
CSV corpus loader for user-provided items.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from .base import BaseDatasetLoader, register_loader
import config

TEXT_CANDIDATES = ["text", "content", "body", "line", "lyrics", "poem"]


@register_loader("csv")
class CsvItemsLoader(BaseDatasetLoader):
    """
    Loader for a CSV with one item per row.

    The text column is auto-detected (case-insensitive) from TEXT_CANDIDATES;
    other columns are kept as metadata.
    """

    def __init__(
        self,
        csv_path: Optional[Path] = None,
        max_items: Optional[int] = config.MAX_CORPUS_ITEMS
    ):
        self.csv_path = Path(csv_path) if csv_path else config.CUSTOM_ITEMS_PATH
        self.max_items = max_items

    @property
    def name(self) -> str:
        suffix = f"_n{self.max_items}" if self.max_items else "_all"
        return f"csv_{self.csv_path.stem}{suffix}"

    def exists(self) -> bool:
        return self.csv_path.exists()

    def load(self) -> pd.DataFrame:
        """
        Load the CSV and normalize to id/text/source.

        Returns:
            Validated DataFrame; empty if the file doesn't exist

        Raises:
            ValueError: If no text column can be found
        """
        if not self.csv_path.exists():
            return pd.DataFrame(columns=["id", "text", "source"])

        df = pd.read_csv(self.csv_path)
        if df.empty:
            return pd.DataFrame(columns=["id", "text", "source"])

        text_col = self._detect_text_column(list(df.columns))
        if text_col != "text":
            df = df.drop(columns=["text"], errors="ignore").rename(columns={text_col: "text"})

        df = df.dropna(subset=["text"])
        if self.max_items:
            df = df.head(self.max_items).copy()

        df["source"] = config.SOURCE_CUSTOM
        df["id"] = [f"custom_{i}" for i in range(len(df))]
        return self.validate(df)

    @staticmethod
    def _detect_text_column(columns: list[str]) -> str:
        columns_lower = {c.lower(): c for c in columns}
        for candidate in TEXT_CANDIDATES:
            if candidate in columns_lower:
                return columns_lower[candidate]
        raise ValueError(
            f"CSV must have a text column (one of {TEXT_CANDIDATES}). "
            f"Available columns: {columns}"
        )
