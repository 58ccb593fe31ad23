"""
Corpus loaders for Semantic Nebula.
"""

from .base import BaseDatasetLoader, get_loader, list_loaders, register_loader
from .text_lines import TextLinesLoader
from .csv_items import CsvItemsLoader

__all__ = [
    "BaseDatasetLoader",
    "get_loader",
    "list_loaders",
    "register_loader",
    "TextLinesLoader",
    "CsvItemsLoader",
]
