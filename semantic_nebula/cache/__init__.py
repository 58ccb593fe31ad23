"""
Cache storage for Semantic Nebula.
"""

from .manager import CacheManager

__all__ = ["CacheManager"]
