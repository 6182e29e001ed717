"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogPage, CatalogReader, CatalogStore, CatalogWriter
from .index import RepositoryIndex

__all__ = [
    "CatalogPage",
    "CatalogReader",
    "CatalogStore",
    "CatalogWriter",
    "RepositoryIndex",
]
