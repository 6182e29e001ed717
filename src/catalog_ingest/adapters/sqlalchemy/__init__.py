"""SQLAlchemy adapter package for the local catalog store."""

from __future__ import annotations

from .catalog import SqlAlchemyCatalog
from .mappings import catalog_entry_table, create_tables, metadata
from .repositories import SqlAlchemyCatalogRepository

__all__ = [
    "SqlAlchemyCatalog",
    "SqlAlchemyCatalogRepository",
    "catalog_entry_table",
    "create_tables",
    "metadata",
]
