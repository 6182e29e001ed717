from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from catalog_ingest.adapters.sqlalchemy import SqlAlchemyCatalog, create_tables
from catalog_ingest.adapters.sqlalchemy.unit_of_work import shutdown, startup
from catalog_ingest.config import IngestionConfig
from catalog_ingest.domain.model import EntryKind

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_catalog(sqlite_engine: Engine) -> Iterator[SqlAlchemyCatalog]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyCatalog()
    finally:
        shutdown()


@pytest.fixture
def ingestion_config() -> IngestionConfig:
    """Small, fast configuration: no spacing between calls and a tiny probe budget."""

    return IngestionConfig.for_kind(
        EntryKind.MCP_SERVER,
        queries=("mcp server",),
        min_interval_seconds=0.0,
        max_candidates=10,
        fallback_image_url="https://img.test/fallback.png",
    )
