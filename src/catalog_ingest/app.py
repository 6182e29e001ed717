"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.adapters.catalog_api import CatalogApiClient
from catalog_ingest.adapters.export import export_entries
from catalog_ingest.adapters.github import GitHubIndexClient
from catalog_ingest.adapters.sqlalchemy import SqlAlchemyCatalog
from catalog_ingest.adapters.sqlalchemy.unit_of_work import is_started, startup
from catalog_ingest.config import (
    DEFAULT_CATALOG_PAGE_SIZE,
    get_catalog_api_config,
    get_github_config,
)
from catalog_ingest.domain.ingest_pipeline import IngestionPipeline

if TYPE_CHECKING:
    from pathlib import Path

    from catalog_ingest.config import CatalogBackend, IngestionConfig
    from catalog_ingest.domain.model import IngestionResult
    from catalog_ingest.domain.ports import CatalogStore, RepositoryIndex


log = getLogger(__name__)


def ingest_catalog(
    config: IngestionConfig,
    *,
    backend: CatalogBackend = "api",
    export_path: Path | None = None,
    index: RepositoryIndex | None = None,
    catalog: CatalogStore | None = None,
) -> IngestionResult:
    """Run one ingestion against the configured index and catalog backend."""

    log.info(
        "Starting %s ingestion: queries=%s, max_candidates=%s, backend=%s, dry_run=%s",
        config.kind,
        len(config.queries),
        config.max_candidates,
        backend,
        not config.persist_enabled,
    )
    result = asyncio.run(_ingest(config, backend=backend, index=index, catalog=catalog))

    if export_path is not None:
        export_entries(result.entries, export_path, kind=config.kind)

    log.info(
        f"Finished {config.kind} ingestion: status={result.status}, "
        f"persisted={result.persisted}, duplicate={result.duplicate}, "
        f"failed={result.enrich_failed + result.persist_failed}"
    )
    return result


async def _ingest(
    config: IngestionConfig,
    *,
    backend: CatalogBackend,
    index: RepositoryIndex | None,
    catalog: CatalogStore | None,
) -> IngestionResult:
    async with AsyncExitStack() as stack:
        if index is None:
            github = GitHubIndexClient(
                config=get_github_config(min_interval_seconds=config.min_interval_seconds)
            )
            index = await stack.enter_async_context(github)

        page_size = DEFAULT_CATALOG_PAGE_SIZE
        if catalog is None:
            if backend == "sqlite":
                if not is_started():
                    startup()
                catalog = SqlAlchemyCatalog()
            else:
                api_config = get_catalog_api_config()
                page_size = api_config.page_size
                catalog = await stack.enter_async_context(CatalogApiClient(config=api_config))

        pipeline = IngestionPipeline(
            index=index,
            reader=catalog,
            writer=catalog,
            config=config,
            catalog_page_size=page_size,
        )
        return await pipeline.run()
