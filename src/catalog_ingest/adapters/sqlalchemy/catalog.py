"""Local catalog store implementing the catalog reader and writer ports."""

from __future__ import annotations

import math
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog_ingest.domain.errors import DuplicateConflict, PersistError, TransientError
from catalog_ingest.domain.ports import CatalogPage

from .unit_of_work import SqlAlchemyCatalogUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalog_ingest.domain.model import CatalogEntry

log = getLogger(__name__)


class SqlAlchemyCatalog:
    """Catalog backed by the ``catalog_entries`` table.

    Uniqueness of ``slug`` and ``source_url`` is enforced by the table itself, so
    a create racing another writer surfaces as ``DuplicateConflict``.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], SqlAlchemyCatalogUnitOfWork] = SqlAlchemyCatalogUnitOfWork,
    ) -> None:
        self._uow_factory = uow_factory

    async def list_all(self, *, page: int, page_size: int) -> CatalogPage:
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be positive")
        try:
            with self._uow_factory() as uow:
                total = uow.catalog.count()
                items = uow.catalog.page(offset=(page - 1) * page_size, limit=page_size)
        except SQLAlchemyError as exc:
            raise TransientError(f"Could not read local catalog: {exc}") from exc
        total_pages = max(1, math.ceil(total / page_size))
        return CatalogPage(items=items, page=page, total_pages=total_pages)

    async def create(self, entry: CatalogEntry) -> str:
        try:
            with self._uow_factory() as uow:
                entry_id = uow.catalog.add(entry)
                uow.commit()
        except IntegrityError as exc:
            raise DuplicateConflict(f"{entry.slug} violates a uniqueness constraint") from exc
        except SQLAlchemyError as exc:
            log.error("Local catalog write failed for %s: %s", entry.slug, exc)
            raise PersistError(f"Could not store {entry.slug}: {exc}") from exc
        return str(entry_id)
