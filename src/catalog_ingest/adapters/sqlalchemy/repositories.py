"""Repository over the ``catalog_entries`` table."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, insert, select

from catalog_ingest.domain.model import ExistingEntry

from .mappings import catalog_entry_table

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from catalog_ingest.domain.model import CatalogEntry


class SqlAlchemyCatalogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def count(self) -> int:
        stmt = select(func.count()).select_from(catalog_entry_table)
        return self.session.execute(stmt).scalar_one()

    def page(self, *, offset: int, limit: int) -> list[ExistingEntry]:
        table = catalog_entry_table
        stmt = (
            select(table.c.name, table.c.name_alt, table.c.slug, table.c.source_url)
            .order_by(table.c.created_at, table.c.slug)
            .offset(offset)
            .limit(limit)
        )
        return [
            ExistingEntry(
                name=row.name,
                slug=row.slug,
                source_url=row.source_url,
                alt_names=(row.name_alt,) if row.name_alt else (),
            )
            for row in self.session.execute(stmt)
        ]

    def add(self, entry: CatalogEntry) -> uuid.UUID:
        entry_id = uuid.uuid4()
        enriched = entry.enriched
        localized = entry.localized
        self.session.execute(
            insert(catalog_entry_table).values(
                id=entry_id,
                kind=str(entry.kind),
                source_id=entry.source_id,
                source_url=entry.source_url,
                slug=enriched.slug,
                name=enriched.name,
                name_alt=localized.name_alt,
                alt_language=localized.language,
                description=enriched.description,
                description_alt=localized.description_alt,
                tags=list(enriched.tags),
                categories=list(enriched.categories),
                install_command=enriched.install_command,
                docs_url=enriched.docs_url,
                demo_url=enriched.demo_url,
                license=enriched.license,
                creator=enriched.creator,
                version=enriched.version,
                language=enriched.language,
                image_url=enriched.image_url,
                icon_url=enriched.icon_url,
                stars=entry.stars,
                is_official=entry.is_official,
                is_featured=entry.is_featured,
                is_active=entry.is_active,
            )
        )
        return entry_id
