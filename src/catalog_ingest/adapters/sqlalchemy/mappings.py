"""Table metadata for the local catalog store."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

metadata = MetaData()


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


catalog_entry_table = Table(
    "catalog_entries",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("kind", String(32), nullable=False),
    Column("source_id", String, nullable=False),
    Column("source_url", String, nullable=False, unique=True),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("name_alt", String, nullable=False),
    Column("alt_language", String(8), nullable=False),
    Column("description", Text, nullable=False),
    Column("description_alt", Text, nullable=False),
    Column("tags", JSON, nullable=False, default=list),
    Column("categories", JSON, nullable=False, default=list),
    Column("install_command", String, nullable=False, default=""),
    Column("docs_url", String, nullable=False, default=""),
    Column("demo_url", String, nullable=False, default=""),
    Column("license", String, nullable=False, default="Unknown"),
    Column("creator", String, nullable=False, default=""),
    Column("version", String, nullable=False, default="latest"),
    Column("language", String, nullable=False, default="Unknown"),
    Column("image_url", String, nullable=False, default=""),
    Column("icon_url", String, nullable=False, default=""),
    Column("stars", Integer, nullable=False, default=0),
    Column("is_official", Boolean, nullable=False, default=False),
    Column("is_featured", Boolean, nullable=False, default=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
)


def create_tables(engine: Engine) -> None:
    log.info("Creating catalog tables")
    metadata.create_all(engine, checkfirst=True)
