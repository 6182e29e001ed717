"""Where the local catalog, HTTP cache and JSON exports live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "catalog-ingest"
DATA_DIR_ENV: Final[str] = "CATALOG_INGEST_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
DEFAULT_DB_FILENAME: Final[str] = "catalog.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
EXPORT_FILENAME: Final[str] = "ingested-entries.json"
SQLITE_DRIVER: Final[str] = "sqlite+pysqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """One data directory holding every file a run writes.

    Path accessors create the directory unless ``ensure=False``.
    """

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    http_cache_filename: str = HTTP_CACHE_FILENAME
    export_filename: str = EXPORT_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def _file(self, filename: str, *, ensure: bool) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / filename

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._file(self.database_filename, ensure=ensure)

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self._file(self.http_cache_filename, ensure=ensure)

    def export_path(self, *, ensure: bool = True) -> Path:
        return self._file(self.export_filename, ensure=ensure)

    def database_uri(self) -> str:
        return f"{SQLITE_DRIVER}:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        base = optional_env_var("LOCALAPPDATA")
        return Path(base) if base else Path.home() / "AppData" / "Local"
    base = optional_env_var("XDG_DATA_HOME")
    return Path(base) if base else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    """Use ``CATALOG_INGEST_DATA_DIR`` when set, else the platform data home."""

    override = optional_env_var(DATA_DIR_ENV)
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var(DATABASE_URI_ENV)
    if uri is None:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
