"""HTTP client for the catalog REST API (existing entries and creates)."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from catalog_ingest.adapters.http_resilience import ResilientClient
from catalog_ingest.domain.errors import DuplicateConflict, PersistError, TransientError
from catalog_ingest.domain.model import ExistingEntry
from catalog_ingest.domain.ports import CatalogPage

from .schema import ProductCreate, ProductCreated, ProductPage, ProductSummary

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from catalog_ingest.config.catalog import CatalogApiConfig
    from catalog_ingest.config.http_resilience import ResilienceConfig
    from catalog_ingest.domain.model import CatalogEntry

log = getLogger(__name__)

_DUPLICATE_MARKERS = ("duplicate", "unique", "already exists")


class CatalogApiClient:
    """Catalog reader and writer backed by ``GET``/``POST`` on ``/products``."""

    def __init__(
        self,
        *,
        config: CatalogApiConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client = (client_factory or ResilientClient)(config.resilience)

    async def __aenter__(self) -> CatalogApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_all(self, *, page: int, page_size: int) -> CatalogPage:
        params = {"page": str(page), "limit": str(page_size)}
        try:
            response = await self._client.get("products", params=params)
        except httpx.HTTPError as exc:
            raise TransientError(f"Catalog list request failed: {exc}") from exc
        if not response.is_success:
            raise TransientError(
                f"Catalog list responded with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        payload = _validate(ProductPage, response, TransientError)
        total_pages = payload.pagination.total_pages if payload.pagination else page
        return CatalogPage(
            items=[_existing_entry(item) for item in payload.products],
            page=page,
            total_pages=total_pages,
        )

    async def create(self, entry: CatalogEntry) -> str:
        body = ProductCreate.from_entry(entry).model_dump(mode="json")
        try:
            response = await self._client.post("products", json=body)
        except httpx.HTTPError as exc:
            raise PersistError(f"Catalog create request failed for {entry.slug}: {exc}") from exc

        if response.is_success:
            created = _validate(ProductCreated, response, PersistError)
            return str(created.id)

        detail = response.text
        if response.status_code == httpx.codes.CONFLICT or _mentions_duplicate(detail):
            raise DuplicateConflict(f"Catalog rejected {entry.slug} as duplicate: {detail}")
        raise PersistError(
            f"Catalog create responded with HTTP {response.status_code} for {entry.slug}: {detail}"
        )


def _existing_entry(item: ProductSummary) -> ExistingEntry:
    alt_names = tuple(name for name in (item.name_en, item.name_pt) if name)
    return ExistingEntry(
        name=item.name,
        slug=item.slug,
        source_url=item.github_url,
        alt_names=alt_names,
    )


def _mentions_duplicate(detail: str) -> bool:
    lowered = detail.lower()
    return any(marker in lowered for marker in _DUPLICATE_MARKERS)


def _validate[TModel: BaseModel](
    model: type[TModel],
    response: httpx.Response,
    error: type[TransientError] | type[PersistError],
) -> TModel:
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        log.error("Unexpected catalog payload from %s: %s", response.request.url, exc)
        raise error(f"Unexpected catalog payload from {response.request.url}") from exc
