"""Wire schemas of the catalog REST API (``/products``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from catalog_ingest.domain.model import CatalogEntry


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProductSummary(CatalogBaseModel):
    id: int | str | None = None
    name: str | None = None
    name_en: str | None = None
    name_pt: str | None = None
    slug: str | None = None
    github_url: str | None = None


class Pagination(CatalogBaseModel):
    total: int | None = None
    total_pages: int = Field(default=1, alias="totalPages")
    current_page: int | None = Field(default=None, alias="currentPage")


class ProductPage(CatalogBaseModel):
    products: list[ProductSummary] = Field(default_factory=list)
    pagination: Pagination | None = None


class ProductCreated(CatalogBaseModel):
    id: int | str


class ProductCreate(CatalogBaseModel):
    name: str
    name_en: str
    name_pt: str
    description: str
    description_en: str
    description_pt: str
    slug: str
    github_url: str
    docs_url: str = ""
    demo_url: str = ""
    installation_command: str = ""
    license: str = "Unknown"
    creator: str = ""
    version: str = "latest"
    language: str = "Unknown"
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    category: str = ""
    product_type: str
    official: bool = False
    stars_numeric: int = 0
    is_featured: bool = False
    is_active: bool = True
    image_url: str = ""
    icon_url: str = ""
    price: float = 0

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> ProductCreate:
        enriched = entry.enriched
        localized = entry.localized
        categories = list(enriched.categories)
        return cls(
            name=enriched.name,
            name_en=enriched.name,
            name_pt=localized.name_alt,
            description=enriched.description,
            description_en=enriched.description,
            description_pt=localized.description_alt,
            slug=enriched.slug,
            github_url=entry.source_url,
            docs_url=enriched.docs_url,
            demo_url=enriched.demo_url,
            installation_command=enriched.install_command,
            license=enriched.license,
            creator=enriched.creator,
            version=enriched.version,
            language=enriched.language,
            tags=list(enriched.tags),
            categories=categories,
            category=categories[0] if categories else "",
            product_type=str(entry.kind),
            official=entry.is_official,
            stars_numeric=entry.stars,
            is_featured=entry.is_featured,
            is_active=entry.is_active,
            image_url=enriched.image_url,
            icon_url=enriched.icon_url,
        )
