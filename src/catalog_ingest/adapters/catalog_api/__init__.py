"""Catalog REST API adapter."""

from __future__ import annotations

from .client import CatalogApiClient
from .schema import ProductCreate, ProductPage

__all__ = ["CatalogApiClient", "ProductCreate", "ProductPage"]
