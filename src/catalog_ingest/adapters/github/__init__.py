"""GitHub repository index adapter."""

from __future__ import annotations

from .client import GitHubIndexClient
from .translator import parse_package_json, parse_pyproject, translate_repository

__all__ = [
    "GitHubIndexClient",
    "parse_package_json",
    "parse_pyproject",
    "translate_repository",
]
