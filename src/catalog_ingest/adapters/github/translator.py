"""Translate GitHub payloads into repository index records."""

from __future__ import annotations

import base64
import binascii
import json
import tomllib
from logging import getLogger
from typing import TYPE_CHECKING

from catalog_ingest.domain.model import Manifest, ManifestEcosystem, RepoRecord

if TYPE_CHECKING:
    from .schema import GitHubContentFile, GitHubRepository

log = getLogger(__name__)

_UNKNOWN_LICENSES = frozenset({"noassertion", "other"})


def translate_repository(payload: GitHubRepository) -> RepoRecord:
    license_name = None
    if payload.license is not None:
        candidate = payload.license.name or payload.license.spdx_id
        if candidate and candidate.strip().lower() not in _UNKNOWN_LICENSES:
            license_name = candidate.strip()

    return RepoRecord(
        source_id=str(payload.id),
        full_name=payload.full_name,
        name=payload.name,
        owner=payload.owner.login,
        source_url=payload.html_url,
        stars=payload.stargazers_count,
        updated_at=payload.updated_at,
        description=(payload.description or "").strip() or None,
        topics=tuple(payload.topics),
        homepage=(payload.homepage or "").strip() or None,
        language=payload.language,
        license_name=license_name,
        default_branch=payload.default_branch or "main",
    )


def decode_content(payload: GitHubContentFile) -> str | None:
    if payload.encoding != "base64":
        return payload.content or None
    try:
        raw = base64.b64decode(payload.content, validate=False)
    except (binascii.Error, ValueError):
        log.warning("Undecodable content for %s", payload.path or payload.name)
        return None
    return raw.decode("utf-8", errors="replace")


def parse_package_json(text: str) -> Manifest | None:
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(document, dict):
        return None

    license_value = document.get("license")
    if isinstance(license_value, dict):
        license_value = license_value.get("type")

    author = document.get("author")
    if isinstance(author, dict):
        author = author.get("name")

    return Manifest(
        ecosystem=ManifestEcosystem.NPM,
        name=_as_text(document.get("name")),
        version=_as_text(document.get("version")),
        license=_as_text(license_value),
        author=_as_text(author),
    )


def parse_pyproject(text: str) -> Manifest | None:
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError:
        return None

    project = document.get("project")
    if not isinstance(project, dict):
        poetry = document.get("tool", {}).get("poetry")
        if not isinstance(poetry, dict):
            return None
        project = poetry

    license_value = project.get("license")
    if isinstance(license_value, dict):
        license_value = license_value.get("text") or license_value.get("file")

    author: object = None
    authors = project.get("authors")
    if isinstance(authors, list) and authors:
        first = authors[0]
        # poetry lists authors as "Name <email>"
        author = first.get("name") if isinstance(first, dict) else str(first).split("<")[0]

    return Manifest(
        ecosystem=ManifestEcosystem.PYPI,
        name=_as_text(project.get("name")),
        version=_as_text(project.get("version")),
        license=_as_text(license_value),
        author=_as_text(author),
    )


def _as_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None
