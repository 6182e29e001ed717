"""Enricher: detail fetch, field derivation and probe budgets."""

from __future__ import annotations

import asyncio

import pytest

from catalog_ingest.config import ProbeBudget, default_heuristics
from catalog_ingest.domain.errors import NotFoundError, RateLimitExceeded, TransientError
from catalog_ingest.domain.ingest_pipeline import Enricher, candidate_from_record
from catalog_ingest.domain.model import EnrichedFields, Manifest, ManifestEcosystem
from tests.helpers.catalog import FakeIndex, make_record

FALLBACK_IMAGE = "https://img.test/fallback.png"

README = """# Files Server

![screenshot](./docs/screenshot.png)

## About
Exposes the local filesystem to Claude through MCP.

## Install
npm install @acme/files-server

See the [docs](docs/guide.md).
"""


def _enricher(index: FakeIndex, *, budget: ProbeBudget | None = None) -> Enricher:
    return Enricher(
        index,
        tables=default_heuristics(),
        fallback_image_url=FALLBACK_IMAGE,
        probe_budget=budget or ProbeBudget(),
    )


def _enrich(index: FakeIndex, name: str, enricher: Enricher | None = None) -> EnrichedFields:
    candidate = candidate_from_record(index.details[f"acme/{name}"])  # type: ignore[arg-type]
    return asyncio.run((enricher or _enricher(index)).enrich(candidate))


def test_enrich_derives_fields_from_readme_and_manifest() -> None:
    record = make_record("files-server", description=None, topics=("mcp",))
    index = FakeIndex().with_repository(record, readme=README)
    index.manifests[record.full_name] = Manifest(
        ecosystem=ManifestEcosystem.NPM, name="@acme/files-server", version="1.4.0", author="Ada"
    )
    screenshot = "https://raw.example.test/acme/files-server/main/docs/screenshot.png"
    index.existing_urls.add(screenshot)

    fields = _enrich(index, "files-server")

    assert fields.name == "files-server"
    assert fields.slug == "files-server"
    assert fields.description == "Exposes the local filesystem to Claude through MCP."
    assert fields.install_command == "npm install @acme/files-server"
    assert fields.docs_url == "https://github.com/acme/files-server/blob/main/docs/guide.md"
    assert fields.demo_url == ""
    assert fields.image_url == screenshot
    assert fields.icon_url == ""
    assert fields.version == "1.4.0"
    assert fields.creator == "Ada"
    assert fields.license == "MIT"
    assert fields.language == "Python"
    assert "filesystem" in fields.tags
    assert fields.tags[-3:] == ("mcp", "server", "integration")
    assert fields.categories[0] == "MCP Server"
    assert index.count("probe") == 4


def test_enrich_defaults_when_nothing_is_found() -> None:
    record = make_record(
        "bare", description=None, license_name=None, language=None, homepage=None
    )
    index = FakeIndex().with_repository(record)

    fields = _enrich(index, "bare")

    assert fields.description == "MCP server for bare"
    assert fields.install_command == ""
    assert fields.docs_url == "https://github.com/acme/bare#readme"
    assert fields.image_url == FALLBACK_IMAGE
    assert fields.license == "Unknown"
    assert fields.language == "Unknown"
    assert fields.version == "latest"
    assert fields.creator == "acme"
    # four image suffixes plus three icon suffixes, capped per candidate
    assert index.count("probe") == ProbeBudget().per_candidate


def test_record_description_and_homepage_take_precedence() -> None:
    record = make_record("described", description="Query Postgres from Claude", homepage="https://described.dev")
    index = FakeIndex().with_repository(record, readme="## About\nSomething else entirely here.")

    fields = _enrich(index, "described")

    assert fields.description == "Query Postgres from Claude"
    assert fields.docs_url == "https://described.dev"
    assert "database" in fields.tags


def test_conventional_image_location_is_used_when_readme_has_none() -> None:
    record = make_record("logo-server")
    index = FakeIndex().with_repository(record, readme="Plain text readme with enough words.")
    logo = "https://raw.example.test/acme/logo-server/main/assets/logo.png"
    icon = "https://raw.example.test/acme/logo-server/main/icon.png"
    index.existing_urls.update({logo, icon})

    fields = _enrich(index, "logo-server")

    assert fields.image_url == logo
    assert fields.icon_url == icon


def test_run_probe_budget_is_shared_across_candidates() -> None:
    first = make_record("first")
    second = make_record("second")
    index = FakeIndex().with_repository(first).with_repository(second)
    enricher = _enricher(index, budget=ProbeBudget(per_run=8, per_candidate=6))

    _enrich(index, "first", enricher)
    fields = _enrich(index, "second", enricher)

    assert enricher.probes_used == 8
    assert index.count("probe") == 8
    assert fields.image_url == FALLBACK_IMAGE


def test_optional_lookups_degrade_on_transient_errors() -> None:
    record = make_record("flaky", description=None)
    index = FakeIndex().with_repository(record)
    index.readmes[record.full_name] = TransientError("readme timed out")

    fields = _enrich(index, "flaky")

    assert fields.description == "MCP server for flaky"


def test_rate_limit_on_optional_lookup_propagates() -> None:
    record = make_record("limited")
    index = FakeIndex().with_repository(record)
    index.readmes[record.full_name] = RateLimitExceeded("quota", retry_after=30.0)

    with pytest.raises(RateLimitExceeded):
        _enrich(index, "limited")


def test_missing_detail_fails_the_candidate() -> None:
    record = make_record("vanished")
    index = FakeIndex()
    candidate = candidate_from_record(record)

    with pytest.raises(NotFoundError):
        asyncio.run(_enricher(index).enrich(candidate))


def test_readme_replaces_candidate_raw_text() -> None:
    record = make_record("files-server")
    index = FakeIndex().with_repository(record, readme=README)
    candidate = candidate_from_record(record)

    asyncio.run(_enricher(index).enrich(candidate))

    assert candidate.raw_text == README
