"""Readme extraction rules and tag/category derivation."""

from __future__ import annotations

from catalog_ingest.config import KeywordRule, default_heuristics
from catalog_ingest.domain.ingest_pipeline.extraction import (
    DEMO_RULES,
    DESCRIPTION_RULES,
    DOCS_RULES,
    IMAGE_RULES,
    INSTALL_RULES,
    compile_label_rules,
    derive_categories,
    derive_tags,
    first_match,
    iter_matches,
    manifest_install_command,
)
from catalog_ingest.domain.model import Manifest, ManifestEcosystem

README_WITH_ABOUT = """# Files Server

![build](https://img.shields.io/badge/build-passing-green.svg)

## About
Exposes the local **filesystem** to Claude through [MCP](https://modelcontextprotocol.io).

## Install
"""

README_WITHOUT_SECTIONS = """# Files MCP

[![CI](https://github.com/acme/files/actions/workflows/ci.yml/badge.svg)](https://ci.test)

A small server that lets Claude read files.
It is fast.

## Usage
"""


def test_description_prefers_about_section() -> None:
    assert first_match(DESCRIPTION_RULES, README_WITH_ABOUT) == (
        "Exposes the local filesystem to Claude through MCP."
    )


def test_description_falls_back_to_first_prose_paragraph() -> None:
    assert first_match(DESCRIPTION_RULES, README_WITHOUT_SECTIONS) == (
        "A small server that lets Claude read files. It is fast."
    )


def test_description_is_capped_at_200_characters() -> None:
    readme = "## Description\n" + "word " * 100

    description = first_match(DESCRIPTION_RULES, readme)

    assert description is not None
    assert len(description) <= 200
    assert description.endswith("...")


def test_description_of_empty_readme_is_none() -> None:
    assert first_match(DESCRIPTION_RULES, "") is None
    assert first_match(DESCRIPTION_RULES, "# Title only") is None


def test_install_rules_follow_priority_order() -> None:
    readme = "Quick start:\n\n```\nnpx -y @acme/mcp-files\n```\n\nor `pip install mcp-files`\n"

    assert first_match(INSTALL_RULES, readme) == "npx -y @acme/mcp-files"


def test_npm_install_outranks_npx_earlier_in_readme() -> None:
    readme = "Try `npx -y @acme/tool` first, or install it with `npm install @acme/tool`."

    assert first_match(INSTALL_RULES, readme) == "npm install @acme/tool"


def test_install_command_stops_at_inline_code_end() -> None:
    readme = "Run `npm install -g @acme/tool` then start it."

    assert first_match(INSTALL_RULES, readme) == "npm install -g @acme/tool"


def test_manifest_install_command_by_ecosystem() -> None:
    npm = Manifest(ecosystem=ManifestEcosystem.NPM, name="@acme/files")
    pypi = Manifest(ecosystem=ManifestEcosystem.PYPI, name="mcp-files")

    assert manifest_install_command(npm) == "npm install @acme/files"
    assert manifest_install_command(pypi) == "pip install mcp-files"
    assert manifest_install_command(Manifest(ecosystem=ManifestEcosystem.NPM)) is None
    assert manifest_install_command(None) is None


def test_docs_link_label_wins_over_bare_url() -> None:
    readme = "See https://docs.other.test/start or the [Documentation](https://acme.dev/guide)."

    assert first_match(DOCS_RULES, readme) == "https://acme.dev/guide"


def test_bare_docs_url_skips_badges() -> None:
    readme = (
        "![docs](https://img.shields.io/badge/docs-latest-blue)\n"
        "Guide: https://docs.acme.dev/start\n"
    )

    assert first_match(DOCS_RULES, readme) == "https://docs.acme.dev/start"


def test_demo_link_variants() -> None:
    assert first_match(DEMO_RULES, "Try the [Live demo](https://play.acme.dev)") == (
        "https://play.acme.dev"
    )
    assert first_match(DEMO_RULES, "Hosted at https://acme.dev/demo/files") == (
        "https://acme.dev/demo/files"
    )
    assert first_match(DEMO_RULES, "No links here") is None


def test_image_candidates_in_rule_order() -> None:
    readme = (
        '<img src="assets/banner.jpg" width="300">\n'
        "![Logo](./docs/logo.png)\n"
        "![badge](https://img.shields.io/badge/x.svg)\n"
        "Raw: https://cdn.test/screens/one.webp\n"
    )

    assert list(iter_matches(IMAGE_RULES, readme)) == [
        "./docs/logo.png",
        "assets/banner.jpg",
        "https://cdn.test/screens/one.webp",
    ]


def test_tags_keep_topics_then_rules_then_baseline() -> None:
    rules = compile_label_rules(
        [
            KeywordRule("database", ("database", "postgres")),
            KeywordRule("web", ("http",)),
        ]
    )

    tags = derive_tags(
        "postgres access for agents",
        topics=("MCP", "sql-tools"),
        rules=rules,
        baseline=("mcp", "server"),
        limit=10,
    )

    assert tags == ("sql-tools", "database", "mcp", "server")


def test_tags_are_capped_but_baseline_survives() -> None:
    topics = tuple(f"topic-{index}" for index in range(12))

    tags = derive_tags(
        "",
        topics=topics,
        rules=(),
        baseline=("mcp", "server", "integration"),
        limit=10,
    )

    assert len(tags) == 10
    assert tags[-3:] == ("mcp", "server", "integration")
    assert tags[0] == "topic-0"


def test_categories_start_with_base_and_cap_at_three() -> None:
    tables = default_heuristics()
    rules = compile_label_rules(tables.category_rules)

    categories = derive_categories(
        "a database api tool",
        base=tables.base_category,
        rules=rules,
        limit=tables.max_categories,
    )

    assert categories == ("MCP Server", "Database", "Web Services")
