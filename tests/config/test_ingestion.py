"""Run configuration defaults and validation."""

from __future__ import annotations

import pytest

from catalog_ingest.config import IngestionConfig, default_fallback_image, default_queries
from catalog_ingest.domain.model import EntryKind


def test_defaults_target_mcp_servers() -> None:
    config = IngestionConfig()

    assert config.kind is EntryKind.MCP_SERVER
    assert config.queries == default_queries()
    assert config.min_popularity == 2
    assert config.probes.per_run == 150
    assert config.probes.per_candidate == 6
    assert config.cooldown.max_cooldowns == 2


def test_for_kind_switches_tables() -> None:
    config = IngestionConfig.for_kind(EntryKind.AI_AGENT, max_candidates=3)

    assert config.kind is EntryKind.AI_AGENT
    assert config.queries == default_queries(EntryKind.AI_AGENT)
    assert config.heuristics.kind is EntryKind.AI_AGENT
    assert config.localization.kind_marker == "agente de ia"
    assert config.max_candidates == 3


def test_each_kind_gets_its_own_fallback_image() -> None:
    server = IngestionConfig.for_kind(EntryKind.MCP_SERVER)
    agent = IngestionConfig.for_kind(EntryKind.AI_AGENT)

    assert server.fallback_image_url == IngestionConfig().fallback_image_url
    assert server.fallback_image_url.endswith("text=MCP+Server")
    assert agent.fallback_image_url == default_fallback_image(EntryKind.AI_AGENT)
    assert agent.fallback_image_url.endswith("text=AI+Agent")


def test_explicit_fallback_image_wins_over_kind_default() -> None:
    config = IngestionConfig.for_kind(
        EntryKind.AI_AGENT, fallback_image_url="https://img.test/agent.png"
    )

    assert config.fallback_image_url == "https://img.test/agent.png"


@pytest.mark.parametrize(
    "overrides",
    [
        {"min_interval_seconds": -0.1},
        {"max_candidates": -1},
        {"page_size": 0},
        {"page_size": 101},
    ],
)
def test_invalid_values_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        IngestionConfig.for_kind(EntryKind.MCP_SERVER, **overrides)
