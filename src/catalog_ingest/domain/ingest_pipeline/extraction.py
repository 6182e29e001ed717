"""Readme extraction rules.

Each field is described by an ordered tuple of ``ExtractionRule``; the first
rule producing a non-empty value wins. Rules are data, so new patterns are
added by extending a table rather than by adding branches.
"""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from typing import TYPE_CHECKING

from catalog_ingest.domain.model import ManifestEcosystem

from .text import collapse_whitespace, keyword_pattern

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from catalog_ingest.config.heuristics import KeywordRule
    from catalog_ingest.domain.model import Manifest

DESCRIPTION_MAX_LENGTH = 200
INSTALL_MAX_LENGTH = 200

_URL_CHARS = r"[^\s)\]>\"'`]"
_IMAGE_EXTENSIONS = r"(?:png|jpe?g|gif|svg|webp)"


@dataclass(frozen=True, slots=True)
class ExtractionRule:
    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], str | None]


def _whole_command(match: re.Match[str]) -> str | None:
    command = collapse_whitespace(match.group(0)).rstrip("`'\".;,")
    return command[:INSTALL_MAX_LENGTH] or None


_MARKDOWN_LINK = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_HTML_TAG = re.compile(r"<[^>]+>")
_EMPHASIS = re.compile(r"(\*\*|__|\*|`)")


def clean_prose(text: str) -> str:
    """Strip markdown links, tags and emphasis and collapse whitespace."""

    text = _MARKDOWN_LINK.sub(r"\1", text)
    text = _HTML_TAG.sub(" ", text)
    text = _EMPHASIS.sub("", text)
    return collapse_whitespace(text)


def _prose(match: re.Match[str]) -> str | None:
    text = clean_prose(match.group("body"))
    # badges and link rows collapse to short fragments
    if len(text) < 20 or not any(char.isalpha() for char in text):
        return None
    return textwrap.shorten(text, width=DESCRIPTION_MAX_LENGTH, placeholder="...")


def _non_badge_url(match: re.Match[str]) -> str | None:
    url = match.group("url").strip()
    lowered = url.lower()
    if "shields.io" in lowered or "badge" in lowered:
        return None
    return url


DESCRIPTION_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        "section",
        re.compile(
            r"^#{1,3}[ \t]*(?:description|about|overview)[ \t]*#*[ \t]*\n+"
            r"(?P<body>.+?)(?=\n[ \t]*\n|\n#{1,6}[ \t]|\Z)",
            re.IGNORECASE | re.MULTILINE | re.DOTALL,
        ),
        _prose,
    ),
    ExtractionRule(
        "first_paragraph",
        re.compile(
            r"(?:\A|\n[ \t]*\n)[ \t]*"
            r"(?P<body>(?![#!<>|\-=*`\[]|\d+\.)[^\n]+(?:\n(?![ \t]*\n)[^\n]+)*)",
        ),
        _prose,
    ),
)

INSTALL_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule("npm", re.compile(r"(?<![\w-])npm (?:install|i) [^`\n]+", re.I), _whole_command),
    ExtractionRule("npx", re.compile(r"(?<![\w-])npx (?:-y )?[^`\n]+", re.I), _whole_command),
    ExtractionRule("pip", re.compile(r"(?<![\w-])pip3? install [^`\n]+", re.I), _whole_command),
    ExtractionRule("uvx", re.compile(r"(?<![\w-])uvx [^`\n]+", re.I), _whole_command),
    ExtractionRule("yarn", re.compile(r"(?<![\w-])yarn add [^`\n]+", re.I), _whole_command),
    ExtractionRule("cargo", re.compile(r"(?<![\w-])cargo install [^`\n]+", re.I), _whole_command),
    ExtractionRule("go", re.compile(r"(?<![\w-])go install [^`\n]+", re.I), _whole_command),
)

DOCS_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        "documentation_link",
        re.compile(r"\[documentation\]\((?P<url>[^)\s]+)\)", re.I),
        _non_badge_url,
    ),
    ExtractionRule("docs_link", re.compile(r"\[docs\]\((?P<url>[^)\s]+)\)", re.I), _non_badge_url),
    ExtractionRule(
        "docs_url",
        re.compile(rf"(?P<url>https?://{_URL_CHARS}*docs{_URL_CHARS}*)", re.I),
        _non_badge_url,
    ),
)

DEMO_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule("demo_link", re.compile(r"\[demo\]\((?P<url>[^)\s]+)\)", re.I), _non_badge_url),
    ExtractionRule(
        "live_demo_link",
        re.compile(r"\[live demo\]\((?P<url>[^)\s]+)\)", re.I),
        _non_badge_url,
    ),
    ExtractionRule(
        "demo_url",
        re.compile(rf"(?P<url>https?://{_URL_CHARS}*demo{_URL_CHARS}*)", re.I),
        _non_badge_url,
    ),
)

IMAGE_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        "markdown_image",
        re.compile(
            rf"!\[[^\]]*\]\((?P<url>[^)\s]+\.{_IMAGE_EXTENSIONS})(?:\s+\"[^\"]*\")?\)",
            re.I,
        ),
        _non_badge_url,
    ),
    ExtractionRule(
        "html_image",
        re.compile(rf"<img[^>]+src=[\"'](?P<url>[^\"']+\.{_IMAGE_EXTENSIONS})[\"']", re.I),
        _non_badge_url,
    ),
    ExtractionRule(
        "image_url",
        re.compile(rf"(?P<url>https?://{_URL_CHARS}+\.{_IMAGE_EXTENSIONS})", re.I),
        _non_badge_url,
    ),
)


def iter_matches(rules: Sequence[ExtractionRule], text: str) -> Iterator[str]:
    """Yield every value the rules produce, in rule order then text order."""

    if not text:
        return
    for rule in rules:
        for match in rule.pattern.finditer(text):
            value = rule.extract(match)
            if value:
                yield value


def first_match(rules: Sequence[ExtractionRule], text: str) -> str | None:
    return next(iter_matches(rules, text), None)


def manifest_install_command(manifest: Manifest | None) -> str | None:
    if manifest is None or not manifest.name:
        return None
    if manifest.ecosystem is ManifestEcosystem.NPM:
        return f"npm install {manifest.name}"
    return f"pip install {manifest.name}"


@dataclass(frozen=True, slots=True)
class LabelRule:
    label: str
    pattern: re.Pattern[str]


def compile_label_rules(rules: Iterable[KeywordRule]) -> tuple[LabelRule, ...]:
    compiled: list[LabelRule] = []
    for rule in rules:
        pattern = keyword_pattern(rule.keywords)
        if pattern is not None:
            compiled.append(LabelRule(rule.label, pattern))
    return tuple(compiled)


def derive_tags(
    text: str,
    *,
    topics: Iterable[str],
    rules: Sequence[LabelRule],
    baseline: Sequence[str],
    limit: int,
) -> tuple[str, ...]:
    """Topics first, then rule matches, capped at ``limit``; baseline tags always survive."""

    ordered: dict[str, None] = {}
    for topic in topics:
        if topic.strip():
            ordered.setdefault(topic.strip().lower(), None)
    for rule in rules:
        if rule.pattern.search(text):
            ordered.setdefault(rule.label, None)

    baseline_tags = [tag for tag in dict.fromkeys(baseline) if tag]
    room = max(limit - len(baseline_tags), 0)
    extra = [tag for tag in ordered if tag not in baseline_tags][:room]
    return (*extra, *baseline_tags)[:limit]


def derive_categories(
    text: str,
    *,
    base: str,
    rules: Sequence[LabelRule],
    limit: int,
) -> tuple[str, ...]:
    categories: dict[str, None] = {base: None}
    for rule in rules:
        if rule.pattern.search(text):
            categories.setdefault(rule.label, None)
    return tuple(categories)[:limit]
