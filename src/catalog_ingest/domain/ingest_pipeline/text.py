"""Text normalisation helpers shared by the pipeline phases."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def ascii_fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return decomposed.encode("ascii", "ignore").decode("ascii")


def slugify(value: str) -> str:
    """Lowercase, fold to ASCII and join alphanumeric runs with single hyphens.

    ``@scope/pkg-name`` becomes ``scope-pkg-name``; an input without any
    alphanumerics yields an empty string.
    """

    return _NON_ALNUM.sub("-", ascii_fold(value).lower()).strip("-")


def normalize_name(value: str) -> str:
    return collapse_whitespace(value).casefold()


def normalize_slug(value: str) -> str:
    return value.strip().lower()


def normalize_url(value: str) -> str:
    normalized = value.strip().lower()
    normalized = normalized.removesuffix("/")
    normalized = normalized.removesuffix(".git")
    return normalized.removesuffix("/")


def keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str] | None:
    """Compile ``keywords`` into one whole-word, case-insensitive alternation.

    Longer keywords are tried first so multi-word phrases win over their parts.
    A trailing plural ``s`` is accepted. Returns ``None`` for an empty table.
    """

    unique = sorted({keyword.strip().lower() for keyword in keywords if keyword.strip()}, key=len)
    if not unique:
        return None
    alternation = "|".join(re.escape(keyword) for keyword in reversed(unique))
    return re.compile(rf"(?<![a-z0-9])(?:{alternation})s?(?![a-z0-9])", re.IGNORECASE)
