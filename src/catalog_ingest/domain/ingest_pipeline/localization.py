"""Secondary-language copies of an entry's name and description.

Substitution is dictionary based: every known phrase is replaced in a single
pass, longest phrase first, matching whole words case-insensitively. Each
input position is rewritten at most once, so translated output is never fed
back into the dictionary.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from catalog_ingest.domain.model import LocalizedFields

from .text import collapse_whitespace

if TYPE_CHECKING:
    from catalog_ingest.config.heuristics import LocalizationTables


class Localizer:
    def __init__(self, tables: LocalizationTables, *, enabled: bool = True) -> None:
        self._tables = tables
        self._enabled = enabled
        self._translations = {source.lower(): target for source, target in tables.dictionary}
        self._pattern = _phrase_pattern(self._translations)

    @property
    def language(self) -> str:
        return self._tables.language

    def substitute(self, text: str) -> str:
        if self._pattern is None or not text:
            return text
        return self._pattern.sub(self._replace, text)

    def localize(self, name: str, description: str) -> LocalizedFields:
        description = collapse_whitespace(description)
        if not self._enabled:
            return LocalizedFields(
                language=self.language,
                name_alt=name,
                description_alt=description or self._fallback(name),
            )

        name_alt = self.substitute(name).strip() or name
        if not description:
            return LocalizedFields(self.language, name_alt, self._fallback(name))

        translated = self.substitute(description)
        if self._tables.kind_marker.lower() not in translated.lower():
            translated = self._tables.kind_prefix.format(text=_lower_first(translated))
        return LocalizedFields(self.language, name_alt, _upper_first(translated))

    def _fallback(self, name: str) -> str:
        return self._tables.fallback_template.format(name=name)

    def _replace(self, match: re.Match[str]) -> str:
        source = match.group(0)
        target = self._translations[source.lower()]
        if len(source) > 1 and source.isupper():
            return target.upper()
        if source[0].isupper():
            return _upper_first(target)
        return target


def _phrase_pattern(translations: dict[str, str]) -> re.Pattern[str] | None:
    if not translations:
        return None
    phrases = sorted(translations, key=len, reverse=True)
    alternation = "|".join(re.escape(phrase) for phrase in phrases)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def _upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def _lower_first(text: str) -> str:
    """Lowercase the leading letter unless the first word is an acronym or brand."""

    first_word = text.split(" ", 1)[0]
    if len(first_word) > 1 and any(char.isupper() for char in first_word[1:]):
        return text
    return text[:1].lower() + text[1:]
