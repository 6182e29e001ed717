"""Errors raised while reading settings from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """Base class for unusable ingestion settings."""


class MissingConfigurationError(ConfigurationError):
    """Required environment variables are unset or blank.

    ``names`` holds every missing variable, sorted, so callers can report them
    all at once instead of failing one variable at a time.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(names))
        super().__init__(f"Missing configuration for: {', '.join(self.names)}")


class UnsupportedValueError(ConfigurationError):
    """An environment variable holds a value outside its allowed choices."""

    def __init__(self, name: str, value: str, *, allowed: Iterable[str]) -> None:
        self.name = name
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unsupported {name} value: {value!r} (expected one of {', '.join(self.allowed)})"
        )
