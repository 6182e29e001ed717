"""Error taxonomy shared by the pipeline and its adapters."""

from __future__ import annotations


class IngestionError(RuntimeError):
    """Base class for errors raised while ingesting catalog entries."""


class TransientError(IngestionError):
    """A recoverable failure talking to an external service (network, timeout, non-2xx)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitExceeded(TransientError):
    """The upstream signalled that its quota is exhausted; callers should cool down."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class NotFoundError(TransientError):
    """The requested resource does not exist (HTTP 404)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)


class DuplicateConflict(IngestionError):
    """The catalog's own uniqueness check rejected an entry."""


class PersistError(IngestionError):
    """The catalog write interface failed for a reason unrelated to uniqueness."""


class CatalogUnavailableError(IngestionError):
    """The existing catalog could not be read to exhaustion."""


class DiscoveryFailedError(IngestionError):
    """Every discovery query failed, leaving nothing to process."""


class EnrichmentError(IngestionError):
    """A candidate could not be enriched (missing base record or required detail)."""
