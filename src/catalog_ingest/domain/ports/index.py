"""Port for the external repository index (search, detail, manifests, probes)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from catalog_ingest.domain.model import Manifest, RepoRecord


@runtime_checkable
class RepositoryIndex(Protocol):
    """Read-only access to the repository index.

    Every call goes through the shared rate limiter. Non-2xx responses surface
    as ``TransientError`` (``RateLimitExceeded`` when the quota is exhausted).
    """

    async def search(self, query: str, *, page: int = 1, page_size: int = 50) -> list[RepoRecord]:
        ...

    async def get_detail(self, full_name: str) -> RepoRecord:
        ...

    async def get_readme(self, full_name: str) -> str | None:
        """Return the decoded readme text, or ``None`` when the repository has none."""
        ...

    async def get_manifest(self, full_name: str) -> Manifest | None:
        """Return the first package manifest found, or ``None``."""
        ...

    async def probe(self, url: str) -> bool:
        """Return whether ``url`` exists (HEAD request succeeds)."""
        ...

    def raw_content_root(self, record: RepoRecord) -> str:
        """Return the hosting root used to resolve relative asset paths."""
        ...
