"""GitHub API client implementing the repository index port."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from catalog_ingest.adapters.http_resilience import ResilientClient
from catalog_ingest.domain.errors import NotFoundError, RateLimitExceeded, TransientError

from .schema import GitHubContentFile, GitHubErrorResponse, GitHubRepository, GitHubSearchResponse
from .translator import decode_content, parse_package_json, parse_pyproject, translate_repository

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from catalog_ingest.config.github import GitHubConfig
    from catalog_ingest.config.http_resilience import ResilienceConfig
    from catalog_ingest.domain.model import Manifest, RepoRecord

log = getLogger(__name__)

MAX_SEARCH_PAGE_SIZE = 100

_MANIFEST_PARSERS: tuple[tuple[str, Callable[[str], Manifest | None]], ...] = (
    ("package.json", parse_package_json),
    ("pyproject.toml", parse_pyproject),
)


class GitHubIndexClient:
    """Repository index backed by the GitHub REST API.

    One instance owns one ``ResilientClient`` and therefore one rate-limit gate;
    every search, detail, readme, manifest and probe request passes through it.
    """

    def __init__(
        self,
        *,
        config: GitHubConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._client = (client_factory or ResilientClient)(config.resilience)
        self._now = now

    async def __aenter__(self) -> GitHubIndexClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, query: str, *, page: int = 1, page_size: int = 50) -> list[RepoRecord]:
        params = {
            "q": query,
            "sort": "stars",
            "order": "desc",
            "per_page": str(min(page_size, MAX_SEARCH_PAGE_SIZE)),
            "page": str(page),
        }
        response = await self._request("GET", "search/repositories", params=params)
        payload = self._validate(GitHubSearchResponse, response)
        if payload.incomplete_results:
            log.info("GitHub search for %r returned incomplete results", query)
        return [translate_repository(item) for item in payload.items]

    async def get_detail(self, full_name: str) -> RepoRecord:
        response = await self._request("GET", f"repos/{_path(full_name)}")
        return translate_repository(self._validate(GitHubRepository, response))

    async def get_readme(self, full_name: str) -> str | None:
        try:
            response = await self._request("GET", f"repos/{_path(full_name)}/readme")
        except NotFoundError:
            log.debug("No readme for %s", full_name)
            return None
        return decode_content(self._validate(GitHubContentFile, response))

    async def get_manifest(self, full_name: str) -> Manifest | None:
        for filename, parser in _MANIFEST_PARSERS:
            try:
                response = await self._request(
                    "GET", f"repos/{_path(full_name)}/contents/{filename}"
                )
            except NotFoundError:
                continue
            text = decode_content(self._validate(GitHubContentFile, response))
            if text is None:
                continue
            manifest = parser(text)
            if manifest is not None:
                return manifest
        return None

    async def probe(self, url: str) -> bool:
        try:
            response = await self._client.head(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise TransientError(f"Probe failed for {url}: {exc}") from exc
        return response.is_success

    def raw_content_root(self, record: RepoRecord) -> str:
        base = self._config.raw_content_base_url.rstrip("/")
        return f"{base}/{record.full_name}/{record.default_branch}/"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, params=params)
        except httpx.TimeoutException as exc:
            raise TransientError(f"GitHub request timed out: {method} {path}") from exc
        except httpx.HTTPError as exc:
            raise TransientError(f"GitHub request failed: {method} {path}: {exc}") from exc
        self._raise_for_status(response)
        return response

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        status = response.status_code
        url = response.request.url
        if _is_rate_limited(response):
            raise RateLimitExceeded(
                f"GitHub rate limit exceeded (HTTP {status}) for {url}",
                status_code=status,
                retry_after=_retry_after_seconds(response, now=self._now()),
            )
        if status == httpx.codes.NOT_FOUND:
            raise NotFoundError(f"GitHub resource not found: {url}")
        raise TransientError(f"GitHub responded with HTTP {status} for {url}", status_code=status)

    @staticmethod
    def _validate[TModel: BaseModel](
        model: type[TModel],
        response: httpx.Response,
    ) -> TModel:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransientError(
                f"Unexpected GitHub payload from {response.request.url}",
                status_code=response.status_code,
            ) from exc


def _path(full_name: str) -> str:
    return quote(full_name, safe="/")


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        return True
    if response.status_code != httpx.codes.FORBIDDEN:
        return False
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    try:
        message = GitHubErrorResponse.model_validate(response.json()).message
    except (ValueError, ValidationError):
        message = response.text
    return "rate limit" in message.lower()


def _retry_after_seconds(response: httpx.Response, *, now: float) -> float | None:
    retry_after = _as_float(response.headers.get("retry-after"))
    if retry_after is not None:
        return max(0.0, retry_after)
    reset = _as_float(response.headers.get("x-ratelimit-reset"))
    if reset is not None:
        return max(0.0, reset - now)
    return None


def _as_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
