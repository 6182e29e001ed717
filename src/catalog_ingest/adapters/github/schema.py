"""GitHub REST response schemas used by the repository index adapter."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class GitHubBaseModel(BaseModel):
    # GitHub payloads carry dozens of keys we never read
    model_config = ConfigDict(extra="ignore")


class GitHubOwner(GitHubBaseModel):
    login: str
    type: str | None = None


class GitHubLicense(GitHubBaseModel):
    key: str | None = None
    name: str | None = None
    spdx_id: str | None = None


class GitHubRepository(GitHubBaseModel):
    id: int
    name: str
    full_name: str
    owner: GitHubOwner
    html_url: str
    description: str | None = None
    topics: list[str] = Field(default_factory=list)
    stargazers_count: int = 0
    updated_at: datetime = Field(default_factory=lambda: datetime.fromtimestamp(0, tz=UTC))
    homepage: str | None = None
    language: str | None = None
    license: GitHubLicense | None = None
    default_branch: str = "main"
    archived: bool = False
    fork: bool = False


class GitHubSearchResponse(GitHubBaseModel):
    total_count: int = 0
    incomplete_results: bool = False
    items: list[GitHubRepository] = Field(default_factory=list)


class GitHubContentFile(GitHubBaseModel):
    """A file fetched through ``/contents`` or ``/readme`` (base64 encoded)."""

    name: str | None = None
    path: str | None = None
    content: str = ""
    encoding: str = "base64"


class GitHubErrorResponse(GitHubBaseModel):
    message: str = ""
    documentation_url: str | None = None
