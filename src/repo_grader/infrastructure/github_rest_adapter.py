"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from repo_grader.domain.entities import Commit, FileNode, RepoMetadata
from repo_grader.domain.exceptions import (
    AcquisitionError,
    EmptyRepositoryError,
    GitHubRateLimitError,
    RepoGraderError,
    RepositoryAccessDeniedError,
    RepositoryNotFoundError,
)
from repo_grader.domain.value_objects import RepositoryIdentifier

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_RAW_BASE = "https://raw.githubusercontent.com"
_USER_AGENT = "repo-grader/1.0"


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(self, client: httpx.AsyncClient, token: str | None = None) -> None:
        self._client = client
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, repo: RepositoryIdentifier) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata."""
        resp = await self._api_get(f"/repos/{repo.owner}/{repo.repo}")
        data = resp.json()
        return RepoMetadata(
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            open_issues=data.get("open_issues_count") or 0,
            description=data.get("description"),
            language=data.get("language"),
            size=data.get("size") or 0,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            default_branch=data.get("default_branch") or "main",
        )

    async def fetch_tree(self, repo: RepositoryIdentifier, branch: str) -> list[FileNode]:
        """GET /repos/{owner}/{repo}/git/trees/{branch}?recursive=1 → [FileNode]."""
        endpoint = f"/repos/{repo.owner}/{repo.repo}/git/trees/{branch}"
        try:
            resp = await self._api_get(endpoint, params={"recursive": "1"})
        except AcquisitionError:
            logger.warning("Recursive tree failed for %s — retrying flat", repo.full_name)
            resp = await self._api_get(endpoint)

        tree = resp.json().get("tree", [])
        if not tree:
            raise EmptyRepositoryError(f"Repository {repo.full_name} appears empty.")

        return [
            FileNode(
                path=item["path"],
                type=item.get("type", "blob"),
                size=item.get("size", 0),
            )
            for item in tree
        ]

    async def fetch_languages(self, repo: RepositoryIdentifier) -> dict[str, int]:
        """GET /repos/{owner}/{repo}/languages → {lang: bytes}."""
        try:
            resp = await self._api_get(f"/repos/{repo.owner}/{repo.repo}/languages")
            data: dict[str, int] = resp.json()
            return data
        except RepoGraderError:
            logger.debug("Failed to fetch languages for %s — returning empty", repo.full_name)
            return {}

    async def fetch_commits(self, repo: RepositoryIdentifier, limit: int) -> list[Commit]:
        """GET /repos/{owner}/{repo}/commits?per_page=limit → [Commit]."""
        try:
            resp = await self._api_get(
                f"/repos/{repo.owner}/{repo.repo}/commits",
                params={"per_page": str(limit)},
            )
        except RepoGraderError:
            logger.debug("Failed to fetch commits for %s — returning empty", repo.full_name)
            return []

        commits: list[Commit] = []
        for item in resp.json()[:limit]:
            detail = item.get("commit") or {}
            author = detail.get("author") or {}
            commits.append(
                Commit(
                    message=detail.get("message") or "",
                    author=author.get("name"),
                    date=author.get("date"),
                )
            )
        return commits

    async def fetch_file_content(
        self, repo: RepositoryIdentifier, path: str, branch: str
    ) -> str:
        """Fetch raw file content via raw.githubusercontent.com (no rate limit)."""
        raw_url = f"{_RAW_BASE}/{repo.owner}/{repo.repo}/{branch}/{path}"
        try:
            resp = await self._client.get(raw_url, headers={"User-Agent": _USER_AGENT})
        except httpx.HTTPError as exc:
            raise AcquisitionError(f"Network error fetching {raw_url}: {exc}") from exc

        if resp.status_code == 200:
            return resp.text

        raise AcquisitionError(
            f"raw.githubusercontent.com returned HTTP {resp.status_code} for {path}"
        )

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{_GITHUB_API}{endpoint}"
        try:
            resp = await self._client.get(url, headers=self._api_headers, params=params)
        except httpx.HTTPError as exc:
            raise AcquisitionError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            raise RepositoryNotFoundError(
                "Repository not found. Make sure the identifier points to a public repository."
            )

        if resp.status_code == 403:
            if resp.headers.get("x-ratelimit-remaining", "") == "0":
                raise GitHubRateLimitError(
                    "GitHub API rate limit exceeded. Resets at "
                    f"{_format_reset(resp.headers.get('x-ratelimit-reset', ''))}. "
                    "Set the GITHUB_TOKEN environment variable to increase the limit."
                )
            raise RepositoryAccessDeniedError("Access denied. The repository may be private.")

        if resp.status_code == 429:
            raise GitHubRateLimitError("GitHub API rate limit exceeded (HTTP 429).")

        raise AcquisitionError(f"GitHub API returned HTTP {resp.status_code} for {url}")


def _format_reset(raw: str) -> str:
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (ValueError, OSError):
        return raw or "unknown"
