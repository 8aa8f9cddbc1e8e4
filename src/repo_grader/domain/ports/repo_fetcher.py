"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_grader.domain.entities import Commit, FileNode, RepoMetadata
from repo_grader.domain.value_objects import RepositoryIdentifier


class RepoFetcher(Protocol):
    """Abstract contract for fetching the raw signals behind a snapshot."""

    async def fetch_metadata(self, repo: RepositoryIdentifier) -> RepoMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_tree(self, repo: RepositoryIdentifier, branch: str) -> list[FileNode]:
        """Return the recursive file tree for the given branch."""
        ...

    async def fetch_file_content(self, repo: RepositoryIdentifier, path: str, branch: str) -> str:
        """Return the decoded text content of a single file."""
        ...

    async def fetch_languages(self, repo: RepositoryIdentifier) -> dict[str, int]:
        """Return language → byte-count mapping."""
        ...

    async def fetch_commits(self, repo: RepositoryIdentifier, limit: int) -> list[Commit]:
        """Return up to *limit* commits, most recent first."""
        ...
