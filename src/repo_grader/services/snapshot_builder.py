"""Snapshot acquisition — turn raw fetcher calls into a bounded snapshot."""

from __future__ import annotations

import asyncio
import logging

from repo_grader.domain.entities import (
    MAX_COMMITS,
    MAX_TEXT_CHARS,
    MAX_TREE_ENTRIES,
    RepositorySnapshot,
    truncate_text,
)
from repo_grader.domain.exceptions import EmptyRepositoryError, RepoGraderError
from repo_grader.domain.ports.repo_fetcher import RepoFetcher
from repo_grader.domain.value_objects import RepositoryIdentifier
from repo_grader.services.file_selection import (
    blob_paths,
    find_entry_point,
    find_manifest,
    find_readme,
)
from repo_grader.services.manifest_parser import parse_dependencies

logger = logging.getLogger(__name__)


async def _soft_fetch(
    fetcher: RepoFetcher, repo: RepositoryIdentifier, path: str | None, branch: str
) -> str | None:
    """Fetch a file, treating any failure as "file absent"."""
    if path is None:
        return None
    try:
        return await fetcher.fetch_file_content(repo, path, branch)
    except RepoGraderError:
        logger.debug("Failed to fetch %s from %s — skipping", path, repo.full_name, exc_info=True)
        return None


async def build_snapshot(
    fetcher: RepoFetcher,
    repo: RepositoryIdentifier,
    *,
    max_tree_entries: int = MAX_TREE_ENTRIES,
    max_text_chars: int = MAX_TEXT_CHARS,
    max_commits: int = MAX_COMMITS,
) -> RepositorySnapshot:
    """Gather every signal for *repo* and return an immutable snapshot.

    Metadata, tree and acquisition errors propagate; only individual file
    contents are fetched on a best-effort basis.
    """
    metadata = await fetcher.fetch_metadata(repo)
    branch = metadata.default_branch
    tree, languages, commits = await asyncio.gather(
        fetcher.fetch_tree(repo, branch),
        fetcher.fetch_languages(repo),
        fetcher.fetch_commits(repo, max_commits),
    )

    # Selection runs over the full tree; only the stored listing is bounded.
    paths = blob_paths(tree)
    if not paths:
        raise EmptyRepositoryError(f"Repository {repo.full_name} has no files.")

    manifest_path = find_manifest(paths)
    readme_path = find_readme(paths)
    entry_path = find_entry_point(paths)
    logger.info(
        "Snapshot %s: %d files, manifest=%s readme=%s entry=%s",
        repo.full_name,
        len(paths),
        manifest_path,
        readme_path,
        entry_path,
    )

    manifest, readme, main_file = await asyncio.gather(
        _soft_fetch(fetcher, repo, manifest_path, branch),
        _soft_fetch(fetcher, repo, readme_path, branch),
        _soft_fetch(fetcher, repo, entry_path, branch),
    )
    dependencies = parse_dependencies(manifest_path, manifest) if manifest_path and manifest else {}

    return RepositorySnapshot(
        owner=repo.owner,
        name=repo.repo,
        metadata=metadata,
        file_tree=tuple(paths[:max_tree_entries]),
        dependencies=dependencies,
        languages=languages,
        commits=tuple(commits[:max_commits]),
        readme=truncate_text(readme, max_text_chars),
        main_file=truncate_text(main_file, max_text_chars),
    )
