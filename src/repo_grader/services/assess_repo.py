"""Assess-repository use case — the single entry point for the business logic.

Depends only on the :class:`RepoFetcher` port and the orchestrator; the
interface layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import logging

from repo_grader.domain.entities import MAX_COMMITS, MAX_TEXT_CHARS, MAX_TREE_ENTRIES, Assessment
from repo_grader.domain.ports.repo_fetcher import RepoFetcher
from repo_grader.domain.value_objects import RepositoryIdentifier
from repo_grader.services.orchestrator import AssessmentOrchestrator
from repo_grader.services.snapshot_builder import build_snapshot

logger = logging.getLogger(__name__)


class AssessRepoUseCase:
    """Orchestrates identifier → snapshot → assessment.

    Acquisition failures propagate to the caller; producer failures never
    do, because the orchestrator always ends in a valid result.
    """

    def __init__(
        self,
        repo_fetcher: RepoFetcher,
        orchestrator: AssessmentOrchestrator,
        max_tree_entries: int = MAX_TREE_ENTRIES,
        max_text_chars: int = MAX_TEXT_CHARS,
        max_commits: int = MAX_COMMITS,
    ) -> None:
        self._fetcher = repo_fetcher
        self._orchestrator = orchestrator
        self._max_tree = max_tree_entries
        self._max_text = max_text_chars
        self._max_commits = max_commits

    async def execute(self, identifier: str, roast_mode: bool = False) -> Assessment:
        repo = RepositoryIdentifier.parse(identifier)
        logger.info("Assessing %s (roast_mode=%s)", repo.full_name, roast_mode)

        snapshot = await build_snapshot(
            self._fetcher,
            repo,
            max_tree_entries=self._max_tree,
            max_text_chars=self._max_text,
            max_commits=self._max_commits,
        )
        assessment = await self._orchestrator.assess(snapshot, roast_mode)
        logger.info(
            "Assessed %s: %d (%s) fallback=%s",
            repo.full_name,
            assessment.result.score,
            assessment.result.level.value,
            assessment.using_fallback,
        )
        return assessment
