"""Port: generative assessment producer."""

from __future__ import annotations

from typing import Protocol

from repo_grader.domain.entities import RepositorySnapshot


class AssessmentProducer(Protocol):
    """Turns a snapshot plus persona directive into a raw JSON payload.

    Producers only transport text; parsing and validation belong to the
    orchestrator.
    """

    name: str

    async def produce(self, snapshot: RepositorySnapshot, persona: str) -> str:
        ...
