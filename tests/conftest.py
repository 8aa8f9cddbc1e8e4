from __future__ import annotations

from typing import Callable

import pytest

from repo_grader.domain.entities import Commit, RepositorySnapshot
from repo_grader.services import token_budget


def _files(count: int, *extra: str) -> tuple[str, ...]:
    filler = [f"src/module_{i}.py" for i in range(count - len(extra))]
    return tuple(list(extra) + filler)


@pytest.fixture
def make_snapshot() -> Callable[..., RepositorySnapshot]:
    """Factory for snapshots; defaults describe a bare three-file repo."""

    def factory(**overrides) -> RepositorySnapshot:
        base = {
            "owner": "octo",
            "name": "demo",
            "file_tree": _files(3),
            "dependencies": {},
            "languages": {},
            "commits": (),
            "readme": None,
            "main_file": None,
        }
        base.update(overrides)
        return RepositorySnapshot(**base)

    return factory


@pytest.fixture
def files() -> Callable[..., tuple[str, ...]]:
    return _files


@pytest.fixture
def good_commits() -> tuple[Commit, ...]:
    return (
        Commit(message="Add pagination to the repository listing", author="ana"),
        Commit(message="Refactor the snapshot builder for clarity", author="ana"),
        Commit(message="fix typo", author="bo"),
        Commit(message="Document the configuration options", author="bo"),
        Commit(message="Introduce structured quality signals", author="ana"),
    )


class _CharEncoder:
    """One token per character; keeps budget tests offline and exact."""

    def encode(self, text: str) -> list[str]:
        return list(text)

    def decode(self, tokens: list[str]) -> str:
        return "".join(tokens)


@pytest.fixture
def char_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(token_budget, "_encoder", _CharEncoder())
