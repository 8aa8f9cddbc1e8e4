from __future__ import annotations

import dataclasses

import pytest

from repo_grader.domain.entities import (
    MAX_COMMITS,
    MAX_TEXT_CHARS,
    MAX_TREE_ENTRIES,
    TRUNCATION_MARKER,
    Commit,
    Level,
    RepositorySnapshot,
    truncate_text,
)


class TestTruncation:
    def test_short_text_untouched(self):
        assert truncate_text("hello", 10) == "hello"
        assert truncate_text(None) is None

    def test_text_at_limit_untouched(self):
        assert truncate_text("x" * 10, 10) == "x" * 10

    def test_long_text_gets_marker(self):
        cut = truncate_text("x" * 11, 10)
        assert cut == "x" * 10 + TRUNCATION_MARKER

    @pytest.mark.parametrize("field", ["readme", "main_file"])
    def test_snapshot_bounds_text(self, make_snapshot, field):
        snapshot = make_snapshot(**{field: "y" * (MAX_TEXT_CHARS * 2)})
        value = getattr(snapshot, field)
        assert value.endswith(TRUNCATION_MARKER)
        assert len(value) <= MAX_TEXT_CHARS + len(TRUNCATION_MARKER)

    def test_truncating_twice_is_stable(self):
        once = truncate_text("z" * 6000)
        assert truncate_text(once) == once


class TestSnapshotBounds:
    def test_file_tree_bounded(self, make_snapshot, files):
        snapshot = make_snapshot(file_tree=files(MAX_TREE_ENTRIES + 50))
        assert len(snapshot.file_tree) == MAX_TREE_ENTRIES

    def test_commits_bounded(self, make_snapshot):
        commits = [Commit(message=f"commit number {i}") for i in range(25)]
        snapshot = make_snapshot(commits=commits)
        assert len(snapshot.commits) == MAX_COMMITS
        assert snapshot.commits[0].message == "commit number 0"

    @pytest.mark.parametrize(("owner", "name"), [("", "demo"), ("octo", "")])
    def test_owner_and_name_required(self, owner, name):
        with pytest.raises(ValueError):
            RepositorySnapshot(owner=owner, name=name)

    def test_immutable(self, make_snapshot):
        snapshot = make_snapshot()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.readme = "changed"  # type: ignore[misc]
        with pytest.raises(TypeError):
            snapshot.dependencies["new"] = "1.0"  # type: ignore[index]

    def test_defensive_copy_of_mappings(self, make_snapshot):
        deps = {"fastapi": ">=0.110"}
        snapshot = make_snapshot(dependencies=deps)
        deps["httpx"] = "*"
        assert dict(snapshot.dependencies) == {"fastapi": ">=0.110"}

    def test_hashable_and_equal_by_value(self, make_snapshot):
        first = make_snapshot(dependencies={"fastapi": "*"}, languages={"Python": 900})
        second = make_snapshot(dependencies={"fastapi": "*"}, languages={"Python": 900})

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1


class TestDerivedFlags:
    @pytest.mark.parametrize(
        "path",
        ["tests/test_api.py", "src/App.test.tsx", "spec/models_spec.rb", "__tests__/x.js", "Test/Main.java"],
    )
    def test_has_tests(self, make_snapshot, path):
        assert make_snapshot(file_tree=("README.md", path)).has_tests

    @pytest.mark.parametrize(
        "path",
        [".github/workflows/ci.yml", ".gitlab-ci.yml", "Jenkinsfile", ".travis.yml", ".circleci/config.yml"],
    )
    def test_has_ci(self, make_snapshot, path):
        assert make_snapshot(file_tree=(path,)).has_ci

    @pytest.mark.parametrize("path", ["Dockerfile", "deploy/Dockerfile.prod", "docker-compose.yaml"])
    def test_has_dockerfile(self, make_snapshot, path):
        assert make_snapshot(file_tree=(path,)).has_dockerfile

    def test_flags_false_for_plain_tree(self, make_snapshot):
        snapshot = make_snapshot(file_tree=("main.go", "go.mod", "README.md"))
        assert not snapshot.has_tests
        assert not snapshot.has_ci
        assert not snapshot.has_dockerfile

    def test_flags_follow_stored_tree_only(self, make_snapshot, files):
        tree = files(MAX_TREE_ENTRIES) + ("tests/test_late.py",)
        assert not make_snapshot(file_tree=tree).has_tests

    def test_full_name(self, make_snapshot):
        assert make_snapshot().full_name == "octo/demo"


def test_levels_are_ordered():
    ranks = [level.rank for level in (Level.BEGINNER, Level.INTERMEDIATE, Level.PRO, Level.ELITE)]
    assert ranks == sorted(ranks)
