"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

MAX_TREE_ENTRIES = 300
MAX_COMMITS = 10
MAX_TEXT_CHARS = 5000
TRUNCATION_MARKER = "...(truncated)"

_TEST_MARKERS: tuple[str, ...] = ("test", "spec", "__tests__")
_CI_MARKERS: tuple[str, ...] = (
    ".github/workflows",
    ".gitlab-ci.yml",
    "Jenkinsfile",
    ".travis.yml",
    ".circleci/",
    "azure-pipelines.yml",
)
_DOCKER_MARKERS: tuple[str, ...] = ("Dockerfile", "docker-compose")


def truncate_text(text: str | None, limit: int = MAX_TEXT_CHARS) -> str | None:
    """Cut *text* to *limit* characters and append the truncation marker."""
    if text is None or len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


class Level(str, Enum):
    """Qualitative grade, ordered from lowest to highest."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    PRO = "Pro"
    ELITE = "Elite"

    @property
    def rank(self) -> int:
        return list(Level).index(self)

    @classmethod
    def from_score(cls, score: int) -> Level:
        """Map a clamped 0-100 score onto its level."""
        if score >= 85:
            return cls.ELITE
        if score >= 70:
            return cls.PRO
        if score >= 50:
            return cls.INTERMEDIATE
        return cls.BEGINNER


class Priority(str, Enum):
    """Roadmap item urgency."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Signal(str, Enum):
    """Named quality signals observed on a snapshot."""

    README = "readme"
    TESTS = "tests"
    CI = "ci"
    DOCKER = "docker"
    DEPENDENCIES = "dependencies"
    MULTI_LANGUAGE = "multi_language"
    GOOD_COMMITS = "good_commits"


@dataclass(frozen=True, slots=True)
class FileNode:
    """A single node from the GitHub tree API (blob or sub-tree)."""

    path: str
    type: str  # "blob" or "tree"
    size: int = 0


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """Informational repository metadata; not scored directly."""

    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    description: str | None = None
    language: str | None = None
    size: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    default_branch: str = "main"


@dataclass(frozen=True, slots=True)
class Commit:
    message: str
    author: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class RepositorySnapshot:
    """Normalized, bounded view of a repository used as scoring input.

    Bounds are enforced on construction: the file tree and commit list are
    cut to their maximum length and the two text blobs are truncated with
    :data:`TRUNCATION_MARKER`.  The test / CI / Docker flags are derived
    from ``file_tree`` and cannot be set independently.
    """

    owner: str
    name: str
    metadata: RepoMetadata = field(default_factory=RepoMetadata)
    file_tree: tuple[str, ...] = ()
    dependencies: Mapping[str, str] = field(default_factory=dict, hash=False)
    languages: Mapping[str, int] = field(default_factory=dict, hash=False)
    commits: tuple[Commit, ...] = ()
    readme: str | None = None
    main_file: str | None = None

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("Snapshot owner and name must be non-empty.")
        # frozen: bounds are applied through object.__setattr__
        object.__setattr__(self, "file_tree", tuple(self.file_tree)[:MAX_TREE_ENTRIES])
        object.__setattr__(self, "commits", tuple(self.commits)[:MAX_COMMITS])
        object.__setattr__(self, "dependencies", MappingProxyType(dict(self.dependencies)))
        object.__setattr__(self, "languages", MappingProxyType(dict(self.languages)))
        object.__setattr__(self, "readme", truncate_text(self.readme))
        object.__setattr__(self, "main_file", truncate_text(self.main_file))

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def has_tests(self) -> bool:
        return _any_path(self.file_tree, _TEST_MARKERS, lower=True)

    @property
    def has_ci(self) -> bool:
        return _any_path(self.file_tree, _CI_MARKERS)

    @property
    def has_dockerfile(self) -> bool:
        return _any_path(self.file_tree, _DOCKER_MARKERS)


def _any_path(paths: Iterable[str], markers: tuple[str, ...], *, lower: bool = False) -> bool:
    for path in paths:
        candidate = path.lower() if lower else path
        if any(marker in candidate for marker in markers):
            return True
    return False


@dataclass(frozen=True, slots=True)
class RoadmapItem:
    title: str
    description: str
    priority: Priority


@dataclass(frozen=True, slots=True)
class AssessmentResult:
    """The structured grade produced by either producer path."""

    score: int
    level: Level
    summary: str
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    roadmap: tuple[RoadmapItem, ...] = ()
    signals: frozenset[Signal] = frozenset()


@dataclass(frozen=True, slots=True)
class Assessment:
    """An :class:`AssessmentResult` annotated with its provenance."""

    repository: str
    result: AssessmentResult
    using_fallback: bool
    producer: str | None = None
