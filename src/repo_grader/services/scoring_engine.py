"""Deterministic scoring engine — rule-based grading of a repository snapshot.

Every criterion contributes an independent score delta and at most one
strength or weakness, plus optional roadmap entries.  The engine is pure:
the same snapshot and mode always produce an identical result, and no
well-formed snapshot can make it raise.

It serves both as the primary offline producer and as the fallback when no
generative producer returns a usable assessment.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from repo_grader.domain.entities import (
    AssessmentResult,
    Level,
    Priority,
    RepositorySnapshot,
    RoadmapItem,
    Signal,
)

BASE_SCORE = 40

README_SHORT_CHARS = 200
README_LONG_CHARS = 1000
DEPENDENCY_MODERATE = 20
DEPENDENCY_HEAVY = 50
TREE_SMALL = 5
TREE_LARGE = 100
COMMIT_WINDOW = 5
COMMIT_GOOD_THRESHOLD = 3
COMMIT_MIN_MESSAGE_CHARS = 10
QUALITY_REVIEW_BELOW = 70

# Legacy marker for clients that still detect the fallback from prose.
FALLBACK_SENTINEL = "AI APIs are down"
_LEGACY_SENTINELS: tuple[str, ...] = (FALLBACK_SENTINEL, "API quota exceeded")

# ── Roadmap catalogue ───────────────────────────────────────────────────────

CREATE_README = RoadmapItem(
    title="Create README",
    description=(
        "Add comprehensive documentation with setup instructions, usage "
        "examples, and project overview"
    ),
    priority=Priority.HIGH,
)
ADD_TEST_SUITE = RoadmapItem(
    title="Add Test Suite",
    description="Implement unit tests, integration tests, and set up testing framework",
    priority=Priority.HIGH,
)
SETUP_CI = RoadmapItem(
    title="Setup CI/CD Pipeline",
    description="Add GitHub Actions for automated testing, linting, and deployment",
    priority=Priority.MEDIUM,
)
ADD_DOCKER = RoadmapItem(
    title="Add Docker Support",
    description="Create Dockerfile for consistent deployment environments",
    priority=Priority.LOW,
)
CODE_QUALITY_REVIEW = RoadmapItem(
    title="Code Quality Review",
    description=(
        "Review code for best practices, error handling, and optimization "
        "opportunities"
    ),
    priority=Priority.MEDIUM,
)
IMPROVE_DOCS = RoadmapItem(
    title="Improve Documentation",
    description="Add installation instructions, usage examples, and API documentation",
    priority=Priority.MEDIUM,
)


@dataclass
class _Tally:
    """Mutable accumulator used while a single assessment is computed."""

    score: int = BASE_SCORE
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    roadmap: list[RoadmapItem] = field(default_factory=list)

    def strength(self, delta: int, message: str) -> None:
        self.score += delta
        self.strengths.append(message)

    def weakness(self, delta: int, message: str, *items: RoadmapItem) -> None:
        self.score += delta
        self.weaknesses.append(message)
        self.roadmap.extend(items)


# ── Criteria ────────────────────────────────────────────────────────────────


def _score_readme(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    if not snapshot.readme:
        tally.weakness(0, "Missing README file", CREATE_README)
        return
    length = len(snapshot.readme)
    if length > README_LONG_CHARS:
        tally.strength(20, "Comprehensive README documentation")
    elif length >= README_SHORT_CHARS:
        tally.strength(15, "Has README documentation")
    else:
        tally.strength(5, "Has a brief README")


def _score_tests(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    if snapshot.has_tests:
        tally.strength(20, "Includes test coverage")
    else:
        tally.weakness(0, "No test coverage found", ADD_TEST_SUITE)


def _score_ci(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    if snapshot.has_ci:
        tally.strength(10, "Has CI/CD automation")
    else:
        tally.weakness(0, "No automated workflows", SETUP_CI)


def _score_dependencies(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    count = len(snapshot.dependencies)
    if count == 0:
        tally.weakness(0, "No package management detected")
    elif count < DEPENDENCY_MODERATE:
        tally.strength(10, "Reasonable dependency count")
    elif count < DEPENDENCY_HEAVY:
        tally.strength(5, "Uses modern dependencies")
    else:
        tally.weakness(2, "Heavy dependency usage")


def _score_file_tree(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    count = len(snapshot.file_tree)
    if TREE_SMALL < count < TREE_LARGE:
        tally.strength(10, "Well-organized project structure")
    elif count >= TREE_LARGE:
        tally.strength(5, "Large, complex project")
    else:
        tally.weakness(2, "Limited project scope")


def _score_docker(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    if snapshot.has_dockerfile:
        tally.strength(5, "Containerization ready")
    else:
        tally.roadmap.append(ADD_DOCKER)


def has_good_commits(snapshot: RepositorySnapshot) -> bool:
    """True when most recent commits carry descriptive, non-"fix" messages."""
    recent = snapshot.commits[:COMMIT_WINDOW]
    good = [
        c
        for c in recent
        if len(c.message) > COMMIT_MIN_MESSAGE_CHARS and "fix" not in c.message.lower()
    ]
    return len(good) >= COMMIT_GOOD_THRESHOLD


def _score_commits(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    if not snapshot.commits:
        return
    if has_good_commits(snapshot):
        tally.strength(5, "Good commit practices")
    else:
        tally.weakness(2, "Commit messages need improvement")


def _score_languages(snapshot: RepositorySnapshot, tally: _Tally) -> None:
    if len(snapshot.languages) > 1:
        tally.strength(5, "Multi-language project")


_CRITERIA = (
    _score_readme,
    _score_tests,
    _score_ci,
    _score_dependencies,
    _score_file_tree,
    _score_docker,
    _score_commits,
    _score_languages,
)


def _mentions_install_steps(readme: str | None) -> bool:
    text = (readme or "").lower()
    return "installation" in text or "setup" in text


# ── Signals & summary ───────────────────────────────────────────────────────


def signals_for(snapshot: RepositorySnapshot) -> frozenset[Signal]:
    """Return the structured quality signals observable on *snapshot*."""
    found: set[Signal] = set()
    if snapshot.readme:
        found.add(Signal.README)
    if snapshot.has_tests:
        found.add(Signal.TESTS)
    if snapshot.has_ci:
        found.add(Signal.CI)
    if snapshot.has_dockerfile:
        found.add(Signal.DOCKER)
    if snapshot.dependencies:
        found.add(Signal.DEPENDENCIES)
    if len(snapshot.languages) > 1:
        found.add(Signal.MULTI_LANGUAGE)
    if has_good_commits(snapshot):
        found.add(Signal.GOOD_COMMITS)
    return frozenset(found)


_ROAST_VERDICT = {
    "high": "Not bad for a human.",
    "mid": "Mediocre at best.",
    "low": "Yikes, this needs work.",
}
_STANDARD_VERDICT = {
    "high": "Strong project foundation.",
    "mid": "Solid base with room for improvement.",
    "low": "Significant improvements recommended.",
}


def _bucket(score: int) -> str:
    if score > 70:
        return "high"
    if score > 50:
        return "mid"
    return "low"


def build_summary(
    score: int,
    *,
    roast_mode: bool,
    has_tests: bool,
    has_readme: bool,
    after_outage: bool = False,
) -> str:
    """Select the templated summary for the given score and signals.

    The outage sentinel is only included when *after_outage* is set, i.e.
    generative producers were configured and all of them failed.
    """
    bucket = _bucket(score)
    if roast_mode:
        tests = "At least you test your code." if has_tests else "No tests? Bold strategy."
        docs = "" if has_readme else " Not even a README, impressive."
        opener = (
            f"The {FALLBACK_SENTINEL}, but I can still judge your code."
            if after_outage
            else "No AI needed to judge this one."
        )
        return f"Score: {score}/100. {opener} {_ROAST_VERDICT[bucket]} {tests}{docs}"
    docs = (
        "Good documentation foundation."
        if has_readme
        else "Documentation needs attention."
    )
    tests = (
        "Testing practices established."
        if has_tests
        else "Testing implementation recommended."
    )
    status = f" ({FALLBACK_SENTINEL})" if after_outage else ""
    return (
        f"Rule-based analysis complete{status}. Score: {score}/100. "
        f"{docs} {tests} {_STANDARD_VERDICT[bucket]}"
    )


def summary_indicates_fallback(summary: str) -> bool:
    """Legacy check: does *summary* read like a fallback summary?

    The ``using_fallback`` flag on :class:`Assessment` is authoritative; this
    exists only for consumers that still inspect the prose.
    """
    return any(sentinel in summary for sentinel in _LEGACY_SENTINELS)


# ── Public entry point ──────────────────────────────────────────────────────


def clamp_score(score: int) -> int:
    return max(0, min(100, score))


def assess(
    snapshot: RepositorySnapshot, roast_mode: bool = False, *, after_outage: bool = False
) -> AssessmentResult:
    """Grade *snapshot* with the fixed rule set.

    *after_outage* marks a run that stands in for failed generative
    producers; only then does the summary carry the outage sentinel.
    """
    tally = _Tally()
    for criterion in _CRITERIA:
        criterion(snapshot, tally)

    if tally.score < QUALITY_REVIEW_BELOW:
        tally.roadmap.append(CODE_QUALITY_REVIEW)
    if not _mentions_install_steps(snapshot.readme):
        tally.roadmap.append(IMPROVE_DOCS)

    score = clamp_score(tally.score)
    return AssessmentResult(
        score=score,
        level=Level.from_score(score),
        summary=build_summary(
            score,
            roast_mode=roast_mode,
            has_tests=snapshot.has_tests,
            has_readme=bool(snapshot.readme),
            after_outage=after_outage,
        ),
        strengths=tuple(tally.strengths),
        weaknesses=tuple(tally.weaknesses),
        roadmap=tuple(tally.roadmap),
        signals=signals_for(snapshot),
    )
