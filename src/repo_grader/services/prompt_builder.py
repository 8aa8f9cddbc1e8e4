"""Prompt construction for generative producers.

The system prompt carries the persona directive and the JSON output
contract; the user prompt carries the snapshot, split into sections that
are redacted and then fitted into the token budget.
"""

from __future__ import annotations

import json
import logging

from repo_grader.domain.entities import RepositorySnapshot
from repo_grader.services.security_sentinel import redact_sections
from repo_grader.services.token_budget import BudgetedPrompt, allocate

logger = logging.getLogger(__name__)

# ── Personas ────────────────────────────────────────────────────────────────

STANDARD_PERSONA = (
    "You are a ruthless but helpful Senior Staff Engineer at FAANG. "
    "You are grading a candidate's repository."
)

ROAST_PERSONA = (
    "You are a savage, sarcastic, and funny Senior Principal Engineer who has "
    "seen too much bad code. Roast this repository mercilessly. Make it hurt "
    "but be technically accurate. Use slang, be condescending, but still "
    "provide the structured output."
)


def persona_for(roast_mode: bool) -> str:
    return ROAST_PERSONA if roast_mode else STANDARD_PERSONA


_OUTPUT_CONTRACT = """\
I will provide the file structure, dependency list, README content, and key \
code snippets of a GitHub repository.  Analyze it comprehensively.  Be \
critical but fair.

SCORING CRITERIA (0-100):
- Code Quality & Structure (25 points): clean code, good architecture, file organization
- Documentation (20 points): README quality, code comments, API docs
- Testing & CI/CD (20 points): test coverage, automated workflows, quality gates
- Dependencies & Security (15 points): up-to-date deps, proper package management
- Git Practices (10 points): commit quality, meaningful messages
- Real-world Applicability (10 points): practical use case, completeness, deployment readiness

DEDUCTIONS:
- No tests: -20 points
- No README: -15 points
- Poor commit messages: -10 points
- Outdated dependencies: -10 points
- No CI/CD: -5 points
- Flat file structure: -5 points

Return **only** valid JSON with exactly these keys:

{
  "score": <integer 0-100>,
  "level": "Beginner" | "Intermediate" | "Pro" | "Elite",
  "summary": "<2 sentences, brutal but fair>",
  "strengths": ["<string>", ...],
  "weaknesses": ["<string>", ...],
  "roadmap": [{"title": "<string>", "description": "<string>", "priority": "High" | "Medium" | "Low"}]
}
"""


def build_system_prompt(persona: str) -> str:
    return f"{persona}\n\n{_OUTPUT_CONTRACT}"


# ── User prompt ─────────────────────────────────────────────────────────────

_HEADERS = {
    "metadata": "## Repository",
    "indicators": "## Quality Indicators",
    "dependencies": "## Dependencies",
    "languages": "## Languages",
    "commits": "## Recent Commits",
    "readme": "## README",
    "main_file": "## Main Entry Point",
    "tree": "## File Structure",
}


def _yes_no(flag: bool) -> str:
    return "YES" if flag else "NO"


def _raw_sections(snapshot: RepositorySnapshot) -> dict[str, str]:
    meta = snapshot.metadata
    metadata_lines = [
        f"Name: {snapshot.full_name}",
        f"Description: {meta.description or 'n/a'}",
        f"Primary language: {meta.language or 'n/a'}",
        f"Stars: {meta.stars}  Forks: {meta.forks}  Open issues: {meta.open_issues}",
        f"Size (KB): {meta.size}",
        f"Created: {meta.created_at or 'n/a'}  Updated: {meta.updated_at or 'n/a'}",
    ]
    indicators = [
        f"- Has Tests: {_yes_no(snapshot.has_tests)}",
        f"- Has CI/CD: {_yes_no(snapshot.has_ci)}",
        f"- Has Docker: {_yes_no(snapshot.has_dockerfile)}",
    ]
    commits = [
        f"- {c.message.splitlines()[0] if c.message else ''} ({c.author or 'unknown'})"
        for c in snapshot.commits
    ]

    return {
        "metadata": "\n".join(metadata_lines),
        "indicators": "\n".join(indicators),
        "dependencies": (
            f"{len(snapshot.dependencies)} total\n"
            + json.dumps(dict(snapshot.dependencies), indent=2)
        ),
        "languages": json.dumps(dict(snapshot.languages), indent=2),
        "commits": "\n".join(commits) or "No commits found",
        "readme": snapshot.readme or "NO README FOUND",
        "main_file": snapshot.main_file or "NO MAIN FILE FOUND",
        "tree": f"{len(snapshot.file_tree)} files\n" + "\n".join(snapshot.file_tree),
    }


def assemble(budget: BudgetedPrompt) -> str:
    """Combine non-empty sections into one structured context block."""
    parts: list[str] = []
    for section in budget.sections:
        if not section.content:
            continue
        header = _HEADERS.get(section.name, f"## {section.name.title()}")
        parts.append(f"{header}\n\n{section.content}")
    return "\n\n---\n\n".join(parts)


def build_user_prompt(snapshot: RepositorySnapshot, max_tokens: int) -> str:
    """Render *snapshot* as a redacted, budgeted prompt."""
    sections = _raw_sections(snapshot)
    report = redact_sections(
        {name: sections[name] for name in ("readme", "main_file")}
    )
    if report.redactions:
        logger.warning(
            "Redacted %d potential secret(s) from %s", report.redactions, snapshot.full_name
        )
    sections.update(report.sections)

    budgeted = allocate(sections, total_budget=max_tokens)
    logger.debug(
        "Prompt budget for %s: %d / %d tokens",
        snapshot.full_name,
        budgeted.total_tokens,
        budgeted.budget_limit,
    )
    return assemble(budgeted)
