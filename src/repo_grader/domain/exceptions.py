"""Domain exception hierarchy.

Acquisition errors map to HTTP status codes at the interface layer and are
the only failures a caller ever sees.  Producer errors never leave the
orchestrator: it logs them and moves on to the next producer.
"""

from __future__ import annotations


class RepoGraderError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRepositoryIdentifierError(RepoGraderError):
    """The supplied identifier is neither a GitHub URL nor ``owner/repo``."""


# ── Acquisition errors ──────────────────────────────────────────────────────


class RepositoryNotFoundError(RepoGraderError):
    """The repository does not exist or is not accessible (404)."""


class RepositoryAccessDeniedError(RepoGraderError):
    """Access to the repository was denied (403)."""


class EmptyRepositoryError(RepoGraderError):
    """The repository exists but has no files to assess."""


class GitHubRateLimitError(RepoGraderError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class AcquisitionError(RepoGraderError):
    """Transport failure or unexpected response while building a snapshot."""


# ── Producer errors ─────────────────────────────────────────────────────────


class ProducerError(RepoGraderError):
    """A generative producer failed to return a usable payload."""


class InvalidAssessmentError(ProducerError):
    """The producer's payload is not a structurally valid assessment."""
