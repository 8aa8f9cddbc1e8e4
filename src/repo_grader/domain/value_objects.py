"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_grader.domain.exceptions import InvalidRepositoryIdentifierError

_GITHUB_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?(?:/.*)?$"
)
_SHORTHAND_RE = re.compile(r"^(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+?)(?:\.git)?/?$")


@dataclass(frozen=True, slots=True)
class RepositoryIdentifier:
    """Validated reference to a GitHub repository.

    Accepts a full URL (``https://github.com/psf/requests``, with or without
    scheme, ``.git`` suffix or trailing ``/tree/main``-style segments) or the
    ``owner/repo`` shorthand.
    """

    owner: str
    repo: str
    raw: str

    @classmethod
    def parse(cls, text: str) -> RepositoryIdentifier:
        """Parse and validate a raw identifier string."""
        raw = text.strip()
        match = _GITHUB_URL_RE.match(raw) or _SHORTHAND_RE.match(raw)
        if (
            not match
            or match["repo"] in (".", "..")
            or match["owner"].lower() in ("github.com", "www.github.com")
        ):
            raise InvalidRepositoryIdentifierError(
                f"Invalid repository identifier: '{raw}'. "
                "Expected https://github.com/<owner>/<repo> or <owner>/<repo>"
            )
        return cls(owner=match["owner"], repo=match["repo"], raw=raw)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
