from __future__ import annotations

import pytest

from repo_grader.domain.exceptions import InvalidRepositoryIdentifierError
from repo_grader.domain.value_objects import RepositoryIdentifier


@pytest.mark.parametrize(
    "raw",
    [
        "https://github.com/psf/requests",
        "https://github.com/psf/requests/",
        "https://github.com/psf/requests.git",
        "http://www.github.com/psf/requests",
        "github.com/psf/requests",
        "https://github.com/psf/requests/tree/main/src",
        "psf/requests",
        "  psf/requests  ",
    ],
)
def test_parses_supported_forms(raw):
    repo = RepositoryIdentifier.parse(raw)
    assert (repo.owner, repo.repo) == ("psf", "requests")
    assert repo.full_name == "psf/requests"


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "requests",
        "https://gitlab.com/psf/requests",
        "https://github.com/psf",
        "github.com/psf",
        "not a url at all",
    ],
)
def test_rejects_invalid(raw):
    with pytest.raises(InvalidRepositoryIdentifierError):
        RepositoryIdentifier.parse(raw)
