"""Dependency manifest parsing.

Supports the manifests :mod:`file_selection` looks for.  Parsing is lenient:
malformed content yields an empty mapping instead of an error, since a
broken manifest simply means "no package management detected".
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from typing import Any, Callable

logger = logging.getLogger(__name__)

_REQUIREMENT_RE = re.compile(
    r"^\s*(?P<name>[A-Za-z0-9][A-Za-z0-9._\-]*)\s*(?:\[[^\]]*\])?\s*(?P<rest>.*)$"
)
# What may follow a distribution name: nothing, a version clause, a marker
# or a direct reference (``name @ url``).
_REQUIREMENT_TAIL_RE = re.compile(r"^(?:$|;|@|\(|[<>=!~])")
_GO_REQUIRE_RE = re.compile(r"^\s*([^\s]+)\s+(v[^\s]+)")


def _split_requirement(line: str) -> tuple[str, str] | None:
    """Return ``(name, spec)`` for a PEP 508 line, or None for anything else.

    Bare URLs and VCS references (``git+https://...``) carry no name and are
    skipped.
    """
    match = _REQUIREMENT_RE.match(line)
    if not match or not _REQUIREMENT_TAIL_RE.match(match["rest"]):
        return None
    rest = match["rest"]
    if rest.startswith("@"):
        return match["name"], rest[1:].split(";", maxsplit=1)[0].strip() or "*"
    spec = rest.split(";", maxsplit=1)[0].strip()
    return match["name"], spec or "*"


def _toml_table_versions(table: Any) -> dict[str, str]:
    if not isinstance(table, dict):
        return {}
    deps: dict[str, str] = {}
    for name, value in table.items():
        if isinstance(value, str):
            deps[name] = value
        elif isinstance(value, dict):
            deps[name] = str(value.get("version", "*"))
        else:
            deps[name] = "*"
    return deps


def parse_package_json(content: str) -> dict[str, str]:
    data = json.loads(content)
    if not isinstance(data, dict):
        return {}
    deps: dict[str, str] = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            deps.update({str(k): str(v) for k, v in section.items()})
    return deps


def parse_requirements_txt(content: str) -> dict[str, str]:
    deps: dict[str, str] = {}
    for raw in content.splitlines():
        line = raw.split("#", maxsplit=1)[0].strip()
        if not line or line.startswith("-"):
            continue
        parsed = _split_requirement(line)
        if parsed:
            deps[parsed[0]] = parsed[1]
    return deps


def parse_pyproject_toml(content: str) -> dict[str, str]:
    data = tomllib.loads(content)
    deps: dict[str, str] = {}

    project = data.get("project")
    requirements = project.get("dependencies") if isinstance(project, dict) else None
    if isinstance(requirements, list):
        for requirement in requirements:
            parsed = _split_requirement(str(requirement))
            if parsed:
                deps[parsed[0]] = parsed[1]

    tool = data.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, dict) else None
    if not isinstance(poetry, dict):
        return deps
    poetry_deps = _toml_table_versions(poetry.get("dependencies"))
    poetry_deps.pop("python", None)
    deps.update(poetry_deps)
    return deps


def parse_cargo_toml(content: str) -> dict[str, str]:
    data = tomllib.loads(content)
    deps = _toml_table_versions(data.get("dependencies"))
    deps.update(_toml_table_versions(data.get("dev-dependencies")))
    return deps


def parse_go_mod(content: str) -> dict[str, str]:
    deps: dict[str, str] = {}
    in_block = False
    for raw in content.splitlines():
        line = raw.split("//", maxsplit=1)[0].strip()
        if line.startswith("require ("):
            in_block = True
            continue
        if in_block and line == ")":
            in_block = False
            continue
        if line.startswith("require "):
            line = line[len("require ") :]
        elif not in_block:
            continue
        match = _GO_REQUIRE_RE.match(line)
        if match:
            deps[match[1]] = match[2]
    return deps


_PARSERS: dict[str, Callable[[str], dict[str, str]]] = {
    "package.json": parse_package_json,
    "requirements.txt": parse_requirements_txt,
    "pyproject.toml": parse_pyproject_toml,
    "Cargo.toml": parse_cargo_toml,
    "go.mod": parse_go_mod,
}


def parse_dependencies(path: str, content: str) -> dict[str, str]:
    """Return ``{package: version_spec}`` for the manifest at *path*."""
    parser = _PARSERS.get(path.rsplit("/", maxsplit=1)[-1])
    if parser is None or not content:
        return {}
    try:
        return parser(content)
    except (ValueError, TypeError, AttributeError) as exc:
        logger.debug("Could not parse manifest %s: %s", path, exc)
        return {}
