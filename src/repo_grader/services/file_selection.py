"""File selection — pick the README, manifest and entry point from a tree."""

from __future__ import annotations

from typing import Sequence

from repo_grader.domain.entities import FileNode

README_NAMES: tuple[str, ...] = (
    "README.md",
    "readme.md",
    "README.rst",
    "README.txt",
    "readme.txt",
    "README",
)

# Checked in order; the first one present wins.
MANIFEST_NAMES: tuple[str, ...] = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "Cargo.toml",
    "go.mod",
)

ENTRY_POINT_PATHS: tuple[str, ...] = (
    "src/index.tsx",
    "src/main.tsx",
    "src/App.tsx",
    "src/index.js",
    "src/main.js",
    "src/App.js",
    "index.js",
    "main.py",
    "app.py",
    "manage.py",
    "main.go",
    "src/main.rs",
    "src/lib.rs",
)

_SRC_FALLBACK_EXTENSIONS: tuple[str, ...] = (".tsx", ".js", ".ts", ".py")

SKIP_DIRS: frozenset[str] = frozenset(
    {"node_modules", "vendor", "dist", "build", ".venv", "venv", "__pycache__"}
)


def _filename(path: str) -> str:
    return path.rsplit("/", maxsplit=1)[-1]


def _skipped(path: str) -> bool:
    return any(part in SKIP_DIRS for part in path.split("/")[:-1])


def blob_paths(nodes: Sequence[FileNode]) -> list[str]:
    """Return the paths of file (blob) nodes, in tree order."""
    return [node.path for node in nodes if node.type == "blob"]


def _shallowest(paths: Sequence[str], names: Sequence[str]) -> str | None:
    matches = [p for p in paths if _filename(p) in names and not _skipped(p)]
    if not matches:
        return None
    return min(matches, key=lambda p: (p.count("/"), names.index(_filename(p))))


def find_readme(paths: Sequence[str]) -> str | None:
    """Prefer a root-level README over nested ones."""
    return _shallowest(paths, README_NAMES)


def find_manifest(paths: Sequence[str]) -> str | None:
    """Return the shallowest dependency manifest; ties go to the earlier name."""
    return _shallowest(paths, MANIFEST_NAMES)


def find_entry_point(paths: Sequence[str]) -> str | None:
    present = set(paths)
    for candidate in ENTRY_POINT_PATHS:
        if candidate in present:
            return candidate
    for path in paths:
        if path.startswith("src/") and path.endswith(_SRC_FALLBACK_EXTENSIONS):
            return path
    return None
