"""Document discovery: find Python files of a project."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

# Default exclusion prefixes (relative to the project root).
_DEFAULT_EXCLUDES = frozenset(
    {
        ".git",
        ".github",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
        "dist",
        "build",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
    }
)

# Marker files that make a directory a project of its own.
PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg")


def is_project_dir(path: Path) -> bool:
    return any((path / marker).is_file() for marker in PROJECT_MARKERS)


def discover_py_files(
    root: Path,
    *,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    skip_dirs: Iterable[Path] = (),
) -> list[Path]:
    """Recursively find ``*.py`` files under *root*.

    Parameters
    ----------
    root:
        Directory to scan.
    include:
        Glob patterns to include.  Default: ``["**/*.py"]``.
    exclude:
        Directory basenames to skip.  Merged with built-in defaults.
    skip_dirs:
        Absolute directories whose contents belong elsewhere (nested
        projects).

    Returns
    -------
    Sorted list of absolute ``Path`` objects.
    """
    skip = _DEFAULT_EXCLUDES | set(exclude or [])
    patterns = include or ["**/*.py"]
    nested = [d.resolve() for d in skip_dirs]

    results: list[Path] = []
    for pat in patterns:
        for p in root.glob(pat):
            # Skip any path whose parents include an excluded directory.
            if any(part in skip for part in p.relative_to(root).parts):
                continue
            if not p.is_file():
                continue
            resolved = p.resolve()
            if any(resolved.is_relative_to(d) for d in nested):
                continue
            results.append(resolved)

    return sorted(set(results))


def discover_project_dirs(root: Path) -> list[Path]:
    """Directories under *root* (root included) that carry a project marker.

    Excluded directories are not descended into.  Sorted by path.
    """
    found: list[Path] = []
    if is_project_dir(root):
        found.append(root.resolve())
    for marker in PROJECT_MARKERS:
        for p in root.rglob(marker):
            if any(part in _DEFAULT_EXCLUDES for part in p.relative_to(root).parts):
                continue
            found.append(p.parent.resolve())
    return sorted(set(found))
