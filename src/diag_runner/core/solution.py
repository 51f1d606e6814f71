"""Solution loader: turn a solution path into an ordered list of projects.

Two inputs are accepted:

* a manifest file (``.toml``, ``.yaml`` or ``.yml``)::

      name = "shop"

      [[projects]]
      name = "api"
      path = "services/api"
      exclude = ["migrations"]

      [[projects]]
      path = "libs/common"        # name defaults to the directory name

* a directory: every directory carrying ``pyproject.toml``, ``setup.py``
  or ``setup.cfg`` is a project, sorted by path.  When there is none the
  directory itself is the only project.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

import yaml

from diag_runner.core.compilation import Compilation, compile_project
from diag_runner.core.discover import discover_project_dirs, discover_py_files
from diag_runner.errors import ConfigurationError

if TYPE_CHECKING:
    from diag_runner.analyzers import AnalyzerDescriptor
    from diag_runner.model.diagnostic import Diagnostic

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = (".toml", ".yaml", ".yml")


@runtime_checkable
class ProjectHandle(Protocol):
    """What the orchestrator needs from a project."""

    name: str

    def compute_diagnostics(self, analyzers: Sequence[AnalyzerDescriptor]) -> Sequence[Diagnostic]:
        ...


@dataclass(frozen=True)
class Project:
    """A project on disk: a root directory and its Python documents."""

    name: str
    root: Path
    documents: tuple[Path, ...] = ()

    def get_compilation(self) -> Compilation:
        return compile_project(self)

    def compute_diagnostics(self, analyzers: Sequence[AnalyzerDescriptor]) -> list[Diagnostic]:
        return self.get_compilation().with_analyzers(analyzers).get_all_diagnostics()


@dataclass(frozen=True)
class Solution:
    name: str
    path: Path
    projects: tuple[Project, ...] = field(default=())

    @property
    def document_count(self) -> int:
        return sum(len(p.documents) for p in self.projects)


# ── manifests ───────────────────────────────────────────────────────


def _read_manifest(path: Path) -> dict[str, Any]:
    try:
        if path.suffix == ".toml":
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        else:
            with path.open(encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Malformed solution manifest '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Solution manifest '{path}' must be a mapping")
    return data


def _str_list(entry: dict[str, Any], key: str, manifest: Path) -> list[str] | None:
    value = entry.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' in '{manifest}' must be a list of strings")
    return value


def _load_manifest(path: Path) -> Solution:
    data = _read_manifest(path)
    entries = data.get("projects")
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(f"Solution manifest '{path}' declares no projects")

    base = path.parent
    projects: list[Project] = []
    seen: set[str] = set()
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or not isinstance(entry.get("path"), str):
            raise ConfigurationError(f"Project #{i + 1} in '{path}' needs a 'path'")
        root = (base / entry["path"]).resolve()
        if not root.is_dir():
            raise ConfigurationError(f"Project directory '{root}' does not exist")
        name = str(entry.get("name") or root.name)
        if name in seen:
            raise ConfigurationError(f"Duplicate project name '{name}' in '{path}'")
        seen.add(name)
        files = discover_py_files(
            root,
            include=_str_list(entry, "include", path),
            exclude=_str_list(entry, "exclude", path),
        )
        projects.append(Project(name=name, root=root, documents=tuple(files)))

    return Solution(name=str(data.get("name") or path.stem), path=path, projects=tuple(projects))


# ── directories ─────────────────────────────────────────────────────


def _project_name(directory: Path) -> str:
    pyproject = directory / "pyproject.toml"
    if pyproject.is_file():
        try:
            with pyproject.open("rb") as fh:
                name = tomllib.load(fh).get("project", {}).get("name")
        except tomllib.TOMLDecodeError:
            logger.warning("Ignoring malformed %s", pyproject)
            name = None
        if isinstance(name, str) and name:
            return name
    return directory.name


def _load_directory(path: Path) -> Solution:
    root = path.resolve()
    project_dirs = discover_project_dirs(root) or [root]
    projects: list[Project] = []
    for directory in project_dirs:
        nested = [d for d in project_dirs if d != directory and d.is_relative_to(directory)]
        files = discover_py_files(directory, skip_dirs=nested)
        projects.append(Project(name=_project_name(directory), root=directory, documents=tuple(files)))
    return Solution(name=root.name, path=root, projects=tuple(projects))


def load_solution(path: str | Path) -> Solution:
    """Load the solution at *path*.

    Raises:
        ConfigurationError: If *path* does not exist, is a file without a
            manifest suffix, or the manifest is malformed.
    """
    p = Path(path)
    if p.is_dir():
        solution = _load_directory(p)
    elif p.suffix not in MANIFEST_SUFFIXES:
        raise ConfigurationError(f"'{p}' is not a valid solution file.")
    elif not p.is_file():
        raise ConfigurationError(f"Provided solution file ('{p}') does not exist.")
    else:
        solution = _load_manifest(p.resolve())
    logger.debug(
        "Solution '%s': %s",
        solution.name,
        ", ".join(f"{pr.name} ({len(pr.documents)} documents)" for pr in solution.projects),
    )
    return solution
