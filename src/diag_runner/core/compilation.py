"""Compilation: the parsed form of one project that analyzers inspect.

Building a compilation reads and parses every document of a project.
Syntax errors do not fail the build; they become compiler diagnostics
(rule ``PY0001``) that sit next to the analyzer output and are dropped by
the orchestrator unless some analyzer claims that rule id.
"""

from __future__ import annotations

import ast
import bisect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, Sequence

from diag_runner.errors import AnalysisComputationError
from diag_runner.model import Severity
from diag_runner.model.diagnostic import Diagnostic

if TYPE_CHECKING:
    from diag_runner.analyzers import AnalyzerDescriptor
    from diag_runner.core.solution import Project

logger = logging.getLogger(__name__)

SYNTAX_ERROR_RULE_ID = "PY0001"


@dataclass(frozen=True)
class Document:
    """One source file: its text, parse tree and display path."""

    path: Path
    display_path: str
    text: str
    tree: ast.Module | None = None
    _line_starts: tuple[int, ...] = field(default=(), repr=False, compare=False)

    @classmethod
    def parse(cls, path: Path, display_path: str, text: str) -> tuple[Document, SyntaxError | None]:
        starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                starts.append(i + 1)
        try:
            tree = ast.parse(text, filename=display_path)
        except SyntaxError as e:
            return cls(path, display_path, text, None, tuple(starts)), e
        return cls(path, display_path, text, tree, tuple(starts)), None

    def offset_of(self, line: int, column: int = 0) -> int:
        """Offset of 1-based *line* plus 0-based *column*, added as given."""
        if not self._line_starts or line < 1:
            return 0
        index = min(line, len(self._line_starts)) - 1
        return self._line_starts[index] + column

    def position_of(self, offset: int) -> tuple[int, int]:
        """Inverse of ``offset_of``: ``(line, column)``."""
        index = bisect.bisect_right(self._line_starts, offset) - 1
        index = max(index, 0)
        return index + 1, offset - self._line_starts[index]

    def walk(self) -> Iterator[ast.AST]:
        if self.tree is None:
            return iter(())
        return ast.walk(self.tree)

    def diagnostic(
        self,
        rule_id: str,
        severity: Severity,
        message: str,
        node: ast.AST | None = None,
    ) -> Diagnostic:
        if node is None or not hasattr(node, "lineno"):
            return Diagnostic(
                rule_id=rule_id,
                severity=severity,
                message=message,
                file_path=self.display_path,
            )
        line = node.lineno
        column = getattr(node, "col_offset", 0) or 0
        return Diagnostic(
            rule_id=rule_id,
            severity=severity,
            message=message,
            file_path=self.display_path,
            start_offset=self.offset_of(line, column),
            line=line,
            column=column,
        )


@dataclass(frozen=True)
class Compilation:
    """All documents of one project plus the compiler's own diagnostics."""

    project_name: str
    documents: tuple[Document, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    def with_analyzers(self, analyzers: Iterable[AnalyzerDescriptor]) -> CompilationWithAnalyzers:
        return CompilationWithAnalyzers(self, tuple(analyzers))


@dataclass(frozen=True)
class CompilationWithAnalyzers:
    compilation: Compilation
    analyzers: tuple[AnalyzerDescriptor, ...]

    def get_analyzer_diagnostics(self) -> list[Diagnostic]:
        results: list[Diagnostic] = []
        for descriptor in self.analyzers:
            analyzer = descriptor.instance
            try:
                results.extend(analyzer.analyze(self.compilation))
            except Exception as e:
                raise AnalysisComputationError(
                    f"Analyzer '{analyzer.id}' failed on project "
                    f"'{self.compilation.project_name}': {e}",
                    project_name=self.compilation.project_name,
                ) from e
        return results

    def get_all_diagnostics(self) -> list[Diagnostic]:
        """Compiler diagnostics followed by every analyzer's diagnostics."""
        return list(self.compilation.diagnostics) + self.get_analyzer_diagnostics()


def _syntax_diagnostic(document: Document, error: SyntaxError) -> Diagnostic:
    line = error.lineno or 1
    column = max((error.offset or 1) - 1, 0)
    return Diagnostic(
        rule_id=SYNTAX_ERROR_RULE_ID,
        severity=Severity.ERROR,
        message=error.msg,
        file_path=document.display_path,
        start_offset=document.offset_of(line, column),
        line=line,
        column=column,
    )


def compile_documents(project_name: str, root: Path, files: Sequence[Path]) -> Compilation:
    """Read and parse *files*; display paths are relative to *root*.

    Raises:
        AnalysisComputationError: If a document cannot be read or decoded.
    """
    documents: list[Document] = []
    diagnostics: list[Diagnostic] = []
    for path in files:
        try:
            display = path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            display = path.resolve().as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise AnalysisComputationError(
                f"Cannot compile project '{project_name}': failed to read '{display}': {e}",
                project_name=project_name,
            ) from e
        document, error = Document.parse(path, display, text)
        if error is not None:
            logger.debug("Syntax error in %s: %s", display, error.msg)
            diagnostics.append(_syntax_diagnostic(document, error))
        documents.append(document)
    return Compilation(project_name, tuple(documents), tuple(diagnostics))


def compile_project(project: Project) -> Compilation:
    return compile_documents(project.name, project.root, project.documents)
