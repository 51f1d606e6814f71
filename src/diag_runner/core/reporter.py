"""Reporter: serialized console and log-file output of project diagnostics.

Both sinks are shared by every project of a run (and by every reporter
instance in the process), so each is guarded by its own module-level lock
held for a whole project batch.  A batch therefore never interleaves with
another project's lines, and the two sinks never wait on each other.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from rich.console import Console
from rich.text import Text

from diag_runner.core.config import ReportingConfig
from diag_runner.model import Severity
from diag_runner.model.diagnostic import Diagnostic, sort_diagnostics

if TYPE_CHECKING:
    from diag_runner.core.solution import ProjectHandle

logger = logging.getLogger(__name__)

_CONSOLE_LOCK = threading.Lock()
_LOG_LOCK = threading.Lock()

CAPTION_STYLE = "green"

# Hidden diagnostics are never printed.
SEVERITY_STYLES: dict[Severity, str | None] = {
    Severity.HIDDEN: None,
    Severity.INFO: "white",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


def caption(project: ProjectHandle, count: int) -> str:
    return f"Found {count} diagnostic in project '{project.name}'"


def render_log_block(project: ProjectHandle, diagnostics: Sequence[Diagnostic]) -> str:
    """Header plus one line per diagnostic, newline-terminated."""
    lines = [caption(project, len(diagnostics))]
    lines.extend(d.render() for d in sort_diagnostics(diagnostics))
    return "\n".join(lines) + "\n"


class Reporter:
    """Renders one project's filtered diagnostics to the configured sinks."""

    def __init__(
        self,
        config: ReportingConfig,
        *,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        self.config = config
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.error_console = error_console or Console(stderr=True, highlight=False, soft_wrap=True)

    def report(self, project: ProjectHandle, diagnostics: Sequence[Diagnostic]) -> None:
        ordered = sort_diagnostics(diagnostics)
        if self.config.print_to_console:
            self._print(project, ordered)
        if self.config.log_file_path is not None:
            self._append_log(self.config.log_file_path, project, ordered)

    def report_failure(self, project: ProjectHandle, error: BaseException) -> None:
        with _CONSOLE_LOCK:
            self.error_console.print(
                Text(f"Analysis of project '{project.name}' failed: {error}", style="red")
            )

    # ── sinks ───────────────────────────────────────────────────────

    def _print(self, project: ProjectHandle, ordered: list[Diagnostic]) -> None:
        with _CONSOLE_LOCK:
            self.console.print(Text(caption(project, len(ordered)), style=CAPTION_STYLE))
            for diagnostic in ordered:
                style = SEVERITY_STYLES[diagnostic.severity]
                if style is None:
                    continue
                self.console.print(Text(diagnostic.render(), style=style))

    def _append_log(self, path: Path, project: ProjectHandle, ordered: list[Diagnostic]) -> None:
        with _LOG_LOCK:
            try:
                # Surrogate-escaped file names are written as \udcXX escapes.
                with path.open("a", encoding="utf-8", errors="backslashreplace") as fh:
                    fh.write(render_log_block(project, ordered))
            except Exception as e:
                logger.error("Failed to write log file '%s': %s", path, e)
                with _CONSOLE_LOCK:
                    self.error_console.print(
                        Text(f"Failed to write a log file:\n{e}", style="red")
                    )
