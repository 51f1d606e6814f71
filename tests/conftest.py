"""Shared fixtures for the diag_runner test-suite."""

from __future__ import annotations

import io
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from rich.console import Console

from diag_runner.analyzers import Analyzer, AnalyzerDescriptor, RuleDescriptor
from diag_runner.core.config import ReportingConfig
from diag_runner.core.reporter import Reporter
from diag_runner.model import Severity
from diag_runner.model.diagnostic import Diagnostic

FIXTURES = Path(__file__).resolve().parent / "fixtures"
PLUGINS = FIXTURES / "plugins"
SHOP = FIXTURES / "solutions" / "shop"


def diag(
    rule_id: str,
    *,
    severity: Severity = Severity.WARNING,
    path: str | None = "a.py",
    offset: int | None = 0,
    message: str = "msg",
) -> Diagnostic:
    return Diagnostic(
        rule_id=rule_id,
        severity=severity,
        message=message,
        file_path=path,
        start_offset=offset,
        line=1 if path else None,
        column=offset if path else None,
    )


@dataclass
class FakeProject:
    """Project handle returning canned diagnostics.

    ``delay`` makes completion order differ from solution order; ``error``
    is raised instead of returning.
    """

    name: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    delay: float = 0.0
    error: BaseException | None = None
    started: threading.Event = field(default_factory=threading.Event)
    calls: int = 0

    def compute_diagnostics(self, analyzers):
        self.calls += 1
        self.started.set()
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.diagnostics)


class StaticAnalyzer(Analyzer):
    """Analyzer that only declares rules; FakeProject supplies the output."""

    def __init__(self, *rule_ids: str) -> None:
        self._rules = tuple(RuleDescriptor(r, r) for r in rule_ids)

    @property
    def supported_rules(self):  # type: ignore[override]
        return self._rules

    def analyze(self, compilation):
        return []


def descriptors(*rule_ids: str) -> list[AnalyzerDescriptor]:
    return [AnalyzerDescriptor.of(StaticAnalyzer(*rule_ids))] if rule_ids else []


class CapturingReporter(Reporter):
    """Reporter writing to in-memory consoles and recording every call."""

    def __init__(self, config: ReportingConfig | None = None) -> None:
        self.out = io.StringIO()
        self.err = io.StringIO()
        super().__init__(
            config or ReportingConfig(print_to_console=True),
            console=Console(file=self.out, highlight=False, soft_wrap=True, width=200),
            error_console=Console(file=self.err, highlight=False, soft_wrap=True, width=200),
        )
        self.reported: list[tuple[str, tuple[Diagnostic, ...]]] = []
        self.failures: list[str] = []
        self._calls_lock = threading.Lock()

    def report(self, project, diagnostics) -> None:
        with self._calls_lock:
            self.reported.append((project.name, tuple(diagnostics)))
        super().report(project, diagnostics)

    def report_failure(self, project, error) -> None:
        with self._calls_lock:
            self.failures.append(project.name)
        super().report_failure(project, error)


@pytest.fixture()
def reporter() -> CapturingReporter:
    return CapturingReporter()
