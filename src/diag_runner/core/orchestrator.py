"""Orchestrator: analyzes every project of a solution concurrently.

Each project runs as one task on a thread pool.  A completed task feeds two
independent consumers: the reporter, immediately and in completion order,
and the result list, which is returned in solution order once every task
has finished.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Iterable, Sequence

from diag_runner.analyzers import AnalyzerDescriptor, allowed_rule_ids
from diag_runner.core.config import ReportingConfig, RunConfig
from diag_runner.core.project_analyzer import analyze_project
from diag_runner.core.reporter import Reporter
from diag_runner.model.project_result import ProjectAnalysisResult

if TYPE_CHECKING:
    from diag_runner.core.solution import ProjectHandle
    from diag_runner.model.diagnostic import Diagnostic

logger = logging.getLogger(__name__)

# Poll interval while waiting, so a cancel request is noticed promptly.
_CANCEL_POLL_SECONDS = 0.1


def filter_diagnostics(
    diagnostics: Iterable[Diagnostic],
    allowed: frozenset[str],
) -> tuple[Diagnostic, ...]:
    """Keep only diagnostics whose rule id belongs to a requested analyzer."""
    return tuple(d for d in diagnostics if d.rule_id in allowed)


class Orchestrator:
    """Fan-out / report / aggregate over the projects of one solution."""

    def __init__(
        self,
        analyzers: Iterable[AnalyzerDescriptor],
        config: ReportingConfig,
        *,
        run_config: RunConfig | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self.analyzers = tuple(analyzers)
        self.allowed_rule_ids = allowed_rule_ids(self.analyzers)
        self.config = config
        self.run_config = run_config or RunConfig()
        self.reporter = reporter or Reporter(config)

    def _analyze(self, project: ProjectHandle) -> tuple[Diagnostic, ...]:
        raw = analyze_project(project, self.analyzers)
        return filter_diagnostics(raw, self.allowed_rule_ids)

    def _on_completed(self, project: ProjectHandle, future: Future) -> ProjectAnalysisResult:
        if future.cancelled():
            logger.info("Analysis of '%s' was cancelled", project.name)
            return ProjectAnalysisResult.cancelled(project)
        error = future.exception()
        if error is not None:
            logger.error("Analysis of '%s' failed: %s", project.name, error)
            if self.run_config.isolate_failures:
                self.reporter.report_failure(project, error)
            return ProjectAnalysisResult.failed(project, error)
        diagnostics = future.result()
        self.reporter.report(project, diagnostics)
        return ProjectAnalysisResult(project=project, diagnostics=diagnostics)

    def run(
        self,
        solution: Sequence[ProjectHandle],
        *,
        cancel_event: threading.Event | None = None,
    ) -> list[ProjectAnalysisResult]:
        """Analyze every project of *solution*.

        Returns one result per project, in solution order.

        Raises:
            Exception: The first failing project's error (in solution
                order) when ``run_config.isolate_failures`` is off.
        """
        projects = list(solution)
        if not projects:
            return []

        workers = self.run_config.max_workers or len(projects)
        results: dict[int, ProjectAnalysisResult] = {}

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="diag-runner") as pool:
            pending: dict[Future, int] = {
                pool.submit(self._analyze, project): index
                for index, project in enumerate(projects)
            }
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    for future in pending:
                        future.cancel()
                done, _ = wait(
                    pending,
                    timeout=_CANCEL_POLL_SECONDS if cancel_event is not None else None,
                    return_when=FIRST_COMPLETED,
                )
                for future in done:
                    index = pending.pop(future)
                    results[index] = self._on_completed(projects[index], future)

        ordered = [results[i] for i in range(len(projects))]
        if not self.run_config.isolate_failures:
            for result in ordered:
                if result.error is not None:
                    raise result.error
        return ordered


def run(
    solution: Sequence[ProjectHandle],
    analyzers: Iterable[AnalyzerDescriptor],
    config: ReportingConfig,
    *,
    run_config: RunConfig | None = None,
    reporter: Reporter | None = None,
    cancel_event: threading.Event | None = None,
) -> list[ProjectAnalysisResult]:
    """Module-level shorthand for ``Orchestrator(...).run(solution)``."""
    orchestrator = Orchestrator(analyzers, config, run_config=run_config, reporter=reporter)
    return orchestrator.run(solution, cancel_event=cancel_event)
