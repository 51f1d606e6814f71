"""
diag_runner.api
===============

Programmatic entrypoints for using diag_runner as a library.

Goals:
  - No argparse / CLI dependencies
  - Deterministic, JSON-friendly report that matches
    ``run_report.schema.json``

Usage::

    from diag_runner.api import analyze_solution

    results, report = analyze_solution("shop.toml", "checks/my_rules.py")
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Iterable, Sequence

from diag_runner.analyzers import AnalyzerDescriptor, allowed_rule_ids
from diag_runner.analyzers.loader import PLUGIN_SUFFIXES, load_analyzers
from diag_runner.contracts.load import validate_instance
from diag_runner.core.config import ReportingConfig, RunConfig
from diag_runner.core.orchestrator import run
from diag_runner.core.reporter import Reporter
from diag_runner.core.solution import Solution, load_solution
from diag_runner.errors import ConfigurationError
from diag_runner.model import Severity
from diag_runner.model.project_result import ProjectAnalysisResult, ProjectStatus

REPORT_SCHEMA = "run_report.schema.json"


def check_plugin_path(path: str | Path) -> Path:
    """Validate an analyzer plugin path before importing it.

    Raises:
        ConfigurationError: Wrong extension or missing file.
    """
    p = Path(path)
    if p.suffix not in PLUGIN_SUFFIXES:
        raise ConfigurationError(f"Provided analyzer '{p}' is not a Python module (.py)")
    if not p.is_file():
        raise ConfigurationError(f"Provided analyzer ('{p}') does not exist.")
    return p


def build_run_report(
    solution_name: str,
    analyzers: Sequence[AnalyzerDescriptor],
    results: Sequence[ProjectAnalysisResult],
) -> dict[str, Any]:
    """Aggregate per-project results into a ``run_report_v1`` dict."""
    by_severity: dict[str, int] = {}
    for result in results:
        for d in result.diagnostics:
            by_severity[d.severity.value] = by_severity.get(d.severity.value, 0) + 1

    return {
        "schema_version": "run_report_v1",
        "solution": solution_name,
        "analyzers": sorted(a.instance.id for a in analyzers),
        "rule_ids": sorted(allowed_rule_ids(analyzers)),
        "summary": {
            "projects_total": len(results),
            "projects_failed": sum(r.status is ProjectStatus.FAILED for r in results),
            "projects_cancelled": sum(r.status is ProjectStatus.CANCELLED for r in results),
            "diagnostics_total": sum(len(r.diagnostics) for r in results),
            "by_severity": {
                s.value: by_severity[s.value] for s in Severity if s.value in by_severity
            },
        },
        "projects": [r.to_dict() for r in results],
    }


def analyze_solution(
    solution: str | Path | Solution,
    analyzers: str | Path | Iterable[AnalyzerDescriptor],
    *,
    config: ReportingConfig | None = None,
    run_config: RunConfig | None = None,
    reporter: Reporter | None = None,
    cancel_event: threading.Event | None = None,
) -> tuple[list[ProjectAnalysisResult], dict[str, Any]]:
    """Load (if needed) and analyze a solution.

    Parameters
    ----------
    solution:
        A solution path (manifest or directory) or a loaded ``Solution``.
    analyzers:
        A plugin path or already-loaded descriptors.
    config:
        Reporting sinks.  Defaults to no console output and no log file.

    Returns
    -------
    ``(results, report_dict)``
        Per-project results in solution order and the schema-validated
        aggregated report.
    """
    if not isinstance(solution, Solution):
        solution = load_solution(solution)
    if isinstance(analyzers, (str, Path)):
        descriptors = load_analyzers(check_plugin_path(analyzers))
    else:
        descriptors = list(analyzers)

    results = run(
        solution.projects,
        descriptors,
        config or ReportingConfig(print_to_console=False),
        run_config=run_config,
        reporter=reporter,
        cancel_event=cancel_event,
    )
    report = build_run_report(solution.name, descriptors, results)
    validate_instance(report, REPORT_SCHEMA)
    return results, report
