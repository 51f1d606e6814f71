"""Project analyzer: full, unfiltered diagnostics for a single project."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from diag_runner.analyzers import AnalyzerDescriptor
    from diag_runner.core.solution import ProjectHandle
    from diag_runner.model.diagnostic import Diagnostic

logger = logging.getLogger(__name__)


def analyze_project(
    project: ProjectHandle,
    analyzers: Sequence[AnalyzerDescriptor],
) -> list[Diagnostic]:
    """Run every analyzer against *project*.

    Returns compiler and analyzer diagnostics alike; filtering by rule id
    is the orchestrator's job.
    """
    logger.info("Running analysis for '%s'...", project.name)
    diagnostics = list(project.compute_diagnostics(analyzers))
    logger.info("Done running analysis for '%s'", project.name)
    return diagnostics
