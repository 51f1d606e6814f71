"""diag_runner: run analyzer plugins across every project of a solution."""

__all__ = [
    "__version__",
    "analyze_solution",
    "build_run_report",
    # Core
    "Orchestrator",
    "Reporter",
    "ReportingConfig",
    "RunConfig",
    "run",
    # Model
    "Diagnostic",
    "Severity",
    "ProjectAnalysisResult",
    "ProjectStatus",
    # Analyzers
    "Analyzer",
    "AnalyzerDescriptor",
    "RuleDescriptor",
    "load_analyzers",
    # Exceptions
    "DiagRunnerError",
    "ConfigurationError",
    "PluginLoadError",
    "AnalysisComputationError",
]
__version__ = "0.1.0"

from diag_runner.analyzers import Analyzer, AnalyzerDescriptor, RuleDescriptor  # noqa: E402
from diag_runner.analyzers.loader import load_analyzers  # noqa: E402
from diag_runner.api import analyze_solution, build_run_report  # noqa: E402
from diag_runner.core.config import ReportingConfig, RunConfig  # noqa: E402
from diag_runner.core.orchestrator import Orchestrator, run  # noqa: E402
from diag_runner.core.reporter import Reporter  # noqa: E402
from diag_runner.errors import (  # noqa: E402
    AnalysisComputationError,
    ConfigurationError,
    DiagRunnerError,
    PluginLoadError,
)
from diag_runner.model import Severity  # noqa: E402
from diag_runner.model.diagnostic import Diagnostic  # noqa: E402
from diag_runner.model.project_result import ProjectAnalysisResult, ProjectStatus  # noqa: E402
