"""Exception hierarchy for diag_runner."""

from __future__ import annotations


class DiagRunnerError(Exception):
    """Base exception for all diag_runner errors."""


class ConfigurationError(DiagRunnerError):
    """Invalid user input detected before any analysis starts.

    Bad solution or analyzer paths, wrong file extensions, malformed
    solution manifests.
    """


class PluginLoadError(DiagRunnerError):
    """Raised when an analyzer plugin module cannot be imported."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class AnalysisComputationError(DiagRunnerError):
    """Raised when a project cannot be compiled or an analyzer fails on it.

    Attributes:
        project_name: Display name of the project being analyzed.
    """

    def __init__(self, message: str, project_name: str = "") -> None:
        super().__init__(message)
        self.project_name = project_name
