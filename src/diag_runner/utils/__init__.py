"""Shared utilities for diag_runner."""

from diag_runner.utils.exit_codes import ExitCode
from diag_runner.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dump",
    "stable_json_dumps",
]
