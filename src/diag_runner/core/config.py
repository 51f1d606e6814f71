"""Run and reporting configuration dataclasses."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from diag_runner.errors import ConfigurationError

# Default cap on concurrent project tasks.  Override with the
# DIAG_RUNNER_MAX_WORKERS env var (0 or unset = one worker per project).
MAX_WORKERS_ENV = "DIAG_RUNNER_MAX_WORKERS"


@dataclass(frozen=True)
class ReportingConfig:
    """Where per-project reports go.  Read-only for the whole run."""

    print_to_console: bool = True
    log_file_path: Path | None = None


@dataclass(frozen=True)
class RunConfig:
    """Execution knobs for the orchestrator.

    ``isolate_failures=False`` restores abort-on-first-failure: the run
    still waits for every started task, then re-raises.
    """

    max_workers: int | None = None
    isolate_failures: bool = True

    @classmethod
    def from_env(cls, **overrides) -> RunConfig:
        raw = os.environ.get(MAX_WORKERS_ENV, "")
        try:
            max_workers: int | None = int(raw) if raw else None
        except ValueError:
            raise ConfigurationError(
                f"{MAX_WORKERS_ENV} must be an integer, got {raw!r}"
            ) from None
        if max_workers is not None and max_workers < 0:
            raise ConfigurationError(
                f"{MAX_WORKERS_ENV} must not be negative, got {raw!r}"
            )
        if max_workers == 0:
            max_workers = None
        values = {"max_workers": max_workers}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
