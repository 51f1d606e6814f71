"""ProjectAnalysisResult: per-project outcome of one run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from diag_runner.model.diagnostic import Diagnostic, sort_diagnostics

if TYPE_CHECKING:
    from diag_runner.core.solution import ProjectHandle


class ProjectStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class ProjectAnalysisResult:
    """Filtered diagnostics for one project, or the reason there are none.

    ``diagnostics`` keeps the order the analysis produced them in; the
    reporter applies the deterministic sort at render time.
    """

    project: ProjectHandle
    diagnostics: tuple[Diagnostic, ...] = ()
    status: ProjectStatus = ProjectStatus.OK
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.status is ProjectStatus.OK

    @property
    def project_name(self) -> str:
        return self.project.name

    @classmethod
    def failed(cls, project: ProjectHandle, error: BaseException) -> ProjectAnalysisResult:
        return cls(project=project, status=ProjectStatus.FAILED, error=error)

    @classmethod
    def cancelled(cls, project: ProjectHandle) -> ProjectAnalysisResult:
        return cls(project=project, status=ProjectStatus.CANCELLED)

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "project": self.project.name,
            "status": self.status.value,
            "diagnostic_count": len(self.diagnostics),
            "diagnostics": [x.to_dict() for x in sort_diagnostics(self.diagnostics)],
        }
        if self.error is not None:
            d["error"] = f"{type(self.error).__name__}: {self.error}"
        return d
