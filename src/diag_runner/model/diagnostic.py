"""Diagnostic: one finding produced by an analyzer or by the compiler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from . import Severity


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Immutable diagnostic value.

    ``start_offset`` is the 0-based offset of the reported node inside
    ``file_path``: characters up to the node's line, plus the ``ast``
    ``col_offset`` within that line, which counts UTF-8 bytes.  ``line``
    (1-based) and ``column`` (0-based, also bytes) are carried along for
    display only.
    """

    rule_id: str
    severity: Severity
    message: str
    file_path: str | None = None
    start_offset: int | None = None
    line: int | None = None
    column: int | None = None

    # ── ordering ────────────────────────────────────────────────────

    def sort_key(self) -> tuple[str, str, int, str, str]:
        """Report ordering: rule id, then path (unknown first), then offset.

        Severity and message break remaining ties so equal inputs always
        render identically, whatever order an analyzer yielded them in.
        """
        return (
            self.rule_id,
            self.file_path or "",
            self.start_offset if self.start_offset is not None else -1,
            self.severity.value,
            self.message,
        )

    # ── rendering ───────────────────────────────────────────────────

    def render(self) -> str:
        """One-line text form, e.g. ``app.py(3,4): warning X001: message``."""
        text = f"{self.severity.value} {self.rule_id}: {self.message}"
        if not self.file_path:
            return text
        if self.line is not None:
            return f"{self.file_path}({self.line},{(self.column or 0) + 1}): {text}"
        return f"{self.file_path}: {text}"

    def __str__(self) -> str:
        return self.render()

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.file_path is not None:
            d["location"] = {
                "path": self.file_path,
                "start_offset": self.start_offset,
                "line": self.line,
                "column": self.column,
            }
        return d


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Return *diagnostics* in deterministic report order."""
    return sorted(diagnostics, key=Diagnostic.sort_key)
