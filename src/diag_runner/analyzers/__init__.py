"""Analyzers inspect a project's compilation and emit diagnostics.

A plugin module defines one or more concrete subclasses of ``Analyzer``.
Each declares the rules it can report through ``supported_rules`` and
implements ``analyze(compilation)``.  The run-time snapshot of an analyzer
(instance plus its rule ids) is an ``AnalyzerDescriptor``.

Example plugin::

    from diag_runner.analyzers import Analyzer, RuleDescriptor
    from diag_runner.model import Severity

    class NoPrintAnalyzer(Analyzer):
        supported_rules = (
            RuleDescriptor("NP001", "print() call", Severity.WARNING),
        )

        def analyze(self, compilation):
            for document in compilation.documents:
                for node in document.walk():
                    ...
"""

from __future__ import annotations

import ast
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterable

from diag_runner.model import Severity
from diag_runner.model.diagnostic import Diagnostic

if TYPE_CHECKING:
    from diag_runner.core.compilation import Compilation, Document


@dataclass(frozen=True, slots=True)
class RuleDescriptor:
    """A rule an analyzer is able to report."""

    rule_id: str
    title: str
    default_severity: Severity = Severity.WARNING


class Analyzer(ABC):
    """Base class for every analyzer plugin."""

    supported_rules: ClassVar[tuple[RuleDescriptor, ...]] = ()

    @property
    def id(self) -> str:
        return type(self).__name__

    @property
    def supported_rule_ids(self) -> frozenset[str]:
        return frozenset(r.rule_id for r in self.supported_rules)

    def rule(self, rule_id: str) -> RuleDescriptor:
        for r in self.supported_rules:
            if r.rule_id == rule_id:
                return r
        raise KeyError(f"{self.id} does not declare rule {rule_id!r}")

    @abstractmethod
    def analyze(self, compilation: Compilation) -> Iterable[Diagnostic]:
        """Return every diagnostic this analyzer finds in *compilation*."""

    def create_diagnostic(
        self,
        rule_id: str,
        message: str,
        *,
        document: Document | None = None,
        node: ast.AST | None = None,
        severity: Severity | None = None,
    ) -> Diagnostic:
        """Build a diagnostic for one of this analyzer's rules.

        The severity defaults to the rule's ``default_severity``.  When
        *document* and *node* are given the location is taken from the
        node's ``lineno`` / ``col_offset``.
        """
        sev = severity if severity is not None else self.rule(rule_id).default_severity
        if document is None:
            return Diagnostic(rule_id=rule_id, severity=sev, message=message)
        return document.diagnostic(rule_id, sev, message, node)


@dataclass(frozen=True, slots=True)
class AnalyzerDescriptor:
    """An instantiated analyzer and the rule ids it supports for this run."""

    instance: Analyzer
    supported_rule_ids: frozenset[str]

    @classmethod
    def of(cls, analyzer: Analyzer) -> AnalyzerDescriptor:
        return cls(instance=analyzer, supported_rule_ids=analyzer.supported_rule_ids)


def allowed_rule_ids(analyzers: Iterable[AnalyzerDescriptor]) -> frozenset[str]:
    """Union of the supported rule ids of every descriptor."""
    ids: set[str] = set()
    for descriptor in analyzers:
        ids |= descriptor.supported_rule_ids
    return frozenset(ids)
