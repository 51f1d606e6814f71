"""Enums shared across the model, the analyzers and the reporter."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Diagnostic severity, ordered from least to most severe."""

    HIDDEN = "hidden"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
