"""sheetlint - configuration-driven style-sheet linter core."""
from __future__ import annotations

from sheetlint.constants import Severity, __version__
from sheetlint.context import ResultContext
from sheetlint.diagnostics import Diagnostic, Position
from sheetlint.errors import ConfigurationError
from sheetlint.rules.registry import RuleRegistry, default_registry
from sheetlint.runner import lint

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "Position",
    "ResultContext",
    "RuleRegistry",
    "Severity",
    "__version__",
    "default_registry",
    "lint",
]
