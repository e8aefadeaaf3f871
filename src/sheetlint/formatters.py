"""Output formatters for sheetlint diagnostics."""
from __future__ import annotations

import json
from enum import Enum
from typing import Protocol

from sheetlint.diagnostics import DiagnosticCollection


class OutputFormat(Enum):
    """Output format options."""

    TEXT = "text"
    JSON = "json"


class Formatter(Protocol):
    def format(self, *, diagnostics: DiagnosticCollection, source: str) -> str: ...


class TextFormatter:
    def format(self, *, diagnostics: DiagnosticCollection, source: str) -> str:
        lines: list[str] = []

        for diag in diagnostics.sorted:
            severity_str: str = diag.severity.label.upper()
            lines.append(
                f"{source}:{diag.position.line}:{diag.position.column}: "
                f"{severity_str} [{diag.rule}] {diag.message}"
            )

        return "\n".join(lines)


class JsonFormatter:
    def format(self, *, diagnostics: DiagnosticCollection, source: str) -> str:
        items: list[dict[str, object]] = [
            {
                "source": source,
                "line": diag.position.line,
                "column": diag.position.column,
                "rule": diag.rule,
                "severity": diag.severity.label,
                "message": diag.message,
            }
            for diag in diagnostics.sorted
        ]
        return json.dumps(items, indent=2)


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    if output_format == OutputFormat.JSON:
        return JsonFormatter()
    return TextFormatter()


def format_summary(*, diagnostics: DiagnosticCollection) -> str:
    error_count: int = diagnostics.error_count
    warning_count: int = diagnostics.warning_count

    parts: list[str] = []
    if error_count > 0:
        parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
    if warning_count > 0:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")

    if not parts:
        return "No issues found."

    return f"Found {', '.join(parts)}."
