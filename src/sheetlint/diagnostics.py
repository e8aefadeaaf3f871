"""Diagnostic data model for sheetlint."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from sheetlint.constants import Severity


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Source position. All values are 1-based."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single diagnostic (error, warning) emitted by a rule."""

    rule: str
    severity: Severity
    message: str
    position: Position


@dataclass(slots=True)
class DiagnosticCollection:
    """Ordered collection of diagnostics, kept in emission order."""

    _diagnostics: list[Diagnostic] = field(default_factory=list)

    def add(self, *, diagnostic: Diagnostic) -> None:
        """Add a single diagnostic."""
        self._diagnostics.append(diagnostic)

    @property
    def sorted(self) -> list[Diagnostic]:
        """Return diagnostics sorted by line, column."""
        return sorted(self._diagnostics, key=lambda d: (d.position.line, d.position.column))

    @property
    def has_errors(self) -> bool:
        """Return True if any diagnostic has ERROR severity."""
        return any(d.severity == Severity.ERROR for d in self._diagnostics)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self._diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self._diagnostics if d.severity == Severity.WARNING)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)
