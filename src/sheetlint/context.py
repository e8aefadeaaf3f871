"""Per-run result context shared by the dispatcher and rule executors."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sheetlint.constants import Severity
from sheetlint.diagnostics import Diagnostic, DiagnosticCollection, Position
from sheetlint.disable_ranges import DisableRange

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResultContext:
    """Mutable state of one lint run.

    Created by the runner, handed by reference to every rule executor and
    returned to the caller. Rules must not keep a reference after they return.
    """

    rule_severities: dict[str, Severity] = field(default_factory=dict)
    quiet: bool = False
    disable_ranges: list[DisableRange] = field(default_factory=list)
    diagnostics: DiagnosticCollection = field(default_factory=DiagnosticCollection)

    def is_disabled(self, *, rule: str, position: Position) -> bool:
        """Return True if ``rule`` is suppressed at ``position``."""
        return any(r.covers(rule=rule, line=position.line) for r in self.disable_ranges)

    def report(self, *, rule: str, message: str, position: Position) -> Diagnostic | None:
        """
        Emit a diagnostic for ``rule`` unless it is suppressed.

        The severity comes from ``rule_severities``. Nothing is recorded for
        rules that are not running, for non-error diagnostics in quiet mode,
        or for positions inside a matching disable range.

        Returns:
            The recorded diagnostic, or None if it was suppressed.
        """
        severity: Severity = self.rule_severities.get(rule, Severity.OFF)
        if severity == Severity.OFF:
            return None
        if self.quiet and severity < Severity.ERROR:
            return None
        if self.is_disabled(rule=rule, position=position):
            logger.debug("Suppressed %s at %d:%d", rule, position.line, position.column)
            return None

        diagnostic: Diagnostic = Diagnostic(
            rule=rule,
            severity=severity,
            message=message,
            position=position,
        )
        self.diagnostics.add(diagnostic=diagnostic)
        return diagnostic

    def report_invalid_option(self, *, rule: str, option: str, value: Any) -> Diagnostic:
        """Record that ``rule`` was configured with an unusable option value."""
        diagnostic: Diagnostic = Diagnostic(
            rule=rule,
            severity=Severity.ERROR,
            message=f'Invalid value {value!r} for option "{option}" of rule "{rule}"',
            position=Position(line=1, column=1),
        )
        self.diagnostics.add(diagnostic=diagnostic)
        return diagnostic
