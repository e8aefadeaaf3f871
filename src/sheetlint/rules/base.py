"""Rule contract for sheetlint lint rules.

A rule is a two-stage callable: options are bound once per configuration
entry, and the returned executor runs once against the document::

    executor = rule(primary_option, secondary_option)
    executor(document, context)
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from sheetlint.context import ResultContext
from sheetlint.document import Root


@runtime_checkable
class RuleExecutor(Protocol):
    """Options-bound rule, ready to check one document."""

    def __call__(self, document: Root, context: ResultContext) -> None: ...


@runtime_checkable
class RuleImplementation(Protocol):
    """Structural interface for lint rules."""

    def __call__(self, primary: Any, secondary: Any) -> RuleExecutor: ...
