"""declaration-no-important: Disallow !important within declarations."""
from __future__ import annotations

from typing import Any, Final

from sheetlint.context import ResultContext
from sheetlint.document import Root
from sheetlint.rules.base import RuleExecutor

RULE_NAME: Final[str] = "declaration-no-important"


def rule(primary: Any, secondary: Any) -> RuleExecutor:
    def check(document: Root, context: ResultContext) -> None:
        for decl in document.walk_decls():
            if decl.important:
                context.report(
                    rule=RULE_NAME,
                    message=f"Unexpected !important on \"{decl.prop}\" ({RULE_NAME})",
                    position=decl.position,
                )

    return check
