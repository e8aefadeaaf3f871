"""block-no-empty: Disallow empty rule and at-rule blocks."""
from __future__ import annotations

from typing import Any, Final

from sheetlint.context import ResultContext
from sheetlint.document import AtRule, Comment, Container, Root, RuleNode
from sheetlint.rules.base import RuleExecutor

RULE_NAME: Final[str] = "block-no-empty"


def rule(primary: Any, secondary: Any) -> RuleExecutor:
    def check(document: Root, context: ResultContext) -> None:
        for node in document.walk():
            if not isinstance(node, (RuleNode, AtRule)):
                continue
            if isinstance(node, AtRule) and not node.nodes and _is_statement(node):
                continue
            if _is_empty(node):
                context.report(
                    rule=RULE_NAME,
                    message=f"Unexpected empty block ({RULE_NAME})",
                    position=node.position,
                )

    return check


def _is_statement(node: AtRule) -> bool:
    # @import, @charset and friends have no block at all
    return node.name in ("import", "charset", "namespace", "use", "forward")


def _is_empty(node: Container) -> bool:
    return all(isinstance(child, Comment) for child in node.nodes)
