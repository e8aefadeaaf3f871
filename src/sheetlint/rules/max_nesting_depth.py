"""max-nesting-depth: Limit how deeply blocks may nest.

Primary option: the maximum depth, a positive integer.
Secondary option: ``{"ignore_at_rules": [...]}`` names at-rules (without
the ``@``) that do not add a nesting level.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from sheetlint.context import ResultContext
from sheetlint.document import AtRule, Container, Root, RuleNode
from sheetlint.rules.base import RuleExecutor

RULE_NAME: Final[str] = "max-nesting-depth"


def rule(primary: Any, secondary: Any) -> RuleExecutor:
    def check(document: Root, context: ResultContext) -> None:
        if isinstance(primary, bool) or not isinstance(primary, int) or primary < 0:
            context.report_invalid_option(rule=RULE_NAME, option="primary", value=primary)
            return

        ignored: frozenset[str] = frozenset()
        if secondary is not None:
            raw: Any = secondary.get("ignore_at_rules", []) if isinstance(secondary, Mapping) else None
            if not isinstance(raw, (list, tuple)):
                context.report_invalid_option(
                    rule=RULE_NAME, option="ignore_at_rules", value=raw,
                )
                return
            ignored = frozenset(str(name).lstrip("@") for name in raw)

        _check_container(document, depth=0, limit=primary, ignored=ignored, context=context)

    return check


def _check_container(
    container: Container,
    *,
    depth: int,
    limit: int,
    ignored: frozenset[str],
    context: ResultContext,
) -> None:
    for child in container.nodes:
        if not isinstance(child, (RuleNode, AtRule)):
            continue
        transparent: bool = isinstance(child, AtRule) and child.name in ignored
        if not transparent and depth > limit:
            context.report(
                rule=RULE_NAME,
                message=f"Expected nesting depth to be no more than {limit} ({RULE_NAME})",
                position=child.position,
            )
        next_depth: int = depth if transparent else depth + 1
        _check_container(child, depth=next_depth, limit=limit, ignored=ignored, context=context)
