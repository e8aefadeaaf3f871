"""Disable/enable comment directives and the ranges they suppress.

Directives live in comments::

    /* sheetlint-disable */                 all rules, until enabled
    /* sheetlint-disable block-no-empty */  listed rules, until enabled
    /* sheetlint-enable */                  closes every open range
    /* sheetlint-enable block-no-empty */   closes the listed rules' ranges
    /* sheetlint-disable-line */            the comment's own line
    /* sheetlint-disable-next-line */       the line after the comment
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from sheetlint.constants import ALL_RULES, DIRECTIVE_PREFIX
from sheetlint.document import Comment, Container

logger: logging.Logger = logging.getLogger(__name__)

_DIRECTIVE_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"^\s*{re.escape(DIRECTIVE_PREFIX)}"
    r"(disable-next-line|disable-line|disable|enable)\b\s*(.*?)\s*$",
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class DisableRange:
    """Lines ``start``..``end`` (inclusive) where ``rule`` is suppressed.

    ``end`` is None for a range left open to the end of the document.
    """

    rule: str
    start: int
    end: int | None = None

    def covers(self, *, rule: str, line: int) -> bool:
        if self.rule not in (ALL_RULES, rule):
            return False
        if line < self.start:
            return False
        return self.end is None or line <= self.end


def compute_disable_ranges(root: Container) -> list[DisableRange]:
    """Scan ``root``'s comments and return the ranges their directives declare."""
    closed: list[DisableRange] = []
    open_starts: dict[str, int] = {}

    for comment in root.walk_comments():
        match: re.Match[str] | None = _DIRECTIVE_PATTERN.match(comment.text)
        if match is None:
            continue

        kind: str = match.group(1)
        rules: list[str] = _parse_rule_list(match.group(2))
        line: int = comment.position.line
        logger.debug("Directive %s %s at line %d", kind, rules or ALL_RULES, line)

        if kind == "disable-line":
            closed.extend(DisableRange(rule=r, start=line, end=line) for r in rules or [ALL_RULES])
        elif kind == "disable-next-line":
            closed.extend(
                DisableRange(rule=r, start=line + 1, end=line + 1) for r in rules or [ALL_RULES]
            )
        elif kind == "disable":
            for rule in rules or [ALL_RULES]:
                open_starts.setdefault(rule, line)
        else:
            closed.extend(_enable(open_starts, rules=rules, comment=comment))

    closed.extend(DisableRange(rule=rule, start=start) for rule, start in open_starts.items())
    return closed


def _enable(
    open_starts: dict[str, int],
    *,
    rules: list[str],
    comment: Comment,
) -> list[DisableRange]:
    line: int = comment.position.line
    targets: list[str] = rules or list(open_starts)
    ended: list[DisableRange] = []
    for rule in targets:
        start: int | None = open_starts.pop(rule, None)
        if start is not None:
            ended.append(DisableRange(rule=rule, start=start, end=line))
        elif ALL_RULES in open_starts:
            logger.warning(
                "Ignoring sheetlint-enable for %r at line %d: all rules are disabled",
                rule,
                line,
            )
        else:
            logger.debug("Nothing to enable for %r at line %d", rule, line)
    return ended


def _parse_rule_list(raw: str) -> list[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]
