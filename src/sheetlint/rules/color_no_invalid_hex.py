"""color-no-invalid-hex: Disallow malformed hex colors."""
from __future__ import annotations

import re
from typing import Any, Final

from sheetlint.context import ResultContext
from sheetlint.diagnostics import Position
from sheetlint.document import Root
from sheetlint.rules.base import RuleExecutor

RULE_NAME: Final[str] = "color-no-invalid-hex"

_HEX_TOKEN: Final[re.Pattern[str]] = re.compile(r"#([\w-]+)")
_VALID_HEX: Final[re.Pattern[str]] = re.compile(
    r"^(?:[0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE
)


def rule(primary: Any, secondary: Any) -> RuleExecutor:
    def check(document: Root, context: ResultContext) -> None:
        for decl in document.walk_decls():
            for match in _HEX_TOKEN.finditer(decl.value):
                if _VALID_HEX.match(match.group(1)):
                    continue
                # Value offset is relative to the start of the declaration
                column: int = decl.position.column + len(decl.prop) + 2 + match.start()
                context.report(
                    rule=RULE_NAME,
                    message=f"Unexpected invalid hex color \"{match.group(0)}\" ({RULE_NAME})",
                    position=Position(line=decl.position.line, column=column),
                )

    return check
