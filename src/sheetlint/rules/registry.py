"""Rule registry for sheetlint."""
from __future__ import annotations

from collections.abc import Iterator, Mapping

from sheetlint.rules import block_no_empty, color_no_invalid_hex, declaration_no_important
from sheetlint.rules import max_nesting_depth
from sheetlint.rules.base import RuleImplementation

BUILTIN_RULES: Mapping[str, RuleImplementation] = {
    block_no_empty.RULE_NAME: block_no_empty.rule,
    color_no_invalid_hex.RULE_NAME: color_no_invalid_hex.rule,
    declaration_no_important.RULE_NAME: declaration_no_important.rule,
    max_nesting_depth.RULE_NAME: max_nesting_depth.rule,
}


class RuleRegistry:
    """Mapping from rule name to rule implementation, owned by one run."""

    def __init__(self, rules: Mapping[str, RuleImplementation] | None = None) -> None:
        self._rules: dict[str, RuleImplementation] = dict(rules or {})

    def register(self, name: str, implementation: RuleImplementation) -> None:
        """Insert or replace the implementation for ``name``."""
        self._rules[name] = implementation

    def names(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __getitem__(self, name: str) -> RuleImplementation:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


def default_registry() -> RuleRegistry:
    """Return a fresh registry holding every built-in rule."""
    return RuleRegistry(BUILTIN_RULES)
