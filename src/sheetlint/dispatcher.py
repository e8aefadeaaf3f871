"""Rule dispatch: run every enabled rule against a document."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sheetlint.config import LintConfig
from sheetlint.constants import SEVERITY_TOKENS, Severity
from sheetlint.context import ResultContext
from sheetlint.document import Root
from sheetlint.errors import ConfigurationError
from sheetlint.rules.registry import RuleRegistry
from sheetlint.values import is_sequence

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleSetting:
    """A rule's configuration entry, normalized."""

    severity: Severity
    primary: Any = None
    secondary: Any = None


def parse_severity(value: Any, *, rule_name: str) -> Severity:
    """
    Convert a configured severity (``0``/``1``/``2`` or a token) to Severity.

    Raises:
        ConfigurationError: If the value is not a known severity.
    """
    if isinstance(value, str) and value.lower() in SEVERITY_TOKENS:
        return SEVERITY_TOKENS[value.lower()]
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return Severity(value)
        except ValueError:
            pass
    valid: list[str] = [s.label for s in Severity]
    raise ConfigurationError(
        f"Invalid severity {value!r} for rule {rule_name}; expected 0, 1, 2 or one of {valid}"
    )


def normalize_setting(setting: Any, *, rule_name: str) -> RuleSetting:
    """Split a bare severity or a ``[severity, primary, secondary]`` entry."""
    if is_sequence(setting):
        if not setting:
            raise ConfigurationError(f"Empty setting for rule {rule_name}")
        padded: list[Any] = [*setting, None, None]
        return RuleSetting(
            severity=parse_severity(padded[0], rule_name=rule_name),
            primary=padded[1],
            secondary=padded[2],
        )
    return RuleSetting(severity=parse_severity(setting, rule_name=rule_name))


def check_rule_names(rules: Mapping[str, Any], registry: RuleRegistry) -> None:
    """
    Fail on the first configured rule name the registry does not know.

    Raises:
        ConfigurationError: Naming the first unknown rule, in config order.
    """
    for rule_name in rules:
        if rule_name not in registry:
            raise ConfigurationError(f"Undefined rule {rule_name}")


def dispatch(
    config: LintConfig,
    registry: RuleRegistry,
    document: Root,
    context: ResultContext,
) -> None:
    """
    Run every enabled rule of ``config`` against ``document``, in config order.

    All rule names and settings are validated before the first rule runs, so
    a configuration error leaves ``context`` without diagnostics. Rules set
    to OFF are neither recorded nor invoked. Exceptions raised by a rule
    propagate unchanged.

    Raises:
        ConfigurationError: For an unknown rule name or a malformed setting.
    """
    check_rule_names(config.rules, registry)
    settings: dict[str, RuleSetting] = {
        name: normalize_setting(raw, rule_name=name) for name, raw in config.rules.items()
    }

    for rule_name, setting in settings.items():
        if setting.severity == Severity.OFF:
            logger.debug("Skipping %s (off)", rule_name)
            continue

        context.rule_severities[rule_name] = setting.severity
        before: int = len(context.diagnostics)
        registry[rule_name](setting.primary, setting.secondary)(document, context)
        logger.debug(
            "Rule %s (%s) produced %d diagnostics",
            rule_name,
            setting.severity.label,
            len(context.diagnostics) - before,
        )
