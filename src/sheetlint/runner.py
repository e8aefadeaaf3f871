"""Lint orchestrator for sheetlint."""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from sheetlint.config import (
    BASEDIR_KEY,
    LintConfig,
    apply_overrides,
    parse_lint_config,
    resolve_config,
)
from sheetlint.context import ResultContext
from sheetlint.disable_ranges import compute_disable_ranges
from sheetlint.dispatcher import dispatch
from sheetlint.document import Root
from sheetlint.modules import FileModuleResolver, ModuleResolver
from sheetlint.plugins import load_plugins
from sheetlint.rules.registry import RuleRegistry, default_registry

logger: logging.Logger = logging.getLogger(__name__)

CONFIG_OPTION: Final[str] = "config"
OVERRIDES_OPTION: Final[str] = "config_overrides"


def prepare_config(
    options: Mapping[str, Any],
    *,
    resolver: ModuleResolver | None = None,
) -> tuple[LintConfig, Path]:
    """
    Resolve and validate the configuration described by ``options``.

    ``options`` is either a configuration mapping, or a wrapper holding it
    under ``config`` next to optional ``config_basedir`` and
    ``config_overrides`` entries.

    Returns:
        The validated configuration and the base directory used for lookups.

    Raises:
        ConfigurationError: If resolution or validation fails.
    """
    loader: ModuleResolver = resolver or FileModuleResolver()
    raw_config: Any = options[CONFIG_OPTION] if CONFIG_OPTION in options else options
    raw_config = raw_config or {}
    overrides: Any = options.get(OVERRIDES_OPTION) if CONFIG_OPTION in options else None

    base_dir: Path = _base_dir(options, raw_config)
    resolved: dict[str, Any] = resolve_config(raw_config, base_dir, resolver=loader)
    resolved = apply_overrides(resolved, overrides)
    config: LintConfig = parse_lint_config(resolved)
    logger.info("Resolved configuration with %d rules", len(config.rules))
    return config, base_dir


def lint(
    document: Root,
    options: Mapping[str, Any],
    *,
    registry: RuleRegistry | None = None,
    resolver: ModuleResolver | None = None,
) -> ResultContext:
    """
    Lint ``document`` under the configuration described by ``options``.

    Runs three phases in order: resolve (configuration and plugins),
    annotate (disable ranges) and dispatch (rules). Any error raised in an
    earlier phase aborts the run before the next one starts.

    Args:
        document: Parsed document tree.
        options: Configuration mapping or ``{config, config_basedir,
            config_overrides}`` wrapper.
        registry: Rule registry to use; a fresh built-in registry by default.
        resolver: Module resolver for extends targets and plugins.

    Returns:
        The run's result context holding severities and diagnostics.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    start: float = time.perf_counter()
    loader: ModuleResolver = resolver or FileModuleResolver()
    rules: RuleRegistry = registry if registry is not None else default_registry()

    config, base_dir = prepare_config(options, resolver=loader)
    load_plugins(config.plugins, base_dir, registry=rules, resolver=loader)

    context: ResultContext = ResultContext(quiet=config.quiet)
    context.disable_ranges.extend(compute_disable_ranges(document))
    logger.debug("Found %d disable ranges", len(context.disable_ranges))

    dispatch(config, rules, document, context)

    elapsed: float = time.perf_counter() - start
    logger.info(
        "Ran %d rules, %d diagnostics. Completed in %.3fs",
        len(context.rule_severities),
        len(context.diagnostics),
        elapsed,
    )
    return context


def _base_dir(options: Mapping[str, Any], config: Mapping[str, Any]) -> Path:
    for source in (options, config):
        raw: Any = source.get(BASEDIR_KEY)
        if raw:
            return Path(raw)
    return Path.cwd()
