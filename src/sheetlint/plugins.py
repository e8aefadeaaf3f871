"""Plugin loading into the rule registry."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from sheetlint.modules import FileModuleResolver, ModuleResolver
from sheetlint.rules.base import RuleImplementation
from sheetlint.rules.registry import RuleRegistry

logger: logging.Logger = logging.getLogger(__name__)


def load_plugins(
    plugins: Mapping[str, str],
    base_dir: Path,
    *,
    registry: RuleRegistry,
    resolver: ModuleResolver | None = None,
) -> None:
    """
    Resolve and load each plugin module, registering it under its rule name.

    Plugins are registered in map order and replace any rule of the same
    name, built-ins included.

    Raises:
        ConfigurationError: If a module path cannot be resolved or the module
            does not provide a rule.
    """
    loader: ModuleResolver = resolver or FileModuleResolver()
    for rule_name, lookup in plugins.items():
        path: Path = loader.resolve(lookup, base_dir)
        implementation: RuleImplementation = loader.load_rule(path)
        if rule_name in registry:
            logger.debug("Plugin %s replaces registered rule %s", path, rule_name)
        registry.register(rule_name, implementation)
        logger.debug("Loaded plugin rule %s from %s", rule_name, path)
