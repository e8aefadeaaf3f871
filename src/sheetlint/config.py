"""Configuration resolution and validation for sheetlint."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from sheetlint.errors import ConfigurationError
from sheetlint.modules import FileModuleResolver, ModuleResolver, is_path_lookup
from sheetlint.values import deep_copy, deep_merge, is_mapping, is_sequence

logger: logging.Logger = logging.getLogger(__name__)

EXTENDS_KEY: Final[str] = "extends"
PLUGINS_KEY: Final[str] = "plugins"
RULES_KEY: Final[str] = "rules"
QUIET_KEY: Final[str] = "quiet"
BASEDIR_KEY: Final[str] = "config_basedir"


@dataclass(frozen=True, slots=True)
class LintConfig:
    """Validated, fully resolved configuration for one lint run."""

    rules: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    plugins: MappingProxyType[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    quiet: bool = False
    config_basedir: Path | None = None


def resolve_config(
    config: Mapping[str, Any],
    base_dir: Path,
    *,
    resolver: ModuleResolver | None = None,
) -> dict[str, Any]:
    """
    Flatten the ``extends`` chain of ``config`` into a single mapping.

    Local keys always win. Among several extends targets an earlier one wins
    over a later one, because each target is folded underneath what has
    already been accumulated. The input is never mutated.

    Args:
        config: The local configuration.
        base_dir: Directory the local ``extends`` lookups are resolved against.
        resolver: Module resolver, defaults to FileModuleResolver.

    Returns:
        A new mapping without an ``extends`` key.

    Raises:
        ConfigurationError: If an extends target cannot be found or loaded,
            or the extends graph contains a cycle.
    """
    return _resolve(config, base_dir, resolver=resolver or FileModuleResolver(), chain=())


def _resolve(
    config: Mapping[str, Any],
    base_dir: Path,
    *,
    resolver: ModuleResolver,
    chain: tuple[Path, ...],
) -> dict[str, Any]:
    if not config.get(EXTENDS_KEY):
        resolved: dict[str, Any] = deep_copy(config)
        resolved.pop(EXTENDS_KEY, None)
        return resolved

    lookups: list[str] = _extends_lookups(config[EXTENDS_KEY])
    accumulated: dict[str, Any] = deep_copy(config)
    del accumulated[EXTENDS_KEY]

    for lookup in lookups:
        target_path: Path = resolver.resolve(lookup, base_dir)
        if target_path in chain:
            cycle: str = " -> ".join(str(p) for p in (*chain, target_path))
            raise ConfigurationError(f"Circular extends detected: {cycle}", path=target_path)

        logger.debug("Extending from %s", target_path)
        target: dict[str, Any] = resolver.load_config(target_path)
        target = _absolutize_plugins(target, target_path.parent)
        target = _resolve(
            target,
            target_path.parent,
            resolver=resolver,
            chain=(*chain, target_path),
        )
        accumulated = deep_merge({}, target, accumulated)

    return accumulated


def _extends_lookups(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [raw]
    if is_sequence(raw) and all(isinstance(item, str) for item in raw):
        return list(raw)
    raise ConfigurationError(
        f"extends must be a string or a list of strings, got {type(raw).__name__}"
    )


def _absolutize_plugins(config: dict[str, Any], directory: Path) -> dict[str, Any]:
    """Anchor relative plugin paths of an extended file to that file's directory."""
    plugins: Any = config.get(PLUGINS_KEY)
    if not is_mapping(plugins):
        return config
    rewritten: dict[str, Any] = {
        name: str(directory / lookup) if isinstance(lookup, str) and is_path_lookup(lookup) else lookup
        for name, lookup in plugins.items()
    }
    return {**config, PLUGINS_KEY: rewritten}


def apply_overrides(
    config: Mapping[str, Any],
    overrides: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Deep-merge ``overrides`` over ``config``; override values win."""
    if not overrides:
        return deep_copy(config)
    return deep_merge(config, overrides)


def parse_lint_config(data: Mapping[str, Any] | None) -> LintConfig:
    """
    Validate a resolved configuration mapping.

    Raises:
        ConfigurationError: If the configuration is empty, has no rules, or
            has malformed fields. Shape errors are reported together.
    """
    if not data:
        raise ConfigurationError("No configuration provided")
    if data.get(RULES_KEY) is None:
        raise ConfigurationError("No rules found within configuration")

    errors: list[str] = []

    raw_rules: Any = data[RULES_KEY]
    rules: dict[str, Any] = {}
    if is_mapping(raw_rules):
        rules = dict(raw_rules)
    else:
        errors.append(f"rules must be a mapping, got {type(raw_rules).__name__}")

    raw_plugins: Any = data.get(PLUGINS_KEY, {})
    plugins: dict[str, str] = {}
    if is_mapping(raw_plugins):
        for name, lookup in raw_plugins.items():
            if isinstance(lookup, str):
                plugins[name] = lookup
            else:
                errors.append(f"plugins.{name} must be a string")
    else:
        errors.append(f"plugins must be a mapping, got {type(raw_plugins).__name__}")

    quiet: Any = data.get(QUIET_KEY, False)
    if quiet is None:
        quiet = False
    if not isinstance(quiet, bool):
        errors.append("quiet must be a boolean")
        quiet = False

    config_basedir: Path | None = None
    raw_basedir: Any = data.get(BASEDIR_KEY)
    if isinstance(raw_basedir, (str, Path)):
        config_basedir = Path(raw_basedir)
    elif raw_basedir is not None:
        errors.append("config_basedir must be a path")

    if errors:
        error_msg: str = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return LintConfig(
        rules=MappingProxyType(rules),
        plugins=MappingProxyType(plugins),
        quiet=quiet,
        config_basedir=config_basedir,
    )


def load_config_file(
    path: Path,
    *,
    resolver: ModuleResolver | None = None,
) -> dict[str, Any]:
    """
    Load a configuration file named explicitly by the caller.

    The file's directory becomes ``config_basedir`` unless the file sets one.
    """
    loader: ModuleResolver = resolver or FileModuleResolver()
    resolved_path: Path = path.resolve()
    data: dict[str, Any] = loader.load_config(resolved_path)
    data.setdefault(BASEDIR_KEY, str(resolved_path.parent))
    return data


def config_to_data(config: LintConfig) -> dict[str, Any]:
    """Return a JSON-serializable view of ``config``."""
    return {
        RULES_KEY: deep_copy(dict(config.rules)),
        PLUGINS_KEY: dict(config.plugins),
        QUIET_KEY: config.quiet,
        BASEDIR_KEY: str(config.config_basedir) if config.config_basedir else None,
    }

