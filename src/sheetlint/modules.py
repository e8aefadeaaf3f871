"""Module lookup and loading for extends targets and plugins."""
from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import json
import logging
import sys
import tomllib
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

import yaml

from sheetlint.constants import CONFIG_SUFFIXES
from sheetlint.errors import ConfigurationError, module_not_found
from sheetlint.rules.base import RuleImplementation

logger: logging.Logger = logging.getLogger(__name__)


class ModuleResolver(Protocol):
    """Turns lookup strings into files and files into loaded values."""

    def resolve(self, lookup: str, base_dir: Path) -> Path: ...

    def load_config(self, path: Path) -> dict[str, Any]: ...

    def load_rule(self, path: Path) -> RuleImplementation: ...


def is_path_lookup(lookup: str) -> bool:
    """Return True if ``lookup`` names a file rather than a module."""
    return lookup.startswith(("./", "../", ".\\", "..\\")) or Path(lookup).is_absolute()


class FileModuleResolver:
    """Resolves lookups against the filesystem and the import path."""

    def resolve(self, lookup: str, base_dir: Path) -> Path:
        """
        Resolve ``lookup`` relative to ``base_dir``.

        Args:
            lookup: A relative/absolute file path, or a module name.
            base_dir: Directory relative lookups are resolved against.

        Returns:
            Absolute path of the file to load.

        Raises:
            ConfigurationError: If nothing matches the lookup.
        """
        found: Path | None
        if is_path_lookup(lookup):
            found = _resolve_file(base_dir / lookup)
        else:
            found = _resolve_module_name(lookup, base_dir)

        if found is None:
            raise module_not_found(lookup)
        logger.debug("Resolved %r from %s to %s", lookup, base_dir, found)
        return found

    def load_config(self, path: Path) -> dict[str, Any]:
        """
        Load a configuration file, choosing the format by suffix.

        Raises:
            ConfigurationError: If the file cannot be read or parsed, or does
                not hold a mapping.
        """
        data: Any
        try:
            if path.suffix == ".py":
                data = getattr(_exec_module(path), "config", None)
            elif path.suffix == ".toml":
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            elif path.suffix in (".yaml", ".yml"):
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            else:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML: {e}", path=path) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", path=path) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON: {e}", path=path) from e
        except UnicodeDecodeError as e:
            raise ConfigurationError(f"Cannot decode config file: {e}", path=path) from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file: {e}", path=path) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}",
                path=path,
            )
        return data

    def load_rule(self, path: Path) -> RuleImplementation:
        """
        Load a plugin module and return its module-level ``rule`` callable.

        Raises:
            ConfigurationError: If the module defines no callable ``rule``.
        """
        module: ModuleType = _exec_module(path)
        implementation: Any = getattr(module, "rule", None)
        if not callable(implementation):
            raise ConfigurationError(
                "Plugin module must define a callable `rule`",
                path=path,
            )
        return implementation


def _resolve_file(candidate: Path) -> Path | None:
    if candidate.is_file():
        return candidate.resolve()
    for suffix in CONFIG_SUFFIXES:
        with_suffix: Path = candidate.with_name(candidate.name + suffix)
        if with_suffix.is_file():
            return with_suffix.resolve()
    package_init: Path = candidate / "__init__.py"
    if package_init.is_file():
        return package_init.resolve()
    return None


def _resolve_module_name(name: str, base_dir: Path) -> Path | None:
    local: Path | None = _resolve_file(base_dir / Path(*name.split(".")))
    if local is not None:
        return local

    spec: importlib.machinery.ModuleSpec | None
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    if spec is None or spec.origin is None or not spec.has_location:
        return None
    return Path(spec.origin).resolve()


def _exec_module(path: Path) -> ModuleType:
    """Import the Python file at ``path`` under a name derived from its location."""
    digest: str = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    module_name: str = f"_sheetlint_module_{path.stem}_{digest}"
    spec: importlib.machinery.ModuleSpec | None = importlib.util.spec_from_file_location(
        module_name, path,
    )
    if spec is None or spec.loader is None:
        raise ConfigurationError("Cannot import module", path=path)

    module: ModuleType = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module
