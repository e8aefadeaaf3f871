"""Tests for plugin loading."""
from __future__ import annotations

from pathlib import Path

import pytest

from sheetlint.errors import ConfigurationError
from sheetlint.plugins import load_plugins
from sheetlint.rules import block_no_empty
from sheetlint.rules.registry import RuleRegistry, default_registry


class TestLoadPlugins:
    def test_registers_plugin_rule(self, tmp_path: Path, plugin_file: Path) -> None:
        registry: RuleRegistry = default_registry()

        load_plugins({"my-rule": "./plugins/my_rule.py"}, tmp_path, registry=registry)

        assert "my-rule" in registry
        assert callable(registry["my-rule"])

    def test_plugin_overrides_builtin(self, tmp_path: Path, plugin_file: Path) -> None:
        registry: RuleRegistry = default_registry()

        load_plugins({"block-no-empty": "./plugins/my_rule"}, tmp_path, registry=registry)

        assert registry["block-no-empty"] is not block_no_empty.rule

    def test_unresolvable_plugin(self, tmp_path: Path) -> None:
        registry: RuleRegistry = RuleRegistry()

        with pytest.raises(ConfigurationError) as exc_info:
            load_plugins({"x": "./missing.py"}, tmp_path, registry=registry)

        assert '"./missing.py"' in str(exc_info.value)
        assert "config_basedir" in str(exc_info.value)
        assert "x" not in registry

    def test_empty_plugin_map(self, tmp_path: Path) -> None:
        registry: RuleRegistry = default_registry()
        before: list[str] = registry.names()

        load_plugins({}, tmp_path, registry=registry)

        assert registry.names() == before

    def test_registry_is_not_shared_between_runs(
        self, tmp_path: Path, plugin_file: Path,
    ) -> None:
        first: RuleRegistry = default_registry()
        load_plugins({"my-rule": "./plugins/my_rule.py"}, tmp_path, registry=first)

        assert "my-rule" not in default_registry()
