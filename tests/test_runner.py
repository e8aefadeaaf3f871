"""Tests for the lint orchestrator."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from sheetlint.constants import Severity
from sheetlint.context import ResultContext
from sheetlint.diagnostics import Position
from sheetlint.document import Comment, Declaration, Root, RuleNode
from sheetlint.errors import ConfigurationError
from sheetlint.rules.registry import RuleRegistry, default_registry
from sheetlint.runner import lint, prepare_config

from conftest import SpyRule

WriteJson = Callable[[str, dict[str, Any]], Path]


def _sample_document() -> Root:
    """
    Line 1: a { }
    Line 2: /* sheetlint-disable-next-line declaration-no-important */
    Line 3: b { color: red !important; }
    Line 4: c { color: blue !important; }
    """
    return Root(nodes=[
        RuleNode(selector="a", position=Position(line=1, column=1)),
        Comment(
            text="sheetlint-disable-next-line declaration-no-important",
            position=Position(line=2, column=1),
        ),
        RuleNode(
            selector="b",
            position=Position(line=3, column=1),
            nodes=[Declaration(prop="color", value="red", important=True,
                               position=Position(line=3, column=5))],
        ),
        RuleNode(
            selector="c",
            position=Position(line=4, column=1),
            nodes=[Declaration(prop="color", value="blue", important=True,
                               position=Position(line=4, column=5))],
        ),
    ])


class TestLint:
    def test_builtin_rules_produce_diagnostics(self) -> None:
        result: ResultContext = lint(
            _sample_document(),
            {"rules": {"block-no-empty": 1, "declaration-no-important": 2}},
        )

        found: list[tuple[str, int, Severity]] = [
            (d.rule, d.position.line, d.severity) for d in result.diagnostics
        ]
        assert found == [
            ("block-no-empty", 1, Severity.WARNING),
            ("declaration-no-important", 4, Severity.ERROR),
        ]
        assert result.rule_severities == {
            "block-no-empty": Severity.WARNING,
            "declaration-no-important": Severity.ERROR,
        }

    def test_disable_ranges_are_computed_before_dispatch(self) -> None:
        result: ResultContext = lint(
            _sample_document(), {"rules": {"declaration-no-important": 2}},
        )

        assert len(result.disable_ranges) == 1
        assert [d.position.line for d in result.diagnostics] == [4]

    def test_quiet_config_drops_warnings(self) -> None:
        result: ResultContext = lint(
            _sample_document(),
            {"rules": {"block-no-empty": 1, "declaration-no-important": 2}, "quiet": True},
        )

        assert result.quiet is True
        assert [d.rule for d in result.diagnostics] == ["declaration-no-important"]

    def test_wrapper_options_with_extends_and_overrides(
        self, tmp_path: Path, write_json: WriteJson,
    ) -> None:
        write_json("base.json", {"rules": {"block-no-empty": 2, "declaration-no-important": 2}})

        result: ResultContext = lint(
            _sample_document(),
            {
                "config": {"extends": "./base.json", "rules": {"block-no-empty": 1}},
                "config_basedir": str(tmp_path),
                "config_overrides": {"rules": {"declaration-no-important": 0}},
            },
        )

        assert result.rule_severities == {"block-no-empty": Severity.WARNING}

    def test_basedir_from_config(self, tmp_path: Path, write_json: WriteJson) -> None:
        write_json("base.json", {"rules": {"block-no-empty": 2}})

        result: ResultContext = lint(
            _sample_document(),
            {"extends": "./base.json", "config_basedir": str(tmp_path)},
        )

        assert result.rule_severities == {"block-no-empty": Severity.ERROR}

    def test_plugin_rule_is_dispatched(self, tmp_path: Path, plugin_file: Path) -> None:
        result: ResultContext = lint(
            _sample_document(),
            {
                "config": {
                    "plugins": {"my-rule": "./plugins/my_rule.py"},
                    "rules": {"my-rule": [2, "opt"]},
                },
                "config_basedir": tmp_path,
            },
        )

        assert result.rule_severities == {"my-rule": Severity.ERROR}
        assert [d.message for d in result.diagnostics] == [
            "saw color with 'opt'",
            "saw color with 'opt'",
        ]

    def test_plugin_from_extended_config(
        self, tmp_path: Path, plugin_file: Path, write_json: WriteJson,
    ) -> None:
        write_json("plugins/preset.json", {"plugins": {"my-rule": "./my_rule.py"}})
        other: Path = tmp_path / "project"
        other.mkdir()

        result: ResultContext = lint(
            Root(),
            {
                "config": {"extends": "../plugins/preset.json", "rules": {"my-rule": 1}},
                "config_basedir": other,
            },
        )

        assert result.rule_severities == {"my-rule": Severity.WARNING}

    def test_custom_registry(self, spy_factory: Callable[[str], SpyRule]) -> None:
        spy: SpyRule = spy_factory("custom")
        result: ResultContext = lint(
            Root(), {"rules": {"custom": 2}}, registry=RuleRegistry({"custom": spy}),
        )

        assert spy.invocations == 1
        assert len(result.diagnostics) == 1

    def test_each_run_gets_a_fresh_context(self) -> None:
        options: dict[str, Any] = {"rules": {"block-no-empty": 2}}
        first: ResultContext = lint(_sample_document(), options)
        second: ResultContext = lint(_sample_document(), options)

        assert first is not second
        assert len(first.diagnostics) == len(second.diagnostics) == 1


class TestLintErrors:
    def test_empty_options(self) -> None:
        with pytest.raises(ConfigurationError, match="No configuration provided"):
            lint(Root(), {})

    def test_empty_wrapped_config(self) -> None:
        with pytest.raises(ConfigurationError, match="No configuration provided"):
            lint(Root(), {"config": None})

    def test_missing_rules(self) -> None:
        with pytest.raises(ConfigurationError, match="No rules found"):
            lint(Root(), {"quiet": True})

    def test_overrides_can_supply_rules(self) -> None:
        result: ResultContext = lint(
            _sample_document(),
            {"config": {"quiet": False}, "config_overrides": {"rules": {"block-no-empty": 2}}},
        )
        assert result.rule_severities == {"block-no-empty": Severity.ERROR}

    def test_unknown_rule_aborts_run(self) -> None:
        with pytest.raises(ConfigurationError, match="Undefined rule not-a-real-rule"):
            lint(_sample_document(), {"rules": {"not-a-real-rule": 2, "block-no-empty": 2}})

    def test_unresolvable_extends_aborts_before_dispatch(
        self, tmp_path: Path, spy_factory: Callable[[str], SpyRule],
    ) -> None:
        spy: SpyRule = spy_factory("a")
        with pytest.raises(ConfigurationError, match="Could not find"):
            lint(
                Root(),
                {"config": {"extends": "./missing", "rules": {"a": 2}}, "config_basedir": tmp_path},
                registry=RuleRegistry({"a": spy}),
            )
        assert spy.invocations == 0

    def test_unresolvable_plugin_aborts_before_dispatch(
        self, tmp_path: Path, spy_factory: Callable[[str], SpyRule],
    ) -> None:
        spy: SpyRule = spy_factory("a")
        with pytest.raises(ConfigurationError, match="missing_plugin"):
            lint(
                Root(),
                {
                    "config": {"plugins": {"p": "./missing_plugin.py"}, "rules": {"a": 2}},
                    "config_basedir": tmp_path,
                },
                registry=RuleRegistry({"a": spy}),
            )
        assert spy.invocations == 0


class TestPrepareConfig:
    def test_returns_base_dir(self, tmp_path: Path) -> None:
        config, base_dir = prepare_config({"config": {"rules": {}}, "config_basedir": tmp_path})
        assert base_dir == tmp_path
        assert dict(config.rules) == {}

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        _, base_dir = prepare_config({"rules": {}})
        assert base_dir == Path.cwd()

    def test_registry_default_is_fresh(self) -> None:
        assert default_registry() is not default_registry()
