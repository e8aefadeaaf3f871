"""Pytest fixtures for sheetlint tests."""
from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from sheetlint.context import ResultContext
from sheetlint.diagnostics import Position
from sheetlint.document import Root


class SpyRule:
    """Rule implementation that records how it was bound and invoked."""

    def __init__(self, name: str, *, log: list[str] | None = None) -> None:
        self.name: str = name
        self.bound_with: list[tuple[Any, Any]] = []
        self.invocations: int = 0
        self.log: list[str] = log if log is not None else []

    def __call__(self, primary: Any, secondary: Any) -> Callable[[Root, ResultContext], None]:
        self.bound_with.append((primary, secondary))

        def check(document: Root, context: ResultContext) -> None:
            self.invocations += 1
            self.log.append(self.name)
            context.report(
                rule=self.name,
                message=f"{self.name} ran",
                position=Position(line=1, column=1),
            )

        return check


@pytest.fixture
def spy_factory() -> Callable[..., SpyRule]:
    """Create SpyRule instances sharing one invocation log."""
    log: list[str] = []

    def make(name: str) -> SpyRule:
        return SpyRule(name, log=log)

    return make


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Write a JSON file relative to tmp_path and return its path."""

    def write(relative: str, data: dict[str, Any]) -> Path:
        path: Path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return write


@pytest.fixture
def plugin_file(tmp_path: Path) -> Path:
    """A plugin module reporting one diagnostic per declaration."""
    path: Path = tmp_path / "plugins" / "my_rule.py"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        '''
from sheetlint.diagnostics import Position


def rule(primary, secondary):
    def check(document, context):
        for decl in document.walk_decls():
            context.report(
                rule="my-rule",
                message=f"saw {decl.prop} with {primary!r}",
                position=decl.position,
            )

    return check
''',
        encoding="utf-8",
    )
    return path
