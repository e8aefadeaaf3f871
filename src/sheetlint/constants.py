"""Constants and enums for sheetlint."""
from __future__ import annotations

from enum import IntEnum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(IntEnum):
    """Rule severity levels, ordered from silent to failing."""

    OFF = 0
    WARNING = 1
    ERROR = 2

    @property
    def label(self) -> str:
        return self.name.lower()


SEVERITY_TOKENS: Final[dict[str, Severity]] = {
    "off": Severity.OFF,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "error": Severity.ERROR,
}

DIRECTIVE_PREFIX: Final[str] = "sheetlint-"

ALL_RULES: Final[str] = "*"

CONFIG_SUFFIXES: Final[tuple[str, ...]] = (".json", ".toml", ".yaml", ".yml", ".py")
