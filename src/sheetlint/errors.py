"""Error types for sheetlint."""
from __future__ import annotations

from pathlib import Path


class ConfigurationError(Exception):
    """Error during configuration resolution, plugin loading or dispatch."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)


def module_not_found(lookup: str) -> ConfigurationError:
    """
    Build the error raised when a module lookup cannot be resolved.

    Bare names are module names, so ``base.json`` means ``base/json``. A file
    next to the config needs a ``./`` prefix.
    """
    return ConfigurationError(
        f'Could not find "{lookup}". Do you need a `config_basedir`? '
        'File paths need a "./" or "../" prefix; bare names are resolved as modules.'
    )


class DocumentError(ValueError):
    """A serialized document tree is malformed."""
