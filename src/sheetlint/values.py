"""Structural helpers for loosely-typed (JSON-like) configuration values.

A configuration value is one of three kinds:

* mapping: ``dict`` (or any ``Mapping``), merged key-wise and recursively,
* sequence: ``list`` or ``tuple``, replaced whole by a later layer,
* scalar: anything else, replaced whole by a later layer.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def deep_copy(value: Any) -> Any:
    """Copy a JSON-like value so no nested container is shared."""
    if is_mapping(value):
        return {key: deep_copy(item) for key, item in value.items()}
    if is_sequence(value):
        return [deep_copy(item) for item in value]
    return copy.deepcopy(value)


def deep_merge(base: Mapping[str, Any], *layers: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge mapping layers left to right into a fresh copy of ``base``.

    Later layers win. Mappings are merged recursively; sequences and scalars
    from a later layer replace the earlier value entirely. No input is mutated.

    Args:
        base: Starting mapping.
        *layers: Mappings applied on top of ``base`` in order.

    Returns:
        A new dict sharing no containers with the inputs.
    """
    merged: dict[str, Any] = deep_copy(base)
    for layer in layers:
        _merge_into(merged, layer)
    return merged


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        existing: Any = target.get(key)
        if is_mapping(existing) and is_mapping(value):
            _merge_into(existing, value)
        else:
            target[key] = deep_copy(value)
