"""Document-tree model consumed by sheetlint rules.

Source parsing happens elsewhere; this module only defines the tree shape
the linter walks, plus a loader for trees serialized as JSON.
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from sheetlint.diagnostics import Position
from sheetlint.errors import DocumentError


@dataclass(slots=True)
class Node:
    """Base class for all tree nodes."""

    position: Position = field(default_factory=lambda: Position(line=1, column=1))

    @property
    def type(self) -> str:
        return "node"


@dataclass(slots=True)
class Container(Node):
    """A node that holds child nodes."""

    nodes: list[Node] = field(default_factory=list)

    def walk(self) -> Iterator[Node]:
        """Yield every descendant depth-first, in source order."""
        for child in self.nodes:
            yield child
            if isinstance(child, Container):
                yield from child.walk()

    def walk_comments(self) -> Iterator[Comment]:
        for node in self.walk():
            if isinstance(node, Comment):
                yield node

    def walk_decls(self) -> Iterator[Declaration]:
        for node in self.walk():
            if isinstance(node, Declaration):
                yield node


@dataclass(slots=True)
class Root(Container):
    source: str | None = None

    @property
    def type(self) -> str:
        return "root"


@dataclass(slots=True)
class RuleNode(Container):
    selector: str = ""

    @property
    def type(self) -> str:
        return "rule"


@dataclass(slots=True)
class AtRule(Container):
    name: str = ""
    params: str = ""

    @property
    def type(self) -> str:
        return "atrule"


@dataclass(slots=True)
class Declaration(Node):
    prop: str = ""
    value: str = ""
    important: bool = False

    @property
    def type(self) -> str:
        return "decl"


@dataclass(slots=True)
class Comment(Node):
    text: str = ""

    @property
    def type(self) -> str:
        return "comment"


def document_from_dict(data: Mapping[str, Any]) -> Root:
    """
    Build a document tree from its JSON form.

    Each node is a mapping with a ``type`` (``root``, ``rule``, ``atrule``,
    ``decl`` or ``comment``), an optional ``line``/``column`` pair and an
    optional ``nodes`` list of children.

    Raises:
        DocumentError: If the payload is not a well-formed tree.
    """
    node: Node = _node_from_dict(data)
    if not isinstance(node, Root):
        raise DocumentError(f"Document must have a root node, got {node.type!r}")
    return node


def _node_from_dict(data: Mapping[str, Any]) -> Node:
    if not isinstance(data, Mapping):
        raise DocumentError(f"Document node must be an object, got {type(data).__name__}")

    node_type: Any = data.get("type")
    position: Position = Position(
        line=_coordinate(data, "line"),
        column=_coordinate(data, "column"),
    )
    raw_children: Any = data.get("nodes", [])
    if not isinstance(raw_children, list):
        raise DocumentError(f"Node children must be a list, got {type(raw_children).__name__}")
    children: list[Node] = [_node_from_dict(child) for child in raw_children]

    if node_type == "root":
        return Root(position=position, nodes=children, source=data.get("source"))
    if node_type == "rule":
        return RuleNode(position=position, nodes=children, selector=str(data.get("selector", "")))
    if node_type == "atrule":
        return AtRule(
            position=position,
            nodes=children,
            name=str(data.get("name", "")),
            params=str(data.get("params", "")),
        )
    if node_type == "decl":
        return Declaration(
            position=position,
            prop=str(data.get("prop", "")),
            value=str(data.get("value", "")),
            important=bool(data.get("important", False)),
        )
    if node_type == "comment":
        return Comment(position=position, text=str(data.get("text", "")))

    raise DocumentError(f"Unknown document node type: {node_type!r}")


def _coordinate(data: Mapping[str, Any], key: str) -> int:
    value: Any = data.get(key, 1)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentError(f"Node {key} must be an integer, got {value!r}")
    return value
