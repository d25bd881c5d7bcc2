"""Tagged view over the top level of a parsed JSON document."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterator, Mapping


class NodeKind(str, Enum):
    """JSON value variants."""

    null = "null"
    bool = "bool"
    number = "number"
    string = "string"
    array = "array"
    object = "object"

    @property
    def is_scalar(self) -> bool:
        return self in (NodeKind.bool, NodeKind.number, NodeKind.string)


def node_kind(value: Any) -> NodeKind:
    """Classify a decoded JSON value.

    ``bool`` is checked before numbers because it subclasses ``int``.
    """
    if value is None:
        return NodeKind.null
    if isinstance(value, bool):
        return NodeKind.bool
    if isinstance(value, (int, float)):
        return NodeKind.number
    if isinstance(value, str):
        return NodeKind.string
    if isinstance(value, (list, tuple)):
        return NodeKind.array
    if isinstance(value, Mapping):
        return NodeKind.object
    raise TypeError(f"{type(value).__name__} is not a JSON value")


def scalar_text(value: Any) -> str:
    """Text form of a scalar leaf: strings as-is, other scalars as JSON literals."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class DocumentTree:
    """Mutable, order-preserving object node.

    Wraps a copy of the mapping it is given, so transforms never touch the
    caller's data.
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Mapping[str, Any] | None = None) -> None:
        self._nodes: dict[str, Any] = dict(nodes or {})

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"DocumentTree({list(self._nodes)})"

    def kind(self, name: str) -> NodeKind | None:
        """Return the kind of node *name*, or ``None`` if it is absent."""
        if name not in self._nodes:
            return None
        return node_kind(self._nodes[name])

    def get(self, name: str) -> Any:
        return self._nodes.get(name)

    def get_string(self, name: str) -> str:
        value = self._nodes[name]
        if not isinstance(value, str):
            raise TypeError(f"node '{name}' is {node_kind(value).value}, not string")
        return value

    def set_string(self, name: str, value: str) -> None:
        """Replace an existing node's value, keeping its position."""
        if name not in self._nodes:
            raise KeyError(name)
        self._nodes[name] = value

    def to_dict(self) -> dict[str, Any]:
        return dict(self._nodes)
