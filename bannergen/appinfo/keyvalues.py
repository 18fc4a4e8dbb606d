"""
KeyValues document tree.

Binary KeyValues payloads are deserialized with the ``vdf`` package and
converted into a small tree of nodes. Lookups never raise: an absent key
(or indexing into a leaf) yields ``MISSING``, so call sites can chain
``doc["common"]["library_assets"]["logo_position"]`` and test ``.exists``.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple

import vdf


class DocumentError(ValueError):
    """Raised when a KeyValues payload cannot be deserialized."""


class Node:
    """Base node; behaves like a missing value unless overridden."""

    exists = False

    def __getitem__(self, key: str) -> "Node":
        return MISSING

    def lookup(self, *path: str) -> "Node":
        node = self
        for key in path:
            node = node[key]
        return node

    @property
    def text(self) -> Optional[str]:
        return None


class _Missing(Node):
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class Leaf(Node):
    value: str
    exists = True

    @property
    def text(self) -> Optional[str]:
        return self.value


@dataclass(frozen=True)
class Branch(Node):
    children: Tuple[Tuple[str, Node], ...] = ()
    exists = True

    def __getitem__(self, key: str) -> Node:
        for name, child in self.children:
            if name == key:
                return child
        return MISSING

    def keys(self) -> Iterator[str]:
        return (name for name, _ in self.children)

    def __len__(self) -> int:
        return len(self.children)


def from_mapping(mapping: Mapping) -> Branch:
    """Convert a nested mapping (as produced by vdf) into a Branch."""
    children = []
    for key, value in mapping.items():
        if isinstance(value, Mapping):
            children.append((str(key), from_mapping(value)))
        else:
            children.append((str(key), Leaf(str(value))))
    return Branch(tuple(children))


def parse_document(payload: bytes) -> Node:
    """Deserialize one binary KeyValues payload and unwrap its single root."""
    try:
        data = vdf.binary_loads(bytes(payload))
    except Exception as e:
        raise DocumentError(f"KeyValues payload could not be parsed: {e}") from e

    root = from_mapping(data)
    if len(root) == 1:
        (_, only), = root.children
        if isinstance(only, Branch):
            return only
    return root
