from __future__ import annotations

from dataclasses import dataclass

_CATEGORY_BITS = 8
_INDEX_BITS = 64 - _CATEGORY_BITS
_INDEX_MASK = (1 << _INDEX_BITS) - 1


@dataclass(frozen=True)
class NodeSymbol:
    """Node identity packed as a category character in the top byte plus an index."""

    category: str
    index: int

    @classmethod
    def from_id(cls, node_id: int) -> NodeSymbol:
        value = int(node_id) & ((1 << 64) - 1)
        return cls(category=chr(value >> _INDEX_BITS), index=value & _INDEX_MASK)

    @property
    def value(self) -> int:
        return (ord(self.category) << _INDEX_BITS) | (self.index & _INDEX_MASK)

    @property
    def label(self) -> str:
        return f"{self.category}({self.index})"

    def __str__(self) -> str:
        return f"{self.category}{self.index}"


def node_label(node_id: int) -> str:
    return NodeSymbol.from_id(node_id).label
