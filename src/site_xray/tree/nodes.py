"""Descriptor dataclass and DataType StrEnum for inspected-value trees.

Provides the foundational data types produced by DataParser and consumed
by the renderer and the JSON snapshot.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

__all__ = ["CONTAINER_TYPES", "DataType", "Descriptor"]


class DataType(StrEnum):
    """The closed set of sixteen tags a Descriptor can carry.

    StrEnum values are the lowercased member names, e.g.
    ``DataType.REGEXP == "regexp"``.  Values that fit no specific tag fall
    into INSTANCE or UNKNOWN; the set is never extended ad hoc.
    """

    UNDEFINED = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    SYMBOL = auto()
    FUNCTION = auto()
    INSTANCE = auto()
    NULL = auto()
    ARRAY = auto()
    REGEXP = auto()
    DATE = auto()
    MAP = auto()
    SET = auto()
    OBJECT = auto()
    CIRCULAR = auto()
    UNKNOWN = auto()


# Tags whose descriptors carry a length and may carry children.
CONTAINER_TYPES: frozenset[DataType] = frozenset(
    {DataType.ARRAY, DataType.OBJECT, DataType.MAP, DataType.SET}
)


@dataclass(slots=True)
class Descriptor:
    """A node describing one inspected value.

    Attributes:
        type:    Which kind of value this is (see DataType).
        key:     The key under which the value was found in its parent.
                 None for set elements and for an unkeyed root.
        content: Short text for leaf types, the child descriptors for
                 containers with at least one child, the first path for
                 CIRCULAR.  None when there is nothing to show.
        length:  Element / entry count for ARRAY, OBJECT, MAP and SET.
    """

    type: DataType
    key: str | None = None
    content: str | list[Descriptor] | None = None
    length: int | None = None

    @property
    def children(self) -> list[Descriptor]:
        """Child descriptors, empty for leaves."""
        if isinstance(self.content, list):
            return self.content
        return []

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready plain structure, omitting absent fields."""
        out: dict[str, Any] = {}
        if self.key is not None:
            out["key"] = self.key
        out["type"] = str(self.type)
        if isinstance(self.content, list):
            out["content"] = [child.to_dict() for child in self.content]
        elif self.content is not None:
            out["content"] = self.content
        if self.length is not None:
            out["length"] = self.length
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Descriptor:
        """Rebuild a descriptor tree from its ``to_dict()`` form.

        Raises:
            ValueError: If a ``type`` is not one of the sixteen tags.
        """
        content = data.get("content")
        if isinstance(content, list):
            content = [cls.from_dict(child) for child in content]
        return cls(
            type=DataType(data["type"]),
            key=data.get("key"),
            content=content,
            length=data.get("length"),
        )
