"""Tests for the Descriptor dataclass and the DataType StrEnum."""

from __future__ import annotations

import json

import pytest

from site_xray.tree.nodes import CONTAINER_TYPES, DataType, Descriptor

# ---------------------------------------------------------------------------
# DataType
# ---------------------------------------------------------------------------


class TestDataType:
    def test_has_exactly_sixteen_members(self) -> None:
        assert len(list(DataType)) == 16

    def test_values_are_lowercase_names(self) -> None:
        values = {str(m) for m in DataType}
        assert values == {
            "undefined",
            "boolean",
            "number",
            "string",
            "symbol",
            "function",
            "instance",
            "null",
            "array",
            "regexp",
            "date",
            "map",
            "set",
            "object",
            "circular",
            "unknown",
        }

    def test_is_str_subclass(self) -> None:
        assert isinstance(DataType.REGEXP, str)
        assert DataType.REGEXP == "regexp"

    def test_container_types(self) -> None:
        assert CONTAINER_TYPES == {
            DataType.ARRAY,
            DataType.OBJECT,
            DataType.MAP,
            DataType.SET,
        }


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


class TestDescriptorDefaults:
    def test_defaults(self) -> None:
        node = Descriptor(DataType.NULL)
        assert node.key is None
        assert node.content is None
        assert node.length is None

    def test_children_of_leaf_is_empty(self) -> None:
        node = Descriptor(DataType.STRING, key="a", content="x")
        assert node.children == []

    def test_children_of_container(self) -> None:
        child = Descriptor(DataType.NUMBER, key="0", content="1")
        node = Descriptor(DataType.ARRAY, key="a", content=[child], length=1)
        assert node.children == [child]


class TestToDict:
    def test_leaf_omits_absent_fields(self) -> None:
        node = Descriptor(DataType.NULL, key="x")
        assert node.to_dict() == {"key": "x", "type": "null"}

    def test_unkeyed_leaf(self) -> None:
        node = Descriptor(DataType.NUMBER, content="3")
        assert node.to_dict() == {"type": "number", "content": "3"}

    def test_empty_container_has_length_but_no_content(self) -> None:
        node = Descriptor(DataType.ARRAY, key="tags", length=0)
        assert node.to_dict() == {"key": "tags", "type": "array", "length": 0}

    def test_nested_children(self) -> None:
        node = Descriptor(
            DataType.OBJECT,
            key="root",
            content=[Descriptor(DataType.STRING, key="title", content="Hi")],
            length=1,
        )
        assert node.to_dict() == {
            "key": "root",
            "type": "object",
            "content": [{"key": "title", "type": "string", "content": "Hi"}],
            "length": 1,
        }

    def test_is_json_serializable(self) -> None:
        node = Descriptor(
            DataType.MAP,
            key="m",
            content=[Descriptor(DataType.CIRCULAR, key="self", content="root.m")],
            length=1,
        )
        assert json.loads(json.dumps(node.to_dict()))["content"][0]["type"] == "circular"


class TestFromDict:
    def test_rebuilds_tree(self) -> None:
        data = {
            "key": "root",
            "type": "object",
            "content": [
                {"key": "tags", "type": "array", "length": 0},
                {"key": "n", "type": "number", "content": "7"},
            ],
            "length": 2,
        }
        node = Descriptor.from_dict(data)
        assert node.type is DataType.OBJECT
        assert [c.key for c in node.children] == ["tags", "n"]
        assert node.children[0].length == 0
        assert node.children[0].content is None
        assert node.children[1].content == "7"
        assert node.to_dict() == data

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(ValueError):
            Descriptor.from_dict({"type": "bogus"})
