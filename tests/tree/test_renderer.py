"""Tests for render()."""

from __future__ import annotations

import pytest

from site_xray.errors import UnknownDataTypeError, XrayError
from site_xray.tree.nodes import DataType, Descriptor
from site_xray.tree.renderer import render


def _root(*children: Descriptor) -> Descriptor:
    return Descriptor(DataType.OBJECT, key="root", content=list(children), length=len(children))


class TestLeaves:
    @pytest.mark.parametrize(
        "tag",
        [
            DataType.STRING,
            DataType.NUMBER,
            DataType.BOOLEAN,
            DataType.REGEXP,
            DataType.SYMBOL,
            DataType.DATE,
            DataType.INSTANCE,
            DataType.CIRCULAR,
            DataType.FUNCTION,
            DataType.UNKNOWN,
        ],
    )
    def test_leaf_row(self, tag: DataType) -> None:
        html = render(Descriptor(tag, key="k", content="v"))
        assert html == f'<ul class="root"><li>k: <code class="{tag}"><span>v</span></code></li></ul>'

    @pytest.mark.parametrize("tag", [DataType.NULL, DataType.UNDEFINED])
    def test_empty_row(self, tag: DataType) -> None:
        html = render(Descriptor(tag, key="k"))
        assert html == f'<ul class="root"><li>k: <code class="{tag}"></code></li></ul>'

    def test_unkeyed_row_has_no_label(self) -> None:
        html = render(Descriptor(DataType.NUMBER, content="1"))
        assert html == '<ul class="root"><li><code class="number"><span>1</span></code></li></ul>'


class TestContainers:
    def test_root_group_is_open(self) -> None:
        html = render(_root(Descriptor(DataType.STRING, key="title", content="Hi")))
        assert html == (
            '<ul class="root"><li><ul class="tree"><label>root: <code class="object"></code>'
            '</label><li>title: <code class="string"><span>Hi</span></code></li></ul></li></ul>'
        )

    def test_nested_groups_start_closed(self) -> None:
        inner = Descriptor(
            DataType.ARRAY,
            key="tags",
            content=[Descriptor(DataType.STRING, key="0", content="a")],
            length=1,
        )
        html = render(_root(inner))
        assert '<ul class="tree closed"><label>tags: <code class="array"><span>1</span></code>' in html
        assert html.count("tree closed") == 1

    def test_empty_array_shows_count(self) -> None:
        html = render(_root(Descriptor(DataType.ARRAY, key="tags", length=0)))
        assert '<li>tags: <code class="array"><span>0</span></code></li>' in html

    def test_truncated_container_shows_count_without_group(self) -> None:
        html = render(_root(Descriptor(DataType.MAP, key="m", content=[], length=4)))
        assert '<li>m: <code class="map"><span>4</span></code></li>' in html
        assert "tree closed" not in html

    def test_object_without_children_is_a_row(self) -> None:
        html = render(_root(Descriptor(DataType.OBJECT, key="empty", length=0)))
        assert '<li>empty: <code class="object"></code></li>' in html

    def test_set_children_have_no_labels(self) -> None:
        members = [Descriptor(DataType.NUMBER, content="1")]
        html = render(_root(Descriptor(DataType.SET, key="s", content=members, length=1)))
        assert '<li><code class="number"><span>1</span></code></li>' in html

    def test_children_in_descriptor_order(self) -> None:
        html = render(
            _root(
                Descriptor(DataType.NUMBER, key="b", content="2"),
                Descriptor(DataType.NUMBER, key="a", content="1"),
            )
        )
        assert html.index("b: ") < html.index("a: ")


class TestEscaping:
    def test_content_is_escaped(self) -> None:
        html = render(Descriptor(DataType.STRING, key="k", content="<script>&\"'"))
        assert "<script>" not in html
        assert "&lt;script&gt;&amp;&quot;&#x27;" in html

    def test_key_is_escaped(self) -> None:
        html = render(Descriptor(DataType.NUMBER, key="<b>", content="1"))
        assert "&lt;b&gt;: " in html


class TestErrors:
    def test_unknown_type_raises(self) -> None:
        bogus = Descriptor("bogus", key="x")  # type: ignore[arg-type]
        with pytest.raises(UnknownDataTypeError, match="Unknown data type"):
            render(_root(bogus))

    def test_error_is_xray_error(self) -> None:
        assert issubclass(UnknownDataTypeError, XrayError)
