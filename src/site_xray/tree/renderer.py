"""render(): projects a Descriptor tree into nested, collapsible HTML.

Containers with children become ``<ul class="tree">`` groups with a
``<label>`` row; every group below the root starts ``closed``.  Everything
else is a single ``<li>`` row.  Children are emitted in descriptor order.

Every key label and every content string is passed through ``html.escape``.
"""

from __future__ import annotations

from html import escape

from site_xray.errors import UnknownDataTypeError
from site_xray.tree.nodes import DataType, Descriptor

__all__ = ["render"]

_LEAF_TYPES: frozenset[DataType] = frozenset(
    {
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
    }
)

_EMPTY_TYPES: frozenset[DataType] = frozenset({DataType.NULL, DataType.UNDEFINED})

_COUNTED_TYPES: frozenset[DataType] = frozenset(
    {DataType.ARRAY, DataType.MAP, DataType.SET}
)


def render(descriptor: Descriptor) -> str:
    """Return the ``<ul class="root">`` markup for a descriptor tree.

    Raises:
        UnknownDataTypeError: If any descriptor carries a type outside the
            sixteen DataType tags.
    """
    return f'<ul class="root">{_render_node(descriptor, 0)}</ul>'


def _render_node(node: Descriptor, depth: int) -> str:
    key_label = f"{escape(node.key)}: " if node.key else ""
    node_type = node.type

    if node_type in _LEAF_TYPES:
        text = escape(node.content) if isinstance(node.content, str) and node.content else ""
        return f'<li>{key_label}<code class="{node_type}"><span>{text}</span></code></li>'

    if node_type in _EMPTY_TYPES:
        return f'<li>{key_label}<code class="{node_type}"></code></li>'

    if node_type == DataType.OBJECT:
        if node.children:
            label = f'{key_label}<code class="{node_type}"></code>'
            return _render_group(node, label, depth)
        return f'<li>{key_label}<code class="{node_type}"></code></li>'

    if node_type in _COUNTED_TYPES:
        count = f"<span>{node.length if node.length is not None else 0}</span>"
        if node.children:
            label = f'{key_label}<code class="{node_type}">{count}</code>'
            return _render_group(node, label, depth)
        return f'<li>{key_label}<code class="{node_type}">{count}</code></li>'

    msg = f"Unknown data type {node_type!r} encountered"
    raise UnknownDataTypeError(msg)


def _render_group(node: Descriptor, label: str, depth: int) -> str:
    css_class = "tree closed" if depth > 0 else "tree"
    children = "".join(_render_node(child, depth + 1) for child in node.children)
    return f'<li><ul class="{css_class}"><label>{label}</label>{children}</ul></li>'
