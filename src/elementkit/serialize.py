"""HTML serialization utilities for elementkit Node trees."""

from __future__ import annotations

from .constants import NEWLINE_STRIPPING_ELEMENTS, RAWTEXT_ELEMENTS, VOID_ELEMENTS
from .node import Node

_CONTAINER_NAMES = frozenset({"#document", "#document-fragment"})


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if value is None:
        return ""
    return str(value).replace("&", "&amp;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: dict[str, str | None] | None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Node) -> str:
    """Serialize a node (and its subtree) to compact HTML.

    Documents and fragments serialize as their children.
    """
    if node.tag_name in _CONTAINER_NAMES:
        return inner_html(node)
    return _serialize(node)


def inner_html(node: Node) -> str:
    """Serialize only the children of ``node``."""
    return "".join(_serialize(child) for child in node.children)


def _serialize(node: Node) -> str:
    # Work items are either nodes to open or literal strings (end tags) to emit.
    out: list[str] = []
    stack: list[Node | str] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue

        name = item.tag_name
        if name == "#text":
            parent = item.parent
            if parent is not None and parent.namespace is None and parent.tag_name in RAWTEXT_ELEMENTS:
                out.append(item.text_content)
            else:
                out.append(_escape_text(item.text_content))
            continue
        if name == "#comment":
            out.append(f"<!--{item.text_content}-->")
            continue
        if name == "!doctype":
            out.append(f"<!DOCTYPE {item.text_content or 'html'}>")
            continue
        if name in _CONTAINER_NAMES:
            stack.extend(reversed(item.children))
            continue

        out.append(serialize_start_tag(name, item.attributes))
        if item.namespace is None and name in VOID_ELEMENTS:
            continue
        if item.namespace is None and name in NEWLINE_STRIPPING_ELEMENTS:
            first = item.children[0] if item.children else None
            if first is not None and first.tag_name == "#text" and first.text_content.startswith("\n"):
                out.append("\n")
        stack.append(serialize_end_tag(name))
        stack.extend(reversed(item.children))
    return "".join(out)


def to_test_format(node: Node, indent: int = 0) -> str:
    """Convert node to html5lib test format string.

    Uses '| ' prefixes and two-space indentation per level; attributes are
    sorted and listed under their element.
    """
    lines: list[str] = []
    if node.tag_name in _CONTAINER_NAMES:
        stack = [(child, indent) for child in reversed(node.children)]
    else:
        stack = [(node, indent)]

    while stack:
        current, depth = stack.pop()
        pad = " " * depth
        name = current.tag_name
        if name == "#text":
            lines.append(f'| {pad}"{current.text_content}"')
            continue
        if name == "#comment":
            lines.append(f"| {pad}<!-- {current.text_content} -->")
            continue
        if name == "!doctype":
            lines.append(f"| <!DOCTYPE {current.text_content}>")
            continue

        display = f"{current.namespace} {name}" if current.namespace else name
        lines.append(f"| {pad}<{display}>")
        for key, value in sorted(current.attributes.items()):
            lines.append(f'| {pad}  {key}="{value}"')
        stack.extend((child, depth + 2) for child in reversed(current.children))
    return "\n".join(lines)
