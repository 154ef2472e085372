"""Conversion between live Node trees and plain node objects.

A node object ("DOM object") is a JSON-friendly dict::

    {"nodeName": "p", "attrs": {"id": "x", "style": {"fontSize": "12px"}}, "content": "Hi"}
    {"nodeName": "ul", "attrs": {}, "children": [{"nodeName": "li", "attrs": {}, "content": "a"}]}
    {"nodeName": "#text", "content": "plain text"}

Element objects always carry ``attrs``. An element whose children are all
text is collapsed to ``content``; an element with no children has neither
key. ``events`` maps event names to handlers and never reaches markup.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypedDict

from .diagnostics import MalformedTemplateError, emit
from .node import Node, NodeKind
from .parser import find_body, parse_document, parse_fragment
from .policy import SanitizationConfig
from .styles import mapping_to_style, style_to_mapping

if TYPE_CHECKING:
    from .diagnostics import Diagnostic


class _DomObjectBase(TypedDict):
    nodeName: str


class DomObject(_DomObjectBase, total=False):
    attrs: dict[str, Any]
    content: str | int | float
    children: list[DomObject]
    events: dict[str, Any]


# Props consumed by JSX tooling that never become attributes.
_IGNORED_PROPS = frozenset({"__source", "__self", "tsxTag", "key", "sanitizeChildren"})
_CLASS_PROPS = frozenset({"class", "className"})
_STYLE_PROPS = frozenset({"style", "css"})
_HTML_PROPS = frozenset({"innerHTML", "html", "dangerouslySetInnerHTML"})
_TEXT_PROPS = frozenset({"text", "textContent", "innerText"})


# -----------------
# Node -> object
# -----------------


def _shallow_object(node: Node) -> dict[str, Any] | None:
    kind = node.kind
    if kind is NodeKind.TEXT:
        text = node.text_content.strip()
        if not text:
            return None
        return {"nodeName": "#text", "content": text}
    if kind is NodeKind.OTHER:
        return None

    attrs: dict[str, Any] = dict(node.attributes)
    style = attrs.get("style")
    if isinstance(style, str):
        parsed = style_to_mapping(style)
        if parsed:
            attrs["style"] = parsed
        else:
            del attrs["style"]

    obj: dict[str, Any] = {"nodeName": node.tag_name.lower(), "attrs": attrs, "children": []}
    if node.events:
        obj["events"] = dict(node.events)
    return obj


def _collapse(obj: dict[str, Any]) -> None:
    children = obj["children"]
    if not children:
        del obj["children"]
        return
    if all(child["nodeName"] == "#text" for child in children):
        obj["content"] = " ".join(str(child["content"]) for child in children)
        del obj["children"]


def to_object(node: Node) -> dict[str, Any] | None:
    """Convert a live node (and its subtree) into a node object.

    Comments, other non-element nodes and whitespace-only text return None.
    """
    root = _shallow_object(node)
    if root is None or "children" not in root:
        return root

    converted: list[dict[str, Any]] = []
    stack: list[tuple[Node, dict[str, Any]]] = [(node, root)]
    while stack:
        source, obj = stack.pop()
        converted.append(obj)
        for child in source.children:
            child_obj = _shallow_object(child)
            if child_obj is None:
                continue
            obj["children"].append(child_obj)
            if "children" in child_obj:
                stack.append((child, child_obj))

    for obj in reversed(converted):
        _collapse(obj)
    return root


# -----------------
# object -> Node
# -----------------


def _require_node_name(obj: Any) -> str:
    name = obj.get("nodeName") if isinstance(obj, Mapping) else None
    if not isinstance(name, str) or not name:
        raise MalformedTemplateError(obj)
    return name


def _flatten_classes(value: Any) -> Iterable[str]:
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from _flatten_classes(item)
    elif value:
        yield str(value)


def _append_markup(el: Node, markup: str, config: SanitizationConfig) -> None:
    fragment = parse_fragment(config.apply(markup), container=el.tag_name if el.namespace is None else "div")
    for child in list(fragment.children):
        el.append_child(child)


def apply_attributes(el: Node, attrs: Mapping[str, Any], config: SanitizationConfig) -> None:
    """Apply node-object attributes to a live element.

    Special cases: style mappings, class lists, markup props (sanitized when
    `config` is enabled), text props and ``on*`` handlers.
    """
    for name, value in attrs.items():
        if name in _IGNORED_PROPS:
            continue

        if name.startswith("on") and callable(value):
            event = name[:-7] if name.endswith("Capture") else name
            event = event[2:].lower()
            if event == "doubleclick":
                event = "dblclick"
            el.events[event] = value
            continue

        if name in _CLASS_PROPS:
            classes = " ".join(_flatten_classes(value))
            if classes:
                el.set_attribute("class", classes)
        elif name in _STYLE_PROPS:
            if isinstance(value, Mapping):
                allowed = config.policy.allowed_css_properties if config.enabled else None
                style = mapping_to_style(value, allowed)
                if style:
                    el.set_attribute("style", style)
            elif value:
                el.set_attribute("style", value)
        elif name in _HTML_PROPS:
            if isinstance(value, Mapping):
                value = value.get("__html")
            if value is not None:
                _append_markup(el, str(value), config)
        elif name in _TEXT_PROPS:
            for child in list(el.children):
                el.remove_child(child)
            el.append_child(Node("#text", text_content=str(value)))
        elif value is True:
            el.set_attribute(name, "")
        elif value is not False and value is not None:
            el.set_attribute(name, value)


def _build_shallow(obj: Any, config: SanitizationConfig) -> Node:
    name = _require_node_name(obj)
    if name == "#text":
        content = obj.get("content")
        return Node("#text", text_content="" if content is None else str(content))

    tag = name.lower()
    svg_tag = config.policy.is_svg_tag(tag)
    el = Node(svg_tag, namespace="svg") if svg_tag else Node(tag)

    attrs = obj.get("attrs")
    if attrs:
        apply_attributes(el, attrs, config)

    content = obj.get("content")
    if content is not None:
        el.append_child(Node("#text", text_content=str(content)))

    events = obj.get("events")
    if events:
        for event, handler in events.items():
            if callable(handler):
                el.events[event] = handler
    return el


def to_element(obj: DomObject | Mapping[str, Any], config: Any = True) -> Node:
    """Materialize a node object into a live Node tree.

    `config` is a :class:`SanitizationConfig`, a bool, or a ``{"sanitize": bool}``
    mapping; it decides whether markup-valued attributes and style mappings are
    filtered. Raises :class:`MalformedTemplateError` for an object without a
    ``nodeName``.
    """
    config = SanitizationConfig.coerce(config)
    root = _build_shallow(obj, config)

    stack: list[tuple[Any, Node]] = [(obj, root)]
    while stack:
        source, el = stack.pop()
        children = source.get("children")
        if not children or el.kind is not NodeKind.ELEMENT:
            continue
        for child_obj in children:
            child = _build_shallow(child_obj, config)
            el.append_child(child)
            if isinstance(child_obj, Mapping) and child_obj.get("children"):
                stack.append((child_obj, child))
    return root


# -----------------
# Markup helpers
# -----------------


def object_from_html(html: str, *, errors: list[Diagnostic] | None = None) -> dict[str, Any] | None:
    """Parse `html` and convert the first element of the body to a node object.

    Falls back to a ``#text`` object when the body holds only text.
    """
    if not isinstance(html, str) or not html.strip():
        emit(errors, "empty-html-input", "Input is not a valid HTML string.")
        return None

    body = find_body(parse_document(html))
    first = body.first_element_child() if body is not None else None
    if first is None:
        text = body.text.strip() if body is not None else ""
        if text:
            return {"nodeName": "#text", "content": text}
        emit(errors, "no-element-found", "No valid element found in the HTML string.")
        return None
    return to_object(first)


def element_from_html(html: str, config: Any = True, *, errors: list[Diagnostic] | None = None) -> Node | None:
    """Parse `html` into a node object and materialize it."""
    obj = object_from_html(html, errors=errors)
    return to_element(obj, config) if obj is not None else None


def text_node(text: Any, *, parse: bool = False, config: Any = False) -> Node:
    """Build a text node, or with `parse` a node/fragment from markup-looking text.

    With `parse` and sanitization enabled, the markup is sanitized first.
    """
    value = str(text)
    stripped = value.strip()
    if not parse:
        return Node("#text", text_content=value)
    if not stripped:
        return Node("#document-fragment")
    if stripped.startswith("<") and stripped.endswith(">"):
        fragment = parse_fragment(SanitizationConfig.coerce(config).apply(stripped))
        if len(fragment.children) == 1:
            only = fragment.children[0]
            fragment.remove_child(only)
            return only
        return fragment
    return Node("#text", text_content=value)
