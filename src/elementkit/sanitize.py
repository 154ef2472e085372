"""Allow-list HTML sanitizer.

The sanitizer never edits the parsed tree. It builds a new tree and copies
into it only what the policy admits:

- text is copied verbatim (escaping happens at serialization time);
- an element is admitted if its tag is allowed, is a content tag (rebuilt as
  the policy's container tag) or matches the caller's extra selector;
- everything else (disallowed elements, comments) is dropped together with its
  whole subtree. Text inside a dropped element is never kept.

Disallowed attributes, CSS properties and URL schemes are simply omitted.
Nothing is escaped into the output instead, and nothing raises.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import COLLAPSIBLE_INLINE_ELEMENTS
from .node import Node, NodeKind
from .parser import find_body, parse_document
from .policy import DEFAULT_POLICY, ExtraSelector, SanitizationPolicy
from .selector import SelectorError, compile_selector
from .serialize import inner_html
from .styles import dropped_properties, filter_style

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from .diagnostics import ReportCallback

# U+00A0 and other Unicode spaces are visible content.
_ASCII_WHITESPACE = " \t\n\r\f"


def is_uri_allowed(value: str, allowed_schemes: Collection[str]) -> bool:
    """Relative (colon-free) values always pass; others need an allowed scheme prefix."""
    if ":" not in value:
        return True
    return any(value.startswith(scheme) for scheme in allowed_schemes)


def _is_admitted(node: Node, policy: SanitizationPolicy, extra: Callable[[Node], bool] | None) -> bool:
    tag = node.tag_name
    if tag in policy.allowed_tags or tag in policy.content_tags:
        return True
    return extra is not None and bool(extra(node))


def _copy_element(node: Node, policy: SanitizationPolicy, report: ReportCallback | None) -> Node:
    if node.tag_name in policy.content_tags:
        copy = Node(policy.container_tag)
    else:
        copy = Node(node.tag_name, namespace=node.namespace)

    for name, value in node.attributes.items():
        if name not in policy.allowed_attributes:
            if report is not None:
                report(f"Dropped attribute '{name}' on <{node.tag_name}>", node=node)
            continue

        if name == "style":
            if report is not None:
                for prop in dropped_properties(value, policy.allowed_css_properties):
                    report(f"Dropped style property '{prop}' on <{node.tag_name}>", node=node)
            style = filter_style(value, policy.allowed_css_properties).strip()
            if style:
                copy.set_attribute("style", style)
            continue

        if name in policy.uri_attributes and not is_uri_allowed(value, policy.allowed_schemes):
            if report is not None:
                report(f"Dropped URL attribute '{name}' on <{node.tag_name}> (scheme not allowed)", node=node)
            continue

        copy.set_attribute(name, value)
    return copy


def _is_blank(node: Node) -> bool:
    for child in node.children:
        if child.kind is not NodeKind.TEXT or child.text_content.strip(_ASCII_WHITESPACE):
            return False
    return True


def sanitize_tree(
    root: Node,
    extra_selector: ExtraSelector = None,
    *,
    policy: SanitizationPolicy = DEFAULT_POLICY,
    report: ReportCallback | None = None,
) -> Node:
    """Return a sanitized copy of the children of `root` as a ``#document-fragment``.

    `root` itself is treated as the container and is not subject to the policy.
    """
    try:
        extra = compile_selector(extra_selector)
    except SelectorError as exc:
        # An unusable selector admits nothing extra; the policy still applies.
        if report is not None:
            report(f"Ignored extra selector: {exc}")
        extra = None
    out_root = Node("#document-fragment")
    inline_wrappers: list[Node] = []

    stack = [(child, out_root) for child in reversed(root.children)]
    while stack:
        node, parent = stack.pop()
        kind = node.kind
        if kind is NodeKind.TEXT:
            parent.append_child(Node("#text", text_content=node.text_content))
        elif kind is NodeKind.ELEMENT:
            if not _is_admitted(node, policy, extra):
                if report is not None:
                    report(f"Dropped tag '{node.tag_name}'", node=node)
                continue
            copy = _copy_element(node, policy, report)
            parent.append_child(copy)
            if copy.namespace is None and copy.tag_name in COLLAPSIBLE_INLINE_ELEMENTS:
                inline_wrappers.append(copy)
            stack.extend((child, copy) for child in reversed(node.children))
        elif kind is NodeKind.OTHER:
            if report is not None:
                report(f"Dropped {node.tag_name} node", node=node)
        else:  # pragma: no cover - NodeKind is closed
            msg = f"Unhandled node kind: {kind!r}"
            raise AssertionError(msg)

    # Wrappers were collected in document order; walking them backwards sees
    # descendants first, so nested empty wrappers collapse outwards.
    for wrapper in reversed(inline_wrappers):
        if _is_blank(wrapper):
            if report is not None:
                report(f"Dropped empty <{wrapper.tag_name}>", node=wrapper)
            wrapper.parent.remove_child(wrapper)

    return out_root


def sanitize(
    html: str,
    extra_selector: ExtraSelector = None,
    *,
    policy: SanitizationPolicy = DEFAULT_POLICY,
    report: ReportCallback | None = None,
    pretty: bool = True,
) -> str:
    """Sanitize untrusted markup and return the cleaned markup.

    The input is parsed as a document body (a ``<body>`` wrapper is added when
    the input has none) and only the body's content is returned. With
    `pretty`, adjacent ``div`` tags are separated by a newline for
    readability; this has no structural meaning.
    """
    if not isinstance(html, str):
        msg = f"sanitize() expects a string, got {type(html).__name__}"
        raise TypeError(msg)

    html = html.strip()
    if html == "" or html == "<br>":
        return ""

    if "<body" not in html.lower():
        html = f"<body>{html}</body>"

    body = find_body(parse_document(html))
    if body is None:
        return ""

    tree = sanitize_tree(body, extra_selector, policy=policy, report=report)
    if pretty:
        _break_adjacent_divs(tree)
    return inner_html(tree)


def _is_html_div(node: Node | None) -> bool:
    return node is not None and node.tag_name == "div" and node.namespace is None


def _break_adjacent_divs(root: Node) -> None:
    """Put a newline where serialized markup would read ``div><div``.

    That is between sibling divs, and before the first child div of an
    attribute-less div. Only text nodes are added, so markup inside attribute
    values and raw text is never touched.
    """
    for node in list(root.iter_descendants()):
        if not _is_html_div(node):
            continue
        if _is_html_div(node.next_sibling):
            parent = node.parent
            parent.insert_child_at(parent.children.index(node) + 1, Node("#text", text_content="\n"))
        if not node.attributes and node.children and _is_html_div(node.children[0]):
            node.insert_child_at(0, Node("#text", text_content="\n"))
