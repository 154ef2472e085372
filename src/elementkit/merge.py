"""Splice node objects into a node-object template by element id."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from .bridge import to_element, to_object
from .diagnostics import MalformedTemplateError, emit
from .policy import SanitizationConfig

if TYPE_CHECKING:
    from .diagnostics import Diagnostic, ReportCallback
    from .node import Node


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+)."""


class MergePosition(_StrEnum):
    APPEND = "append"
    PREPEND = "prepend"
    REPLACE = "replace"


def copy_tree(obj: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a node-object tree without recursing on its depth.

    Attribute mappings are deep-copied; event handlers are shared.
    """
    root = _copy_node(obj)
    stack = [root]
    while stack:
        current = stack.pop()
        children = current.get("children")
        if isinstance(children, list):
            copied = [_copy_node(child) if isinstance(child, Mapping) else copy.deepcopy(child) for child in children]
            current["children"] = copied
            stack.extend(child for child in copied if isinstance(child, dict))
    return root


def _copy_node(obj: Mapping[str, Any]) -> dict[str, Any]:
    node = dict(obj)
    if isinstance(node.get("attrs"), Mapping):
        node["attrs"] = copy.deepcopy(dict(node["attrs"]))
    if isinstance(node.get("events"), Mapping):
        node["events"] = dict(node["events"])
    return node


def find_node_by_id(obj: Mapping[str, Any], node_id: str) -> dict[str, Any] | None:
    """Depth-first search for the first node whose ``attrs.id`` equals `node_id`.

    A node is checked before its children and children in document order, so
    the first match in document order wins.
    """
    if not obj or not node_id:
        return None

    stack = [obj]
    while stack:
        current = stack.pop()
        if not isinstance(current, Mapping):
            continue
        attrs = current.get("attrs")
        if isinstance(attrs, Mapping) and attrs.get("id") == node_id:
            return current
        children = current.get("children")
        if isinstance(children, list):
            stack.extend(reversed(children))
    return None


def merge_by_id(
    root: Mapping[str, Any],
    target_id: str,
    insertion: Mapping[str, Any],
    position: MergePosition | str = MergePosition.APPEND,
    *,
    errors: list[Diagnostic] | None = None,
    report: ReportCallback | None = None,
) -> dict[str, Any]:
    """Return a deep copy of `root` with `insertion` spliced into the node with id `target_id`.

    `root` and `insertion` are never modified. When no node carries the id,
    a ``merge-target-not-found`` diagnostic is recorded, `report` is called
    with the same message, and the unmodified copy is returned.
    """
    if not isinstance(root, Mapping) or not isinstance(root.get("nodeName"), str) or not root["nodeName"]:
        raise MalformedTemplateError(root, f"Invalid main DOM object. Must have a 'nodeName' property. {root!r}")
    position = MergePosition(position)

    merged = copy_tree(root)
    target = find_node_by_id(merged, target_id)
    if target is None:
        msg = f"Node with ID '{target_id}' not found in the main DOM object. Merge cancelled."
        emit(errors, "merge-target-not-found", msg, category="merge")
        if report is not None:
            report(msg)
        return merged

    inserted = copy_tree(insertion)
    children = target.get("children")
    if not isinstance(children, list):
        children = []
        target["children"] = children

    if position is MergePosition.PREPEND:
        children.insert(0, inserted)
    elif position is MergePosition.REPLACE:
        children[:] = [inserted]
    else:
        children.append(inserted)
    return merged


def build_from_object(
    dom_object: Mapping[str, Any],
    merge_object: Mapping[str, Any] | None = None,
    target_id: str | None = None,
    position: MergePosition | str = MergePosition.APPEND,
    config: Any = True,
    *,
    errors: list[Diagnostic] | None = None,
    report: ReportCallback | None = None,
) -> Node:
    """Materialize `dom_object`, optionally merging `merge_object` into it first.

    The merge object goes through :func:`to_element` and back through
    :func:`to_object` before it is spliced in, so it gets the same attribute
    handling as the template.
    """
    if not isinstance(dom_object, Mapping) or not isinstance(dom_object.get("nodeName"), str):
        msg = f"Invalid main DOM object. Must have a 'nodeName' property. {dom_object!r}"
        raise MalformedTemplateError(dom_object, msg)
    config = SanitizationConfig.coerce(config)

    final = dom_object
    if merge_object and isinstance(target_id, str) and target_id.strip():
        normalized = to_object(to_element(merge_object, config))
        if normalized is not None:
            final = merge_by_id(dom_object, target_id, normalized, position, errors=errors, report=report)

    return to_element(final, config)
