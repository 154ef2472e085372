from .bridge import DomObject, element_from_html, object_from_html, text_node, to_element, to_object
from .diagnostics import Diagnostic, MalformedTemplateError
from .merge import MergePosition, build_from_object, find_node_by_id, merge_by_id
from .node import Node, NodeKind
from .parser import find_body, parse_document, parse_fragment
from .policy import DEFAULT_CONFIG, DEFAULT_POLICY, SanitizationConfig, SanitizationPolicy
from .sanitize import is_uri_allowed, sanitize, sanitize_tree
from .selector import SelectorError, compile_selector
from .serialize import inner_html, to_html, to_test_format
from .styles import filter_style, style_to_mapping

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_POLICY",
    "Diagnostic",
    "DomObject",
    "MalformedTemplateError",
    "MergePosition",
    "Node",
    "NodeKind",
    "SanitizationConfig",
    "SanitizationPolicy",
    "SelectorError",
    "build_from_object",
    "compile_selector",
    "element_from_html",
    "filter_style",
    "find_body",
    "find_node_by_id",
    "inner_html",
    "is_uri_allowed",
    "merge_by_id",
    "object_from_html",
    "parse_document",
    "parse_fragment",
    "sanitize",
    "sanitize_tree",
    "style_to_mapping",
    "text_node",
    "to_element",
    "to_html",
    "to_object",
    "to_test_format",
]
