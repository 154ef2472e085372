"""Sanitization policy and per-call configuration.

A :class:`SanitizationPolicy` is the whole security boundary in one immutable
value: tags, content tags, attributes, CSS properties, URI schemes and the
attributes that carry URIs. There is no API for patching a policy; build a new
one when a stricter or looser variant is needed.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import (
    DEFAULT_ATTRIBUTE_WHITELIST,
    DEFAULT_CONTAINER_TAG,
    DEFAULT_CONTENT_TAG_WHITELIST,
    DEFAULT_CSS_WHITELIST,
    DEFAULT_SCHEMA_WHITELIST,
    DEFAULT_TAG_WHITELIST,
    DEFAULT_URI_ATTRIBUTES,
    SVG_ELEMENTS,
)
from .node import Node

NodePredicate = Callable[[Node], bool]
ExtraSelector = str | NodePredicate | None


@dataclass(frozen=True, slots=True)
class SanitizationPolicy:
    """An allow-list driven policy for sanitizing a parsed tree.

    - Elements whose tag is in `allowed_tags` are kept.
    - Elements whose tag is in `content_tags` are kept but rebuilt as
      `container_tag`, discarding the original tag.
    - `allowed_attributes` applies to every kept element alike.
    - `style` values are reduced to `allowed_css_properties`.
    - Attributes in `uri_attributes` whose value contains ':' must start with
      one of `allowed_schemes`; colon-free (relative) values are not checked.

    Names are compared exactly, so they are expected in the case the parser
    produces (ASCII-lowercase for HTML).
    """

    allowed_tags: Collection[str] = DEFAULT_TAG_WHITELIST
    content_tags: Collection[str] = DEFAULT_CONTENT_TAG_WHITELIST
    allowed_attributes: Collection[str] = DEFAULT_ATTRIBUTE_WHITELIST
    allowed_css_properties: Collection[str] = DEFAULT_CSS_WHITELIST
    allowed_schemes: Collection[str] = DEFAULT_SCHEMA_WHITELIST
    uri_attributes: Collection[str] = DEFAULT_URI_ATTRIBUTES
    container_tag: str = DEFAULT_CONTAINER_TAG

    # Tags built in the SVG namespace when materializing node objects.
    svg_elements: Collection[str] = field(default=SVG_ELEMENTS)

    def __post_init__(self) -> None:
        # Normalize to frozensets so callers can pass lists and nothing can be mutated later.
        for name in (
            "allowed_tags",
            "content_tags",
            "allowed_attributes",
            "allowed_css_properties",
            "uri_attributes",
            "svg_elements",
        ):
            value = getattr(self, name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))

        # Schemes are prefix-matched in declaration order.
        if isinstance(self.allowed_schemes, str):
            object.__setattr__(self, "allowed_schemes", (self.allowed_schemes,))
        elif not isinstance(self.allowed_schemes, tuple):
            object.__setattr__(self, "allowed_schemes", tuple(self.allowed_schemes))

        if not self.container_tag:
            msg = "container_tag must be a non-empty tag name"
            raise ValueError(msg)

    def is_svg_tag(self, tag: str) -> str | None:
        """Return the canonical SVG spelling of `tag`, or None if it is not an SVG tag."""
        lowered = tag.lower()
        for name in self.svg_elements:
            if name.lower() == lowered:
                return name
        return None


DEFAULT_POLICY: SanitizationPolicy = SanitizationPolicy()


@dataclass(frozen=True, slots=True)
class SanitizationConfig:
    """Per-call sanitization switch.

    `extra_allowed` admits additional elements: either a predicate over
    :class:`~elementkit.node.Node` or a selector string (see
    :func:`elementkit.selector.compile_selector`).
    """

    enabled: bool = True
    extra_allowed: ExtraSelector = None
    policy: SanitizationPolicy = DEFAULT_POLICY

    @classmethod
    def coerce(cls, value: Any) -> SanitizationConfig:
        """Accept a config, a bool, a ``{"sanitize": bool}`` mapping or None."""
        if value is None:
            return DEFAULT_CONFIG
        if isinstance(value, SanitizationConfig):
            return value
        if isinstance(value, bool):
            return cls(enabled=value)
        if isinstance(value, Mapping):
            if "sanitize" in value:
                return cls(enabled=bool(value["sanitize"]))
            return DEFAULT_CONFIG
        msg = f"Unsupported sanitization config: {value!r}"
        raise TypeError(msg)

    def apply(self, html: str) -> str:
        """Sanitize `html` when enabled, otherwise return it unchanged."""
        if not self.enabled:
            return html
        from .sanitize import sanitize

        return sanitize(html, self.extra_allowed, policy=self.policy)


DEFAULT_CONFIG: SanitizationConfig = SanitizationConfig()
