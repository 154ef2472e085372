"""Inline style parsing and filtering.

Declarations are parsed with tinycss2, so values come back in the parser's own
serialization (comments dropped) and property names are lowercased. Anything
tinycss2 reports as a parse error is dropped, and so is any declaration whose
value loads or evaluates something: ``url()``, ``expression()``, ``image-set()``
and every other function outside :data:`SAFE_CSS_FUNCTIONS`.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator, Mapping

import tinycss2
from tinycss2 import ast

_HYPHEN_LOWER_RE = re.compile(r"-([a-z])")
_UPPER_RE = re.compile(r"([A-Z])")

SAFE_CSS_FUNCTIONS = frozenset({"rgb", "rgba", "hsl", "hsla", "calc"})

_COLOR_FUNCTIONS = frozenset({"rgb", "rgba", "hsl", "hsla"})

# Idents that are valid in the background shorthand but are not colors.
_BACKGROUND_KEYWORDS = frozenset(
    {
        "none",
        "repeat",
        "repeat-x",
        "repeat-y",
        "no-repeat",
        "space",
        "round",
        "scroll",
        "fixed",
        "local",
        "top",
        "bottom",
        "left",
        "right",
        "center",
        "cover",
        "contain",
        "auto",
        "border-box",
        "padding-box",
        "content-box",
        "text",
    }
)


def _is_safe_value(tokens: list[ast.Node]) -> bool:
    stack = list(tokens)
    while stack:
        node = stack.pop()
        if isinstance(node, (ast.URLToken, ast.ParseError, ast.CurlyBracketsBlock, ast.SquareBracketsBlock)):
            return False
        if isinstance(node, ast.FunctionBlock):
            if node.lower_name not in SAFE_CSS_FUNCTIONS:
                return False
            stack.extend(node.arguments)
        elif isinstance(node, ast.ParenthesesBlock):
            stack.extend(node.content)
    return True


def _longhand(name: str, tokens: list[ast.Node]) -> str:
    """Map a ``background`` shorthand holding only a color to ``background-color``."""
    if name != "background":
        return name
    parts = [t for t in tokens if not isinstance(t, (ast.WhitespaceToken, ast.Comment))]
    if len(parts) != 1:
        return name
    part = parts[0]
    if isinstance(part, ast.HashToken):
        return "background-color"
    if isinstance(part, ast.IdentToken) and part.lower_value not in _BACKGROUND_KEYWORDS:
        return "background-color"
    if isinstance(part, ast.FunctionBlock) and part.lower_name in _COLOR_FUNCTIONS:
        return "background-color"
    return name


def _parse_declarations(css: str) -> Iterator[tuple[str, str, bool]]:
    if not css or not css.strip():
        return
    for decl in tinycss2.parse_declaration_list(css, skip_comments=True, skip_whitespace=True):
        if decl.type != "declaration":
            continue
        value = tinycss2.serialize(decl.value).strip()
        if not value:
            continue
        yield _longhand(decl.lower_name, decl.value), value, _is_safe_value(decl.value)


def iter_declarations(css: str) -> Iterator[tuple[str, str]]:
    """Yield ``(name, value)`` for each well-formed, safe declaration in `css`.

    Declarations with an empty value are skipped. `!important` is not part of
    the returned value.
    """
    for name, value, safe in _parse_declarations(css):
        if safe:
            yield name, value


def filter_style(css: str, allowed_properties: Collection[str]) -> str:
    """Return `css` reduced to the allowed properties as ``"name: value; "`` pairs."""
    parts: list[str] = []
    for name, value in iter_declarations(css):
        if name in allowed_properties:
            parts.append(f"{name}: {value}; ")
    return "".join(parts)


def dropped_properties(css: str, allowed_properties: Collection[str]) -> list[str]:
    """Names of the parsed declarations `filter_style` would remove."""
    return [name for name, _, safe in _parse_declarations(css) if not safe or name not in allowed_properties]


def to_camel_case(name: str) -> str:
    """``font-size`` -> ``fontSize``"""
    return _HYPHEN_LOWER_RE.sub(lambda m: m.group(1).upper(), name)


def to_hyphen_case(name: str) -> str:
    """``fontSize`` -> ``font-size``"""
    return _UPPER_RE.sub(r"-\1", name).lower()


def style_to_mapping(css: str) -> dict[str, str]:
    """Parse a declaration list into a camelCase property -> value mapping."""
    return {to_camel_case(name): value for name, value in iter_declarations(css)}


def mapping_to_style(styles: Mapping[str, object], allowed_properties: Collection[str] | None = None) -> str:
    """Serialize a camelCase (or hyphen-case) mapping back to a declaration list.

    Empty and None values are skipped. When `allowed_properties` is given the
    result goes through :func:`filter_style`, so other properties and unsafe
    values are left out.
    """
    parts: list[str] = []
    for key, value in styles.items():
        if value is None or value == "":
            continue
        parts.append(f"{to_hyphen_case(str(key))}: {value};")
    style = " ".join(parts)
    if allowed_properties is not None:
        style = filter_style(style, allowed_properties).strip()
    return style
