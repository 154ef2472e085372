"""Element Constants

This module defines the default sanitization vocabulary and the HTML/SVG
element sets shared by the parser, serializer, sanitizer and object bridge.
Sets are frozen so they can be shared between policies and calls.

Usage:
    from elementkit.constants import DEFAULT_TAG_WHITELIST, SVG_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/parsing.html#serialising-html-fragments
"""

# Default allowed HTML tags (structural, typographic, tables, media).
DEFAULT_TAG_WHITELIST = frozenset(
    {
        "a",
        "abbr",
        "b",
        "blockquote",
        "body",
        "br",
        "center",
        "code",
        "dd",
        "div",
        "dl",
        "dt",
        "em",
        "font",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "hr",
        "i",
        "img",
        "label",
        "li",
        "ol",
        "p",
        "pre",
        "small",
        "source",
        "span",
        "strong",
        "sub",
        "sup",
        "table",
        "tbody",
        "tr",
        "td",
        "th",
        "thead",
        "ul",
        "u",
        "video",
    }
)

# Allowed, but always rebuilt as the neutral container tag.
DEFAULT_CONTENT_TAG_WHITELIST = frozenset({"form", "google-sheets-html-origin"})

DEFAULT_ATTRIBUTE_WHITELIST = frozenset(
    {
        "align",
        "color",
        "controls",
        "height",
        "href",
        "id",
        "src",
        "style",
        "target",
        "title",
        "type",
        "width",
    }
)

DEFAULT_CSS_WHITELIST = frozenset(
    {
        "background-color",
        "color",
        "font-size",
        "font-weight",
        "text-align",
        "text-decoration",
        "width",
    }
)

# Matched as prefixes, so each entry keeps its trailing colon.
DEFAULT_SCHEMA_WHITELIST = ("http:", "https:", "data:", "m-files:", "file:", "ftp:", "mailto:", "pw:")

DEFAULT_URI_ATTRIBUTES = frozenset({"href", "action"})

DEFAULT_CONTAINER_TAG = "div"

# Inline wrappers that are dropped when nothing is left inside them.
COLLAPSIBLE_INLINE_ELEMENTS = frozenset({"span", "b", "i", "u"})

SVG_ELEMENTS = (
    "animate",
    "animateMotion",
    "animateTransform",
    "circle",
    "clipPath",
    "defs",
    "desc",
    "discard",
    "ellipse",
    "filter",
    "foreignObject",
    "g",
    "image",
    "line",
    "linearGradient",
    "marker",
    "mask",
    "metadata",
    "mpath",
    "path",
    "pattern",
    "polygon",
    "polyline",
    "radialGradient",
    "rect",
    "set",
    "stop",
    "svg",
    "switch",
    "symbol",
    "text",
    "textPath",
    "tspan",
    "use",
    "view",
)

NAMESPACES = {
    "svg": "http://www.w3.org/2000/svg",
    "html": "http://www.w3.org/1999/xhtml",
    "xml": "http://www.w3.org/XML/1998/namespace",
    "xlink": "http://www.w3.org/1999/xlink",
    "xmlns": "http://www.w3.org/2000/xmlns/",
    "math": "http://www.w3.org/1998/Math/MathML",
}

# Namespace URI -> short name stored on Node.namespace (None means HTML).
NAMESPACE_PREFIXES = {uri: prefix for prefix, uri in NAMESPACES.items() if prefix != "html"}

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "basefont",
        "bgsound",
        "br",
        "col",
        "embed",
        "frame",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Text inside these is serialized without escaping.
RAWTEXT_ELEMENTS = frozenset(
    {
        "style",
        "script",
        "xmp",
        "iframe",
        "noembed",
        "noframes",
        "plaintext",
    }
)

# The parser drops one newline right after these start tags, so the
# serializer has to emit one to keep a leading newline in the text.
NEWLINE_STRIPPING_ELEMENTS = frozenset({"pre", "textarea", "listing"})
