from enum import Enum


class NodeKind(Enum):
    """Closed set of node categories the sanitizer and bridge dispatch on."""

    TEXT = "text"
    ELEMENT = "element"
    OTHER = "other"


# Names starting with these markers are never elements.
_NON_ELEMENT_NAMES = frozenset({"#comment", "#document", "#document-fragment", "!doctype"})


class Node:
    """Represents a DOM-like node.
    - tag_name: e.g., 'div', 'p', etc. Use '#text' for text nodes, '#comment' for comments.
    - attributes: dict of tag attributes (insertion ordered)
    - children: list of child Nodes
    - parent: reference to parent Node (or None for root)
    - namespace: None for HTML, "svg" or "math" for foreign elements
    - events: event name -> handler; carried alongside the tree, never serialized
    """

    __slots__ = (
        "attributes",
        "children",
        "events",
        "namespace",
        "next_sibling",
        "parent",
        "previous_sibling",
        "tag_name",
        "text_content",
    )

    def __init__(self, tag_name, attributes=None, text_content=None, namespace=None):
        if tag_name is None or tag_name == "":
            msg = "Empty tag_name passed to Node constructor"
            raise ValueError(msg)

        self.tag_name = tag_name
        self.namespace = namespace
        # First occurrence of a duplicated attribute wins, matching parser behavior.
        self.attributes = {}
        if attributes:
            for key, value in attributes.items():
                if key not in self.attributes:
                    self.attributes[key] = value
        self.children = []
        self.parent = None
        self.text_content = text_content if text_content is not None else ""
        self.events = {}
        self.next_sibling = None
        self.previous_sibling = None

    @property
    def kind(self):
        if self.tag_name == "#text":
            return NodeKind.TEXT
        if self.tag_name in _NON_ELEMENT_NAMES:
            return NodeKind.OTHER
        return NodeKind.ELEMENT

    @property
    def is_svg(self):
        """Check if this is an SVG element."""
        return self.namespace == "svg"

    @property
    def is_foreign(self):
        """Check if this is a foreign element (SVG or MathML)."""
        return self.namespace in ("svg", "math")

    def get_attribute(self, name, default=None):
        return self.attributes.get(name, default)

    def set_attribute(self, name, value):
        self.attributes[name] = "" if value is None else str(value)

    def append_child(self, child):
        if self._would_create_circular_reference(child):
            msg = f"Adding {child.tag_name} as child of {self.tag_name} would create circular reference"
            raise ValueError(msg)

        if child.parent:
            child.parent.remove_child(child)

        if self.children:
            self.children[-1].next_sibling = child
            child.previous_sibling = self.children[-1]
        else:
            child.previous_sibling = None

        child.parent = self
        child.next_sibling = None
        self.children.append(child)

    def _would_create_circular_reference(self, child):
        """Check if adding child would create a circular reference."""
        if child is self:
            return True
        # Fast path: a detached node with no children can't be our ancestor
        if not child.children:
            return False

        current = self.parent
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def insert_child_at(self, index, child):
        """Insert a child at the specified index (appends when out of range)."""
        if index < 0 or index >= len(self.children):
            self.append_child(child)
            return

        if self._would_create_circular_reference(child):
            msg = f"Adding {child.tag_name} as child of {self.tag_name} would create circular reference"
            raise ValueError(msg)

        if child.parent:
            child.parent.remove_child(child)

        child.parent = self
        self.children.insert(index, child)
        self._relink(index)

    def remove_child(self, child):
        """Remove a child node, updating all sibling links.

        Args:
            child: The Node to remove

        """
        if child.parent is not self:
            return

        if child.previous_sibling:
            child.previous_sibling.next_sibling = child.next_sibling
        if child.next_sibling:
            child.next_sibling.previous_sibling = child.previous_sibling

        self.children.remove(child)
        child.parent = None
        child.next_sibling = None
        child.previous_sibling = None

    def _relink(self, index):
        child = self.children[index]
        child.previous_sibling = self.children[index - 1] if index > 0 else None
        child.next_sibling = self.children[index + 1] if index + 1 < len(self.children) else None
        if child.previous_sibling:
            child.previous_sibling.next_sibling = child
        if child.next_sibling:
            child.next_sibling.previous_sibling = child

    def clone(self, deep=False):
        """Return a detached copy of this node (and its subtree when deep=True).

        Event handlers are shared by reference; everything else is copied.
        """
        root = self._shallow_copy()
        if not deep:
            return root

        stack = [(self, root)]
        while stack:
            source, target = stack.pop()
            for child in source.children:
                copied = child._shallow_copy()
                target.append_child(copied)
                if child.children:
                    stack.append((child, copied))
        return root

    def _shallow_copy(self):
        copied = Node(self.tag_name, self.attributes, text_content=self.text_content, namespace=self.namespace)
        copied.events = dict(self.events)
        return copied

    def iter_descendants(self):
        """Yield every descendant in document order, without recursion."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    @property
    def text(self):
        """Concatenated text of this node and all descendant text nodes."""
        if self.tag_name == "#text":
            return self.text_content
        return "".join(n.text_content for n in self.iter_descendants() if n.tag_name == "#text")

    def find_child_by_tag(self, tag_name):
        """Find first child with the given tag name.

        Args:
            tag_name: Tag name to search for
        Returns:
            First matching child or None if not found

        """
        for child in self.children:
            if child.tag_name == tag_name:
                return child
        return None

    def first_element_child(self):
        for child in self.children:
            if child.kind is NodeKind.ELEMENT:
                return child
        return None

    def __repr__(self):
        if self.tag_name == "#text":
            return f"Node(#text='{self.text_content[:30]}')"
        if self.tag_name == "#comment":
            return f"Node(#comment='{self.text_content[:30]}')"
        return f"Node(<{self.tag_name}>, children={len(self.children)})"
