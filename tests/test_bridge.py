from __future__ import annotations

import unittest

from elementkit import (
    MalformedTemplateError,
    Node,
    SanitizationConfig,
    element_from_html,
    object_from_html,
    parse_fragment,
    text_node,
    to_element,
    to_html,
    to_object,
)


def _first(html: str) -> Node:
    return parse_fragment(html).children[0]


class TestToObject(unittest.TestCase):
    def test_text_only_element_collapses_to_content(self) -> None:
        assert to_object(_first("<p>Hi</p>")) == {"nodeName": "p", "attrs": {}, "content": "Hi"}

    def test_comment_and_whitespace_text_become_none(self) -> None:
        assert to_object(Node("#comment", text_content="x")) is None
        assert to_object(Node("#text", text_content="  \n\t")) is None
        assert to_object(Node("#document-fragment")) is None

    def test_text_node_is_trimmed(self) -> None:
        assert to_object(Node("#text", text_content="  hi  ")) == {"nodeName": "#text", "content": "hi"}

    def test_empty_element_has_no_children_or_content(self) -> None:
        assert to_object(_first('<p id="a"></p>')) == {"nodeName": "p", "attrs": {"id": "a"}}

    def test_style_becomes_camel_case_mapping(self) -> None:
        obj = to_object(_first('<p style="font-size: 12px; color: red">x</p>'))
        assert obj["attrs"] == {"style": {"fontSize": "12px", "color": "red"}}

    def test_unparseable_style_is_removed(self) -> None:
        obj = to_object(_first('<p style="???" title="t">x</p>'))
        assert obj["attrs"] == {"title": "t"}

    def test_text_children_around_a_comment_are_space_joined(self) -> None:
        assert to_object(_first("<p>a<!--x-->b</p>")) == {"nodeName": "p", "attrs": {}, "content": "a b"}

    def test_mixed_children_are_kept_in_order(self) -> None:
        obj = to_object(_first("<p>Hello <b>world</b> again</p>"))
        assert obj == {
            "nodeName": "p",
            "attrs": {},
            "children": [
                {"nodeName": "#text", "content": "Hello"},
                {"nodeName": "b", "attrs": {}, "content": "world"},
                {"nodeName": "#text", "content": "again"},
            ],
        }

    def test_node_name_is_lowercased(self) -> None:
        assert to_object(Node("DIV"))["nodeName"] == "div"
        assert to_object(_first('<svg><clipPath id="c"></clipPath></svg>')) == {
            "nodeName": "svg",
            "attrs": {},
            "children": [{"nodeName": "clippath", "attrs": {"id": "c"}}],
        }

    def test_events_are_carried_over(self) -> None:
        def handler() -> None:
            pass

        el = Node("button")
        el.events["click"] = handler
        assert to_object(el) == {"nodeName": "button", "attrs": {}, "events": {"click": handler}}


class TestToElement(unittest.TestCase):
    def test_element_with_content(self) -> None:
        el = to_element({"nodeName": "p", "attrs": {"id": "x"}, "content": "Hi"})
        assert to_html(el) == '<p id="x">Hi</p>'

    def test_numeric_content_is_stringified(self) -> None:
        assert to_html(to_element({"nodeName": "span", "content": 5})) == "<span>5</span>"

    def test_text_object(self) -> None:
        el = to_element({"nodeName": "#text", "content": "a < b"})
        assert el.tag_name == "#text"
        assert to_html(el) == "a &lt; b"

    def test_text_object_ignores_children(self) -> None:
        el = to_element({"nodeName": "#text", "content": "t", "children": [{"nodeName": "b"}]})
        assert el.children == []

    def test_children_are_built_in_order(self) -> None:
        el = to_element(
            {
                "nodeName": "ul",
                "children": [
                    {"nodeName": "li", "content": "a"},
                    {"nodeName": "li", "children": [{"nodeName": "b", "content": "b"}]},
                ],
            }
        )
        assert to_html(el) == "<ul><li>a</li><li><b>b</b></li></ul>"

    def test_missing_node_name_raises(self) -> None:
        for bad in ({}, {"nodeName": ""}, {"nodeName": None}, "div", None):
            with self.assertRaises(MalformedTemplateError):
                to_element(bad)  # type: ignore[arg-type]

    def test_malformed_child_raises(self) -> None:
        with self.assertRaises(MalformedTemplateError) as ctx:
            to_element({"nodeName": "div", "children": [{"attrs": {}}]})
        assert ctx.exception.obj == {"attrs": {}}

    def test_malformed_template_error_is_a_value_error(self) -> None:
        assert issubclass(MalformedTemplateError, ValueError)

    def test_svg_tags_get_canonical_case_and_namespace(self) -> None:
        el = to_element({"nodeName": "svg", "children": [{"nodeName": "clippath", "attrs": {"id": "c"}}]})
        assert el.namespace == "svg"
        clip = el.children[0]
        assert clip.tag_name == "clipPath"
        assert clip.namespace == "svg"
        assert to_html(el) == '<svg><clipPath id="c"></clipPath></svg>'

    def test_boolean_and_null_attributes(self) -> None:
        attrs = {"disabled": True, "hidden": False, "title": None, "tabindex": 0}
        el = to_element({"nodeName": "button", "attrs": attrs})
        assert el.attributes == {"disabled": "", "tabindex": "0"}

    def test_class_lists_are_flattened(self) -> None:
        el = to_element({"nodeName": "div", "attrs": {"className": ["a", ["b", None, "c"], ""]}})
        assert el.attributes == {"class": "a b c"}

    def test_ignored_props_are_skipped(self) -> None:
        el = to_element({"nodeName": "div", "attrs": {"key": "1", "__source": {}, "id": "x"}})
        assert el.attributes == {"id": "x"}

    def test_event_handlers_are_not_serialized(self) -> None:
        def on_click() -> None:
            pass

        def on_double() -> None:
            pass

        el = to_element(
            {"nodeName": "button", "attrs": {"onClickCapture": on_click, "onDoubleClick": on_double}, "content": "go"}
        )
        assert el.events == {"click": on_click, "dblclick": on_double}
        assert to_html(el) == "<button>go</button>"

    def test_events_key_is_copied_to_the_node(self) -> None:
        def handler() -> None:
            pass

        el = to_element({"nodeName": "a", "events": {"click": handler, "bogus": "not callable"}})
        assert el.events == {"click": handler}

    def test_string_on_attribute_is_treated_as_attribute(self) -> None:
        el = to_element({"nodeName": "a", "attrs": {"onclick": "x()"}})
        assert el.attributes == {"onclick": "x()"}
        assert el.events == {}

    def test_style_mapping_is_filtered_when_sanitizing(self) -> None:
        obj = {"nodeName": "p", "attrs": {"style": {"fontSize": "12px", "position": "absolute"}}}
        assert to_element(obj).attributes == {"style": "font-size: 12px;"}
        assert to_element(obj, False).attributes == {"style": "font-size: 12px; position: absolute;"}
        assert to_element(obj, {"sanitize": False}).attributes == {"style": "font-size: 12px; position: absolute;"}

    def test_style_mapping_with_nothing_allowed_is_dropped(self) -> None:
        assert to_element({"nodeName": "p", "attrs": {"style": {"position": "absolute"}}}).attributes == {}

    def test_style_string_is_kept(self) -> None:
        assert to_element({"nodeName": "p", "attrs": {"style": "color: red"}}).attributes == {"style": "color: red"}

    def test_inner_html_is_sanitized_by_default(self) -> None:
        obj = {"nodeName": "div", "attrs": {"innerHTML": "<b>x</b><script>y()</script>"}}
        assert to_html(to_element(obj)) == "<div><b>x</b></div>"
        assert to_html(to_element(obj, False)) == "<div><b>x</b><script>y()</script></div>"

    def test_dangerously_set_inner_html(self) -> None:
        obj = {"nodeName": "div", "attrs": {"dangerouslySetInnerHTML": {"__html": '<a href="javascript:x">l</a>'}}}
        assert to_html(to_element(obj)) == "<div><a>l</a></div>"

    def test_text_props_are_escaped(self) -> None:
        el = to_element({"nodeName": "p", "attrs": {"textContent": "<b>not bold</b>"}})
        assert to_html(el) == "<p>&lt;b&gt;not bold&lt;/b&gt;</p>"

    def test_config_object_with_custom_policy(self) -> None:
        from elementkit import SanitizationPolicy

        config = SanitizationConfig(policy=SanitizationPolicy(allowed_css_properties=["position"]))
        obj = {"nodeName": "p", "attrs": {"style": {"fontSize": "12px", "position": "absolute"}}}
        assert to_element(obj, config).attributes == {"style": "position: absolute;"}

    def test_unsupported_config_raises(self) -> None:
        with self.assertRaises(TypeError):
            to_element({"nodeName": "p"}, "yes")


class TestRoundTrip(unittest.TestCase):
    def test_object_survives_a_round_trip(self) -> None:
        obj = {
            "nodeName": "div",
            "attrs": {"id": "a", "style": {"color": "red"}},
            "children": [
                {"nodeName": "p", "attrs": {}, "content": "x"},
                {"nodeName": "#text", "content": "tail"},
            ],
        }
        assert to_object(to_element(obj)) == obj

    def test_markup_survives_a_round_trip(self) -> None:
        html = '<ul id="l"><li>one</li><li><b>two</b></li></ul>'
        assert to_html(to_element(to_object(_first(html)))) == html

    def test_deep_object_chain_does_not_exhaust_the_stack(self) -> None:
        depth = 3000
        obj: dict = {"nodeName": "span", "content": "leaf"}
        for _ in range(depth):
            obj = {"nodeName": "div", "children": [obj]}

        el = to_element(obj)
        html = to_html(el)
        assert html.count("<div>") == depth

        back = to_object(el)
        levels = 0
        current = back
        while current["nodeName"] == "div":
            levels += 1
            current = current["children"][0]
        assert levels == depth
        assert current == {"nodeName": "span", "attrs": {}, "content": "leaf"}


class TestMarkupHelpers(unittest.TestCase):
    def test_object_from_html(self) -> None:
        assert object_from_html("<p>Hi</p><p>ignored</p>") == {"nodeName": "p", "attrs": {}, "content": "Hi"}

    def test_object_from_html_text_fallback(self) -> None:
        assert object_from_html("  just text ") == {"nodeName": "#text", "content": "just text"}

    def test_object_from_html_diagnostics(self) -> None:
        errors: list = []
        assert object_from_html("", errors=errors) is None
        assert object_from_html("<!-- only a comment -->", errors=errors) is None
        assert [e.code for e in errors] == ["empty-html-input", "no-element-found"]
        assert all(e.category == "bridge" for e in errors)

    def test_object_from_html_without_sink_is_silent(self) -> None:
        assert object_from_html("   ") is None

    def test_element_from_html(self) -> None:
        el = element_from_html('<a href="/x" onclick="y()">go</a>')
        assert to_html(el) == '<a href="/x" onclick="y()">go</a>'
        assert element_from_html("") is None

    def test_text_node_without_parse(self) -> None:
        node = text_node("<b>x</b>")
        assert node.tag_name == "#text"
        assert node.text_content == "<b>x</b>"
        assert text_node(42).text_content == "42"

    def test_text_node_parses_single_element(self) -> None:
        node = text_node(" <b>x</b> ", parse=True)
        assert node.tag_name == "b"
        assert node.parent is None
        assert to_html(node) == "<b>x</b>"

    def test_text_node_parses_multiple_nodes_into_fragment(self) -> None:
        node = text_node("<b>x</b><i>y</i>", parse=True)
        assert node.tag_name == "#document-fragment"
        assert to_html(node) == "<b>x</b><i>y</i>"

    def test_text_node_blank_input_gives_empty_fragment(self) -> None:
        node = text_node("   ", parse=True)
        assert node.tag_name == "#document-fragment"
        assert node.children == []

    def test_text_node_plain_text_is_not_parsed(self) -> None:
        node = text_node("a <b> c", parse=True)
        assert node.tag_name == "#text"
        assert node.text_content == "a <b> c"

    def test_text_node_sanitizes_markup_when_enabled(self) -> None:
        node = text_node("<script>x()</script><b>y</b>", parse=True, config=True)
        assert to_html(node) == "<b>y</b>"


if __name__ == "__main__":
    unittest.main()
