from __future__ import annotations

import unittest

from elementkit import Diagnostic, MalformedTemplateError
from elementkit.diagnostics import emit


class TestDiagnostic(unittest.TestCase):
    def test_defaults(self) -> None:
        d = Diagnostic("no-element-found")
        assert d.message == "no-element-found"
        assert d.category == "bridge"
        assert d.severity == "warning"
        assert str(d) == "warning: no-element-found"
        assert repr(d) == "Diagnostic('no-element-found', severity='warning')"

    def test_str_includes_message(self) -> None:
        d = Diagnostic("merge-target-not-found", "Node with ID 'x' not found", category="merge")
        assert str(d) == "warning: merge-target-not-found - Node with ID 'x' not found"

    def test_equality_ignores_message(self) -> None:
        assert Diagnostic("a", "one") == Diagnostic("a", "two")
        assert Diagnostic("a") != Diagnostic("a", category="merge")
        assert Diagnostic("a") != "a"

    def test_unhashable(self) -> None:
        with self.assertRaises(TypeError):
            hash(Diagnostic("a"))

    def test_emit(self) -> None:
        errors: list = []
        emit(errors, "empty-html-input", "Input is not a valid HTML string.")
        emit(None, "ignored")
        assert errors == [Diagnostic("empty-html-input")]
        assert errors[0].message == "Input is not a valid HTML string."


class TestMalformedTemplateError(unittest.TestCase):
    def test_carries_object_and_message(self) -> None:
        err = MalformedTemplateError({"attrs": {}})
        assert err.obj == {"attrs": {}}
        assert "nodeName" in str(err)

    def test_custom_message(self) -> None:
        err = MalformedTemplateError(None, "bad root")
        assert str(err) == "bad root"
        assert isinstance(err, ValueError)


if __name__ == "__main__":
    unittest.main()
