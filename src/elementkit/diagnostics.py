"""Error types and the non-fatal diagnostics sink."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Protocol

    class ReportCallback(Protocol):
        def __call__(self, msg: str, *, node: Any | None = None) -> None: ...


class MalformedTemplateError(ValueError):
    """A node object handed to the bridge has no usable ``nodeName``.

    Templates are authored by the caller, so this is a programming error and is
    raised rather than guessed around. ``obj`` is the offending object.
    """

    def __init__(self, obj: Any, message: str | None = None) -> None:
        self.obj = obj
        msg = message or f"Invalid DOM object, it must have a non-empty string 'nodeName': {obj!r}"
        super().__init__(msg)


class Diagnostic:
    """A non-fatal condition recorded while processing a tree."""

    __slots__ = ("category", "code", "message", "severity")

    def __init__(self, code, message=None, category="bridge", severity="warning"):
        self.code = code
        self.message = message or code
        self.category = category
        self.severity = severity

    def __repr__(self):
        return f"Diagnostic({self.code!r}, severity={self.severity!r})"

    def __str__(self):
        if self.message != self.code:
            return f"{self.severity}: {self.code} - {self.message}"
        return f"{self.severity}: {self.code}"

    def __eq__(self, other):
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return self.code == other.code and self.category == other.category and self.severity == other.severity

    __hash__ = None  # Unhashable since we define __eq__


def emit(errors: list[Diagnostic] | None, code: str, message: str | None = None, *, category: str = "bridge") -> None:
    """Append a warning-level diagnostic when a sink was provided; no-op otherwise."""
    if errors is None:
        return
    errors.append(Diagnostic(code, message, category=category))
