"""
Custom render capability.

A struct type may define `render_custom_typescript(w)` to add its own
members to the generated declaration. The method may be an instance
method (called on a bare instance, without running __init__), a
classmethod or a staticmethod.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Protocol, TextIO, runtime_checkable

CUSTOM_RENDER_METHOD = "render_custom_typescript"


@runtime_checkable
class CustomTypescript(Protocol):
    """Types implementing this write extra TypeScript into their declaration body."""

    def render_custom_typescript(self, w: TextIO) -> None: ...


def find_custom_renderer(tp: type) -> Callable[[Any], Any] | None:
    """
    Return a callable invoking the type's render hook, or None.

    Args:
        tp: A struct type

    Returns:
        A callable taking the writer to render into
    """
    if not isinstance(tp, type) or not issubclass(tp, CustomTypescript):
        return None

    attr = inspect.getattr_static(tp, CUSTOM_RENDER_METHOD)
    if isinstance(attr, (classmethod, staticmethod)):
        return getattr(tp, CUSTOM_RENDER_METHOD)

    def render(w: Any) -> Any:
        instance = tp.__new__(tp)
        return getattr(instance, CUSTOM_RENDER_METHOD)(w)

    return render
