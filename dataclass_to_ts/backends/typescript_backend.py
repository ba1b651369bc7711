"""
TypeScript code generation backend.

Generates TypeScript classes (or interfaces) from the registry's struct types.
"""

from __future__ import annotations

from .base import CodeBackend


class TypeScriptBackend(CodeBackend):
    """TypeScript code generation backend."""

    TEMPLATE_LANG = "typescript"
    FILE_EXTENSION = "ts"

    def cast(self, expr: str, ts_type: str) -> str:
        return f"{expr} as {ts_type}"

    def param(self, name: str, ts_type: str = "any") -> str:
        return f"{name}: {ts_type}"
