"""
Exceptions raised by the generator.
"""

from __future__ import annotations


class TypeScriptGenerationError(Exception):
    """Base class for generation errors."""


class InvalidRootTypeError(TypeScriptGenerationError, TypeError):
    """Raised when a registered root does not reduce to a struct type."""

    def __init__(self, type_name: str):
        super().__init__(f"{type_name} is not a struct.")
        self.type_name = type_name


class CustomRenderError(TypeScriptGenerationError):
    """Raised when a type's render_custom_typescript hook fails."""

    def __init__(self, type_name: str, message: str):
        super().__init__(f"Custom render of {type_name} failed: {message}")
        self.type_name = type_name
