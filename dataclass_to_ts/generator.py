"""
TypeScript generator.

Ties the two phases together:

1. Analyzer: register root struct types and everything reachable from
   them into a TypeRegistry
2. Backend: render the registered types through Jinja2 templates
"""

from __future__ import annotations

import io
from typing import Any, TextIO

from .analyzer import Diagnostic, StructType, TypeRegistry
from .backends import create_backend
from .config import CodeGeneratorConfig


class TypeScriptGenerator:
    """
    Generates TypeScript (or ES6) declarations for Python struct types.

    Usage:
        generator = TypeScriptGenerator(CodeGeneratorConfig(interface_only=True))
        generator.add(User)
        generator.add_with_name(Page[User], "UserPage")
        print(generator.render())
    """

    def __init__(self, config: CodeGeneratorConfig | None = None):
        """
        Initialize the generator.

        Args:
            config: Code generation configuration
        """
        self.config = config or CodeGeneratorConfig()
        self.registry = TypeRegistry(self.config)
        self.backend = create_backend(self.config)

    def add(self, value: Any, name: str = "") -> StructType:
        """Register a root struct type (or an instance of one)."""
        return self.registry.add(value, name)

    def add_with_name(self, value: Any, name: str) -> StructType:
        """Register a root struct type under an explicit name."""
        return self.registry.add_with_name(value, name)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.registry.diagnostics

    def render_to(self, sink: TextIO) -> None:
        """
        Render every registered type to a text sink.

        Args:
            sink: Anything with a write(str) method

        Raises:
            CustomRenderError: If a type's custom render hook fails
        """
        self.backend.render(list(self.registry), sink)

    def render(self) -> str:
        """Render every registered type and return the output."""
        out = io.StringIO()
        self.render_to(out)
        return out.getvalue()
