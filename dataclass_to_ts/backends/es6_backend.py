"""
ES6 code generation backend.

Generates untyped JavaScript classes. JavaScript has no interfaces, so
nothing is rendered for struct types in interface-only mode.
"""

from __future__ import annotations

import logging
from typing import TextIO

from ..analyzer.ir_nodes import StructType
from .base import CodeBackend

logger = logging.getLogger(__name__)


class ES6Backend(CodeBackend):
    """ES6 JavaScript code generation backend."""

    TEMPLATE_LANG = "es6"
    FILE_EXTENSION = "js"

    def render(self, structs: list[StructType], sink: TextIO) -> None:
        if self.config.interface_only and structs:
            logger.warning("interfaces can't be expressed in ES6, skipping %d types", len(structs))
        super().render(structs, sink)

    def render_struct(self, struct: StructType) -> str:
        if self.config.interface_only:
            return ""
        return super().render_struct(struct)

    def cast(self, expr: str, ts_type: str) -> str:
        return expr

    def param(self, name: str, ts_type: str = "any") -> str:
        return name
