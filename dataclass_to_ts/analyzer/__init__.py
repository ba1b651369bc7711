"""
Analyzer module.

Contains type resolution, field building and the type registry.
"""

from __future__ import annotations

from .field_builder import DeclaredField, FieldBuilder, FieldTags, declared_fields, parse_tags, tags
from .ir_nodes import (
    Diagnostic,
    DiagnosticKind,
    FieldSpec,
    StructType,
    TypeDescriptor,
    TypeKind,
)
from .registry import TypeRegistry
from .type_resolver import TypeResolver

__all__ = [
    "StructType",
    "FieldSpec",
    "TypeDescriptor",
    "TypeKind",
    "Diagnostic",
    "DiagnosticKind",
    "DeclaredField",
    "FieldBuilder",
    "FieldTags",
    "declared_fields",
    "parse_tags",
    "tags",
    "TypeRegistry",
    "TypeResolver",
]
