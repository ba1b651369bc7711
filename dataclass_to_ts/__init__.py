"""Dataclass to TypeScript Generator

A Python package for generating TypeScript classes or interfaces (or ES6
classes) from dataclasses and TypedDicts, including every struct type
reachable from them.
"""

__version__ = "1.0.0"

from .analyzer import (
    Diagnostic,
    DiagnosticKind,
    FieldSpec,
    StructType,
    TypeDescriptor,
    TypeKind,
    TypeRegistry,
    tags,
)
from .backends import IndentingWriter
from .config import CodeGeneratorConfig
from .custom import CustomTypescript
from .errors import CustomRenderError, InvalidRootTypeError, TypeScriptGenerationError
from .generator import TypeScriptGenerator

__all__ = [
    "TypeScriptGenerator",
    "TypeRegistry",
    "CodeGeneratorConfig",
    "TypeScriptGenerationError",
    "InvalidRootTypeError",
    "CustomRenderError",
    "Diagnostic",
    "DiagnosticKind",
    "StructType",
    "FieldSpec",
    "TypeDescriptor",
    "TypeKind",
    "IndentingWriter",
    "CustomTypescript",
    "tags",
]
