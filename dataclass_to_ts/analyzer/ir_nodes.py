"""
IR (Intermediate Representation) node definitions.

These nodes describe the struct types reachable from the registered roots,
with every field type classified and every nested struct resolved to its
registry entry, ready for code generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class TypeKind(Enum):
    """Kind of type in the IR."""

    PRIMITIVE = "primitive"  # string, number, boolean (or a native-name fallback)
    ARRAY = "array"  # T[]
    MAP = "map"  # { [key: K]: V }
    OBJECT = "object"  # A registered struct
    DATE = "date"  # Date
    DYNAMIC = "dynamic"  # any


# TypeScript names of the primitive kinds
STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"


@dataclass
class TypeDescriptor:
    """A classified field type."""

    kind: TypeKind = TypeKind.PRIMITIVE

    # For primitives: the TypeScript name, or the native name when unclassified.
    # For dates: the raw representation ("string" or "number").
    name: str = ""

    # Element type for arrays, value type for maps
    element: TypeDescriptor | None = None

    # Key type for maps
    key: TypeDescriptor | None = None

    # Referenced struct for objects
    struct: StructType | None = None

    # Reached through Optional[...] (or forced by a tag)
    nullable: bool = False

    # Set when the type could not be classified and `name` is a fallback
    fallback: bool = False


@dataclass
class FieldSpec:
    """A field of a struct type."""

    name: str = ""  # External (post-rename) name
    declared_name: str = ""  # Attribute name in the Python class
    descriptor: TypeDescriptor | None = None
    optional: bool = False
    nullable: bool = False
    is_date: bool = False
    ignore: bool = False


@dataclass(eq=False)
class StructType:
    """The registry record for one distinct struct type."""

    name: str = ""
    origin: Any = None  # The underlying Python type (deduplication key)
    fields: list[FieldSpec] = field(default_factory=list)

    # Bound `render_custom_typescript` callable when the type provides one
    custom_renderer: Callable[[Any], Any] | None = None

    @property
    def qualified_name(self) -> str:
        """Fully-qualified origin of the type, used in traceability comments."""
        module = getattr(self.origin, "__module__", "")
        qualname = getattr(self.origin, "__qualname__", "") or self.name
        return f"{module}.{qualname}" if module else qualname

    @property
    def visible_fields(self) -> list[FieldSpec]:
        return [f for f in self.fields if not f.ignore]


class DiagnosticKind(Enum):
    UNSUPPORTED_FIELD_KIND = "unsupported_field_kind"
    UNSUPPORTED_EMBEDDING = "unsupported_embedding"


@dataclass
class Diagnostic:
    """A non-fatal problem found while building the IR."""

    kind: DiagnosticKind
    type_name: str = ""
    field_name: str = ""
    message: str = ""
