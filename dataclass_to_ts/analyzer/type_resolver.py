"""
Type resolver.

Classifies a Python type annotation into a TypeDescriptor, unwrapping
Optional/alias indirection and registering nested struct types with the
owning registry as they are found.
"""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import pathlib
import types
import typing
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Annotated, Any, Literal, NotRequired, Required, TypeVar, Union, get_args, get_origin

from .ir_nodes import BOOLEAN, NUMBER, STRING, DiagnosticKind, TypeDescriptor, TypeKind

if TYPE_CHECKING:
    from .registry import TypeRegistry

NONE_TYPE = type(None)

NUMBER_TYPES = (int, float, decimal.Decimal)
STRING_TYPES = (str, bytes, bytearray, uuid.UUID, pathlib.PurePath)
DATE_TYPES = (datetime.datetime, datetime.date)

ARRAY_ORIGINS = {
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
}

MAP_ORIGINS = {
    dict,
    collections.defaultdict,
    collections.OrderedDict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
}

UNION_ORIGINS = (Union, types.UnionType)


@dataclass
class Unwrapped:
    """A type with its Optional/alias wrappers removed."""

    tp: Any
    nullable: bool = False
    extras: list[Any] = field(default_factory=list)  # Annotated[...] metadata


def strip_aliases(tp: Any, extras: list[Any] | None = None) -> Any:
    """Remove Annotated, NewType, `type` alias and Required/NotRequired wrappers."""
    while True:
        origin = get_origin(tp)
        if origin is Annotated:
            if extras is not None:
                extras.extend(tp.__metadata__)
            tp = tp.__origin__
        elif origin in (Required, NotRequired):
            tp = get_args(tp)[0]
        elif isinstance(tp, typing.NewType):
            tp = tp.__supertype__
        elif isinstance(tp, typing.TypeAliasType):
            tp = tp.__value__
        else:
            return tp


def unwrap(tp: Any) -> Unwrapped:
    """Unwrap Optional indirection repeatedly, recording nullability."""
    out = Unwrapped(tp)
    while True:
        tp = strip_aliases(tp, out.extras)
        if get_origin(tp) not in UNION_ORIGINS:
            break
        args = get_args(tp)
        rest = tuple(a for a in args if a is not NONE_TYPE and a is not None)
        if len(rest) == len(args):
            break
        out.nullable = True
        if len(rest) != 1:
            tp = Union[rest]
            break
        tp = rest[0]
    out.tp = tp
    return out


def struct_origin(tp: Any) -> type | None:
    """Return the struct type behind `tp` (a dataclass or TypedDict), or None."""
    candidate = get_origin(tp) or tp
    if not isinstance(candidate, type):
        return None
    if dataclasses.is_dataclass(candidate) or typing.is_typeddict(candidate):
        return candidate
    return None


def is_integer_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, int) and not issubclass(tp, (bool, enum.Enum))


def native_name(tp: Any) -> str:
    """Best-effort name of an unclassified type."""
    if isinstance(tp, str):
        return tp
    name = getattr(tp, "__name__", None)
    if name and get_origin(tp) is None:
        return name
    return repr(tp).replace("typing.", "")


def _primitive_name(value: Any) -> str | None:
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    return None


class TypeResolver:
    """Converts field annotations into TypeDescriptors."""

    def __init__(self, registry: TypeRegistry):
        self.registry = registry
        self.config = registry.config

    def resolve(self, annotation: Any, context: str = "") -> TypeDescriptor:
        """
        Resolve an annotation to a TypeDescriptor.

        Args:
            annotation: The declared type of a field (or of a nested element)
            context: "Type.field" label used in diagnostics

        Returns:
            The descriptor; nullable when Optional indirection was unwrapped
        """
        unwrapped = unwrap(annotation)
        descriptor = self._classify(unwrapped.tp, context)
        descriptor.nullable = descriptor.nullable or unwrapped.nullable
        return descriptor

    def _classify(self, tp: Any, context: str) -> TypeDescriptor:
        if tp is Any or tp is object:
            return TypeDescriptor(TypeKind.DYNAMIC)

        if isinstance(tp, TypeVar):
            return self._classify_type_var(tp, context)

        struct = struct_origin(tp)
        if struct is not None:
            return TypeDescriptor(TypeKind.OBJECT, struct=self.registry.add_type(struct))

        origin = get_origin(tp)
        if origin is Literal:
            return self._classify_values(tp, get_args(tp), context)

        if isinstance(tp, type) and origin is None:
            if issubclass(tp, enum.Enum):
                return self._classify_values(tp, [m.value for m in tp], context)
            if issubclass(tp, bool):
                return TypeDescriptor(TypeKind.PRIMITIVE, BOOLEAN)
            if issubclass(tp, DATE_TYPES):
                return TypeDescriptor(TypeKind.DATE, STRING)
            if issubclass(tp, NUMBER_TYPES):
                return TypeDescriptor(TypeKind.PRIMITIVE, NUMBER)
            if issubclass(tp, STRING_TYPES):
                return TypeDescriptor(TypeKind.PRIMITIVE, STRING)

        container = origin if origin is not None else tp
        args = get_args(tp)

        if container in MAP_ORIGINS:
            return self._classify_map(args, context)

        if container in ARRAY_ORIGINS:
            element = self.resolve(args[0], context) if args else TypeDescriptor(TypeKind.DYNAMIC)
            return TypeDescriptor(TypeKind.ARRAY, element=element, nullable=self.config.nullable_slices)

        if container is tuple:
            return self._classify_tuple(args, context)

        return self._fallback(tp, context)

    def _classify_map(self, args: tuple, context: str) -> TypeDescriptor:
        key = TypeDescriptor(TypeKind.PRIMITIVE, STRING)
        # struct keys are rejected before they get registered
        usable = not args or struct_origin(unwrap(args[0]).tp) is None
        if args and usable:
            key = self.resolve(args[0], context)
        value = self.resolve(args[1], context) if len(args) > 1 else TypeDescriptor(TypeKind.DYNAMIC)

        if not usable or key.kind != TypeKind.PRIMITIVE or key.name not in (STRING, NUMBER) or key.nullable:
            self.registry.report(
                DiagnosticKind.UNSUPPORTED_FIELD_KIND,
                context,
                f"map key type {native_name(args[0])} can't be used as an index signature, using string",
            )
            key = TypeDescriptor(TypeKind.PRIMITIVE, STRING)

        return TypeDescriptor(TypeKind.MAP, key=key, element=value)

    def _classify_tuple(self, args: tuple, context: str) -> TypeDescriptor:
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeDescriptor(
                TypeKind.ARRAY,
                element=self.resolve(args[0], context),
                nullable=self.config.nullable_slices,
            )

        elements = [self.resolve(a, context) for a in args]
        if not elements:
            return TypeDescriptor(TypeKind.ARRAY, element=TypeDescriptor(TypeKind.DYNAMIC))

        if any(e != elements[0] for e in elements[1:]):
            self.registry.report(
                DiagnosticKind.UNSUPPORTED_FIELD_KIND,
                context,
                f"heterogeneous tuple {native_name(tuple[args])} rendered as any[]",
            )
            return TypeDescriptor(TypeKind.ARRAY, element=TypeDescriptor(TypeKind.DYNAMIC))

        return TypeDescriptor(TypeKind.ARRAY, element=elements[0])

    def _classify_values(self, tp: Any, values: Any, context: str) -> TypeDescriptor:
        """Classify an Enum or Literal by the primitive kind of its values."""
        names = {_primitive_name(v) for v in values}
        if len(names) == 1 and None not in names:
            return TypeDescriptor(TypeKind.PRIMITIVE, names.pop())
        return self._fallback(tp, context)

    def _classify_type_var(self, tp: TypeVar, context: str) -> TypeDescriptor:
        candidates = [tp.__bound__] if tp.__bound__ is not None else list(tp.__constraints__)
        if len(candidates) == 1:
            descriptor = self.resolve(candidates[0], context)
            if descriptor.kind == TypeKind.PRIMITIVE and not descriptor.fallback:
                return descriptor
        return TypeDescriptor(TypeKind.DYNAMIC)

    def _fallback(self, tp: Any, context: str) -> TypeDescriptor:
        name = native_name(tp)
        self.registry.report(DiagnosticKind.UNSUPPORTED_FIELD_KIND, context, f"unhandled type {name}")
        return TypeDescriptor(TypeKind.PRIMITIVE, name, fallback=True)
