"""
Type registry.

Walks every struct reachable from the registered roots, deduplicating by
the underlying Python type. Names are bound on first registration.
"""

from __future__ import annotations

import logging
import typing
from typing import Any, Iterator, TypeVar, get_origin

from ..config import CodeGeneratorConfig
from ..custom import find_custom_renderer
from ..errors import InvalidRootTypeError
from ..utils import capitalize
from .field_builder import DeclaredField, FieldBuilder, declared_fields
from .ir_nodes import Diagnostic, DiagnosticKind, StructType
from .type_resolver import TypeResolver, native_name, struct_origin, unwrap

logger = logging.getLogger(__name__)


def root_type(value: Any) -> Any:
    """Reduce a registered value (type, alias, Optional[...] or instance) to a type."""
    is_type_like = (
        isinstance(value, (type, TypeVar, typing.NewType, typing.TypeAliasType))
        or get_origin(value) is not None
        or value is typing.Any
    )
    if not is_type_like:
        value = type(value)
    return unwrap(value).tp


class TypeRegistry:
    """Ordered, deduplicated collection of the struct types of one generation run."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        self.config = config or CodeGeneratorConfig()
        self.resolver = TypeResolver(self)
        self.field_builder = FieldBuilder(self.resolver)

        self.structs: list[StructType] = []
        self.diagnostics: list[Diagnostic] = []

        self._seen: dict[Any, StructType] = {}
        self._anonymous_count = 0
        self._embedding: list[type] = []

    def __iter__(self) -> Iterator[StructType]:
        return iter(self.structs)

    def __len__(self) -> int:
        return len(self.structs)

    def get(self, value: Any) -> StructType | None:
        """Return the entry registered for a value's underlying type, if any."""
        tp = struct_origin(root_type(value))
        return self._seen.get(tp) if tp is not None else None

    def add(self, value: Any, name: str = "") -> StructType:
        """
        Register a root struct and every struct reachable from it.

        Args:
            value: A struct type, an alias or Optional of one, or an instance
            name: Name to use instead of the type's own (ignored when the
                type is already registered)

        Returns:
            The registry entry of the type

        Raises:
            InvalidRootTypeError: If the value doesn't reduce to a struct type

        A failed registration leaves the registry as it was before the call.
        """
        tp = root_type(value)
        struct = struct_origin(tp)
        if struct is None:
            raise InvalidRootTypeError(native_name(tp))

        seen = dict(self._seen)
        n_structs, n_diagnostics, n_anonymous = len(self.structs), len(self.diagnostics), self._anonymous_count
        try:
            return self.add_type(struct, name)
        except Exception:
            logger.debug("registration of %s failed, rolling back", native_name(struct))
            self._seen = seen
            del self.structs[n_structs:]
            del self.diagnostics[n_diagnostics:]
            self._anonymous_count = n_anonymous
            self._embedding.clear()
            raise

    def add_with_name(self, value: Any, name: str) -> StructType:
        return self.add(value, name)

    def add_type(self, tp: type, name: str = "") -> StructType:
        """Register a struct type; the entry is visible before its fields are built."""
        existing = self._seen.get(tp)
        if existing is not None:
            return existing

        if not name:
            name = tp.__name__
            if not self.config.no_capitalize:
                name = capitalize(name)
        if not name:
            name = self._next_anonymous()

        out = StructType(name=name, origin=tp, custom_renderer=find_custom_renderer(tp))
        self._seen[tp] = out

        logger.debug("building struct %s", name)
        self._add_fields(out, tp)
        self.structs.append(out)
        logger.debug("built struct %s with %d fields", name, len(out.fields))
        return out

    def report(self, kind: DiagnosticKind, context: str, message: str) -> None:
        """Record and log a non-fatal diagnostic."""
        type_name, _, field_name = context.partition(".")
        self.diagnostics.append(Diagnostic(kind, type_name, field_name, message))
        logger.warning("%s: %s", context or "<root>", message)

    def _add_fields(self, out: StructType, tp: type) -> None:
        for declared in declared_fields(tp):
            if self.field_builder.wants_embedding(declared):
                self._embed(out, declared)
                continue

            spec = self.field_builder.build(declared, out.name)
            if spec is not None:
                out.fields.append(spec)

    def _embed(self, out: StructType, declared: DeclaredField) -> None:
        """Splice the fields of an embedded struct into `out` at the current position."""
        context = f"{out.name}.{declared.name}"
        embedded = struct_origin(unwrap(declared.annotation).tp)

        if embedded is None:
            self.report(DiagnosticKind.UNSUPPORTED_EMBEDDING, context, "only struct fields can be embedded, skipping")
            return
        if embedded is out.origin or embedded in self._embedding:
            self.report(DiagnosticKind.UNSUPPORTED_EMBEDDING, context, f"{embedded.__name__} embeds itself, skipping")
            return

        self._embedding.append(embedded)
        try:
            self._add_fields(out, embedded)
        finally:
            self._embedding.pop()

    def _next_anonymous(self) -> str:
        self._anonymous_count += 1
        return f"Anonymous{self._anonymous_count}"

