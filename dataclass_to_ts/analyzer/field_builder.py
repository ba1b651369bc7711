"""
Field builder.

Extracts per-field metadata (external name, type descriptor and the
optional/nullable/date/ignore flags) from a struct field declaration
and its tags.

Tags come from dataclass `field(metadata=...)` or from `Annotated[...]`
extras, as a mapping with "json" and/or "ts" keys:

    json: "<name>[,omitempty]"           "-" ignores the field
    ts:   "<kind>[,<option>...]"         kind "-" ignores, "date" forces a date
                                         options: null, no-null, optional, embed
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .ir_nodes import FieldSpec, TypeKind
from .type_resolver import TypeResolver, is_integer_type, unwrap

logger = logging.getLogger(__name__)

TAG_KEYS = ("json", "ts")


def tags(json: str = "", ts: str = "") -> dict[str, str]:
    """Build field tags, usable as dataclass field metadata or an Annotated extra."""
    return {k: v for k, v in (("json", json), ("ts", ts)) if v}


@dataclass
class FieldTags:
    """Parsed json/ts tags of one field."""

    json_name: str = ""
    json_options: list[str] = field(default_factory=list)
    ts_kind: str = ""
    ts_options: list[str] = field(default_factory=list)

    @property
    def ignore(self) -> bool:
        return self.json_name == "-" or self.ts_kind == "-"

    @property
    def date(self) -> bool:
        return self.ts_kind == "date"

    @property
    def optional(self) -> bool:
        return "optional" in self.ts_options or "omitempty" in self.json_options

    @property
    def embed(self) -> bool:
        return "embed" in self.ts_options

    @property
    def nullable(self) -> bool | None:
        """Forced nullability, or None to keep the type's own."""
        if "no-null" in self.ts_options:
            return False
        if "null" in self.ts_options:
            return True
        return None


def parse_tags(*sources: Any) -> FieldTags:
    """Parse tags from metadata mappings; the first source defining a key wins."""
    raw: dict[str, str] = {}
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for key in TAG_KEYS:
            value = source.get(key)
            if isinstance(value, str) and key not in raw:
                raw[key] = value

    json_parts = raw.get("json", "").split(",")
    ts_parts = raw.get("ts", "").split(",")
    return FieldTags(
        json_name=json_parts[0].strip(),
        json_options=[p.strip() for p in json_parts[1:]],
        ts_kind=ts_parts[0].strip(),
        ts_options=[p.strip() for p in ts_parts[1:]],
    )


@dataclass
class DeclaredField:
    """A field as declared on a struct type."""

    name: str
    annotation: Any
    metadata: Mapping[str, Any] = field(default_factory=dict)
    required: bool = True

    @property
    def exported(self) -> bool:
        return bool(self.name) and not self.name.startswith("_")

    @property
    def tags(self) -> FieldTags:
        return parse_tags(self.metadata, *unwrap(self.annotation).extras)


def declared_fields(tp: type) -> list[DeclaredField]:
    """
    Enumerate the fields of a dataclass or TypedDict in declaration order.

    Inherited fields come first, so base classes are flattened into the
    fields of their subclasses.
    """
    try:
        hints = typing.get_type_hints(tp, include_extras=True)
    except Exception as e:
        logger.warning("can't resolve annotations of %s (%s), using them unevaluated", tp.__name__, e)
        hints = {}

    if dataclasses.is_dataclass(tp):
        return [DeclaredField(f.name, hints.get(f.name, f.type), f.metadata) for f in dataclasses.fields(tp)]

    annotations = hints or getattr(tp, "__annotations__", {})
    optional_keys = getattr(tp, "__optional_keys__", frozenset())
    return [DeclaredField(name, hint, required=name not in optional_keys) for name, hint in annotations.items()]


class FieldBuilder:
    """Builds FieldSpecs from declared fields."""

    def __init__(self, resolver: TypeResolver):
        self.resolver = resolver
        self.config = resolver.config

    def wants_embedding(self, declared: DeclaredField) -> bool:
        """Whether the field asks to have its struct's fields spliced into the parent."""
        tags = declared.tags
        return declared.exported and not tags.ignore and tags.embed

    def build(self, declared: DeclaredField, owner: str = "") -> FieldSpec | None:
        """
        Build the FieldSpec of a declared field.

        Args:
            declared: The field declaration
            owner: Name of the struct being built, for diagnostics

        Returns:
            The field spec (flagged `ignore` when a tag excludes it), or None
            when the field is not part of the public contract
        """
        if not declared.exported:
            return None

        tags = declared.tags
        name = tags.json_name or declared.name
        if tags.ignore:
            return FieldSpec(name=declared.name, declared_name=declared.name, ignore=True)

        descriptor = self.resolver.resolve(declared.annotation, f"{owner}.{declared.name}")

        is_date = tags.date or descriptor.kind == TypeKind.DATE or self._is_timestamp(declared, name)

        nullable = descriptor.nullable if tags.nullable is None else tags.nullable

        return FieldSpec(
            name=name,
            declared_name=declared.name,
            descriptor=descriptor,
            optional=tags.optional or not declared.required,
            nullable=nullable,
            is_date=is_date,
        )

    def _is_timestamp(self, declared: DeclaredField, name: str) -> bool:
        if not is_integer_type(unwrap(declared.annotation).tp):
            return False
        return any(n.endswith(suffix) for n in (declared.name, name) for suffix in self.config.date_suffixes)
