import datetime
import decimal
import uuid
from typing import Annotated, Any, Callable, Literal, NewType, Optional, TypeVar, Union

import pytest

from dataclass_to_ts import CodeGeneratorConfig, DiagnosticKind, TypeKind, TypeRegistry, tags
from dataclass_to_ts.analyzer.type_resolver import native_name, struct_origin, unwrap

from .models import Box, Color, Level, Movie, SomeStruct, SomeStructAlias, SomeStructID


def resolve(annotation, **config):
    registry = TypeRegistry(CodeGeneratorConfig(**config))
    return registry.resolver.resolve(annotation, "Test.field"), registry


class TestUnwrap:
    """Optional/alias unwrapping"""

    def test_plain_type_is_not_nullable(self):
        out = unwrap(int)
        assert out.tp is int
        assert not out.nullable

    def test_optional_is_nullable(self):
        assert unwrap(Optional[int]).nullable
        assert unwrap(int | None).nullable
        assert unwrap(Union[None, str]).tp is str

    def test_nested_wrappers_unwrap_repeatedly(self):
        Inner = NewType("Inner", Optional[int])
        out = unwrap(Annotated[Inner, "x"])
        assert out.tp is int
        assert out.nullable
        assert out.extras == ["x"]

    def test_multi_member_union_keeps_the_rest(self):
        out = unwrap(int | str | None)
        assert out.nullable
        assert out.tp == Union[int, str]

    def test_aliases_reduce_to_the_struct(self):
        assert unwrap(SomeStructID).tp is SomeStruct
        assert unwrap(SomeStructAlias).tp is SomeStruct


def test_struct_origin():
    assert struct_origin(SomeStruct) is SomeStruct
    assert struct_origin(Box[int, int]) is Box
    assert struct_origin(Movie) is Movie
    assert struct_origin(str) is None
    assert struct_origin(list[SomeStruct]) is None


def test_native_name():
    assert native_name(SomeStruct) == "SomeStruct"
    assert native_name("Forward") == "Forward"


@pytest.mark.parametrize(
    "annotation, name",
    [
        (str, "string"),
        (bytes, "string"),
        (uuid.UUID, "string"),
        (int, "number"),
        (float, "number"),
        (decimal.Decimal, "number"),
        (bool, "boolean"),
        (Color, "string"),
        (Level, "number"),
        (Literal["a", "b"], "string"),
        (Literal[True], "boolean"),
    ],
)
def test_primitives(annotation, name):
    descriptor, registry = resolve(annotation)
    assert descriptor.kind == TypeKind.PRIMITIVE
    assert descriptor.name == name
    assert not descriptor.nullable
    assert not registry.diagnostics


def test_optional_primitive_is_nullable():
    descriptor, _ = resolve(Optional[int])
    assert descriptor.name == "number"
    assert descriptor.nullable


@pytest.mark.parametrize("annotation", [datetime.datetime, datetime.date])
def test_dates(annotation):
    descriptor, _ = resolve(annotation)
    assert descriptor.kind == TypeKind.DATE
    assert descriptor.name == "string"


@pytest.mark.parametrize("annotation", [Any, object, TypeVar("Free")])
def test_dynamic(annotation):
    descriptor, _ = resolve(annotation)
    assert descriptor.kind == TypeKind.DYNAMIC


def test_bound_type_var_uses_its_bound():
    descriptor, _ = resolve(TypeVar("Count", bound=int))
    assert descriptor.kind == TypeKind.PRIMITIVE
    assert descriptor.name == "number"


def test_struct_is_registered():
    descriptor, registry = resolve(Optional[SomeStruct])
    assert descriptor.kind == TypeKind.OBJECT
    assert descriptor.nullable
    assert descriptor.struct is registry.get(SomeStruct)
    assert [s.name for s in registry] == ["SomeStruct"]


class TestArrays:
    """Sequences and tuples"""

    def test_list(self):
        descriptor, _ = resolve(list[int])
        assert descriptor.kind == TypeKind.ARRAY
        assert descriptor.element.name == "number"
        assert not descriptor.nullable

    def test_nullable_slices(self):
        descriptor, _ = resolve(set[str], nullable_slices=True)
        assert descriptor.kind == TypeKind.ARRAY
        assert descriptor.nullable

    def test_homogeneous_tuple_ignores_nullable_slices(self):
        descriptor, _ = resolve(tuple[int, int], nullable_slices=True)
        assert not descriptor.nullable
        assert descriptor.element.name == "number"

    def test_variadic_tuple_is_growable(self):
        descriptor, _ = resolve(tuple[str, ...], nullable_slices=True)
        assert descriptor.nullable
        assert descriptor.element.name == "string"

    def test_heterogeneous_tuple(self):
        descriptor, registry = resolve(tuple[int, str])
        assert descriptor.element.kind == TypeKind.DYNAMIC
        assert registry.diagnostics[0].kind == DiagnosticKind.UNSUPPORTED_FIELD_KIND

    def test_nested(self):
        descriptor, _ = resolve(list[list[Optional[SomeStruct]]])
        element = descriptor.element.element
        assert element.kind == TypeKind.OBJECT
        assert element.nullable


class TestMaps:
    """Mappings"""

    def test_dict(self):
        descriptor, _ = resolve(dict[str, float])
        assert descriptor.kind == TypeKind.MAP
        assert descriptor.key.name == "string"
        assert descriptor.element.name == "number"

    def test_number_keys(self):
        descriptor, registry = resolve(dict[int, SomeStruct])
        assert descriptor.key.name == "number"
        assert descriptor.element.kind == TypeKind.OBJECT
        assert not registry.diagnostics

    def test_unsupported_key_falls_back_to_string(self):
        descriptor, registry = resolve(dict[tuple[int, int], str])
        assert descriptor.key.name == "string"
        assert len(registry.diagnostics) == 1
        assert registry.diagnostics[0].type_name == "Test"
        assert registry.diagnostics[0].field_name == "field"

    def test_struct_key_is_not_registered(self):
        descriptor, registry = resolve(dict[SomeStruct, int])
        assert descriptor.key.name == "string"
        assert registry.get(SomeStruct) is None
        assert len(registry) == 0
        assert registry.diagnostics[0].kind == DiagnosticKind.UNSUPPORTED_FIELD_KIND

    def test_bare_dict(self):
        descriptor, _ = resolve(dict)
        assert descriptor.key.name == "string"
        assert descriptor.element.kind == TypeKind.DYNAMIC


class TestFallback:
    """Unclassified types are emitted under their native name"""

    def test_callable(self):
        descriptor, registry = resolve(Callable[[], None])
        assert descriptor.kind == TypeKind.PRIMITIVE
        assert descriptor.fallback
        assert registry.diagnostics[0].kind == DiagnosticKind.UNSUPPORTED_FIELD_KIND

    def test_union(self):
        descriptor, registry = resolve(int | str | None)
        assert descriptor.fallback
        assert descriptor.nullable
        assert len(registry.diagnostics) == 1

    def test_mixed_literal(self):
        descriptor, registry = resolve(Literal[1, "a"])
        assert descriptor.fallback
        assert registry.diagnostics

    def test_diagnostics_are_logged(self, caplog):
        with caplog.at_level("WARNING"):
            resolve(Callable[[], None])
        assert "Test.field" in caplog.text
        assert "unhandled type" in caplog.text


def test_annotated_tags_do_not_change_the_type():
    descriptor, _ = resolve(Annotated[Optional[int], tags(ts=",no-null")])
    assert descriptor.name == "number"
    assert descriptor.nullable
