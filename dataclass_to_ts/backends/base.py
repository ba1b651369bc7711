"""
Base class for code generation backends.

Renders the registry's struct types through Jinja2 templates. Field
declarations, constructor statements and serializer hints are computed
here; the templates only lay out the declaration skeleton.
"""

from __future__ import annotations

import functools
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, TextIO

import jinja2

from ..analyzer.ir_nodes import BOOLEAN, NUMBER, STRING, FieldSpec, StructType, TypeDescriptor, TypeKind
from ..config import CodeGeneratorConfig
from ..errors import CustomRenderError
from ..utils import member, property_name
from .indent_writer import IndentingWriter

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

# Zero values for non-nullable fields without a more specific default
ZERO_VALUES = {
    NUMBER: "0",
    BOOLEAN: "false",
    STRING: "''",
}


@functools.cache
def template_environment(lang: str) -> jinja2.Environment:
    """Shared Jinja2 environment for one template language (compiled templates are cached)."""
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR / lang)),
        lstrip_blocks=True,
        trim_blocks=True,
    )


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Functions defined by the helper block
    HELPER_NAMES = ("ParseDate", "ParseNumber", "FromArray", "ToObject")

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.indent = config.indent
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Load the prefix, class and suffix templates."""
        env = template_environment(self.TEMPLATE_LANG)
        self.prefix_template = env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.suffix_template = env.get_template(f"suffix.{self.FILE_EXTENSION}.jinja2")

    def render(self, structs: list[StructType], sink: TextIO) -> None:
        """
        Render struct types to a text sink.

        Each block is written as soon as it is rendered; a failing custom
        render hook leaves the blocks already written in the sink.

        Args:
            structs: Struct types in registration order
            sink: Anything with a write(str) method

        Raises:
            CustomRenderError: If a type's custom render hook fails
        """
        sink.write(self.prefix_template.render(HELPERS=self.config.emit_helpers))

        for struct in structs:
            logger.debug("rendering %s", struct.name)
            block = self.render_struct(struct)
            if block:
                sink.write(block + "\n\n")

        sink.write(self.suffix_template.render(EXPORTS=self.export_names(structs), INDENT=self.indent))

    def render_struct(self, struct: StructType) -> str:
        return self.class_template.render(self._prepare_class_context(struct))

    def export_names(self, structs: list[StructType]) -> list[str]:
        """Symbols listed in the export block (interfaces are exported inline)."""
        if self.config.no_exports or not self.config.has_classes:
            return []
        names = [s.name for s in structs]
        if self.config.emit_helpers:
            names.extend(self.HELPER_NAMES)
        return names

    @abstractmethod
    def cast(self, expr: str, ts_type: str) -> str:
        """
        Annotate an untyped expression with a type, if the language has types.

        Args:
            expr: The expression
            ts_type: The TypeScript type it holds

        Returns:
            The expression for the target language
        """

    @abstractmethod
    def param(self, name: str, ts_type: str = "any") -> str:
        """Format a lambda parameter."""

    def _prepare_class_context(self, struct: StructType) -> dict[str, Any]:
        """
        Prepare the template context for a struct type.

        Args:
            struct: The struct type

        Returns:
            Dictionary of template variables
        """
        fields = struct.visible_fields
        has_classes = self.config.has_classes
        return {
            "ORIGIN": f"dataclass_to_ts:{struct.qualified_name}",
            "CLASS_NAME": struct.name,
            "INTERFACE": self.config.interface_only,
            "EXPORT": not self.config.no_exports,
            "INDENT": self.indent,
            "INDENT2": self.indent * 2,
            "FIELDS": [self._prepare_field_context(f) for f in fields],
            "CONSTRUCTOR": has_classes and not self.config.no_constructor,
            "SERIALIZER": has_classes and not self.config.no_to_object,
            "TYPE_HINTS": self.serializer_hints(fields),
            "CUSTOM": self._render_custom(struct),
        }

    def _prepare_field_context(self, field: FieldSpec) -> dict[str, Any]:
        ctx = {
            "name": field.name,
            "declaration": self.declaration(field),
        }
        if self.config.has_classes:
            ctx["hydration"] = self.hydration(field)
        return ctx

    def translate_type(self, descriptor: TypeDescriptor) -> str:
        """Translate a descriptor to a TypeScript type (without its own nullability)."""
        kind = descriptor.kind
        if kind == TypeKind.PRIMITIVE:
            return descriptor.name
        if kind == TypeKind.DATE:
            return descriptor.name if self.config.no_date else "Date"
        if kind == TypeKind.DYNAMIC:
            return "any"
        if kind == TypeKind.OBJECT:
            return descriptor.struct.name
        if kind == TypeKind.ARRAY:
            element = self._nested_type(descriptor.element)
            if descriptor.element.nullable:
                return f"({element})[]"
            return f"{element}[]"
        if kind == TypeKind.MAP:
            return f"{{ [key: {descriptor.key.name}]: {self._nested_type(descriptor.element)} }}"
        raise ValueError(f"Unknown type kind {kind}")

    def _nested_type(self, descriptor: TypeDescriptor) -> str:
        out = self.translate_type(descriptor)
        return f"{out} | null" if descriptor.nullable else out

    def field_type(self, field: FieldSpec, null_suffix: bool = True) -> str:
        """The TypeScript type of a field."""
        if field.is_date and not self.config.no_date:
            out = "Date"
        else:
            out = self.translate_type(field.descriptor)
        if null_suffix and field.nullable:
            out += " | null"
        return out

    def declaration(self, field: FieldSpec) -> str:
        """A field declaration, without the trailing semicolon."""
        name = property_name(field.name)
        if field.optional and self.config.mark_optional:
            name += "?"

        out = f"{name}: {self.field_type(field)}"
        config = self.config
        if not (config.interface_only or config.no_assign_defaults or not config.no_constructor):
            out += f" = {self.default_value(field)}"
        return out

    def default_value(self, field: FieldSpec) -> str:
        """The value a constructor assigns when the input lacks the field."""
        if field.nullable:
            return "null"

        if field.is_date and not self.config.no_date:
            return "new Date()"

        descriptor = field.descriptor
        if descriptor.kind == TypeKind.OBJECT:
            return f"new {descriptor.struct.name}()"
        if descriptor.kind == TypeKind.MAP:
            return "{}"
        if descriptor.kind == TypeKind.ARRAY:
            return "[]"
        if descriptor.kind in (TypeKind.PRIMITIVE, TypeKind.DATE):
            return ZERO_VALUES.get(descriptor.name, "null")
        return "null"

    def needs_hydration(self, descriptor: TypeDescriptor) -> bool:
        """Whether raw values of this type must be converted in a constructor."""
        if descriptor.kind == TypeKind.OBJECT:
            return True
        if descriptor.kind == TypeKind.DATE:
            return not self.config.no_date
        if descriptor.kind in (TypeKind.ARRAY, TypeKind.MAP):
            return self.needs_hydration(descriptor.element)
        return False

    def hydration(self, field: FieldSpec) -> str:
        """The constructor statement assigning a field, without the trailing semicolon."""
        target = member("this", field.name)
        source = member("d", field.name)
        present = f"{_quote(field.name)} in d"
        descriptor = field.descriptor

        if field.is_date and not self.config.no_date:
            guard, value = present, f"ParseDate({source})"
        elif descriptor.kind == TypeKind.OBJECT:
            guard, value = present, f"new {descriptor.struct.name}({source})"
            if not field.nullable and not self.config.no_assign_defaults:
                # constructors accept a missing input
                return f"{target} = {value}"
        elif descriptor.kind == TypeKind.ARRAY and self.needs_hydration(descriptor):
            guard, value = f"Array.isArray({source})", self._map_array(descriptor.element, source, 0)
        elif descriptor.kind == TypeKind.MAP and self.needs_hydration(descriptor):
            guard = f"{source} != null" if field.nullable else present
            value = self._map_object(descriptor.element, source, 0)
        else:
            guard, value = present, self.cast(source, self.field_type(field, null_suffix=False))

        if self.config.no_assign_defaults:
            return f"if ({guard}) {target} = {value}"
        if " in " in guard:
            guard = f"({guard})"
        return f"{target} = {guard} ? {value} : {self.default_value(field)}"

    def hydrate_value(self, descriptor: TypeDescriptor, expr: str, depth: int) -> str:
        """Expression converting a raw nested value to its runtime type."""
        if not self.needs_hydration(descriptor):
            return expr

        if descriptor.kind == TypeKind.DATE:
            value = f"ParseDate({expr})"
        elif descriptor.kind == TypeKind.OBJECT:
            value = f"new {descriptor.struct.name}({expr})"
        elif descriptor.kind == TypeKind.ARRAY:
            value = f"Array.isArray({expr}) ? {self._map_array(descriptor.element, expr, depth)} : []"
        else:
            value = self._map_object(descriptor.element, expr, depth)

        if descriptor.nullable:
            return f"{expr} == null ? null : {value}"
        return value

    def _map_array(self, element: TypeDescriptor, expr: str, depth: int) -> str:
        var = _var("v", depth)
        inner = self.hydrate_value(element, var, depth + 1)
        return f"{expr}.map(({self.param(var)}) => {_wrap(inner)})"

    def _map_object(self, element: TypeDescriptor, expr: str, depth: int) -> str:
        acc, key = _var("m", depth), _var("k", depth)
        inner = self.hydrate_value(element, f"{expr}[{key}]", depth + 1)
        return (
            f"Object.keys({expr} || {{}}).reduce(({self.param(acc)}, {self.param(key, 'string')}) => "
            f"{{ {acc}[{key}] = {inner}; return {acc}; }}, {{}})"
        )

    def serializer_hints(self, fields: list[FieldSpec]) -> list[tuple[str, str]]:
        """
        Per-field type hints passed to ToObject by toObject().

        Dates held as strings serialize as ISO strings ('string'); dates held
        as numbers get no hint and serialize as epoch seconds; numbers get
        'number' so numeric strings are parsed back.
        """
        hints = []
        for field in fields:
            ts_type = self.field_type(field, null_suffix=False)
            if ts_type == "Date" and field.descriptor.name != NUMBER:
                hints.append((member("cfg", field.name), STRING))
            elif ts_type == NUMBER:
                hints.append((member("cfg", field.name), NUMBER))
        return hints

    def _render_custom(self, struct: StructType) -> str:
        """Run the struct's custom render hook, returning its indented output."""
        if struct.custom_renderer is None:
            return ""

        buffer = io.StringIO()
        try:
            struct.custom_renderer(IndentingWriter(buffer, self.indent))
        except Exception as e:
            raise CustomRenderError(struct.name, str(e)) from e

        text = buffer.getvalue().rstrip()
        return self.indent + text if text else ""


def _quote(name: str) -> str:
    return "'" + name.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _var(prefix: str, depth: int) -> str:
    return prefix if depth == 0 else f"{prefix}{depth}"


def _wrap(expr: str) -> str:
    """Parenthesize conditional expressions used as arrow function bodies."""
    return f"({expr})" if " ? " in expr else expr
