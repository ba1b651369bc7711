from dataclass_to_ts import CodeGeneratorConfig, TypeScriptGenerator
from dataclass_to_ts.backends import ES6Backend, TypeScriptBackend, create_backend

from .models import Collections, ComplexStruct, SomeStruct


def render(*types, **config):
    generator = TypeScriptGenerator(CodeGeneratorConfig(es6=True, **config))
    for tp in types:
        generator.add(tp)
    return generator.render()


def test_backend_selection():
    assert isinstance(create_backend(CodeGeneratorConfig(es6=True)), ES6Backend)
    assert isinstance(create_backend(CodeGeneratorConfig()), TypeScriptBackend)


def test_class():
    out = render(SomeStruct, no_helpers=True)
    assert out == (
        "'use strict';\n"
        "\n"
        "// dataclass_to_ts:dataclass_to_ts.tests.models.SomeStruct\n"
        "class SomeStruct {\n"
        "\tconstructor(data = null) {\n"
        "\t\tconst d = (data && typeof data === 'object') ? ToObject(data) : {};\n"
        "\t\tthis.B = ('B' in d) ? d.B : '';\n"
        "\t}\n"
        "\n"
        "\ttoObject() {\n"
        "\t\tconst cfg = {};\n"
        "\t\treturn ToObject(this, cfg);\n"
        "\t}\n"
        "}\n"
        "\n"
        "// exports\n"
        "if (typeof exports === 'undefined') var exports = {};\n"
        "\n"
        "exports.SomeStruct = SomeStruct;\n"
    )


def test_untyped_helpers():
    out = render(SomeStruct)
    assert out.startswith("'use strict';\n\n// helpers\n")
    assert "function ParseDate(d) {\n" in out
    assert "exports.ToObject = ToObject;\n" in out
    assert ": any" not in out


def test_no_casts_or_typed_params():
    out = render(ComplexStruct, Collections, no_helpers=True)
    assert " as " not in out
    assert "\t\tthis.s = ('s' in d) ? d.s : '';\n" in out
    assert "Object.keys(d.Lookup || {}).reduce((m, k) => { m[k] = new SomeStruct(d.Lookup[k]); return m; }, {})" in out
    assert "d.Maybe.map((v) => (v == null ? null : new SomeStruct(v)))" in out
    assert "\t\tcfg.t = 'string';\n" in out


def test_no_field_declarations():
    out = render(ComplexStruct, no_helpers=True)
    assert "\ts: string" not in out
    assert "class ComplexStruct {\n\tconstructor(data = null) {\n" in out


def test_interfaces_are_skipped(caplog):
    with caplog.at_level("WARNING"):
        out = render(SomeStruct, interface_only=True)
    assert out == "'use strict';\n\n"
    assert "interfaces can't be expressed in ES6" in caplog.text


def test_no_exports():
    out = render(SomeStruct, no_exports=True)
    assert "exports" not in out
