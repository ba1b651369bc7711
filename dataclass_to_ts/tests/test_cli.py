import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from dataclass_to_ts import __version__
from dataclass_to_ts.dataclass_to_ts import dataclass_to_ts

MODELS = "dataclass_to_ts.tests.models"


@pytest.fixture
def runner():
    return CliRunner()


def test_interface_output(runner):
    result = runner.invoke(dataclass_to_ts, ["-i", f"{MODELS}:SomeStruct"])
    assert result.exit_code == 0, result.output
    assert result.stdout == (
        f"// this file was automatically generated using dataclass_to_ts {MODELS}:SomeStruct --interface, DO NOT EDIT\n"
        "\n"
        f"// dataclass_to_ts:{MODELS}.SomeStruct\n"
        "export interface SomeStruct {\n"
        "\tB: string;\n"
        "}\n"
        "\n"
    )


def test_dotted_reference(runner):
    result = runner.invoke(dataclass_to_ts, ["--interface", f"{MODELS}.SomeStruct"])
    assert result.exit_code == 0, result.output
    assert "export interface SomeStruct {" in result.stdout


def test_class_output_with_flags(runner):
    args = ["-C", "-T", "-N", "--no-helpers", "--no-exports", f"{MODELS}:ComplexStruct"]
    result = runner.invoke(dataclass_to_ts, args)
    assert result.exit_code == 0, result.output
    assert "class ComplexStruct {\n\ts: string;\n" in result.stdout
    assert "constructor" not in result.stdout
    assert "toObject" not in result.stdout
    assert "// helpers" not in result.stdout
    assert "// exports" not in result.stdout


def test_several_types(runner):
    result = runner.invoke(dataclass_to_ts, ["-i", f"{MODELS}:SomeStruct", f"{MODELS}:Node"])
    assert result.exit_code == 0, result.output
    assert result.stdout.index("interface SomeStruct") < result.stdout.index("interface Node")


def test_es6(runner):
    result = runner.invoke(dataclass_to_ts, ["--es6", f"{MODELS}:SomeStruct"])
    assert result.exit_code == 0, result.output
    assert "'use strict';\n" in result.stdout
    assert "exports.SomeStruct = SomeStruct;" in result.stdout


def test_config_file_and_output_file(runner):
    with runner.isolated_filesystem():
        Path("config.json").write_text(json.dumps({"interface_only": True, "indent": "  "}))
        result = runner.invoke(dataclass_to_ts, ["-c", "config.json", "-o", "out.ts", "-m", f"{MODELS}:Optionals"])
        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        out = Path("out.ts").read_text()

    assert out.startswith("// this file was automatically generated using dataclass_to_ts ")
    assert "--config config.json" in out.splitlines()[0]
    assert "export interface Optionals {\n  name?: string;\n" in out


def test_flags_override_config_file(runner):
    with runner.isolated_filesystem():
        Path("config.json").write_text(json.dumps({"no_helpers": True}))
        result = runner.invoke(dataclass_to_ts, ["-c", "config.json", "--indent", "    ", f"{MODELS}:SomeStruct"])
    assert result.exit_code == 0, result.output
    assert "// helpers" not in result.stdout
    assert "class SomeStruct {\n    B: string;\n" in result.stdout
    assert "--indent '    '" in result.stdout.splitlines()[0]


def test_non_struct_type(runner):
    result = runner.invoke(dataclass_to_ts, [f"{MODELS}:DataMap"])
    assert result.exit_code == 1
    assert "is not a struct." in result.output


def test_unknown_module(runner):
    result = runner.invoke(dataclass_to_ts, ["no_such_module_here:Thing"])
    assert result.exit_code == 2
    assert "can't import no_such_module_here" in result.output


def test_unknown_attribute(runner):
    result = runner.invoke(dataclass_to_ts, [f"{MODELS}:Missing"])
    assert result.exit_code == 2
    assert "has no attribute Missing" in result.output


def test_custom_render_failure(runner):
    result = runner.invoke(dataclass_to_ts, [f"{MODELS}:FailingCustom"])
    assert result.exit_code == 1
    assert "Custom render of FailingCustom failed: boom" in result.output


def test_types_are_required(runner):
    result = runner.invoke(dataclass_to_ts, [])
    assert result.exit_code == 2


def test_version(runner):
    result = runner.invoke(dataclass_to_ts, ["-V"])
    assert result.exit_code == 0
    assert __version__ in result.output
