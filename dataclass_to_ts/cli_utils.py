"""
CLI utilities for command line reconstruction and type reference resolution.
"""

import importlib
import sys
from pathlib import Path
from typing import Any

import click

PROGRAM_NAME = "dataclass_to_ts"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return PROGRAM_NAME

    if not cli_args:
        return PROGRAM_NAME

    cmd_parts = [PROGRAM_NAME]
    arguments = []
    options = []

    for param in click_command.params:
        if param.name not in cli_args:
            continue

        value = cli_args[param.name]
        if not value:
            continue

        if isinstance(param, click.Argument):
            values = value if isinstance(value, (list, tuple)) else [value]
            arguments.extend(_format_value(v) for v in values)

        elif isinstance(param, click.Option):
            # Skip default values
            if value == param.default:
                continue

            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, _format_value(value)])

    # Combine: command + arguments + options
    cmd_parts.extend(arguments)
    cmd_parts.extend(options)

    return " ".join(cmd_parts)


def _format_value(value: Any) -> str:
    """Format a value, reducing existing file paths to their file name."""
    if isinstance(value, (str, Path)):
        text = str(value)
        path_obj = Path(text)
        if path_obj.is_file():
            return path_obj.name
        # whitespace-only values such as an indent
        return repr(text) if text != text.strip() else text
    return str(value)


def resolve_type_reference(reference: str) -> Any:
    """
    Import the object named by a `module:attr` or `module.attr` reference.

    The current directory is put on sys.path first, so modules of the
    project the command runs in can be imported.

    Args:
        reference: The type reference

    Returns:
        The referenced object

    Raises:
        click.BadParameter: If the module can't be imported or lacks the attribute
    """
    if ":" in reference:
        module_name, _, attr_path = reference.partition(":")
    else:
        module_name, _, attr_path = reference.rpartition(".")

    if not module_name or not attr_path:
        raise click.BadParameter(f"{reference!r} is not a module:Type reference", param_hint="TYPES")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"can't import {module_name}: {e}", param_hint="TYPES") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name} has no attribute {attr_path}", param_hint="TYPES") from e

    return obj
