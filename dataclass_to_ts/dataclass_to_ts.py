import json
import logging

import click

from . import __version__
from .cli_utils import reconstruct_command_line, resolve_type_reference
from .config import CodeGeneratorConfig
from .errors import TypeScriptGenerationError
from .generator import TypeScriptGenerator

logger = logging.getLogger(__name__)

# CLI flag -> config attribute, for flags that switch an option on
FLAG_OPTIONS = {
    "mark_optional": "mark_optional",
    "no_ctor": "no_constructor",
    "no_to_object": "no_to_object",
    "no_date": "no_date",
    "no_default_values": "no_assign_defaults",
    "interface": "interface_only",
    "no_capitalize": "no_capitalize",
    "no_exports": "no_exports",
    "no_helpers": "no_helpers",
    "es6": "es6",
    "nullable_slices": "nullable_slices",
}


@click.command()
@click.version_option(__version__, "--version", "-V")
@click.option("--indent", default=None, type=str, help="Output indentation (default: a tab).")
@click.option("--mark-optional-fields", "-m", "mark_optional", is_flag=True, help="Add `?` to optional fields.")
@click.option("--no-ctor", "-C", "no_ctor", is_flag=True, help="Don't generate a constructor.")
@click.option("--no-toObject", "-T", "no_to_object", is_flag=True, help="Don't generate a toObject() method.")
@click.option("--no-date", "-D", "no_date", is_flag=True, help="Don't convert dates to JS Date objects.")
@click.option(
    "--no-default-values",
    "-N",
    "no_default_values",
    is_flag=True,
    help="Don't assign default/zero values in the constructor.",
)
@click.option("--interface", "-i", "interface", is_flag=True, help="Only generate interfaces.")
@click.option("--no-capitalize", is_flag=True, help="Keep type names as declared.")
@click.option("--no-exports", is_flag=True, help="Don't export the generated symbols.")
@click.option("--no-helpers", is_flag=True, help="Don't emit the helper functions.")
@click.option("--es6", is_flag=True, help="Generate untyped ES6 JavaScript.")
@click.option("--nullable-slices", is_flag=True, help="Render sequences as nullable arrays.")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--out", "-o", default="-", type=click.Path(dir_okay=False, allow_dash=True), help="Output file.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug information.")
@click.argument("types", nargs=-1, required=True)
def dataclass_to_ts(indent, config, out, verbose, types, **flags):
    """Generate TypeScript declarations for the dataclasses/TypedDicts TYPES (module:Class)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # Flags override the config file when set
    for flag, option in FLAG_OPTIONS.items():
        if flags[flag]:
            setattr(config, option, True)
    if indent is not None:
        config.indent = indent

    generator = TypeScriptGenerator(config)
    try:
        for reference in types:
            logger.debug("adding %s", reference)
            generator.add(resolve_type_reference(reference))
    except TypeScriptGenerationError as e:
        raise click.ClickException(str(e)) from e

    command_line = reconstruct_command_line(dataclass_to_ts)
    with click.open_file(out, "w") as f:
        f.write(f"// this file was automatically generated using {command_line}, DO NOT EDIT\n\n")
        try:
            generator.render_to(f)
        except TypeScriptGenerationError as e:
            raise click.ClickException(str(e)) from e
