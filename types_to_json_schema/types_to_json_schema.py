import json
import logging

import click

from .cli_utils import apply_cli_overrides, format_schema, select_include_files, write_output
from .config import GeneratorConfig
from .errors import ProgramDiagnosticsError, SchemaGenerationError
from .generator import generate_schema
from .oracle.loader import load_program


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--ref/--no-ref", default=True, help="Reference named types through definitions")
@click.option("--alias-ref/--no-alias-ref", default=False, help="Reference type aliases by their alias name")
@click.option("--top-ref/--no-top-ref", default=False, help="Make the requested type itself a $ref")
@click.option("--titles/--no-titles", default=False, help="Add titles to definitions and properties")
@click.option("--default-props/--no-default-props", default=False, help="Add an empty defaultProperties list")
@click.option("--no-extra-props/--extra-props", default=False, help="Forbid additional properties on objects")
@click.option("--prop-order/--no-prop-order", default=False, help="Add propertyOrder to objects")
@click.option("--type-of-keyword/--no-type-of-keyword", default=False, help="Emit typeof for function types")
@click.option("--required/--no-required", default=False, help="Compute required properties")
@click.option("--strict-null-checks/--no-strict-null-checks", default=False)
@click.option("--ignore-errors/--no-ignore-errors", default=False, help="Generate despite program diagnostics")
@click.option("--validation-keyword", "validation_keywords", multiple=True, help="Extra documentation tag to copy (repeatable)")
@click.option("--include", multiple=True, help="Glob of files holding user types (repeatable)")
@click.option("--exclude-private/--no-exclude-private", default=False, help="Skip private members")
@click.option("--unique-names/--no-unique-names", default=False, help="Suffix names with a declaration hash")
@click.option("--reject-date-type/--no-reject-date-type", default=False, help="Treat Date as unsupported")
@click.option("--id", default="", help="Schema $id")
@click.option("--out", "-o", default="", type=click.Path(resolve_path=True), help="Output file (default: stdout)")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("program", type=click.Path(exists=True, resolve_path=True))
@click.argument("type_name", metavar="TYPE")
@click.pass_context
def types_to_json_schema(ctx, config, verbose, program, type_name, **options):
    """Generate the JSON Schema of TYPE (or "*" for all) from a PROGRAM dump."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # Options given on the command line override the config file
    config = apply_cli_overrides(ctx, config, options)

    try:
        oracle = load_program(program)
        only_include_files = select_include_files(oracle, config.include)
        schema = generate_schema(oracle, type_name, config, only_include_files)
    except ProgramDiagnosticsError as e:
        for diagnostic in e.diagnostics:
            click.echo(diagnostic, err=True)
        ctx.exit(1)
    except SchemaGenerationError as e:
        raise click.ClickException(str(e)) from e

    write_output(format_schema(schema), config.out)
