"""Command-line interface for gql-pymarshal."""

import codecs
import importlib
import logging
import sys
from pathlib import Path

import click

from .core.document import CompiledDocument, marshal
from .core.errors import MarshalError
from .core.settings import CompilerSettings


def load_shape(target: str) -> type:
    """Import a shape from a 'package.module:ClassName' reference."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise click.BadParameter(
            f"expected 'module:ClassName', got {target!r}", param_hint="TARGET"
        )
    # Allow targets in the working directory without installing them
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name!r}: {e}", param_hint="TARGET")
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise click.BadParameter(
                f"{module_name!r} has no attribute {attr_path!r}", param_hint="TARGET"
            )
    return obj


def compile_target(target: str, indent: str | None, verbose: bool) -> CompiledDocument:
    """Load and marshal a target, turning marshal errors into CLI errors."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    shape = load_shape(target)
    settings = None
    if indent is not None:
        # Accept escapes such as "\t" from the shell
        settings = CompilerSettings(indent=codecs.decode(indent, "unicode_escape"))
    try:
        return marshal(shape, settings)
    except MarshalError as e:
        raise click.ClickException(str(e))


def _assemble(document: CompiledDocument, operation: str, name: str | None) -> str:
    try:
        if operation == "mutation":
            return document.mutation(name)
        return document.query(name)
    except MarshalError as e:
        raise click.ClickException(str(e))


target_argument = click.argument("target")
name_option = click.option("--name", "-n", default=None, help="Operation name.")
indent_option = click.option(
    "--indent",
    "-i",
    default=None,
    help='Indent unit (default: two spaces). Escapes such as "\\t" are accepted.',
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")


@click.group()
@click.version_option(package_name="gql-pymarshal")
def main():
    """Marshal pydantic models and dataclasses into GraphQL documents.

    TARGET is a reference like 'myapp.queries:ProductsQuery'.
    """
    pass


@main.command()
@target_argument
@name_option
@indent_option
@verbose_option
def query(target: str, name: str | None, indent: str | None, verbose: bool):
    """Print the query document for a shape.

    Examples:

        gql-pymarshal query myapp.queries:ProductsQuery --name GetProducts

        gql-pymarshal query myapp.queries:ProductsQuery -i "\\t"
    """
    document = compile_target(target, indent, verbose)
    click.echo(_assemble(document, "query", name))


@main.command()
@target_argument
@name_option
@indent_option
@verbose_option
def mutation(target: str, name: str | None, indent: str | None, verbose: bool):
    """Print the mutation document for a shape.

    Examples:

        gql-pymarshal mutation myapp.mutations:UpdateVariants -n productVariantsBulkUpdate
    """
    document = compile_target(target, indent, verbose)
    click.echo(_assemble(document, "mutation", name))


@main.command()
@target_argument
@verbose_option
def variables(target: str, verbose: bool):
    """List the variables of a shape with their types and usage paths."""
    document = compile_target(target, None, verbose)
    if not document.variables:
        click.echo("No variables.")
        return
    for variable in document.variables:
        if variable.type:
            click.echo(variable.declaration())
        else:
            click.echo(f"{variable.reference}: <untyped>")
        for path in variable.usage_paths:
            click.echo(f"  {path}")


if __name__ == "__main__":
    main()
