"""Evaluate a single expression from the command line."""

from pathlib import Path

import click

from showwhen.cli.context import format_value, load_context
from showwhen.expressions import (
    ExpressionSecurityError,
    ExpressionSyntaxError,
    compile_expression,
    is_truthy,
)


@click.command("eval")
@click.argument("expression")
@click.option(
    "--context",
    "context_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML or JSON file holding the context mapping.",
)
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Set a context key (dotted keys nest); VALUE is parsed as YAML.",
)
@click.option(
    "--bool",
    "as_bool",
    is_flag=True,
    default=False,
    help="Print the truthiness of the result instead of the value.",
)
def eval_cmd(
    expression: str,
    context_file: Path | None,
    assignments: tuple[str, ...],
    as_bool: bool,
):
    """Evaluate EXPRESSION against a context and print the result."""
    context = load_context(context_file, assignments)

    try:
        compiled = compile_expression(expression)
    except ExpressionSyntaxError as e:
        click.echo(click.style(f"Syntax error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    try:
        result = compiled(context)
    except ExpressionSecurityError as e:
        click.echo(click.style(f"Security error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if as_bool:
        result = is_truthy(result)

    click.echo(format_value(result))
