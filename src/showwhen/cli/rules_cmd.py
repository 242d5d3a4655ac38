"""Rule file commands: validate and check."""

from pathlib import Path

import click

from showwhen.cli.context import load_context
from showwhen.config import CliConfig
from showwhen.rules import RuleFileError, RuleSetLoader


def _load_rules(path: Path | None, config: CliConfig) -> RuleSetLoader:
    """Load rules from PATH, falling back to the configured rules path."""
    rules_path = path or config.rules_path
    if not rules_path.exists():
        click.echo(f"Error: Rules path not found at {rules_path}", err=True)
        raise SystemExit(1)

    loader = RuleSetLoader(rules_path)
    try:
        loader.load_all()
    except RuleFileError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


@click.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, path_type=Path),
)
@click.pass_obj
def validate(config: CliConfig, path: Path | None):
    """Check every show-when expression in the rule files for syntax errors."""
    loader = _load_rules(path, config)
    rules = loader.list_rules()
    issues = loader.check_syntax()

    for issue in issues:
        click.echo(click.style(str(issue), fg="red"))
        click.echo(f"    {issue.expression}")

    if issues:
        click.echo(
            click.style(f"\n{len(issues)} syntax error(s) found", fg="red", bold=True)
        )
        raise SystemExit(1)

    expression_count = sum(len(rule.show_when) for rule in rules)
    click.echo(f"Checked {len(rules)} rule(s), {expression_count} expression(s).")
    click.echo(click.style("All show-when expressions are valid.", fg="green", bold=True))


@click.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, path_type=Path),
)
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
@click.pass_obj
def check(
    config: CliConfig,
    path: Path | None,
    context_file: Path | None,
    assignments: tuple[str, ...],
):
    """Show which rules apply to a context."""
    loader = _load_rules(path, config)
    context = load_context(context_file, assignments)

    rules = loader.list_rules()
    shown = {rule.name for rule in loader.shown_rules(context)}

    for rule in rules:
        if rule.name in shown:
            click.echo(click.style(f"  ✓ {rule.name}", fg="green"))
        else:
            click.echo(click.style(f"  ✗ {rule.name}", fg="yellow"))

    click.echo(f"\n{len(shown)} of {len(rules)} rule(s) shown.")
