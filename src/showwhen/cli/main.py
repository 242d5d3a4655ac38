"""showwhen CLI entry point."""

import click

from showwhen.config import CliConfig, configure_logging


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (overrides SHOWWHEN_LOG_LEVEL).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """showwhen: check and evaluate show/hide condition expressions."""
    config = CliConfig.from_env()
    if log_level:
        config.log_level = log_level.upper()

    try:
        configure_logging(config.log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level")

    ctx.obj = config


# Register subcommands
from showwhen.cli.eval_cmd import eval_cmd  # noqa: E402
from showwhen.cli.rules_cmd import check, validate  # noqa: E402

cli.add_command(eval_cmd)
cli.add_command(validate)
cli.add_command(check)
