"""Run the showwhen CLI.

Usage:
    python -m showwhen validate rules/
    python -m showwhen eval "element.tag === 'button'" --context ctx.yaml
"""

from showwhen.cli.main import cli


if __name__ == "__main__":
    cli()
