"""Build evaluation contexts from YAML files and KEY=VALUE assignments."""

import json
from pathlib import Path
from typing import Any

import click
import yaml

from showwhen.expressions.semantics import to_string, type_of


def load_context(context_file: Path | None, assignments: tuple[str, ...]) -> dict[str, Any]:
    """Read a context mapping and apply --set assignments on top of it.

    Assignment values are parsed as YAML, so ``count=3`` sets a number and
    ``tag=button`` a string. Dotted keys (``element.tag=a``) create nested
    mappings.

    Raises:
        click.ClickException: If the file is not a mapping or an assignment
            is malformed.
    """
    context: dict[str, Any] = {}

    if context_file is not None:
        try:
            with open(context_file) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise click.ClickException(f"{context_file}: invalid YAML: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise click.ClickException(f"{context_file}: context must be a mapping")
        context.update(data or {})

    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            raise click.ClickException(f"Invalid assignment '{assignment}', expected KEY=VALUE")

        *parents, leaf = key.split(".")
        target = context
        for part in parents:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise click.ClickException(f"Cannot set '{key}': '{part}' is not a mapping")

        try:
            target[leaf] = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise click.ClickException(f"Invalid value in '{assignment}': {e}") from e

    return context


def format_value(value: Any) -> str:
    """Render an evaluation result for terminal output."""
    if type_of(value) == "object":
        return json.dumps(value, default=repr)
    if isinstance(value, str):
        return json.dumps(value)
    return to_string(value)
