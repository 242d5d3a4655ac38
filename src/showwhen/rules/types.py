"""Rule types: named show-when condition lists loaded from YAML."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from showwhen.expressions import evaluate_show_when, validate_expression_syntax


class RuleFileError(ValueError):
    """A rule document could not be read or has the wrong shape."""


@dataclass
class SyntaxIssue:
    """A show-when expression in a rule that does not parse."""

    rule: str
    index: int
    expression: str
    message: str
    file: Path | None = None

    def __str__(self) -> str:
        loc = f"{self.file}: " if self.file else ""
        return f"[ERROR] {loc}rule '{self.rule}' showWhen[{self.index}]: {self.message}"


@dataclass
class ShowWhenRule:
    """A named rule that is shown when any of its conditions holds.

    Attributes:
        name: Unique rule name
        show_when: Expressions OR-ed together; empty means always shown
        description: Human-readable description
        source: File the rule was loaded from, if any
    """

    name: str
    show_when: list[str] = field(default_factory=list)
    description: str = ""
    source: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> "ShowWhenRule":
        """Create a ShowWhenRule from a YAML/JSON dict."""
        if not isinstance(data, dict):
            raise RuleFileError(f"{source or '<rules>'}: each rule must be a mapping")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise RuleFileError(f"{source or '<rules>'}: rule is missing a 'name'")

        expressions = data.get("showWhen")
        if expressions is None:
            expressions = []
        if isinstance(expressions, str):
            expressions = [expressions]
        if not isinstance(expressions, list) or not all(
            isinstance(e, str) for e in expressions
        ):
            raise RuleFileError(
                f"{source or '<rules>'}: rule '{name}' showWhen must be a string or a list of strings"
            )

        return cls(
            name=name,
            show_when=expressions,
            description=data.get("description", ""),
            source=source,
        )

    def is_shown(self, context: Mapping[str, Any]) -> bool:
        """Evaluate the rule's conditions against a context."""
        return evaluate_show_when(self.show_when, context)

    def syntax_issues(self) -> list[SyntaxIssue]:
        """List every condition of this rule that fails to parse."""
        issues = []
        for index, expression in enumerate(self.show_when):
            message = validate_expression_syntax(expression)
            if message is not None:
                issues.append(
                    SyntaxIssue(
                        rule=self.name,
                        index=index,
                        expression=expression,
                        message=message,
                        file=self.source,
                    )
                )
        return issues
