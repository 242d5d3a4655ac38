"""Show-when rule sets: YAML loader and rule types."""

from showwhen.rules.types import RuleFileError, ShowWhenRule, SyntaxIssue
from showwhen.rules.loader import RuleSetLoader

__all__ = ["RuleFileError", "RuleSetLoader", "ShowWhenRule", "SyntaxIssue"]
