"""Error types for the showwhen expression language.

Two failure kinds are kept apart so callers can tell a malformed expression
from an expression that tried to reach data it may not see:
- ExpressionSyntaxError: raised by the lexer and parser
- ExpressionSecurityError: raised by the evaluator
"""


class ExpressionError(Exception):
    """Base class for all expression failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ExpressionSyntaxError(ExpressionError):
    """The expression is not a valid sentence of the grammar."""


class ExpressionSecurityError(ExpressionError):
    """The expression attempted a disallowed identifier, property or method access."""
