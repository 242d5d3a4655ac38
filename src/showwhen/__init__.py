"""showwhen: sandboxed show/hide condition expressions."""

from showwhen.expressions import (
    UNDEFINED,
    CompiledExpression,
    ExpressionError,
    ExpressionSecurityError,
    ExpressionSyntaxError,
    compile_expression,
    evaluate_show_when,
    is_truthy,
    safe_evaluate_expression,
    validate_expression_syntax,
)

__version__ = "0.1.0"

__all__ = [
    "UNDEFINED",
    "CompiledExpression",
    "ExpressionError",
    "ExpressionSecurityError",
    "ExpressionSyntaxError",
    "compile_expression",
    "evaluate_show_when",
    "is_truthy",
    "safe_evaluate_expression",
    "validate_expression_syntax",
]
