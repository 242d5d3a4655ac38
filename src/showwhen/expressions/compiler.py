"""Entry points for compiling and evaluating show/hide condition expressions.

- compile_expression: lex and parse once, evaluate many times
- safe_evaluate_expression: evaluate once, any failure becomes False
- validate_expression_syntax: report the first syntax problem, never evaluate
- evaluate_show_when: OR a list of expressions, an empty list always shows
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from showwhen.expressions.errors import ExpressionError
from showwhen.expressions.evaluator import evaluate_ast
from showwhen.expressions.lexer import tokenize
from showwhen.expressions.parser import ASTNode, Parser
from showwhen.expressions.semantics import is_truthy

logger = logging.getLogger(__name__)

COMPILE_CACHE_SIZE = 512


@dataclass(frozen=True)
class CompiledExpression:
    """A parsed expression ready to be evaluated against any context.

    Attributes:
        source: The expression string it was compiled from
        ast: The immutable AST root

    Instances hold no mutable state and may be shared across threads.
    """

    source: str
    ast: ASTNode

    def __call__(self, context: Mapping[str, Any]) -> Any:
        """Evaluate against a context.

        Raises:
            ExpressionSecurityError: If the expression reads outside the context
        """
        return evaluate_ast(self.ast, context)


def compile_expression(source: str) -> CompiledExpression:
    """Parse an expression string into a reusable CompiledExpression.

    Args:
        source: The expression string

    Returns:
        A callable taking a context and returning the expression's value

    Raises:
        ExpressionSyntaxError: If the source is not a valid expression

    Example:
        is_button = compile_expression("element.tag === 'button'")
        is_button({"element": {"tag": "button"}})  # True
    """
    ast = Parser(tokenize(source)).parse()
    return CompiledExpression(source=source, ast=ast)


# Compiled ASTs are immutable, so they can be memoised by source text.
# Failed compilations raise and are therefore never cached.
compile_cached = lru_cache(maxsize=COMPILE_CACHE_SIZE)(compile_expression)


def safe_evaluate_expression(source: str, context: Mapping[str, Any]) -> Any:
    """Compile and evaluate an expression, turning any failure into False."""
    try:
        return compile_cached(source)(context)
    except ExpressionError as e:
        logger.debug("Expression %r evaluated to false: %s", source, e)
        return False
    except Exception:
        logger.debug("Expression %r failed unexpectedly", source, exc_info=True)
        return False


def validate_expression_syntax(source: str) -> str | None:
    """Check an expression's syntax without evaluating it.

    Returns:
        None if the expression is valid, otherwise a message describing the
        first syntax error
    """
    try:
        compile_cached(source)
    except ExpressionError as e:
        return str(e)
    return None


def evaluate_show_when(
    expressions: Sequence[str] | str | None,
    context: Mapping[str, Any],
) -> bool:
    """Decide whether something with these show-when conditions is shown.

    No conditions (None or an empty list) means always shown. Otherwise the
    conditions are tried in order and the first truthy one wins; conditions
    that fail to compile or evaluate count as false.
    A single expression string is treated as a one-element list.
    """
    if isinstance(expressions, str):
        expressions = [expressions]
    if not expressions:
        return True

    return any(
        is_truthy(safe_evaluate_expression(expression, context))
        for expression in expressions
    )
