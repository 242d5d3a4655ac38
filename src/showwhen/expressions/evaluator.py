"""Evaluator for the showwhen expression language.

Walks the AST and computes the result against a read-only context mapping.

The evaluator is the sandbox boundary:
- Identifiers resolve only to keys present in the context mapping
- Member access resolves only to keys present in the object being read
  (a list's only readable property is ``length``)
- The only callable method is ``includes`` on a list or tuple

Nothing is ever read with ``getattr``, so Python attributes, dunder
members and methods of context values are unreachable.
"""

from collections.abc import Mapping
from typing import Any

from showwhen.expressions.errors import ExpressionSecurityError, ExpressionSyntaxError
from showwhen.expressions.parser import (
    ASTNode,
    ArrayLiteral,
    BinaryOp,
    Identifier,
    Literal,
    MemberAccess,
    MethodCall,
    Parenthesized,
    UnaryOp,
)
from showwhen.expressions.semantics import (
    UNDEFINED,
    compare,
    is_array,
    is_truthy,
    loose_equals,
    strict_equals,
    type_of,
)

ALLOWED_METHODS = frozenset({"includes"})

RELATIONAL_OPERATORS = frozenset({"<", "<=", ">", ">="})


class Evaluator:
    """Evaluates an expression AST against a context.

    An Evaluator holds nothing but the context, so a fresh one is cheap and
    every evaluation is independent.

    Usage:
        evaluator = Evaluator({"element": {"tag": "button"}})
        result = evaluator.evaluate(parse("element.tag === 'button'"))
    """

    def __init__(self, context: Mapping[str, Any]):
        self.context = context

    def evaluate(self, node: ASTNode) -> Any:
        """Evaluate an AST node and return the result."""
        method_name = f"_eval_{type(node).__name__.lower()}"
        method = getattr(self, method_name, None)

        if method is None:
            raise ExpressionSyntaxError(f"Unknown node type: {type(node).__name__}")

        return method(node)

    # -------------------------------------------------------------------------
    # Node type evaluators
    # -------------------------------------------------------------------------

    def _eval_literal(self, node: Literal) -> Any:
        return node.value

    def _eval_identifier(self, node: Identifier) -> Any:
        """Evaluate an identifier (top-level context key)."""
        if not isinstance(self.context, Mapping) or node.name not in self.context:
            raise ExpressionSecurityError(f"Access to '{node.name}' is not allowed")
        return self.context[node.name]

    def _eval_memberaccess(self, node: MemberAccess) -> Any:
        """Evaluate member access (a.b).

        Reading a property of a non-object yields UNDEFINED; reading a
        property an object does not have is a security failure.
        """
        obj = self.evaluate(node.object)

        if type_of(obj) != "object":
            return UNDEFINED

        return _own_property(obj, node.property)

    def _eval_arrayliteral(self, node: ArrayLiteral) -> list[Any]:
        return [self.evaluate(element) for element in node.elements]

    def _eval_methodcall(self, node: MethodCall) -> Any:
        """Evaluate a method call; only list.includes(value) is permitted."""
        obj = self.evaluate(node.object)

        if node.method not in ALLOWED_METHODS:
            raise ExpressionSecurityError(f"Method '{node.method}' is not allowed")

        if not is_array(obj):
            raise ExpressionSecurityError(f"'{node.method}' can only be called on arrays")

        needle = self.evaluate(node.args[0]) if node.args else UNDEFINED
        return any(strict_equals(item, needle) for item in obj)

    def _eval_binaryop(self, node: BinaryOp) -> Any:
        """Evaluate a binary operation."""
        op = node.operator

        # Short-circuit evaluation for logical operators; the deciding
        # operand is returned as-is
        if op == "&&":
            left = self.evaluate(node.left)
            if not is_truthy(left):
                return left
            return self.evaluate(node.right)

        if op == "||":
            left = self.evaluate(node.left)
            if is_truthy(left):
                return left
            return self.evaluate(node.right)

        # Evaluate both operands for comparisons
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)

        if op == "===":
            return strict_equals(left, right)
        if op == "!==":
            return not strict_equals(left, right)
        if op == "==":
            return loose_equals(left, right)
        if op == "!=":
            return not loose_equals(left, right)
        if op in RELATIONAL_OPERATORS:
            return compare(op, left, right)

        raise ExpressionSyntaxError(f"Unknown operator: '{op}'")

    def _eval_unaryop(self, node: UnaryOp) -> Any:
        """Evaluate a unary operation."""
        operand = self.evaluate(node.operand)

        if node.operator == "!":
            return not is_truthy(operand)

        raise ExpressionSyntaxError(f"Unknown unary operator: '{node.operator}'")

    def _eval_parenthesized(self, node: Parenthesized) -> Any:
        return self.evaluate(node.inner)


def _own_property(obj: Any, name: str) -> Any:
    """Read a property the object was built with, or raise."""
    if isinstance(obj, Mapping):
        if name in obj:
            return obj[name]
    elif is_array(obj) and name == "length":
        return len(obj)

    raise ExpressionSecurityError(f"Access to '{name}' is not allowed")


def evaluate_ast(ast: ASTNode, context: Mapping[str, Any]) -> Any:
    """Evaluate a parsed expression against a context.

    Args:
        ast: The AST root produced by the parser
        context: Mapping of top-level names to values; never mutated

    Returns:
        The result of the expression (not coerced to bool)

    Raises:
        ExpressionSecurityError: On access outside the context's own keys
            or a call to a method other than list.includes
        ExpressionSyntaxError: If the AST is too deep to walk
    """
    try:
        return Evaluator(context).evaluate(ast)
    except RecursionError:
        raise ExpressionSyntaxError("Expression is nested too deeply") from None
