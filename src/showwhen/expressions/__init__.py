"""Restricted expression language for show/hide conditions.

This module provides:
- Lexer: Tokenizes expression strings
- Parser: Produces an immutable AST from tokens
- Evaluator: Evaluates an AST against a read-only context, sandboxed
- compile_expression and friends: the entry points most callers need
"""

from showwhen.expressions.compiler import (
    CompiledExpression,
    compile_expression,
    evaluate_show_when,
    safe_evaluate_expression,
    validate_expression_syntax,
)
from showwhen.expressions.errors import (
    ExpressionError,
    ExpressionSecurityError,
    ExpressionSyntaxError,
)
from showwhen.expressions.evaluator import Evaluator, evaluate_ast
from showwhen.expressions.lexer import Lexer, Token, TokenType, tokenize
from showwhen.expressions.parser import (
    ASTNode,
    ArrayLiteral,
    BinaryOp,
    Identifier,
    Literal,
    MemberAccess,
    MethodCall,
    Parenthesized,
    Parser,
    UnaryOp,
    parse,
)
from showwhen.expressions.semantics import UNDEFINED, is_truthy

__all__ = [
    # Compiler
    "CompiledExpression",
    "compile_expression",
    "evaluate_show_when",
    "safe_evaluate_expression",
    "validate_expression_syntax",
    # Errors
    "ExpressionError",
    "ExpressionSecurityError",
    "ExpressionSyntaxError",
    # Evaluator
    "Evaluator",
    "evaluate_ast",
    "UNDEFINED",
    "is_truthy",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "ASTNode",
    "ArrayLiteral",
    "BinaryOp",
    "Identifier",
    "Literal",
    "MemberAccess",
    "MethodCall",
    "Parenthesized",
    "Parser",
    "UnaryOp",
    "parse",
]
