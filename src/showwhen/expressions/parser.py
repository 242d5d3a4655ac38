"""Parser for the showwhen expression language.

Converts a stream of tokens into an immutable Abstract Syntax Tree (AST).
Uses recursive descent parsing with operator precedence.

Operator Precedence (lowest to highest):
1. ||
2. &&
3. === !== == != > < >= <=
4. ! (unary)
5. . (member access) .name() (method call)

All binary operators are left-associative, so chained comparisons such as
``a < b < c`` parse as ``(a < b) < c``.
"""

import math
from dataclasses import dataclass

from showwhen.expressions.errors import ExpressionSyntaxError
from showwhen.expressions.lexer import Token, TokenType, tokenize


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ASTNode:
    """Base class for AST nodes."""
    pass


@dataclass(frozen=True)
class Literal(ASTNode):
    """A literal value (number, string, boolean, null)."""
    value: str | float | bool | None


@dataclass(frozen=True)
class Identifier(ASTNode):
    """A top-level context key reference."""
    name: str


@dataclass(frozen=True)
class MemberAccess(ASTNode):
    """Dot notation member access (e.g., element.tag, tree.depth)."""
    object: ASTNode
    property: str


@dataclass(frozen=True)
class ArrayLiteral(ASTNode):
    """Array literal (e.g., ['button', 'a'])."""
    elements: tuple[ASTNode, ...]


@dataclass(frozen=True)
class MethodCall(ASTNode):
    """Method call on a value (e.g., ['a', 'b'].includes(element.tag))."""
    object: ASTNode
    method: str
    args: tuple[ASTNode, ...]


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """Binary operation (e.g., a && b, x === y)."""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class UnaryOp(ASTNode):
    """Unary operation (!x)."""
    operator: str
    operand: ASTNode


@dataclass(frozen=True)
class Parenthesized(ASTNode):
    """A grouped sub-expression ( ... )."""
    inner: ASTNode


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


COMPARISON_OPERATORS = frozenset({"===", "!==", "==", "!=", ">", "<", ">=", "<="})


class Parser:
    """Recursive descent parser for the expression language.

    Usage:
        parser = Parser(tokenize("element.tag === 'button'"))
        ast = parser.parse()
    """

    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            tokens = [*tokens, Token(TokenType.EOF, "")]
        self.tokens = tokens
        self.position = 0

    def parse(self) -> ASTNode:
        """Parse the whole token stream and return the AST root."""
        if self._is_at_end():
            raise ExpressionSyntaxError("Empty expression")

        try:
            ast = self._parse_or()
        except RecursionError:
            raise ExpressionSyntaxError("Expression is nested too deeply") from None

        if not self._is_at_end():
            raise ExpressionSyntaxError(f"Unexpected token: '{self._current().value}'")

        return ast

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        """Get current token."""
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        """Check if we've consumed all tokens."""
        return self._current().type == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return current token. Never moves past EOF."""
        token = self._current()
        if token.type != TokenType.EOF:
            self.position += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self._current().type in types

    def _match_operator(self, *operators: str) -> bool:
        """Check if current token is one of the given operators."""
        token = self._current()
        return token.type == TokenType.OPERATOR and token.value in operators

    def _consume(self, token_type: TokenType) -> Token:
        """Consume a token of the expected type, or raise error."""
        token = self._current()
        if token.type == token_type:
            return self._advance()
        raise ExpressionSyntaxError(
            f"Expected {token_type.value}, got {token.type.value} ('{token.value}')"
        )

    # -------------------------------------------------------------------------
    # Parsing methods (in order of precedence, lowest to highest)
    # -------------------------------------------------------------------------

    def _parse_or(self) -> ASTNode:
        """Parse OR expression (lowest precedence)."""
        left = self._parse_and()

        while self._match_operator("||"):
            self._advance()
            right = self._parse_and()
            left = BinaryOp("||", left, right)

        return left

    def _parse_and(self) -> ASTNode:
        """Parse AND expression."""
        left = self._parse_comparison()

        while self._match_operator("&&"):
            self._advance()
            right = self._parse_comparison()
            left = BinaryOp("&&", left, right)

        return left

    def _parse_comparison(self) -> ASTNode:
        """Parse comparison expression (===, !==, ==, !=, >, <, >=, <=)."""
        left = self._parse_unary()

        while self._match_operator(*COMPARISON_OPERATORS):
            op = self._advance().value
            right = self._parse_unary()
            left = BinaryOp(op, left, right)

        return left

    def _parse_unary(self) -> ASTNode:
        """Parse unary expression (!)."""
        if self._match_operator("!"):
            self._advance()
            operand = self._parse_unary()
            return UnaryOp("!", operand)

        return self._parse_postfix()

    def _parse_postfix(self) -> ASTNode:
        """Parse postfix expressions (member access, method call)."""
        expr = self._parse_primary()

        while self._match(TokenType.DOT):
            self._advance()
            name = self._consume(TokenType.IDENTIFIER).value

            if self._match(TokenType.LPAREN):
                self._advance()
                args = self._parse_list(TokenType.RPAREN)
                expr = MethodCall(expr, name, args)
            else:
                expr = MemberAccess(expr, name)

        return expr

    def _parse_primary(self) -> ASTNode:
        """Parse primary expression (literals, identifiers, arrays, groups)."""
        token = self._current()

        # Literals
        if token.type == TokenType.STRING:
            self._advance()
            return Literal(token.value)

        if token.type == TokenType.NUMBER:
            self._advance()
            return Literal(_parse_number(token.value))

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return Literal(token.value == "true")

        if token.type == TokenType.NULL:
            self._advance()
            return Literal(None)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return Identifier(token.value)

        # Array literal
        if token.type == TokenType.LBRACKET:
            self._advance()
            return ArrayLiteral(self._parse_list(TokenType.RBRACKET))

        # Grouped expression
        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_or()
            self._consume(TokenType.RPAREN)
            return Parenthesized(inner)

        raise ExpressionSyntaxError(f"Unexpected token: '{token.value}'")

    def _parse_list(self, closing: TokenType) -> tuple[ASTNode, ...]:
        """Parse a comma separated list of expressions up to the closing token."""
        items: list[ASTNode] = []

        if not self._match(closing):
            items.append(self._parse_or())

            while self._match(TokenType.COMMA):
                self._advance()
                items.append(self._parse_or())

        self._consume(closing)

        return tuple(items)


def _parse_number(lexeme: str) -> float:
    """Convert a number lexeme to a float; malformed runs like 1.2.3 become NaN."""
    try:
        return float(lexeme)
    except ValueError:
        return math.nan


def parse(source: str) -> ASTNode:
    """Convenience function to parse an expression string.

    Args:
        source: The expression string

    Returns:
        The AST root node

    Raises:
        ExpressionSyntaxError: If the source is not a valid expression
    """
    return Parser(tokenize(source)).parse()
