"""Lexer/tokenizer for the showwhen expression language.

Converts expression strings into a flat stream of tokens for the parser.

Token types:
- Literals: NUMBER, STRING, BOOLEAN, NULL
- Identifiers: IDENTIFIER (context keys, property and method names)
- Operators: OPERATOR (comparison, logical, negation)
- Punctuation: DOT, LPAREN, RPAREN, LBRACKET, RBRACKET, COMMA
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from showwhen.expressions.errors import ExpressionSyntaxError


class TokenType(Enum):
    """Types of tokens in the expression language.

    Values double as the names used in syntax error messages.
    """

    # Literals
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"

    # Identifiers
    IDENTIFIER = "identifier"

    # ===, !==, ==, !=, >=, <=, &&, ||, !, >, <
    OPERATOR = "operator"

    # Punctuation
    DOT = "dot"
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    COMMA = "comma"

    # End of input
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: The lexeme (decoded text for strings, operator text for operators)
    """

    type: TokenType
    value: str

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r})"


# Token patterns (order matters - longer operators first)
TOKEN_PATTERNS = [
    # Whitespace (skip)
    (r"[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+", None),

    # Multi-character operators (before single character)
    (r"===", TokenType.OPERATOR),
    (r"!==", TokenType.OPERATOR),
    (r"==", TokenType.OPERATOR),
    (r"!=", TokenType.OPERATOR),
    (r">=", TokenType.OPERATOR),
    (r"<=", TokenType.OPERATOR),
    (r"&&", TokenType.OPERATOR),
    (r"\|\|", TokenType.OPERATOR),

    # Single character operators
    (r"!", TokenType.OPERATOR),
    (r">", TokenType.OPERATOR),
    (r"<", TokenType.OPERATOR),

    # Punctuation
    (r"\.", TokenType.DOT),
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r"\[", TokenType.LBRACKET),
    (r"\]", TokenType.RBRACKET),
    (r",", TokenType.COMMA),

    # Numbers: a digit followed by any run of digits and dots
    (r"[0-9][0-9.]*", TokenType.NUMBER),

    # Keywords and identifiers
    (r"[A-Za-z_$][A-Za-z0-9_$]*", TokenType.IDENTIFIER),
]

# Keywords that map to specific token types (case-sensitive)
KEYWORDS = {
    "true": TokenType.BOOLEAN,
    "false": TokenType.BOOLEAN,
    "null": TokenType.NULL,
}

QUOTES = ("'", '"')


class Lexer:
    """Tokenizer for the expression language.

    Usage:
        lexer = Lexer("element.tag === 'button' && tree.depth > 0")
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self._compiled_patterns = [
            (re.compile(pattern), token_type)
            for pattern, token_type in TOKEN_PATTERNS
        ]

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source, ending with EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break

    def next_token(self) -> Token:
        """Get the next token from the source."""
        while True:
            if self.position >= len(self.source):
                return Token(TokenType.EOF, "")

            if self.source[self.position] in QUOTES:
                return self._read_string()

            for pattern, token_type in self._compiled_patterns:
                match = pattern.match(self.source, self.position)
                if match:
                    break
            else:
                raise ExpressionSyntaxError(
                    f"Unexpected character: '{self.source[self.position]}' "
                    f"at position {self.position}"
                )

            value = match.group()
            self.position = match.end()

            # Skip whitespace
            if token_type is None:
                continue

            if token_type == TokenType.IDENTIFIER:
                token_type = KEYWORDS.get(value, TokenType.IDENTIFIER)

            return Token(token_type, value)

    def _read_string(self) -> Token:
        """Read a quoted string literal.

        A backslash makes the next character literal. A string that is never
        closed runs to the end of the input instead of failing.
        """
        quote = self.source[self.position]
        self.position += 1
        chars = []

        while self.position < len(self.source):
            char = self.source[self.position]
            if char == quote:
                self.position += 1
                break
            if char == "\\":
                # A trailing backslash contributes nothing
                chars.append(self.source[self.position + 1:self.position + 2])
                self.position += 2
            else:
                chars.append(char)
                self.position += 1

        return Token(TokenType.STRING, "".join(chars))

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return list of tokens."""
        return list(self)


def tokenize(source: str) -> list[Token]:
    """Convenience function to tokenize an expression string."""
    return Lexer(source).tokenize()
