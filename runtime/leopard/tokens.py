"""
Leopard tokens

A token is a (type, literal) pair. Token types are plain string constants;
operators and delimiters use their own spelling as the type name so parser
diagnostics read naturally ("expected token ), got EOF").
"""

from dataclasses import dataclass
from types import MappingProxyType


# ============================================================================
# Token Types
# ============================================================================

class TokenType:
    """Token type constants"""
    # Special
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    # Identifiers and literals
    IDENT = "IDENT"
    INT = "INT"
    STRING = "STRING"

    # Operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    # Delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # Keywords
    FUNCTION = "FUNCTION"
    LET = "LET"
    TRUE = "TRUE"
    FALSE = "FALSE"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"


@dataclass(frozen=True)
class Token:
    """Token from Leopard source"""
    type: str
    literal: str


# Read-only: keyword spellings never change at runtime
KEYWORDS = MappingProxyType({
    'fn': TokenType.FUNCTION,
    'let': TokenType.LET,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'return': TokenType.RETURN,
})


def lookup_ident(ident: str) -> str:
    """Return the keyword token type for ident, or IDENT"""
    return KEYWORDS.get(ident, TokenType.IDENT)


__all__ = ['TokenType', 'Token', 'KEYWORDS', 'lookup_ident']
