"""Token definitions for the Monkey language.

A token pairs a lexical category (`TokenType`) with the exact source text
it was scanned from. Tokens also remember the line and column of their
first byte so that the parser can point at the offending input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class TokenType(Enum):
    ILLEGAL = 'ILLEGAL'
    EOF = 'EOF'

    # Identifiers + literals
    IDENT = 'IDENT'
    INT = 'INT'

    # Operators
    ASSIGN = '='
    PLUS = '+'
    MINUS = '-'
    BANG = '!'
    ASTERISK = '*'
    SLASH = '/'
    LT = '<'
    GT = '>'
    EQ = '=='
    NOT_EQ = '!='

    # Delimiters
    COMMA = ','
    SEMICOLON = ';'
    LPAREN = '('
    RPAREN = ')'
    LBRACE = '{'
    RBRACE = '}'

    # Keywords
    FUNCTION = 'fn'
    LET = 'let'
    TRUE = 'true'
    FALSE = 'false'
    IF = 'if'
    ELSE = 'else'
    RETURN = 'return'


KEYWORDS: Dict[str, TokenType] = {
    'fn': TokenType.FUNCTION,
    'let': TokenType.LET,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'return': TokenType.RETURN,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    literal: str
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return self.literal


def lookup_ident(ident: str) -> TokenType:
    """Return the keyword type for `ident`, or IDENT for plain names."""
    return KEYWORDS.get(ident, TokenType.IDENT)
