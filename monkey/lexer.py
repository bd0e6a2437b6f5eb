"""Lexer for the Monkey language.

The lexer works on the raw UTF-8 bytes of a program and hands out one
token per call to `next_token`. Nothing is rejected at this layer: bytes
that do not start any token come back as ILLEGAL tokens and it is up to
the parser to complain about them.
"""

from __future__ import annotations

from typing import Dict, Iterator, Union

from .token import Token, TokenType, lookup_ident


# Sentinel returned for the current byte once the input is exhausted.
NUL = 0

WHITESPACE = frozenset(b' \t\n\r')

SINGLE_BYTE_TOKENS: Dict[int, TokenType] = {
    ord('+'): TokenType.PLUS,
    ord('-'): TokenType.MINUS,
    ord('*'): TokenType.ASTERISK,
    ord('/'): TokenType.SLASH,
    ord('<'): TokenType.LT,
    ord('>'): TokenType.GT,
    ord(','): TokenType.COMMA,
    ord(';'): TokenType.SEMICOLON,
    ord('('): TokenType.LPAREN,
    ord(')'): TokenType.RPAREN,
    ord('{'): TokenType.LBRACE,
    ord('}'): TokenType.RBRACE,
}


def is_letter(ch: int) -> bool:
    return ord('a') <= ch <= ord('z') or ord('A') <= ch <= ord('Z') or ch == ord('_')


def is_digit(ch: int) -> bool:
    return ord('0') <= ch <= ord('9')


class Lexer:
    """Pull-based scanner over an in-memory source buffer."""

    def __init__(self, source: Union[str, bytes]):
        if isinstance(source, str):
            source = source.encode('utf-8')
        self.source = bytes(source)
        self.position = 0  # index of `ch`
        self.read_position = 0  # index of the byte after `ch`
        self.ch = NUL
        self.line = 1
        self.line_start = 0
        self.read_char()

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to, but not including, the EOF token."""
        while True:
            tok = self.next_token()
            if tok.type is TokenType.EOF:
                return
            yield tok

    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def read_char(self) -> None:
        if self.ch == ord('\n'):
            self.line += 1
            self.line_start = self.read_position
        if self.read_position >= len(self.source):
            self.ch = NUL
        else:
            self.ch = self.source[self.read_position]
        self.position = min(self.read_position, len(self.source))
        if self.read_position < len(self.source):
            self.read_position += 1

    def peek_char(self) -> int:
        if self.read_position >= len(self.source):
            return NUL
        return self.source[self.read_position]

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.ch in WHITESPACE:
            self.read_char()

    def text(self, start: int, end: int) -> str:
        # Every valid token is ASCII; stray non-ASCII bytes are escaped.
        return self.source[start:end].decode('ascii', errors='backslashreplace')

    def next_token(self) -> Token:
        self.skip_whitespace()
        line = self.line
        column = self.position - self.line_start + 1
        if self.at_end():
            return Token(TokenType.EOF, '', line, column)

        ch = self.ch
        start = self.position
        if ch == ord('='):
            if self.peek_char() == ord('='):
                self.read_char()
                tok_type = TokenType.EQ
            else:
                tok_type = TokenType.ASSIGN
        elif ch == ord('!'):
            if self.peek_char() == ord('='):
                self.read_char()
                tok_type = TokenType.NOT_EQ
            else:
                tok_type = TokenType.BANG
        elif ch in SINGLE_BYTE_TOKENS:
            tok_type = SINGLE_BYTE_TOKENS[ch]
        elif is_letter(ch):
            ident = self.read_while(is_letter)
            return Token(lookup_ident(ident), ident, line, column)
        elif is_digit(ch):
            number = self.read_while(is_digit)
            return Token(TokenType.INT, number, line, column)
        else:
            tok_type = TokenType.ILLEGAL
        self.read_char()
        return Token(tok_type, self.text(start, self.position), line, column)

    def read_while(self, predicate) -> str:
        start = self.position
        while not self.at_end() and predicate(self.ch):
            self.read_char()
        return self.text(start, self.position)
