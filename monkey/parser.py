"""Pratt parser for the Monkey language.

The parser pulls tokens from a `Lexer` with two tokens of lookahead
(`cur_token` and `peek_token`) and builds the AST defined in
`monkey.ast`. Expressions are parsed by precedence climbing: each token
type may own a prefix rule (how to start an expression) and an infix
rule (how to extend an expression that is already on the left), and
the binding power of the infix operators decides how far a right-hand
side reaches.

Syntax errors never abort the parse. A failed statement records a
message, is left out of the result, and the parser resynchronizes at
the next `;` (or at a closing `}` or the end of input) before carrying
on, so one pass reports every problem it can find. `parse` only
returns a Program when no error was recorded.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, List, Optional, Union

from .ast import (
    Program, Statement, Expression, LetStatement, ReturnStatement,
    ExpressionStatement, BlockStatement, Identifier, IntegerLiteral,
    BooleanLiteral, PrefixExpression, InfixExpression, IfExpression,
    FunctionLiteral, CallExpression,
)
from .lexer import Lexer
from .objects import fits_int64
from .token import Token, TokenType


class ParseError(Exception):
    """Raised when a program has syntax errors; carries all of them."""
    def __init__(self, errors: List[str]):
        super().__init__('; '.join(errors))
        self.errors = list(errors)


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == !=
    LESSGREATER = 3  # < >
    SUM = 4          # + -
    PRODUCT = 5      # * /
    PREFIX = 6       # -x !x
    CALL = 7         # f(x)


PRECEDENCES: Dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}

PrefixRule = Callable[[], Optional[Expression]]
InfixRule = Callable[[Expression], Optional[Expression]]


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []
        self.cur_token: Token = lexer.next_token()
        self.peek_token: Token = lexer.next_token()

        self.prefix_rules: Dict[TokenType, PrefixRule] = {
            TokenType.IDENT: self.parse_identifier,
            TokenType.INT: self.parse_integer_literal,
            TokenType.TRUE: self.parse_boolean,
            TokenType.FALSE: self.parse_boolean,
            TokenType.BANG: self.parse_prefix_expression,
            TokenType.MINUS: self.parse_prefix_expression,
            TokenType.LPAREN: self.parse_grouped_expression,
            TokenType.IF: self.parse_if_expression,
            TokenType.FUNCTION: self.parse_function_literal,
        }
        self.infix_rules: Dict[TokenType, InfixRule] = {
            tok_type: self.parse_infix_expression
            for tok_type in PRECEDENCES
            if tok_type is not TokenType.LPAREN
        }
        self.infix_rules[TokenType.LPAREN] = self.parse_call_expression

    # Token cursor

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_is(self, tok_type: TokenType) -> bool:
        return self.cur_token.type is tok_type

    def peek_is(self, tok_type: TokenType) -> bool:
        return self.peek_token.type is tok_type

    def expect_peek(self, tok_type: TokenType) -> bool:
        """Advance if the next token has the given type, else record an error."""
        if self.peek_is(tok_type):
            self.next_token()
            return True
        self.peek_error(tok_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # Diagnostics

    def error(self, message: str, token: Token) -> None:
        self.errors.append(f"{message} at {token.line}:{token.column}")

    def peek_error(self, expected: TokenType) -> None:
        self.error(
            f"expected next token to be {expected.name}, "
            f"got {self.peek_token.type.name} instead",
            self.peek_token,
        )

    def synchronize(self) -> None:
        """Skip ahead to a statement boundary after a failed statement.

        Stops on the next `;`, on a `}` that may close the enclosing
        block, or at the end of input. The caller's usual `next_token`
        then steps past a `;`.
        """
        while not (self.cur_is(TokenType.SEMICOLON)
                   or self.cur_is(TokenType.RBRACE)
                   or self.cur_is(TokenType.EOF)):
            self.next_token()

    # Statements

    def parse(self) -> Program:
        statements: List[Statement] = []
        while not self.cur_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self.synchronize()
            self.next_token()
        if self.errors:
            raise ParseError(self.errors)
        return Program(tuple(statements))

    def parse_statement(self) -> Optional[Statement]:
        if self.cur_is(TokenType.LET):
            return self.parse_let_statement()
        if self.cur_is(TokenType.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.cur_token.literal)
        if not self.expect_peek(TokenType.ASSIGN):
            return None
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()
        return LetStatement(name, value)

    def parse_return_statement(self) -> Optional[ReturnStatement]:
        if (self.peek_is(TokenType.SEMICOLON) or self.peek_is(TokenType.RBRACE)
                or self.peek_is(TokenType.EOF)):
            if self.peek_is(TokenType.SEMICOLON):
                self.next_token()
            return ReturnStatement(None)
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()
        return ReturnStatement(value)

    def parse_expression_statement(self) -> Optional[ExpressionStatement]:
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None
        # semicolons are optional
        if self.peek_is(TokenType.SEMICOLON):
            self.next_token()
        return ExpressionStatement(expr)

    def parse_block_statement(self) -> BlockStatement:
        """Parse statements until `}` or end of input; `cur_token` is `{`."""
        statements: List[Statement] = []
        self.next_token()
        while not self.cur_is(TokenType.RBRACE) and not self.cur_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self.synchronize()
                if not self.cur_is(TokenType.SEMICOLON):
                    break
            self.next_token()
        return BlockStatement(tuple(statements))

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_rules.get(self.cur_token.type)
        if prefix is None:
            self.error(f"no prefix parse function for {self.cur_token.type.name} found",
                       self.cur_token)
            return None
        left = prefix()
        while (left is not None
               and not self.peek_is(TokenType.SEMICOLON)
               and precedence < self.peek_precedence()):
            infix = self.infix_rules.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        value = int(self.cur_token.literal)
        if not fits_int64(value):
            self.error(f"could not parse {self.cur_token.literal} as integer", self.cur_token)
            return None
        return IntegerLiteral(value)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_is(TokenType.TRUE))

    def parse_prefix_expression(self) -> Optional[Expression]:
        operator = self.cur_token.literal
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(operator, right)

    def parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        operator = self.cur_token.literal
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(left, operator, right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None or not self.expect_peek(TokenType.RPAREN):
            return None
        return expr

    def parse_if_expression(self) -> Optional[Expression]:
        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self.expect_peek(TokenType.RPAREN):
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None
        consequence = self.parse_block_statement()
        alternative = None
        if self.peek_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()
        return IfExpression(condition, consequence, alternative)

    def parse_function_literal(self) -> Optional[Expression]:
        if not self.expect_peek(TokenType.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None
        body = self.parse_block_statement()
        return FunctionLiteral(tuple(parameters), body)

    def parse_function_parameters(self) -> Optional[List[Identifier]]:
        identifiers: List[Identifier] = []
        if self.peek_is(TokenType.RPAREN):
            self.next_token()
            return identifiers
        if not self.expect_peek(TokenType.IDENT):
            return None
        identifiers.append(Identifier(self.cur_token.literal))
        while self.peek_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(self.cur_token.literal))
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return identifiers

    def parse_call_expression(self, function: Expression) -> Optional[Expression]:
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(function, tuple(arguments))

    def parse_call_arguments(self) -> Optional[List[Expression]]:
        args: List[Expression] = []
        if self.peek_is(TokenType.RPAREN):
            self.next_token()
            return args
        self.next_token()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        args.append(arg)
        while self.peek_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            args.append(arg)
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return args


def parse_program(source: Union[str, bytes]) -> Program:
    """Parse Monkey source code into a Program AST.

    Raises ParseError listing every syntax error found.
    """
    return Parser(Lexer(source)).parse()
