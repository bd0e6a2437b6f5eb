"""Grammar-driven front end for the Monkey language.

This module describes Monkey with a Lark LALR grammar and transforms the
resulting parse tree into the same AST classes the Pratt parser in
`monkey.parser` produces. It is an independent second implementation of
the syntax, used to cross-check the hand-written parser and selectable
from the command line with `--frontend lark`.

Unlike the Pratt parser it stops at the first syntax error. Where the
grammar is ambiguous because semicolons are optional (`a -b` could be one
statement or two), the LALR tables resolve the conflict by shifting,
which gives the same reading as the Pratt parser: the operator extends
the expression on its left.
"""

from __future__ import annotations

from typing import Optional, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import (
    UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError,
)

from .ast import (
    Program, LetStatement, ReturnStatement, ExpressionStatement,
    BlockStatement, Identifier, IntegerLiteral, BooleanLiteral,
    PrefixExpression, InfixExpression, IfExpression, FunctionLiteral,
    CallExpression,
)
from .objects import fits_int64
from .parser import ParseError


MONKEY_GRAMMAR = r"""
    start: _statement*

    _statement: let_stmt
              | return_stmt
              | expr_stmt

    let_stmt: "let" IDENT "=" expression ";"?
    return_stmt: "return" expression? ";"?
    expr_stmt: expression ";"?

    block: "{" _statement* "}"

    // Expressions, lowest precedence first
    ?expression: equality
    ?equality: equality (EQ | NOT_EQ) comparison -> infix
             | comparison
    ?comparison: comparison (LT | GT) sum -> infix
               | sum
    ?sum: sum (PLUS | MINUS) product -> infix
        | product
    ?product: product (ASTERISK | SLASH) prefix -> infix
            | prefix
    ?prefix: (BANG | MINUS) prefix -> prefix_expr
           | call
    ?call: call "(" [arguments] ")" -> call_expr
         | primary
    ?primary: IDENT -> identifier
            | INT -> integer
            | "true" -> true_lit
            | "false" -> false_lit
            | "(" expression ")"
            | if_expr
            | fn_literal

    if_expr: "if" "(" expression ")" block ["else" block]
    fn_literal: "fn" "(" [params] ")" block
    params: IDENT ("," IDENT)*
    arguments: expression ("," expression)*

    // Tokens
    IDENT: /[A-Za-z_]+/
    INT: /[0-9]+/
    EQ: "=="
    NOT_EQ: "!="
    LT: "<"
    GT: ">"
    PLUS: "+"
    MINUS: "-"
    ASTERISK: "*"
    SLASH: "/"
    BANG: "!"

    WS: /[ \t\r\n]+/
    %ignore WS
"""


MONKEY_PARSER = Lark(
    MONKEY_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=True,
)


@v_args(inline=True)
class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def start(self, *statements):
        return Program(tuple(statements))

    def let_stmt(self, name, value):
        return LetStatement(Identifier(str(name)), value)

    def return_stmt(self, value=None):
        return ReturnStatement(value)

    def expr_stmt(self, expr):
        return ExpressionStatement(expr)

    def block(self, *statements):
        return BlockStatement(tuple(statements))

    def infix(self, left, op, right):
        return InfixExpression(left, str(op), right)

    def prefix_expr(self, op, operand):
        return PrefixExpression(str(op), operand)

    def call_expr(self, function, arguments):
        return CallExpression(function, arguments or ())

    def arguments(self, *items):
        return tuple(items)

    def identifier(self, token):
        return Identifier(str(token))

    def integer(self, token):
        value = int(token)
        if not fits_int64(value):
            raise ParseError([f"could not parse {token} as integer at {token.line}:{token.column}"])
        return IntegerLiteral(value)

    def true_lit(self):
        return BooleanLiteral(True)

    def false_lit(self):
        return BooleanLiteral(False)

    def if_expr(self, condition, consequence, alternative):
        return IfExpression(condition, consequence, alternative)

    def fn_literal(self, params, body):
        return FunctionLiteral(params or (), body)

    def params(self, *names):
        return tuple(Identifier(str(n)) for n in names)


def describe_error(err: UnexpectedInput) -> str:
    if isinstance(err, UnexpectedEOF):
        return 'unexpected end of input'
    if isinstance(err, UnexpectedToken):
        if err.token.type == '$END':
            return f"unexpected end of input at {err.line}:{err.column}"
        return f"unexpected token {err.token.type} {str(err.token)!r} at {err.line}:{err.column}"
    if isinstance(err, UnexpectedCharacters):
        return f"illegal character {err.char!r} at {err.line}:{err.column}"
    return str(err)


def parse_with_lark(source: Union[str, bytes]) -> Program:
    """Parse Monkey source with the Lark grammar.

    Raises ParseError holding a single message for the first syntax
    error encountered.
    """
    if isinstance(source, bytes):
        source = source.decode('utf-8', errors='replace')
    try:
        tree = MONKEY_PARSER.parse(source)
    except UnexpectedInput as e:
        raise ParseError([describe_error(e)]) from e
    try:
        return ASTTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from e
        raise
