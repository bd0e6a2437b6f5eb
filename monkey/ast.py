"""Abstract Syntax Tree (AST) definitions for the Monkey language.

Nodes are frozen dataclasses: once the parser builds a node nobody
mutates it. Every node renders back to source-like text with `str()`;
expressions are fully parenthesized so that the rendered form shows how
the parser associated each operator, e.g. `a + b * c` renders as
`(a + (b * c))`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: Tuple[Statement, ...]

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        out = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: Tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression  # Identifier or FunctionLiteral in practice
    arguments: Tuple[Expression, ...]

    def __str__(self) -> str:
        args = ', '.join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class LetStatement(Statement):
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Optional[Expression] = None

    def __str__(self) -> str:
        if self.value is None:
            return 'return;'
        return f"return {self.value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...]

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)
