"""Tree-walking evaluator for the Monkey language.

The `Interpreter` walks a parsed `Program` statement by statement,
reading and writing bindings in an `Environment`. An early `return`
travels outward as a `ReturnSignal` value: every statement sequence
stops as soon as one shows up and hands it to its caller untouched, and
only the program level unwraps it. Runtime errors are raised as
`MonkeyError` and end the evaluation at the first failure.

Function literals and call expressions are parsed but not evaluated;
evaluating one raises an `UnsupportedError`.
"""

from __future__ import annotations

import sys
from typing import Iterable, Optional, Union

from .ast import (
    Program, Statement, Expression, LetStatement, ReturnStatement,
    ExpressionStatement, BlockStatement, Identifier, IntegerLiteral,
    BooleanLiteral, PrefixExpression, InfixExpression, IfExpression,
    FunctionLiteral, CallExpression,
)
from .environment import Environment
from .errors import MonkeyError
from .objects import (
    Object, Integer, Boolean, ReturnSignal, ErrorVal, NULL,
    native_bool, type_name, fits_int64, truncating_div,
)
from .parser import parse_program


class Interpreter:
    """Evaluates Monkey ASTs.

    `debug_level` controls tracing: 1 traces top-level statements and
    results, 2 adds bindings and returns, 3 adds conditions and infix
    operations. Trace lines go to `debug_file` if one is given, else to
    stderr. The file is open only while `run` executes: the first run
    truncates it and later runs on the same interpreter append to it.
    """
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None):
        self.debug_level = debug_level
        self.debug_file = debug_file if debug_level > 0 else None
        self.debug_fp = None
        self.debug_started = False

    def open_debug_file(self) -> None:
        if self.debug_file and self.debug_fp is None:
            mode = 'a' if self.debug_started else 'w'
            self.debug_fp = open(self.debug_file, mode, encoding='utf-8')
            self.debug_started = True

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Object:
        if env is None:
            env = Environment()
        self.open_debug_file()
        try:
            result: Object = NULL
            for stmt in program.statements:
                if self.debug_level >= 1:
                    self.debug(f"exec {stmt}")
                result = self.execute(stmt, env)
                if isinstance(result, ReturnSignal):
                    result = result.value
                    break
            if self.debug_level >= 1:
                self.debug(f"result {result}")
            return result
        finally:
            self.close()

    def execute_block(self, statements: Iterable[Statement], env: Environment) -> Object:
        result: Object = NULL
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return result

    def execute(self, node: Statement, env: Environment) -> Object:
        if isinstance(node, ExpressionStatement):
            return self.evaluate(node.expression, env)
        if isinstance(node, LetStatement):
            value = self.evaluate(node.value, env)
            if isinstance(value, ReturnSignal):
                return value
            env.set(node.name.value, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name} = {value}")
            return NULL
        if isinstance(node, ReturnStatement):
            value = self.evaluate(node.value, env) if node.value is not None else NULL
            if isinstance(value, ReturnSignal):
                return value
            if self.debug_level >= 2:
                self.debug(f"return {value}")
            return ReturnSignal(value)
        if isinstance(node, BlockStatement):
            # blocks share the enclosing environment
            return self.execute_block(node.statements, env)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expression, env: Environment) -> Object:
        if isinstance(node, IntegerLiteral):
            return Integer(node.value)
        if isinstance(node, BooleanLiteral):
            return native_bool(node.value)
        if isinstance(node, Identifier):
            value = env.get(node.value)
            if value is None:
                raise MonkeyError(ErrorVal('NameError', f'identifier not found: {node.value}'))
            return value
        if isinstance(node, PrefixExpression):
            right = self.evaluate(node.right, env)
            if isinstance(right, ReturnSignal):
                return right
            return self.apply_prefix_op(node.operator, right)
        if isinstance(node, InfixExpression):
            left = self.evaluate(node.left, env)
            if isinstance(left, ReturnSignal):
                return left
            right = self.evaluate(node.right, env)
            if isinstance(right, ReturnSignal):
                return right
            result = self.apply_infix_op(node.operator, left, right)
            if self.debug_level >= 3:
                self.debug(f"{left} {node.operator} {right} -> {result}")
            return result
        if isinstance(node, IfExpression):
            return self.evaluate_if(node, env)
        if isinstance(node, (FunctionLiteral, CallExpression)):
            raise MonkeyError(ErrorVal('UnsupportedError', f'cannot evaluate {node}: functions are not supported'))
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_if(self, node: IfExpression, env: Environment) -> Object:
        cond = self.evaluate(node.condition, env)
        if isinstance(cond, ReturnSignal):
            return cond
        if not isinstance(cond, Boolean):
            raise MonkeyError(ErrorVal('ConditionError', f'condition must be BOOLEAN, got {type_name(cond)}'))
        if self.debug_level >= 3:
            self.debug(f"if condition {node.condition} -> {cond}")
        if cond.value:
            return self.execute(node.consequence, env)
        if node.alternative is not None:
            return self.execute(node.alternative, env)
        return NULL

    def apply_prefix_op(self, op: str, operand: Object) -> Object:
        if op == '!':
            if isinstance(operand, Boolean):
                return native_bool(not operand.value)
            raise MonkeyError(ErrorVal('TypeError', f"operator '!' only applies to BOOLEAN, got {type_name(operand)}"))
        if op == '-':
            if isinstance(operand, Integer):
                return self.checked_integer(-operand.value, f'-{operand}')
            raise MonkeyError(ErrorVal('TypeError', f"operator '-' only applies to INTEGER, got {type_name(operand)}"))
        raise MonkeyError(ErrorVal('OperatorError', f'unknown operator: {op}{type_name(operand)}'))

    def apply_infix_op(self, op: str, a: Object, b: Object) -> Object:
        if isinstance(a, Integer) and isinstance(b, Integer):
            return self.apply_integer_op(op, a.value, b.value)
        if isinstance(a, Boolean) and isinstance(b, Boolean):
            if op == '==':
                return native_bool(a.value == b.value)
            if op == '!=':
                return native_bool(a.value != b.value)
        if type(a) is not type(b):
            raise MonkeyError(ErrorVal('TypeError', f'type mismatch: {type_name(a)} {op} {type_name(b)}'))
        raise MonkeyError(ErrorVal('OperatorError', f'unknown operator: {type_name(a)} {op} {type_name(b)}'))

    def apply_integer_op(self, op: str, a: int, b: int) -> Object:
        if op == '+':
            return self.checked_integer(a + b, f'{a} + {b}')
        if op == '-':
            return self.checked_integer(a - b, f'{a} - {b}')
        if op == '*':
            return self.checked_integer(a * b, f'{a} * {b}')
        if op == '/':
            if b == 0:
                raise MonkeyError(ErrorVal('ZeroDivisionError', f'division by zero: {a} / {b}'))
            return self.checked_integer(truncating_div(a, b), f'{a} / {b}')
        if op == '<':
            return native_bool(a < b)
        if op == '>':
            return native_bool(a > b)
        if op == '==':
            return native_bool(a == b)
        if op == '!=':
            return native_bool(a != b)
        raise MonkeyError(ErrorVal('OperatorError', f'unknown operator: INTEGER {op} INTEGER'))

    def checked_integer(self, value: int, expr: str) -> Integer:
        if not fits_int64(value):
            raise MonkeyError(ErrorVal('OverflowError', f'integer overflow in {expr}'))
        return Integer(value)


def eval_program(program: Program, env: Environment) -> Object:
    """Evaluate `program` against `env` and return its final value.

    A top-level `return` ends the program early; its value is returned
    unwrapped. Raises MonkeyError on the first runtime error.
    """
    return Interpreter().run(program, env)


def run_program(source: Union[str, bytes], env: Optional[Environment] = None, debug_level: int = 0) -> Object:
    """Convenience function to parse and evaluate a Monkey program from source."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(program, env if env is not None else Environment())
