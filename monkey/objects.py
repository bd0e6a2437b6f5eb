"""Runtime values for the Monkey evaluator.

Values form a small closed family: integers, booleans, null, and the
`ReturnSignal` wrapper the evaluator uses internally to carry an early
`return` out of nested blocks. Integers are signed 64-bit; the helpers
at the bottom of this module keep arithmetic inside that range.
"""

from __future__ import annotations

from dataclasses import dataclass


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class Object:
    """Base class for runtime values."""
    pass


@dataclass(frozen=True)
class Integer(Object):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    value: bool

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class Null(Object):
    def __str__(self) -> str:
        return 'null'


@dataclass(frozen=True)
class ReturnSignal(Object):
    """Wraps the value of a `return` while it propagates outward.

    Never observable from `eval_program`; the evaluator unwraps it at
    program level.
    """
    value: Object

    def __str__(self) -> str:
        return str(self.value)


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


@dataclass
class ErrorVal:
    """Describes a runtime error: a category name and a message.

    Categories used by the evaluator are NameError, TypeError,
    OperatorError, ConditionError, ZeroDivisionError, OverflowError and
    UnsupportedError.
    """
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def type_name(value: Object) -> str:
    if isinstance(value, Integer):
        return 'INTEGER'
    if isinstance(value, Boolean):
        return 'BOOLEAN'
    if isinstance(value, Null):
        return 'NULL'
    if isinstance(value, ReturnSignal):
        return 'RETURN_VALUE'
    return type(value).__name__


def fits_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient
