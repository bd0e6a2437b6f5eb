# Monkey language package
# This package provides a lexer, a Pratt parser and a tree-walking evaluator for the Monkey language.
from .environment import Environment
from .errors import MonkeyError
from .evaluator import Interpreter, eval_program, run_program
from .lexer import Lexer
from .parser import Parser, ParseError, parse_program

__all__ = [
    'Environment',
    'Interpreter',
    'Lexer',
    'MonkeyError',
    'ParseError',
    'Parser',
    'eval_program',
    'parse_program',
    'run_program',
]
