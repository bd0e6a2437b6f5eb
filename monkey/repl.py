"""Interactive read-eval-print loop.

Each input line is parsed and evaluated on its own, but all lines share
one Environment so that `let` bindings carry over from line to line.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, Optional, TextIO

from .ast import Program
from .environment import Environment
from .errors import MonkeyError
from .evaluator import Interpreter
from .grammar import parse_with_lark
from .parser import ParseError, parse_program


PROMPT = '>> '

FRONTENDS: Dict[str, Callable[[str], Program]] = {
    'pratt': parse_program,
    'lark': parse_with_lark,
}


def print_parse_errors(out: TextIO, errors) -> None:
    out.write('parser errors:\n')
    for msg in errors:
        out.write(f'\t{msg}\n')


def start(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
          env: Optional[Environment] = None, frontend: str = 'pratt',
          interpreter: Optional[Interpreter] = None) -> Environment:
    """Run the loop until `stdin` is exhausted; returns the shared environment."""
    parse = FRONTENDS[frontend]
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    env = env if env is not None else Environment()
    interpreter = interpreter if interpreter is not None else Interpreter()
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write('\n')
            return env
        if not line.strip():
            continue
        try:
            program = parse(line)
        except ParseError as e:
            print_parse_errors(stdout, e.errors)
            continue
        try:
            value = interpreter.run(program, env)
        except MonkeyError as e:
            stdout.write(f'error: {e}\n')
            continue
        stdout.write(f'{value}\n')
