"""CLI entry point for the Monkey interpreter.

Usage:
    python -m monkey [-v|-vv|-vvv] [--frontend pratt|lark] <program_file>
    python -m monkey [-v...] -e '<source>'
    python -m monkey --tokens <program_file>
    python -m monkey [--frontend ...] --emit-ast <program_file>
    python -m monkey [-v...] --ast <ast_json_file>
    python -m monkey                      # interactive prompt

Options:
  -v            Increase debug verbosity (can be repeated)
  -e SOURCE     Evaluate SOURCE given on the command line
  --frontend    Parser to use: the Pratt parser (default) or the Lark grammar
  --tokens      Print the token stream of the given file and exit
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

The value of the last evaluated statement is printed. Debug information
is written to `debug.txt` in the current directory when verbosity is
greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .environment import Environment
from .errors import MonkeyError
from .evaluator import Interpreter
from .lexer import Lexer
from .parser import ParseError
from .repl import FRONTENDS, start


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str, frontend: str):
    try:
        return FRONTENDS[frontend](source)
    except ParseError as e:
        for msg in e.errors:
            print(f"Syntax error: {msg}", file=sys.stderr)
        sys.exit(1)


def execute(program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level, debug_file='debug.txt')
    try:
        value = interpreter.run(program, Environment())
    except MonkeyError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    print(value)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Monkey language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--frontend', choices=sorted(FRONTENDS), default='pratt', help='parser implementation to use')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-e', '--eval', metavar='SOURCE', help='evaluate SOURCE instead of a file')
    group.add_argument('--tokens', metavar='MONKEY_FILE', help='print the tokens of the given file')
    group.add_argument('--emit-ast', metavar='MONKEY_FILE', help='emit AST JSON for the given file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Monkey program file to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        for tok in Lexer(read_source(args.tokens)):
            print(f"{tok.line}:{tok.column}\t{tok.type.name}\t{tok.literal}")
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = parse_or_exit(read_source(args.emit_ast), args.frontend)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        execute(ast_from_obj(data), args.v)
        return

    if args.eval is not None:
        execute(parse_or_exit(args.eval, args.frontend), args.v)
        return

    # No program: interactive prompt
    if not args.program:
        print("Monkey REPL; Ctrl-D to exit")
        start(frontend=args.frontend, interpreter=Interpreter(debug_level=args.v, debug_file='debug.txt'))
        return

    execute(parse_or_exit(read_source(args.program), args.frontend), args.v)


if __name__ == '__main__':
    main()
