#!/usr/bin/env python3
"""
CLI for the arrow language interpreter.

Usage:
    python -m arrowlang run FILE [--print-result] [--config FILE] [--max-depth N]
    python -m arrowlang run -e SOURCE
    python -m arrowlang check FILE
    python -m arrowlang tokens FILE
    python -m arrowlang ast FILE

Examples:
    # Run a script
    python -m arrowlang run examples/fib.arrow

    # Evaluate a one-liner and show its value
    python -m arrowlang run -e "val x = 6 x * 7" --print-result

    # Check syntax only
    python -m arrowlang check examples/fib.arrow
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .config import ConfigError, InterpreterConfig, load_config
from .errors import ArrowError, attach_source


def read_source(args) -> Tuple[str, str]:
    """Return (display name, source text) for the file or -e argument."""
    if getattr(args, "eval", None) is not None:
        return "<eval>", args.eval

    source_path = Path(args.file)
    if not source_path.exists():
        raise FileNotFoundError(f"File not found: {source_path}")
    return str(source_path), source_path.read_text(encoding="utf-8")


def build_config(args) -> InterpreterConfig:
    """Config file first, then command-line overrides."""
    config = load_config(args.config) if args.config else InterpreterConfig()
    return config.with_overrides(
        max_call_depth=args.max_depth,
        echo_result=True if args.print_result else None,
    )


def report(error: ArrowError, source: str) -> None:
    print(attach_source(error, source), file=sys.stderr)


def cmd_run(args):
    """Parse and execute a program."""
    from . import parse, Interpreter, StreamOutput

    try:
        config = build_config(args)
        name, source = read_source(args)
    except (ConfigError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    filename = None if name == "<eval>" else name
    try:
        program = parse(source, filename)
        result = Interpreter(output=StreamOutput(), config=config).run(program)
    except ArrowError as e:
        report(e, source)
        return 1

    if config.echo_result:
        print(result)
    return 0


def cmd_check(args):
    """Check a file for lexer and syntax errors."""
    from . import parse

    try:
        name, source = read_source(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        program = parse(source, name)
    except ArrowError as e:
        report(e, source)
        return 1

    print(f"OK: {Path(name).name} - {len(program.statements)} statement(s)")
    return 0


def cmd_tokens(args):
    """Print one token per line."""
    from . import Lexer

    try:
        name, source = read_source(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        for token in Lexer(source, name):
            print(f"{token.position.line}:{token.position.column}\t{token}")
    except ArrowError as e:
        report(e, source)
        return 1
    return 0


def cmd_ast(args):
    """Print the parsed AST."""
    from . import parse, format_ast

    try:
        name, source = read_source(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        program = parse(source, name)
    except ArrowError as e:
        report(e, source)
        return 1

    print(format_ast(program))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m arrowlang',
        description='arrow language interpreter',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log interpreter activity to stderr')

    subparsers = parser.add_subparsers(dest='action', required=True)

    # run command
    run_parser = subparsers.add_parser('run', help='Run a program')
    source_group = run_parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument('file', nargs='?', help='Source file')
    source_group.add_argument('-e', '--eval', metavar='SOURCE',
                              help='Program text to run instead of a file')
    run_parser.add_argument('--print-result', action='store_true',
                            help='Print the value of the last statement')
    run_parser.add_argument('--config', metavar='FILE',
                            help='YAML interpreter configuration')
    run_parser.add_argument('--max-depth', type=int, metavar='N',
                            help='Maximum function call depth')

    # check command
    check_parser = subparsers.add_parser('check', help='Check a file for syntax errors')
    check_parser.add_argument('file', help='Source file')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='List the tokens of a file')
    tokens_parser.add_argument('file', help='Source file')

    # ast command
    ast_parser = subparsers.add_parser('ast', help='Print the AST of a file')
    ast_parser.add_argument('file', help='Source file')

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.action == 'run':
        return cmd_run(args)
    elif args.action == 'check':
        return cmd_check(args)
    elif args.action == 'tokens':
        return cmd_tokens(args)
    elif args.action == 'ast':
        return cmd_ast(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
