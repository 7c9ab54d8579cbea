"""
Leopard read-eval-print loop and command-line entry point

The REPL owns one environment for its whole lifetime. Each line is parsed on
its own; parser diagnostics are printed and the line is skipped, otherwise the
line is evaluated and the result's inspect() text is printed.

Usage:
    leopard            # interactive
    leopard FILE       # run a file and print its result
"""

import argparse
import getpass
import logging
import os
import sys
from contextlib import redirect_stdout
from typing import List, Optional, TextIO

from termcolor import colored

from .environment import Environment
from .errors import LeopardError, LeopardParseError
from .evaluator import Evaluator
from .lexer import Lexer
from .objects import LeopardObject, is_error
from .parser import parse_program
from .runtime import LeopardRuntime

logger = logging.getLogger(__name__)

PROMPT = ">> "
ERROR = "red"


class Repl:
    """Interactive Leopard session"""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None, color: bool = True):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.color = color
        self.env = Environment()
        self.evaluator = Evaluator()

    def start(self):
        """Read lines until end of input"""
        while True:
            self._write(PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                return
            self.run_line(line.rstrip('\n'))

    def run_line(self, line: str):
        """Parse and evaluate a single line against the session environment"""
        logger.debug("line: %r", line)
        program, errors = parse_program(Lexer(line))
        if errors:
            self.print_parser_errors(errors)
            return

        try:
            # puts writes to the session stream, in order with results
            with redirect_stdout(self.stdout):
                evaluated = self.evaluator.evaluate(program, self.env)
        except RecursionError:
            self._write(self._paint_error("ERROR: maximum recursion depth exceeded") + "\n")
            return

        if evaluated is not None:
            self._write(self.format_result(evaluated) + "\n")

    def print_parser_errors(self, errors: List[str]):
        self._write(self._paint_error("Parser errors:", bold=True) + "\n")
        for msg in errors:
            self._write("\t" + self._paint_error(msg) + "\n")

    def format_result(self, obj: LeopardObject) -> str:
        text = obj.inspect()
        if is_error(obj):
            return self._paint_error(text)
        return text

    def _paint_error(self, text: str, bold: bool = False) -> str:
        if not self.color:
            return text
        return colored(text, ERROR, attrs=["bold"] if bold else None)

    def _write(self, text: str):
        self.stdout.write(text)


# ============================================================================
# Command Line
# ============================================================================

def _get_log_level() -> int:
    """
    Determine log level from LOGLEVEL environment variable.
    Defaults to WARNING if not set.
    """
    loglevel_env = os.getenv("LOGLEVEL", "").upper()
    if loglevel_env:
        level = getattr(logging, loglevel_env, None)
        if isinstance(level, int):
            return level

    return logging.WARNING


def _color_enabled(no_color_flag: bool) -> bool:
    return not no_color_flag and "NO_COLOR" not in os.environ


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        # No login name in some containers
        return "there"


def run_file(path: str, color: bool) -> int:
    """Execute a source file, print its result; returns the exit status"""
    runtime = LeopardRuntime()
    try:
        result = runtime.execute_file(path)
    except LeopardParseError as e:
        header = "Parser errors:"
        print(colored(header, ERROR, attrs=["bold"]) if color else header, file=sys.stderr)
        for msg in e.diagnostics:
            print("\t" + msg, file=sys.stderr)
        return 1
    except LeopardError as e:
        prefix = "error: "
        print((colored(prefix, ERROR, attrs=["bold"]) if color else prefix) + e.message, file=sys.stderr)
        return 1

    if result is not None:
        print(result.inspect())
    return 1 if is_error(result) else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Runs the Leopard interpreter. Called from the leopard console script."""
    logging.basicConfig(level=_get_log_level(), format='%(name)s: %(message)s', stream=sys.stderr)

    parser = argparse.ArgumentParser(prog="leopard", description="Leopard programming language interpreter")
    parser.add_argument("file", nargs="?", help="file to run (if empty, starts the interactive prompt)")
    parser.add_argument("--no-color", action="store_true", help="disable coloured error output")
    args = parser.parse_args(argv)

    color = _color_enabled(args.no_color)

    if args.file is not None:
        return run_file(args.file, color)

    print(f"Hello {_current_user()}! This is the Leopard programming language!")
    print("Feel free to type in commands")
    try:
        Repl(color=color).start()
    except KeyboardInterrupt:
        pass
    print()
    return 0


if __name__ == '__main__':
    sys.exit(main())
