"""
Leopard runtime interface

Ties lexer, parser and evaluator together around one persistent top-level
environment, so bindings made by one execute() call are visible to the next.

Example:
    >>> runtime = LeopardRuntime()
    >>> runtime.execute('let add = fn(a, b) { a + b };')
    >>> runtime.execute('add(2, 3)').inspect()
    '5'
"""

import logging
from typing import Any, Dict, Optional

from .environment import Environment
from .errors import E_IO_ERROR, LeopardError, LeopardParseError
from .evaluator import Evaluator
from .lexer import Lexer
from .objects import LeopardObject, from_native
from .parser import parse_program

logger = logging.getLogger(__name__)


class LeopardRuntime:
    """Main Leopard runtime interface"""

    def __init__(self, env: Optional[Environment] = None):
        """
        Initialize Leopard runtime

        Args:
            env: Top-level environment to evaluate in (default: a new one)
        """
        self.env = env if env is not None else Environment()
        self.evaluator = Evaluator()

    def execute(self, source: str) -> Optional[LeopardObject]:
        """
        Execute Leopard source code

        Args:
            source: Leopard source code

        Returns:
            Result of evaluation; an Error object if evaluation failed, None
            if the program produced no value

        Raises:
            LeopardParseError: If the parser reported any diagnostics
        """
        program, diagnostics = parse_program(Lexer(source))
        if diagnostics:
            logger.debug("parse failed with %d diagnostic(s)", len(diagnostics))
            raise LeopardParseError(diagnostics)

        logger.debug("evaluating %d statement(s)", len(program.statements))
        return self.evaluator.evaluate(program, self.env)

    def execute_file(self, filepath: str) -> Optional[LeopardObject]:
        """
        Execute Leopard source file

        Args:
            filepath: Path to a Leopard source file

        Returns:
            Result of evaluation

        Raises:
            LeopardError: E_IO_ERROR if the file cannot be read or is not UTF-8
            LeopardParseError: If the parser reported any diagnostics
        """
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                source = f.read()
        except OSError as e:
            raise LeopardError(E_IO_ERROR, f"'{filepath}' could not be opened: {e.strerror}") from e
        except UnicodeDecodeError as e:
            raise LeopardError(E_IO_ERROR, f"'{filepath}' is not valid UTF-8: {e.reason}") from e
        return self.execute(source)

    def get_env(self) -> Dict[str, LeopardObject]:
        """Get current top-level bindings"""
        return dict(self.env.store)

    def set_var(self, name: str, value: Any):
        """Bind a variable in the top-level environment (native values are converted)"""
        self.env.set(name, from_native(value))

    def get_var(self, name: str) -> Optional[LeopardObject]:
        """Get a variable, searching the environment chain"""
        return self.env.get(name)

    def clear_env(self):
        """Drop every top-level binding"""
        self.env.store.clear()


# ============================================================================
# Convenience Function
# ============================================================================

def execute_leopard(source: str) -> Optional[LeopardObject]:
    """
    Execute Leopard source code in a fresh runtime (convenience function)

    Example:
        >>> execute_leopard('5 + 3').inspect()
        '8'
    """
    runtime = LeopardRuntime()
    return runtime.execute(source)


__all__ = ['LeopardRuntime', 'execute_leopard']
