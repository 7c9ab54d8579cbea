"""
Leopard - a small dynamically-typed scripting language

This package provides the complete Leopard interpreter:

**Front End:**
- Tokens and Lexer: source text to tokens
- Parser: Pratt parser from tokens to AST, with accumulated diagnostics

**Runtime:**
- Objects: integers, booleans, null, strings, arrays, hashes, functions
- Environment: lexical scopes with closures
- Evaluator: tree-walking evaluation, errors carried as values
- Built-ins: len, first, last, rest, push, puts

**Interfaces:**
- LeopardRuntime: embedding API with a persistent environment
- REPL / CLI: `leopard [FILE]`

Version: 1.0.0
"""

import logging

__version__ = '1.0.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ============================================================================
# Front End
# ============================================================================

from .tokens import Token, TokenType, KEYWORDS, lookup_ident
from .lexer import Lexer, tokenize
from .parser import Parser, Precedence, parse_program, parse
from . import ast

# ============================================================================
# Runtime
# ============================================================================

from .objects import (
    LeopardObject, Integer, Boolean, Null, String, Array, Hash, HashKey, HashPair,
    Function, Builtin, ReturnValue, Error,
    TRUE, FALSE, NULL,
    from_native, to_native,
)
from .environment import Environment, new_environment
from .evaluator import Evaluator, evaluate
from .builtins import BUILTINS

# ============================================================================
# Interfaces
# ============================================================================

from .errors import (
    E_PARSE_ERROR, E_IO_ERROR, E_INTERNAL,
    LeopardError, LeopardParseError,
)
from .runtime import LeopardRuntime, execute_leopard
from .repl import Repl, main

# ============================================================================
# Exports
# ============================================================================

__all__ = [
    # Version
    '__version__',

    # Front End
    'Token', 'TokenType', 'KEYWORDS', 'lookup_ident',
    'Lexer', 'tokenize',
    'Parser', 'Precedence', 'parse_program', 'parse',
    'ast',

    # Objects
    'LeopardObject', 'Integer', 'Boolean', 'Null', 'String', 'Array', 'Hash',
    'HashKey', 'HashPair', 'Function', 'Builtin', 'ReturnValue', 'Error',
    'TRUE', 'FALSE', 'NULL',
    'from_native', 'to_native',

    # Evaluation
    'Environment', 'new_environment',
    'Evaluator', 'evaluate',
    'BUILTINS',

    # Errors
    'E_PARSE_ERROR', 'E_IO_ERROR', 'E_INTERNAL',
    'LeopardError', 'LeopardParseError',

    # Interfaces
    'LeopardRuntime', 'execute_leopard',
    'Repl', 'main',
]
