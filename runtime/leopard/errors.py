"""
Leopard host-level errors

Language-level failures (type mismatches, unknown identifiers, bad built-in
arguments) are never raised: they are Error objects returned by the evaluator.
The exceptions here cover what sits around the language: source that failed to
parse when driven through the runtime facade, unreadable files, and broken
internal invariants.
"""

from typing import List


# ============================================================================
# Error Codes
# ============================================================================

E_PARSE_ERROR = "E_PARSE_ERROR"
E_IO_ERROR = "E_IO_ERROR"
E_INTERNAL = "E_INTERNAL"


class LeopardError(Exception):
    """Base exception for Leopard host errors"""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class LeopardParseError(LeopardError):
    """Source could not be parsed; carries every parser diagnostic"""
    def __init__(self, diagnostics: List[str]):
        self.diagnostics = list(diagnostics)
        super().__init__(E_PARSE_ERROR, "; ".join(self.diagnostics))


__all__ = [
    'E_PARSE_ERROR',
    'E_IO_ERROR',
    'E_INTERNAL',
    'LeopardError',
    'LeopardParseError',
]
