"""
Leopard built-in functions

The registry is fixed. Each built-in checks its own arguments and reports a
mismatch as an Error object naming itself; none of them raise.
"""

from types import MappingProxyType
from typing import Optional

from .objects import (
    ARRAY_OBJ,
    NULL,
    Array,
    Builtin,
    Error,
    LeopardObject,
    String,
    Integer,
    new_error,
)


def _check_arity(name: str, args, want: int) -> Optional[Error]:
    if len(args) != want:
        return new_error(f"wrong number of arguments to `{name}`: got={len(args)}, want={want}")
    return None


def _check_array(name: str, arg: LeopardObject) -> Optional[Error]:
    if not isinstance(arg, Array):
        return new_error(f"argument to `{name}` must be {ARRAY_OBJ}, got {arg.type()}")
    return None


def _builtin_len(*args: LeopardObject) -> LeopardObject:
    """Built-in: len(string | array) → integer"""
    err = _check_arity('len', args, 1)
    if err:
        return err

    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return new_error(f"argument to `len` not supported, got {arg.type()}")


def _builtin_first(*args: LeopardObject) -> LeopardObject:
    """Built-in: first(array) → element or null"""
    err = _check_arity('first', args, 1) or _check_array('first', args[0])
    if err:
        return err

    elements = args[0].elements
    return elements[0] if elements else NULL


def _builtin_last(*args: LeopardObject) -> LeopardObject:
    """Built-in: last(array) → element or null"""
    err = _check_arity('last', args, 1) or _check_array('last', args[0])
    if err:
        return err

    elements = args[0].elements
    return elements[-1] if elements else NULL


def _builtin_rest(*args: LeopardObject) -> LeopardObject:
    """Built-in: rest(array) → new array without the first element, or null"""
    err = _check_arity('rest', args, 1) or _check_array('rest', args[0])
    if err:
        return err

    elements = args[0].elements
    if not elements:
        return NULL
    return Array(list(elements[1:]))


def _builtin_push(*args: LeopardObject) -> LeopardObject:
    """Built-in: push(array, value) → new array; the original is untouched"""
    err = _check_arity('push', args, 2) or _check_array('push', args[0])
    if err:
        return err

    return Array(args[0].elements + [args[1]])


def _builtin_puts(*args: LeopardObject) -> LeopardObject:
    """Built-in: puts(...) → null, printing each argument on its own line"""
    for arg in args:
        print(arg.inspect())
    return NULL


BUILTINS = MappingProxyType({
    name: Builtin(fn=fn, name=name)
    for name, fn in (
        ('len', _builtin_len),
        ('first', _builtin_first),
        ('last', _builtin_last),
        ('rest', _builtin_rest),
        ('push', _builtin_push),
        ('puts', _builtin_puts),
    )
})


__all__ = ['BUILTINS']
