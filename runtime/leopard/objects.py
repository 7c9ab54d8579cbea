"""
Leopard runtime objects

Every value a Leopard program can produce is one of the classes below. Each
reports its type name through type() and its canonical text through inspect().

Booleans and null are singletons (TRUE, FALSE, NULL) so the evaluator can
compare them by identity. Integer, Boolean and String can serve as hash keys:
their hash_key() is a pure function of the value, so equal values always land
on the same HashKey.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, NamedTuple, Tuple

if TYPE_CHECKING:
    from .ast import BlockStatement, Identifier
    from .environment import Environment


# ============================================================================
# Object Types
# ============================================================================

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
NULL_OBJ = "NULL"
STRING_OBJ = "STRING"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"

UINT64_MASK = (1 << 64) - 1

FNV64_OFFSET_BASIS = 0xcbf29ce484222325
FNV64_PRIME = 0x100000001b3


def wrap_int64(value: int) -> int:
    """Wrap an arbitrary int to signed 64 bits (two's complement)"""
    value &= UINT64_MASK
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def fnv1a_64(data: bytes) -> int:
    """64-bit FNV-1a hash"""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & UINT64_MASK
    return h


class HashKey(NamedTuple):
    """Lookup key for Hash objects: (type name, unsigned 64-bit value)"""
    type: str
    value: int


# ============================================================================
# Objects
# ============================================================================

class LeopardObject:
    """Base class for runtime values"""

    def type(self) -> str:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self):
        return self.inspect()


@dataclass(eq=False)
class Integer(LeopardObject):
    value: int

    def type(self) -> str:
        return INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER_OBJ, self.value & UINT64_MASK)


@dataclass(eq=False)
class Boolean(LeopardObject):
    value: bool

    def type(self) -> str:
        return BOOLEAN_OBJ

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN_OBJ, 1 if self.value else 0)


class Null(LeopardObject):

    def type(self) -> str:
        return NULL_OBJ

    def inspect(self) -> str:
        return "null"

    def __repr__(self):
        return "Null()"


@dataclass(eq=False)
class String(LeopardObject):
    value: str

    def type(self) -> str:
        return STRING_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING_OBJ, fnv1a_64(self.value.encode('utf-8')))


@dataclass(eq=False)
class Array(LeopardObject):
    """Ordered, mutable sequence of objects"""
    elements: List[LeopardObject] = field(default_factory=list)

    def type(self) -> str:
        return ARRAY_OBJ

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


class HashPair(NamedTuple):
    key: LeopardObject
    value: LeopardObject


@dataclass(eq=False)
class Hash(LeopardObject):
    """Mapping keyed by HashKey; each entry keeps the original key object"""
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def type(self) -> str:
        return HASH_OBJ

    def inspect(self) -> str:
        items = (f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values())
        return "{" + ", ".join(items) + "}"


@dataclass(eq=False)
class Function(LeopardObject):
    """User function; env is the environment it was defined in"""
    parameters: Tuple['Identifier', ...]
    body: 'BlockStatement'
    env: 'Environment'

    def type(self) -> str:
        return FUNCTION_OBJ

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"

    def __repr__(self):
        # The captured environment may contain this function
        return f"Function({self.inspect()!r})"


BuiltinFunction = Callable[..., LeopardObject]


@dataclass(eq=False)
class Builtin(LeopardObject):
    """Native function from the fixed built-in registry"""
    fn: BuiltinFunction
    name: str = ""

    def type(self) -> str:
        return BUILTIN_OBJ

    def inspect(self) -> str:
        return "builtin function"


@dataclass(eq=False)
class ReturnValue(LeopardObject):
    """Wraps a returned value while it unwinds to the enclosing call"""
    value: LeopardObject

    def type(self) -> str:
        return RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(eq=False)
class Error(LeopardObject):
    """A language-level failure, carried as a value"""
    message: str

    def type(self) -> str:
        return ERROR_OBJ

    def inspect(self) -> str:
        return "ERROR: " + self.message


# ============================================================================
# Singletons and Helpers
# ============================================================================

TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool_to_boolean(value: bool) -> Boolean:
    """Map a Python bool onto the shared singletons"""
    return TRUE if value else FALSE


def is_hashable(obj: LeopardObject) -> bool:
    return isinstance(obj, (Integer, Boolean, String))


def is_error(obj: Any) -> bool:
    return isinstance(obj, Error)


def is_truthy(obj: LeopardObject) -> bool:
    """Everything is truthy except false and null"""
    return obj is not NULL and obj is not FALSE


def new_error(message: str) -> Error:
    return Error(message)


def from_native(value: Any) -> LeopardObject:
    """
    Convert a Python value into a Leopard object

    Supports None, bool, int, str, lists/tuples and dicts with hashable keys.
    Leopard objects pass through unchanged.
    """
    if isinstance(value, LeopardObject):
        return value
    if value is None:
        return NULL
    if isinstance(value, bool):
        return native_bool_to_boolean(value)
    if isinstance(value, int):
        return Integer(wrap_int64(value))
    if isinstance(value, str):
        return String(value)
    if isinstance(value, (list, tuple)):
        return Array([from_native(v) for v in value])
    if isinstance(value, dict):
        pairs = {}
        for k, v in value.items():
            key = from_native(k)
            if not is_hashable(key):
                raise TypeError(f"unusable as hash key: {key.type()}")
            pairs[key.hash_key()] = HashPair(key, from_native(v))
        return Hash(pairs)
    raise TypeError(f"cannot convert {type(value).__name__} to a Leopard object")


def to_native(obj: LeopardObject) -> Any:
    """
    Convert a Leopard object into a plain Python value

    Functions, built-ins and errors have no native form and are returned as-is.
    """
    if obj is NULL:
        return None
    if isinstance(obj, (Integer, Boolean, String)):
        return obj.value
    if isinstance(obj, ReturnValue):
        return to_native(obj.value)
    if isinstance(obj, Array):
        return [to_native(e) for e in obj.elements]
    if isinstance(obj, Hash):
        return {to_native(p.key): to_native(p.value) for p in obj.pairs.values()}
    return obj


__all__ = [
    'INTEGER_OBJ', 'BOOLEAN_OBJ', 'NULL_OBJ', 'STRING_OBJ', 'ARRAY_OBJ',
    'HASH_OBJ', 'FUNCTION_OBJ', 'BUILTIN_OBJ', 'RETURN_VALUE_OBJ', 'ERROR_OBJ',
    'HashKey', 'HashPair',
    'LeopardObject', 'Integer', 'Boolean', 'Null', 'String', 'Array', 'Hash',
    'Function', 'Builtin', 'BuiltinFunction', 'ReturnValue', 'Error',
    'TRUE', 'FALSE', 'NULL',
    'wrap_int64', 'fnv1a_64', 'native_bool_to_boolean', 'is_hashable',
    'is_error', 'is_truthy', 'new_error', 'from_native', 'to_native',
]
