"""
Test suite for Leopard runtime objects and environments
"""

import pytest

from leopard.environment import Environment, new_environment
from leopard.objects import (
    FALSE,
    NULL,
    TRUE,
    Array,
    Boolean,
    Builtin,
    Error,
    Hash,
    HashKey,
    Integer,
    ReturnValue,
    String,
    fnv1a_64,
    from_native,
    is_truthy,
    to_native,
    wrap_int64,
)
from leopard.parser import parse


class TestHashKeys:
    """Test hash key derivation"""

    def test_equal_strings_share_key(self):
        hello1 = String("Hello World")
        hello2 = String("Hello World")
        diff1 = String("My name is johnny")
        diff2 = String("My name is johnny")

        assert hello1.hash_key() == hello2.hash_key()
        assert diff1.hash_key() == diff2.hash_key()
        assert hello1.hash_key() != diff1.hash_key()

    def test_integer_key(self):
        assert Integer(1).hash_key() == HashKey("INTEGER", 1)
        assert Integer(-1).hash_key() == HashKey("INTEGER", 2 ** 64 - 1)

    def test_boolean_key(self):
        assert TRUE.hash_key() == HashKey("BOOLEAN", 1)
        assert Boolean(False).hash_key() == HashKey("BOOLEAN", 0)

    def test_type_is_part_of_key(self):
        assert Integer(1).hash_key() != TRUE.hash_key()

    def test_fnv1a_64(self):
        assert fnv1a_64(b"") == 0xcbf29ce484222325
        assert fnv1a_64(b"a") == 0xaf63dc4c8601ec8c

    def test_string_key_uses_utf8(self):
        assert String("é").hash_key().value == fnv1a_64("é".encode("utf-8"))


class TestInspect:
    """Test canonical text of each object kind"""

    @pytest.mark.parametrize("obj,expected", [
        (Integer(-5), "-5"),
        (TRUE, "true"),
        (FALSE, "false"),
        (NULL, "null"),
        (String("hi there"), "hi there"),
        (Array([Integer(1), String("a"), NULL]), "[1, a, null]"),
        (Array([]), "[]"),
        (Error("boom"), "ERROR: boom"),
        (ReturnValue(Integer(3)), "3"),
    ])
    def test_inspect(self, obj, expected):
        assert obj.inspect() == expected
        assert str(obj) == expected

    def test_hash_inspect_keeps_insertion_order(self):
        h = from_native({"b": 1, "a": 2})
        assert h.inspect() == "{b: 1, a: 2}"

    def test_builtin_inspect(self):
        assert Builtin(fn=lambda *args: NULL, name="noop").inspect() == "builtin function"

    def test_function_inspect(self):
        from leopard.evaluator import evaluate

        program, _ = parse("fn(x, y) { x + y }")
        fn = evaluate(program, Environment())
        assert fn.type() == "FUNCTION"
        assert fn.inspect() == "fn(x, y) {\n(x + y)\n}"
        assert fn.inspect() == fn.inspect()

    @pytest.mark.parametrize("obj,type_name", [
        (Integer(0), "INTEGER"),
        (TRUE, "BOOLEAN"),
        (NULL, "NULL"),
        (String(""), "STRING"),
        (Array([]), "ARRAY"),
        (Hash({}), "HASH"),
        (Error("x"), "ERROR"),
        (ReturnValue(NULL), "RETURN_VALUE"),
    ])
    def test_type_names(self, obj, type_name):
        assert obj.type() == type_name


class TestHelpers:
    """Test conversions and predicates"""

    @pytest.mark.parametrize("value,expected", [
        (0, 0),
        (2 ** 63 - 1, 2 ** 63 - 1),
        (2 ** 63, -2 ** 63),
        (-2 ** 63 - 1, 2 ** 63 - 1),
        (2 ** 64 + 5, 5),
    ])
    def test_wrap_int64(self, value, expected):
        assert wrap_int64(value) == expected

    def test_truthiness(self):
        assert not is_truthy(NULL)
        assert not is_truthy(FALSE)
        assert is_truthy(TRUE)
        assert is_truthy(Integer(0))
        assert is_truthy(String(""))
        assert is_truthy(Array([]))

    def test_from_native_singletons(self):
        assert from_native(None) is NULL
        assert from_native(True) is TRUE
        assert from_native(False) is FALSE

    def test_from_native_passthrough(self):
        obj = Integer(7)
        assert from_native(obj) is obj

    def test_native_round_trip(self):
        value = {"name": "leopard", "tags": [1, True, None], 3: "three"}
        assert to_native(from_native(value)) == value

    def test_from_native_wraps_integers(self):
        assert from_native(2 ** 63).value == -2 ** 63

    def test_from_native_rejects_unsupported(self):
        with pytest.raises(TypeError):
            from_native(1.5)

    def test_from_native_rejects_unhashable_key(self):
        with pytest.raises(TypeError, match="unusable as hash key: ARRAY"):
            from_native({(1, 2): "pair"})


class TestEnvironment:
    """Test scopes and lookups"""

    def test_get_and_set(self):
        env = new_environment()
        value = env.set("x", Integer(5))
        assert value.value == 5
        assert env.get("x") is value
        assert "x" in env

    def test_unbound_is_none(self):
        env = Environment()
        assert env.get("missing") is None
        assert "missing" not in env

    def test_lookup_walks_outward(self):
        outer = Environment()
        outer.set("x", Integer(1))
        inner = Environment.enclosed(outer)
        assert inner.get("x").value == 1
        assert inner.outer is outer

    def test_inner_binding_shadows(self):
        outer = Environment()
        outer.set("x", Integer(1))
        inner = Environment.enclosed(outer)
        inner.set("x", Integer(2))

        assert inner.get("x").value == 2
        assert outer.get("x").value == 1

    def test_outer_changes_are_visible(self):
        outer = Environment()
        inner = Environment.enclosed(outer)
        outer.set("late", TRUE)
        assert inner.get("late") is TRUE

    def test_names(self):
        outer = Environment()
        outer.set("a", NULL)
        inner = Environment.enclosed(outer)
        inner.set("b", NULL)
        assert inner.names() == ["b"]

    def test_repr(self):
        inner = Environment.enclosed(Environment())
        inner.set("x", NULL)
        assert repr(inner) == "Environment(names=['x'], depth=1)"
