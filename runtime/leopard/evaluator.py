"""
Leopard evaluator

Walks the AST against an environment and produces runtime objects.

Failures are values, not exceptions: whenever a sub-evaluation yields an Error
object, the caller stops evaluating siblings and hands that same Error back up.
A ReturnValue likewise stops every enclosing block and expression, but is
unwrapped at the nearest enclosing function call (or at the top of the
program). Host exceptions are reserved for broken invariants, such as a node
type the dispatcher does not know.
"""

from typing import List, Mapping, Optional, Sequence

from .ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .builtins import BUILTINS
from .environment import Environment
from .errors import E_INTERNAL, LeopardError
from .objects import (
    FALSE,
    NULL,
    TRUE,
    Array,
    Boolean,
    Builtin,
    Function,
    Hash,
    HashPair,
    Integer,
    LeopardObject,
    ReturnValue,
    String,
    is_error,
    is_hashable,
    is_truthy,
    native_bool_to_boolean,
    new_error,
    wrap_int64,
)


def _is_abrupt(obj: Optional[LeopardObject]) -> bool:
    """Error or ReturnValue: the enclosing construct must stop and hand it up"""
    return is_error(obj) or isinstance(obj, ReturnValue)


class Evaluator:
    """Evaluate Leopard AST nodes"""

    def __init__(self, builtins: Mapping[str, Builtin] = BUILTINS):
        self.builtins = builtins

    def evaluate(self, node, env: Environment) -> Optional[LeopardObject]:
        """
        Evaluate an AST node

        Args:
            node: Program, statement or expression
            env: Environment to resolve and bind names in

        Returns:
            Resulting object, or None when the node produces no value (a
            `let` statement, an empty program)

        Raises:
            LeopardError: If node is not a known AST node type
        """
        # Statements
        if isinstance(node, Program):
            return self._eval_program(node, env)

        elif isinstance(node, BlockStatement):
            return self._eval_block_statement(node, env)

        elif isinstance(node, ExpressionStatement):
            return self.evaluate(node.expression, env)

        elif isinstance(node, ReturnStatement):
            value = self._eval_value(node.return_value, env)
            if _is_abrupt(value):
                return value
            return ReturnValue(value)

        elif isinstance(node, LetStatement):
            value = self._eval_value(node.value, env)
            if _is_abrupt(value):
                return value
            env.set(node.name.value, value)
            return None

        # Literals
        elif isinstance(node, IntegerLiteral):
            return Integer(node.value)

        elif isinstance(node, BooleanLiteral):
            return native_bool_to_boolean(node.value)

        elif isinstance(node, StringLiteral):
            return String(node.value)

        # Expressions
        elif isinstance(node, PrefixExpression):
            right = self._eval_value(node.right, env)
            if _is_abrupt(right):
                return right
            return self._eval_prefix_expression(node.operator, right)

        elif isinstance(node, InfixExpression):
            left = self._eval_value(node.left, env)
            if _is_abrupt(left):
                return left
            right = self._eval_value(node.right, env)
            if _is_abrupt(right):
                return right
            return self._eval_infix_expression(node.operator, left, right)

        elif isinstance(node, IfExpression):
            return self._eval_if_expression(node, env)

        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)

        elif isinstance(node, FunctionLiteral):
            return Function(parameters=node.parameters, body=node.body, env=env)

        elif isinstance(node, CallExpression):
            function = self._eval_value(node.function, env)
            if _is_abrupt(function):
                return function
            args = self._eval_expressions(node.arguments, env)
            if len(args) == 1 and _is_abrupt(args[0]):
                return args[0]
            return self.apply_function(function, args)

        elif isinstance(node, ArrayLiteral):
            elements = self._eval_expressions(node.elements, env)
            if len(elements) == 1 and _is_abrupt(elements[0]):
                return elements[0]
            return Array(elements)

        elif isinstance(node, IndexExpression):
            left = self._eval_value(node.left, env)
            if _is_abrupt(left):
                return left
            index = self._eval_value(node.index, env)
            if _is_abrupt(index):
                return index
            return self._eval_index_expression(left, index)

        elif isinstance(node, HashLiteral):
            return self._eval_hash_literal(node, env)

        else:
            raise LeopardError(E_INTERNAL, f"Unknown AST node type: {type(node).__name__}")

    def apply_function(self, fn: LeopardObject, args: List[LeopardObject]) -> LeopardObject:
        """Call a user function or built-in with evaluated arguments"""
        if isinstance(fn, Function):
            if len(args) != len(fn.parameters):
                return new_error(
                    f"wrong number of arguments: want={len(fn.parameters)}, got={len(args)}")
            call_env = self._extend_function_env(fn, args)
            result = self.evaluate(fn.body, call_env)
            return self._unwrap_return_value(result)

        elif isinstance(fn, Builtin):
            return fn.fn(*args)

        return new_error(f"not a function: {fn.type()}")

    # Statements

    def _eval_program(self, program: Program, env: Environment) -> Optional[LeopardObject]:
        result = None
        for stmt in program.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if is_error(result):
                return result
        return result

    def _eval_block_statement(self, block: BlockStatement, env: Environment) -> Optional[LeopardObject]:
        """Evaluate a block in the enclosing scope; ReturnValue stays wrapped"""
        result = None
        for stmt in block.statements:
            result = self.evaluate(stmt, env)
            if _is_abrupt(result):
                return result
        return result

    # Expressions

    def _eval_value(self, node: Expression, env: Environment) -> LeopardObject:
        """Evaluate where a value is required; an absent result reads as null"""
        result = self.evaluate(node, env)
        return NULL if result is None else result

    def _eval_expressions(self, exprs: Sequence[Expression], env: Environment) -> List[LeopardObject]:
        """Evaluate left to right; a lone Error or ReturnValue in the result means failure"""
        result = []
        for expr in exprs:
            evaluated = self._eval_value(expr, env)
            if _is_abrupt(evaluated):
                return [evaluated]
            result.append(evaluated)
        return result

    def _eval_identifier(self, node: Identifier, env: Environment) -> LeopardObject:
        value = env.get(node.value)
        if value is not None:
            return value
        builtin = self.builtins.get(node.value)
        if builtin is not None:
            return builtin
        return new_error(f"identifier not found: {node.value}")

    def _eval_prefix_expression(self, operator: str, right: LeopardObject) -> LeopardObject:
        if operator == '!':
            return FALSE if is_truthy(right) else TRUE
        elif operator == '-':
            if not isinstance(right, Integer):
                return new_error(f"unknown operator: -{right.type()}")
            return Integer(wrap_int64(-right.value))
        return new_error(f"unknown operator: {operator}{right.type()}")

    def _eval_infix_expression(self, operator: str, left: LeopardObject,
                               right: LeopardObject) -> LeopardObject:
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix_expression(operator, left, right)
        elif isinstance(left, Boolean) and isinstance(right, Boolean):
            if operator == '==':
                return native_bool_to_boolean(left is right)
            elif operator == '!=':
                return native_bool_to_boolean(left is not right)
        elif isinstance(left, String) and isinstance(right, String):
            if operator == '+':
                return String(left.value + right.value)
        elif left.type() != right.type():
            return new_error(f"type mismatch: {left.type()} {operator} {right.type()}")

        return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")

    def _eval_integer_infix_expression(self, operator: str, left: Integer,
                                       right: Integer) -> LeopardObject:
        a = left.value
        b = right.value

        if operator == '+':
            return Integer(wrap_int64(a + b))
        elif operator == '-':
            return Integer(wrap_int64(a - b))
        elif operator == '*':
            return Integer(wrap_int64(a * b))
        elif operator == '/':
            if b == 0:
                return new_error("division by zero")
            # Truncate toward zero
            quotient = abs(a) // abs(b)
            if (a < 0) != (b < 0):
                quotient = -quotient
            return Integer(wrap_int64(quotient))
        elif operator == '<':
            return native_bool_to_boolean(a < b)
        elif operator == '>':
            return native_bool_to_boolean(a > b)
        elif operator == '==':
            return native_bool_to_boolean(a == b)
        elif operator == '!=':
            return native_bool_to_boolean(a != b)
        return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")

    def _eval_if_expression(self, node: IfExpression, env: Environment) -> LeopardObject:
        condition = self._eval_value(node.condition, env)
        if _is_abrupt(condition):
            return condition

        if is_truthy(condition):
            result = self.evaluate(node.consequence, env)
        elif node.alternative is not None:
            result = self.evaluate(node.alternative, env)
        else:
            return NULL
        return NULL if result is None else result

    def _eval_index_expression(self, left: LeopardObject, index: LeopardObject) -> LeopardObject:
        if isinstance(left, Array) and isinstance(index, Integer):
            i = index.value
            if i < 0 or i >= len(left.elements):
                return NULL
            return left.elements[i]
        elif isinstance(left, Hash):
            if not is_hashable(index):
                return new_error(f"unusable as hash key: {index.type()}")
            pair = left.pairs.get(index.hash_key())
            return NULL if pair is None else pair.value
        return new_error(f"index operator not supported: {left.type()}[{index.type()}]")

    def _eval_hash_literal(self, node: HashLiteral, env: Environment) -> LeopardObject:
        pairs = {}
        for key_node, value_node in node.pairs:
            key = self._eval_value(key_node, env)
            if _is_abrupt(key):
                return key
            if not is_hashable(key):
                return new_error(f"unusable as hash key: {key.type()}")

            value = self._eval_value(value_node, env)
            if _is_abrupt(value):
                return value

            # Later duplicates overwrite earlier ones
            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)

    # Function calls

    def _extend_function_env(self, fn: Function, args: List[LeopardObject]) -> Environment:
        """New scope enclosed by the function's defining scope, not the caller's"""
        env = Environment.enclosed(fn.env)
        for param, arg in zip(fn.parameters, args):
            env.set(param.value, arg)
        return env

    def _unwrap_return_value(self, obj: Optional[LeopardObject]) -> LeopardObject:
        if isinstance(obj, ReturnValue):
            return obj.value
        return NULL if obj is None else obj


_default_evaluator = Evaluator()


def evaluate(node, env: Environment) -> Optional[LeopardObject]:
    """Evaluate node in env with the standard built-ins (convenience function)"""
    return _default_evaluator.evaluate(node, env)


__all__ = ['Evaluator', 'evaluate']
