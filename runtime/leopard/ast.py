"""
Leopard abstract syntax tree

Two node families, statements and expressions, produced by the parser and
consumed by the evaluator. Nodes are frozen after construction and keep the
token they were built from. str(node) rebuilds a fully parenthesized form of
the source, which is what parser tests and diagnostics compare against.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .tokens import Token


# ============================================================================
# Base Nodes
# ============================================================================

@dataclass(frozen=True)
class Node:
    """Base AST node"""
    token: Token

    def token_literal(self) -> str:
        return self.token.literal


@dataclass(frozen=True)
class Statement(Node):
    """Base statement node"""


@dataclass(frozen=True)
class Expression(Node):
    """Base expression node"""


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Identifier(Expression):
    """Variable reference"""
    value: str

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int

    def __str__(self):
        return self.token.literal


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    def __str__(self):
        return self.token.literal


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    def __str__(self):
        return self.token.literal


@dataclass(frozen=True)
class PrefixExpression(Expression):
    """Prefix operation, e.g. -x or !ok"""
    operator: str
    right: Expression

    def __str__(self):
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression(Expression):
    """Binary operation, e.g. a + b"""
    left: Expression
    operator: str
    right: Expression

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: 'BlockStatement'
    alternative: Optional['BlockStatement'] = None

    def __str__(self):
        out = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f"else{self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    """Function definition: fn(params) { body }"""
    parameters: Tuple[Identifier, ...]
    body: 'BlockStatement'

    def __str__(self):
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()}({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression(Expression):
    """Function call; token is the '(' token"""
    function: Expression
    arguments: Tuple[Expression, ...]

    def __str__(self):
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: Tuple[Expression, ...]

    def __str__(self):
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class IndexExpression(Expression):
    """Indexing: collection[index]"""
    left: Expression
    index: Expression

    def __str__(self):
        return f"({self.left}[{self.index}])"


@dataclass(frozen=True)
class HashLiteral(Expression):
    """Hash literal; pairs keep source order"""
    pairs: Tuple[Tuple[Expression, Expression], ...]

    def __str__(self):
        return "{" + ", ".join(f"{k}:{v}" for k, v in self.pairs) + "}"


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class LetStatement(Statement):
    """Variable binding: let name = value;"""
    name: Identifier
    value: Expression

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement(Statement):
    return_value: Expression

    def __str__(self):
        return f"{self.token_literal()} {self.return_value};"


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """A bare expression used as a statement"""
    expression: Expression

    def __str__(self):
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    """Brace-delimited statements; token is the '{' token"""
    statements: Tuple[Statement, ...]

    def __str__(self):
        return "".join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Program:
    """Root node: every top-level statement of a source text"""
    statements: Tuple[Statement, ...]

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self):
        return "".join(str(s) for s in self.statements)


__all__ = [
    'Node',
    'Statement',
    'Expression',
    'Identifier',
    'IntegerLiteral',
    'BooleanLiteral',
    'StringLiteral',
    'PrefixExpression',
    'InfixExpression',
    'IfExpression',
    'FunctionLiteral',
    'CallExpression',
    'ArrayLiteral',
    'IndexExpression',
    'HashLiteral',
    'LetStatement',
    'ReturnStatement',
    'ExpressionStatement',
    'BlockStatement',
    'Program',
]
