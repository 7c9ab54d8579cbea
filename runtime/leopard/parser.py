"""
Leopard parser

Recursive descent for statements, operator precedence (Pratt) resolution for
expressions. Every token type that can start an expression has a prefix parse
function; every token type that can follow a complete left operand has an
infix parse function and a precedence.

The parser never raises on bad input. Each failed expectation appends a
diagnostic to `errors`, the statement being parsed is abandoned, and parsing
resumes at the next statement boundary.
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

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
    Statement,
    StringLiteral,
)
from .lexer import Lexer
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


# ============================================================================
# Precedence
# ============================================================================

class Precedence(IntEnum):
    """Binding power, weakest first"""
    LOWEST = 1
    EQUALS = 2        # ==
    LESSGREATER = 3   # > or <
    SUM = 4           # +
    PRODUCT = 5       # *
    PREFIX = 6        # -x or !x
    CALL = 7          # f(x)
    INDEX = 8         # a[i]


PRECEDENCES: Dict[str, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


# ============================================================================
# Parser
# ============================================================================

class Parser:
    """Parse Leopard tokens into an AST"""

    def __init__(self, tokens: Iterable[Token]):
        """
        Initialize parser with a token stream

        Args:
            tokens: Lexer or any iterable of tokens; treated as ending in EOF
                once exhausted
        """
        self._tokens: Iterator[Token] = iter(tokens)
        self.errors: List[str] = []

        self.prefix_parse_fns: Dict[str, PrefixParseFn] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
            TokenType.LBRACKET: self._parse_array_literal,
            TokenType.LBRACE: self._parse_hash_literal,
        }

        self.infix_parse_fns: Dict[str, InfixParseFn] = {
            TokenType.PLUS: self._parse_infix_expression,
            TokenType.MINUS: self._parse_infix_expression,
            TokenType.SLASH: self._parse_infix_expression,
            TokenType.ASTERISK: self._parse_infix_expression,
            TokenType.EQ: self._parse_infix_expression,
            TokenType.NOT_EQ: self._parse_infix_expression,
            TokenType.LT: self._parse_infix_expression,
            TokenType.GT: self._parse_infix_expression,
            TokenType.LPAREN: self._parse_call_expression,
            TokenType.LBRACKET: self._parse_index_expression,
        }

        # Braces opened and not yet closed, up to and including cur_token
        self._depth = 0
        self._closed_brace = False

        # Two-token window: current and one token of lookahead
        self.cur_token = self._pull()
        self.peek_token = self._pull()
        self._track_depth()

    def parse_program(self) -> Program:
        """
        Parse every statement up to EOF

        Returns:
            Program holding each statement that parsed; problems are in
            self.errors
        """
        statements = []

        while not self._cur_token_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            else:
                self._synchronize()
            self._next_token()

        return Program(statements=tuple(statements))

    # Statements

    def _parse_statement(self) -> Optional[Statement]:
        if self.cur_token.type == TokenType.LET:
            return self._parse_let_statement()
        elif self.cur_token.type == TokenType.RETURN:
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> Optional[LetStatement]:
        """Parse: let name = value;"""
        token = self.cur_token

        if not self._expect_peek(TokenType.IDENT):
            return None
        name = Identifier(token=self.cur_token, value=self.cur_token.literal)

        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()

        return LetStatement(token=token, name=name, value=value)

    def _parse_return_statement(self) -> Optional[ReturnStatement]:
        """Parse: return value;"""
        token = self.cur_token
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()

        return ReturnStatement(token=token, return_value=value)

    def _parse_expression_statement(self) -> Optional[ExpressionStatement]:
        token = self.cur_token
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()

        return ExpressionStatement(token=token, expression=expression)

    def _parse_block_statement(self) -> Optional[BlockStatement]:
        """Parse statements up to the closing brace; cur_token is '{'"""
        token = self.cur_token
        statements = []
        self._next_token()

        while not self._cur_token_is(TokenType.RBRACE):
            if self._cur_token_is(TokenType.EOF):
                self._peek_error(TokenType.RBRACE, self.cur_token)
                return None
            stmt = self._parse_statement()
            if stmt is None:
                return None
            statements.append(stmt)
            self._next_token()

        return BlockStatement(token=token, statements=tuple(statements))

    # Expressions

    def _parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """Parse an expression binding tighter than precedence"""
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self._no_prefix_parse_fn_error(self.cur_token.type)
            return None

        left = prefix()
        while left is not None and not self._peek_token_is(TokenType.SEMICOLON) \
                and precedence < self._peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(token=self.cur_token, value=self.cur_token.literal)

    def _parse_integer_literal(self) -> Optional[Expression]:
        literal = self.cur_token.literal
        try:
            value = int(literal, 10)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self._error(f'could not parse "{literal}" as integer')
            return None
        return IntegerLiteral(token=self.cur_token, value=value)

    def _parse_string_literal(self) -> Expression:
        return StringLiteral(token=self.cur_token, value=self.cur_token.literal)

    def _parse_boolean(self) -> Expression:
        return BooleanLiteral(token=self.cur_token, value=self._cur_token_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Optional[Expression]:
        token = self.cur_token
        self._next_token()

        right = self._parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(token=token, operator=token.literal, right=right)

    def _parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        precedence = self._cur_precedence()
        self._next_token()

        right = self._parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(token=token, left=left, operator=token.literal, right=right)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        self._next_token()

        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None or not self._expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_if_expression(self) -> Optional[Expression]:
        """Parse: if (condition) { ... } else { ... }"""
        token = self.cur_token

        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None or not self._expect_peek(TokenType.RPAREN):
            return None

        if not self._expect_peek(TokenType.LBRACE):
            return None
        consequence = self._parse_block_statement()
        if consequence is None:
            return None

        alternative = None
        if self._peek_token_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()
            if alternative is None:
                return None

        return IfExpression(token=token, condition=condition,
                            consequence=consequence, alternative=alternative)

    def _parse_function_literal(self) -> Optional[Expression]:
        """Parse: fn(a, b) { ... }"""
        token = self.cur_token

        if not self._expect_peek(TokenType.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None

        if not self._expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None

        return FunctionLiteral(token=token, parameters=parameters, body=body)

    def _parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        identifiers = []

        if self._peek_token_is(TokenType.RPAREN):
            self._next_token()
            return ()

        if not self._expect_peek(TokenType.IDENT):
            return None
        identifiers.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        if not self._expect_peek(TokenType.RPAREN):
            return None

        return tuple(identifiers)

    def _parse_call_expression(self, function: Expression) -> Optional[Expression]:
        token = self.cur_token
        arguments = self._parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return CallExpression(token=token, function=function, arguments=arguments)

    def _parse_array_literal(self) -> Optional[Expression]:
        token = self.cur_token
        elements = self._parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(token=token, elements=elements)

    def _parse_index_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        self._next_token()

        index = self._parse_expression(Precedence.LOWEST)
        if index is None or not self._expect_peek(TokenType.RBRACKET):
            return None
        return IndexExpression(token=token, left=left, index=index)

    def _parse_hash_literal(self) -> Optional[Expression]:
        """Parse: {key: value, ...}"""
        token = self.cur_token
        pairs = []

        while not self._peek_token_is(TokenType.RBRACE):
            self._next_token()
            key = self._parse_expression(Precedence.LOWEST)
            if key is None or not self._expect_peek(TokenType.COLON):
                return None

            self._next_token()
            value = self._parse_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self._peek_token_is(TokenType.RBRACE) and not self._expect_peek(TokenType.COMMA):
                return None

        if not self._expect_peek(TokenType.RBRACE):
            return None

        return HashLiteral(token=token, pairs=tuple(pairs))

    def _parse_expression_list(self, end: str) -> Optional[Tuple[Expression, ...]]:
        """Parse comma-separated expressions up to the end token"""
        items = []

        if self._peek_token_is(end):
            self._next_token()
            return ()

        self._next_token()
        item = self._parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            item = self._parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self._expect_peek(end):
            return None

        return tuple(items)

    # Parser utilities

    def _pull(self) -> Token:
        """Pull the next token from the stream; EOF once it runs dry"""
        return next(self._tokens, Token(TokenType.EOF, ""))

    def _next_token(self):
        """Advance the token window by one"""
        self.cur_token = self.peek_token
        if self.cur_token.type == TokenType.EOF:
            # Do not pull past the end of the stream
            self.peek_token = self.cur_token
        else:
            self.peek_token = self._pull()
        self._track_depth()

    def _track_depth(self):
        self._closed_brace = False
        if self._cur_token_is(TokenType.LBRACE):
            self._depth += 1
        elif self._cur_token_is(TokenType.RBRACE) and self._depth > 0:
            self._depth -= 1
            self._closed_brace = True

    def _synchronize(self):
        """
        Skip to the end of a failed top-level statement

        Stops at a ';', before a let/return, or on the brace that closes the
        block the failure happened in; tokens inside open braces are skipped.
        """
        nested = self._depth > 0 or self._closed_brace
        while not self._cur_token_is(TokenType.EOF):
            if self._depth == 0:
                if self._cur_token_is(TokenType.SEMICOLON):
                    return
                if nested and self._cur_token_is(TokenType.RBRACE):
                    if self._peek_token_is(TokenType.SEMICOLON):
                        self._next_token()
                    return
                if self._peek_token_is(TokenType.LET) or self._peek_token_is(TokenType.RETURN):
                    return
            self._next_token()
            nested = nested or self._depth > 0

    def _cur_token_is(self, token_type: str) -> bool:
        return self.cur_token.type == token_type

    def _peek_token_is(self, token_type: str) -> bool:
        return self.peek_token.type == token_type

    def _expect_peek(self, token_type: str) -> bool:
        """Advance if the next token has the expected type, else record an error"""
        if self._peek_token_is(token_type):
            self._next_token()
            return True
        self._peek_error(token_type, self.peek_token)
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    def _peek_error(self, expected: str, got: Token):
        self._error(f"expected token {expected}, got {got.type}")

    def _no_prefix_parse_fn_error(self, token_type: str):
        self._error(f"no prefix parse function for token kind {token_type}")

    def _error(self, msg: str):
        logger.debug("parse error: %s", msg)
        self.errors.append(msg)


# ============================================================================
# Convenience Functions
# ============================================================================

def parse_program(tokens: Iterable[Token]) -> Tuple[Program, List[str]]:
    """
    Parse a token stream

    Returns:
        (program, diagnostics); diagnostics is empty when parsing succeeded
    """
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors


def parse(source: str) -> Tuple[Program, List[str]]:
    """
    Lex and parse Leopard source

    Example:
        >>> program, errors = parse('-a * b')
        >>> str(program)
        '((-a) * b)'
    """
    return parse_program(Lexer(source))


__all__ = ['Parser', 'Precedence', 'PRECEDENCES', 'parse_program', 'parse']
