"""
Leopard lexer

Turns source text into tokens on demand. The lexer never raises: characters it
does not understand, and string literals that never close, come out as ILLEGAL
tokens and are left for the parser to report.
"""

from typing import Iterator, List

from .tokens import Token, TokenType, lookup_ident


# Single-character tokens that never start a longer token
_SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.ASTERISK,
    '/': TokenType.SLASH,
    '<': TokenType.LT,
    '>': TokenType.GT,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    ':': TokenType.COLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
}

_DIGITS = frozenset('0123456789')
_IDENT_START = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_')
_IDENT_CHARS = _IDENT_START | _DIGITS
_ESCAPES = {'n': '\n', 't': '\t', '"': '"', '\\': '\\'}


class Lexer:
    """Tokenize Leopard source code"""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self._done = False

    def next_token(self) -> Token:
        """Read the next token; EOF once the source is exhausted"""
        self._skip_whitespace_and_comments()
        if self.pos >= len(self.source):
            return Token(TokenType.EOF, "")

        ch = self.source[self.pos]

        if ch in _DIGITS:
            return self._read_number()
        if ch == '"':
            return self._read_string()
        if ch in _IDENT_START:
            return self._read_identifier()

        if ch == '=':
            if self._peek_char() == '=':
                self.pos += 2
                return Token(TokenType.EQ, '==')
            self.pos += 1
            return Token(TokenType.ASSIGN, ch)
        if ch == '!':
            if self._peek_char() == '=':
                self.pos += 2
                return Token(TokenType.NOT_EQ, '!=')
            self.pos += 1
            return Token(TokenType.BANG, ch)

        self.pos += 1
        if ch in _SINGLE_CHAR_TOKENS:
            return Token(_SINGLE_CHAR_TOKENS[ch], ch)
        return Token(TokenType.ILLEGAL, ch)

    def tokenize(self) -> List[Token]:
        """Tokenize entire source, EOF token included"""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        while not self._done:
            token = self.next_token()
            if token.type == TokenType.EOF:
                self._done = True
            yield token

    def _peek_char(self) -> str:
        if self.pos + 1 < len(self.source):
            return self.source[self.pos + 1]
        return ''

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and comments"""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in ' \t\r\n':
                self.pos += 1
            elif ch == '#':
                # Skip comment until end of line
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self.pos += 1
            else:
                break

    def _read_number(self) -> Token:
        """Read integer literal"""
        start = self.pos
        while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
            self.pos += 1
        return Token(TokenType.INT, self.source[start:self.pos])

    def _read_string(self) -> Token:
        """Read string literal"""
        self.pos += 1  # Skip opening quote
        start = self.pos
        chars = []

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            ch = self.source[self.pos]
            if ch == '\\' and self.pos + 1 < len(self.source):
                escaped = self.source[self.pos + 1]
                chars.append(_ESCAPES.get(escaped, '\\' + escaped))
                self.pos += 2
            else:
                chars.append(ch)
                self.pos += 1

        if self.pos >= len(self.source):
            return Token(TokenType.ILLEGAL, '"' + self.source[start:])

        self.pos += 1  # Skip closing quote
        return Token(TokenType.STRING, ''.join(chars))

    def _read_identifier(self) -> Token:
        """Read identifier or keyword"""
        start = self.pos
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in _IDENT_CHARS:
                self.pos += 1
            else:
                break

        text = self.source[start:self.pos]
        return Token(lookup_ident(text), text)


def tokenize(source: str) -> List[Token]:
    """Tokenize source (convenience function)"""
    return Lexer(source).tokenize()


__all__ = ['Lexer', 'tokenize']
