"""
Lexer for the arrow language.

Converts source text into a stream of tokens for the parser.
Supports:
- Single-line comments (#)
- String literals (single or double quoted) with escape sequences
- Number literals with an optional fractional part
- Keywords in lowercase and capitalised spelling
- The '->' / '.' block delimiters and all operators

The lexer is a TokenSource: the parser pulls one token at a time.
"""

from typing import List, Optional
from .tokens import (
    Token, TokenType, TokenSource, SourceLocation, SourceSpan, KEYWORDS,
)
from .errors import NotFinishedStringError, UnrecognizedError


ESCAPE_CHARS = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
    "'": "'",
    '0': '\0',
}

SINGLE_CHAR_TOKENS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '^': TokenType.CARET,
    '<': TokenType.LT,
    '>': TokenType.GT,
    '=': TokenType.ASSIGN,
    '!': TokenType.BANG,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    '.': TokenType.DOT,
}


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer(TokenSource):
    """
    Tokenizer for the arrow language.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or pull tokens one at a time:
        lexer = Lexer(source_code)
        token = lexer.next_token()
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _span(self, start: SourceLocation) -> SourceSpan:
        """Create a span from start to current position."""
        return SourceSpan(start, self._location())

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if not self._is_at_end() and self._peek() == expected:
            self._advance()
            return True
        return False

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_whitespace_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch in ' \t\r\n':
                self._advance()
            elif ch == '#':
                while not self._is_at_end() and self._peek() != '\n':
                    self._advance()
            else:
                break

    def _make_token(self, token_type: TokenType, value, start: SourceLocation) -> Token:
        """Create a token spanning from start to the current position."""
        lexeme = self.source[start.offset:self.pos]
        return Token(token_type, value, lexeme, self._span(start))

    def _scan_string(self) -> Token:
        """Scan a string literal."""
        start = self._location()
        quote = self._advance()  # consume opening quote

        chars = []
        while not self._is_at_end() and self._peek() != quote:
            if self._peek() == '\\':
                chars.append(self._scan_escape_sequence())
            else:
                chars.append(self._advance())

        if self._is_at_end():
            raise NotFinishedStringError(self._span(start))

        self._advance()  # consume closing quote
        return self._make_token(TokenType.STRING, ''.join(chars), start)

    def _scan_escape_sequence(self) -> str:
        """Parse an escape sequence starting at the backslash."""
        esc_start = self._location()
        self._advance()  # consume backslash
        if self._is_at_end():
            raise UnrecognizedError("\\", self._span(esc_start))
        ch = self._advance()
        if ch in ESCAPE_CHARS:
            return ESCAPE_CHARS[ch]
        raise UnrecognizedError(f"\\{ch}", self._span(esc_start))

    def _scan_number(self) -> Token:
        """Scan a numeric literal, keeping any fractional part."""
        start = self._location()

        while _is_digit(self._peek()):
            self._advance()

        # A '.' belongs to the number only when a digit follows; otherwise
        # it closes a block.
        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()

        lexeme = self.source[start.offset:self.pos]
        return self._make_token(TokenType.NUMBER, float(lexeme), start)

    def _scan_identifier_or_keyword(self) -> Token:
        """Scan an identifier or keyword."""
        start = self._location()

        while self._peek().isalnum() or self._peek() == '_':
            self._advance()

        lexeme = self.source[start.offset:self.pos]

        token_type = KEYWORDS.get(lexeme)
        if token_type is None:
            return self._make_token(TokenType.IDENTIFIER, lexeme, start)
        if token_type == TokenType.BOOL:
            return self._make_token(token_type, lexeme.lower() == "true", start)
        if token_type == TokenType.NIL:
            return self._make_token(token_type, None, start)
        return self._make_token(token_type, lexeme, start)

    def next_token(self) -> Token:
        """Scan the next token; EOF is returned repeatedly once reached."""
        self._skip_whitespace_and_comments()

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenType.EOF, None, start)

        ch = self._peek()

        if ch in '"\'':
            return self._scan_string()

        if _is_digit(ch):
            return self._scan_number()

        if ch.isalpha() or ch == '_':
            return self._scan_identifier_or_keyword()

        self._advance()

        # Two-character operators
        if ch == '-' and self._match('>'):
            return self._make_token(TokenType.ARROW, "->", start)
        if ch == '=' and self._match('='):
            return self._make_token(TokenType.EQ, "==", start)
        if ch == '!' and self._match('='):
            return self._make_token(TokenType.NE, "!=", start)
        if ch == '<' and self._match('='):
            return self._make_token(TokenType.LE, "<=", start)
        if ch == '>' and self._match('='):
            return self._make_token(TokenType.GE, ">=", start)

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch], ch, start)

        raise UnrecognizedError(ch, self._span(start))

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        return list(self)


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for error messages

    Returns:
        List of tokens, ending with EOF

    Raises:
        LexerError: If tokenization fails
    """
    return Lexer(source, filename).tokenize()
