"""
Token types for the arrow language lexer.

Token type categories follow the error code ranges used by errors.py:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42, 3.75
    STRING = auto()             # "hello", 'hello'
    BOOL = auto()               # true, false
    NIL = auto()                # nil

    # --- Identifiers ---
    IDENTIFIER = auto()         # user-defined names

    # --- Keywords ---
    VAL = auto()                # val (declaration)
    IF = auto()                 # if
    ELIF = auto()               # elif
    ELSE = auto()               # else
    FN = auto()                 # fn (function definition)

    # --- Logical operators (keyword-based) ---
    AND = auto()                # and
    OR = auto()                 # or

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /
    CARET = auto()              # ^ (power)

    # --- Comparison operators ---
    LT = auto()                 # <
    GT = auto()                 # >
    LE = auto()                 # <=
    GE = auto()                 # >=
    EQ = auto()                 # ==
    NE = auto()                 # !=

    # --- Unary ---
    BANG = auto()               # !

    # --- Assignment ---
    ASSIGN = auto()             # =

    # --- Delimiters ---
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACKET = auto()           # [
    RBRACKET = auto()           # ]
    COMMA = auto()              # ,
    SEMICOLON = auto()          # ; (optional statement separator)
    ARROW = auto()              # -> (opens a block)
    DOT = auto()                # . (closes a block)

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"

    @classmethod
    def at(cls, location: SourceLocation) -> "SourceSpan":
        """Zero-width span at a single location."""
        return cls(location, location)


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # float for NUMBER, str for STRING/IDENTIFIER, bool for BOOL
    lexeme: str             # The original source text
    span: SourceSpan        # Location in source

    @property
    def kind(self) -> TokenType:
        return self.type

    @property
    def position(self) -> SourceLocation:
        return self.span.start

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.STRING,
                         TokenType.IDENTIFIER, TokenType.BOOL):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Keyword mapping - both lowercase and capitalised spellings are keywords
KEYWORDS: dict[str, TokenType] = {
    "val": TokenType.VAL,
    "if": TokenType.IF,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
    "fn": TokenType.FN,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "true": TokenType.BOOL,
    "false": TokenType.BOOL,
    "nil": TokenType.NIL,
}
KEYWORDS.update({word.capitalize(): token_type for word, token_type in list(KEYWORDS.items())})


# Human-readable spelling of each token type, used in diagnostics
TOKEN_SPELLING: dict[TokenType, str] = {
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.STAR: "'*'",
    TokenType.SLASH: "'/'",
    TokenType.CARET: "'^'",
    TokenType.LT: "'<'",
    TokenType.GT: "'>'",
    TokenType.LE: "'<='",
    TokenType.GE: "'>='",
    TokenType.EQ: "'=='",
    TokenType.NE: "'!='",
    TokenType.BANG: "'!'",
    TokenType.ASSIGN: "'='",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.LBRACKET: "'['",
    TokenType.RBRACKET: "']'",
    TokenType.COMMA: "','",
    TokenType.SEMICOLON: "';'",
    TokenType.ARROW: "'->'",
    TokenType.DOT: "'.'",
    TokenType.EOF: "end of input",
}


def describe(token_type: TokenType) -> str:
    """Spell a token type for an error message."""
    return TOKEN_SPELLING.get(token_type, token_type.name)


class TokenSource(ABC):
    """
    Pull interface consumed by the parser.

    Each call to next_token() yields the next token; the stream never
    rewinds and always ends with (and keeps yielding) an EOF token.
    """

    @abstractmethod
    def next_token(self) -> Token:
        """Return the next token in the stream."""

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


class TokenStream(TokenSource):
    """Adapts an already-tokenized sequence to the TokenSource interface."""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self._last: Optional[Token] = None

    def next_token(self) -> Token:
        if self._last is not None and self._last.type == TokenType.EOF:
            return self._last
        try:
            token = next(self._tokens)
        except StopIteration:
            # Synthesize the terminal token right after the last one seen
            end = self._last.span.end if self._last else SourceLocation(1, 1, 0)
            token = Token(TokenType.EOF, None, "", SourceSpan.at(end))
        self._last = token
        return token
