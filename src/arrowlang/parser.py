"""
Recursive descent parser for the arrow language.

Pulls tokens from a TokenSource one at a time and builds the AST.
"""

import logging
from typing import Iterable, List, Optional, Union

from .tokens import Token, TokenType, TokenSource, TokenStream, SourceSpan, describe
from .lexer import Lexer
from .ast import (
    AstNode, Expression,
    Number, String, Bool, Nil, Identifier, BinaryOp, Unary, Call, Array,
    Compound, VarDecl, VarSet, ElifBranch, If, Function, Program,
)
from .errors import SyntaxError

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser with a single token of lookahead.

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse()

    Expression precedence, lowest to highest:
        Lowest:  and or            (left fold)
                 < > <= >= == !=   (at most one, no chaining)
                 + -
                 * /
                 ^                 (left fold)
        Highest: unary - + !
    """

    COMPARISON = (
        TokenType.LT, TokenType.GT, TokenType.LE, TokenType.GE,
        TokenType.EQ, TokenType.NE,
    )
    LOGICAL = (TokenType.AND, TokenType.OR)
    ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
    MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH)
    UNARY = (TokenType.MINUS, TokenType.PLUS, TokenType.BANG)

    def __init__(self, tokens: TokenSource):
        self.tokens = tokens
        self.current: Token = tokens.next_token()
        self.previous: Optional[Token] = None

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _check(self, *token_types: TokenType) -> bool:
        """Check if the current token is any of the given types."""
        return self.current.type in token_types

    def _advance(self) -> Token:
        """Consume and return the current token."""
        self.previous = self.current
        if self.current.type != TokenType.EOF:
            self.current = self.tokens.next_token()
        return self.previous

    def eat(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """Consume a token of the given type, or raise SyntaxError."""
        if self.current.type == token_type:
            return self._advance()
        self._error(expected or describe(token_type))

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume the current token if it matches any of the given types."""
        if self.current.type in token_types:
            return self._advance()
        return None

    def _skip_separators(self) -> None:
        while self._match(TokenType.SEMICOLON):
            pass

    def _error(self, expected: str) -> None:
        raise SyntaxError(expected, describe(self.current.type), self.current.span)

    def _span_from(self, start: Token) -> SourceSpan:
        """Span from the start token to the end of the last consumed token."""
        return SourceSpan(start.span.start, self.previous.span.end)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse a full expression, including logical operators."""
        left = self._parse_comparison()
        while self._check(*self.LOGICAL):
            operator = self._advance().type
            right = self._parse_comparison()
            left = BinaryOp(SourceSpan(left.span.start, right.span.end), operator, left, right)
        return left

    def _parse_comparison(self) -> Expression:
        left = self._parse_additive()
        if self._check(*self.COMPARISON):
            operator = self._advance().type
            right = self._parse_additive()
            left = BinaryOp(SourceSpan(left.span.start, right.span.end), operator, left, right)
        return left

    def _parse_additive(self) -> Expression:
        left = self._parse_multiplicative()
        while self._check(*self.ADDITIVE):
            operator = self._advance().type
            right = self._parse_multiplicative()
            left = BinaryOp(SourceSpan(left.span.start, right.span.end), operator, left, right)
        return left

    def _parse_multiplicative(self) -> Expression:
        left = self._parse_power()
        while self._check(*self.MULTIPLICATIVE):
            operator = self._advance().type
            right = self._parse_power()
            left = BinaryOp(SourceSpan(left.span.start, right.span.end), operator, left, right)
        return left

    def _parse_power(self) -> Expression:
        left = self._parse_factor()
        while self._check(TokenType.CARET):
            operator = self._advance().type
            right = self._parse_factor()
            left = BinaryOp(SourceSpan(left.span.start, right.span.end), operator, left, right)
        return left

    def _parse_factor(self) -> Expression:
        """Parse literals, names, calls, arrays, groups and unary operators."""
        token = self.current

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self.eat(TokenType.RPAREN)
            return expr

        if token.type in self.UNARY:
            self._advance()
            operand = self._parse_factor()
            return Unary(SourceSpan(token.span.start, operand.span.end), token.type, operand)

        if token.type == TokenType.IDENTIFIER:
            return self._parse_name()

        if token.type == TokenType.NUMBER:
            self._advance()
            return Number(token.span, token.value)

        if token.type == TokenType.STRING:
            self._advance()
            return String(token.span, token.value)

        if token.type == TokenType.BOOL:
            self._advance()
            return Bool(token.span, token.value)

        if token.type == TokenType.NIL:
            self._advance()
            return Nil(token.span)

        if token.type == TokenType.LBRACKET:
            return self._parse_array()

        self._error("expression")

    def _parse_name(self) -> Expression:
        """An identifier, or a call when the next token is '('."""
        name = self.eat(TokenType.IDENTIFIER)
        if not self._check(TokenType.LPAREN):
            return Identifier(name.span, name.value)

        arguments = self._parse_delimited(TokenType.LPAREN, TokenType.RPAREN)
        return Call(self._span_from(name), name.value, arguments)

    def _parse_array(self) -> Array:
        start = self.current
        elements = self._parse_delimited(TokenType.LBRACKET, TokenType.RBRACKET)
        return Array(self._span_from(start), elements)

    def _parse_delimited(self, open_type: TokenType, close_type: TokenType) -> tuple:
        """Parse comma-separated expressions between a pair of delimiters."""
        self.eat(open_type)
        items: List[Expression] = []
        if not self._check(close_type):
            items.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                items.append(self._parse_expression())
        self.eat(close_type, f"',' or {describe(close_type)}")
        return tuple(items)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> AstNode:
        """Parse one statement; function definitions are handled by parse()."""
        if self._check(TokenType.VAL):
            stmt = self._parse_var_decl()
        elif self._check(TokenType.IF):
            stmt = self._parse_if()
        elif self._check(TokenType.ARROW):
            stmt = self._parse_compound()
        else:
            stmt = self._parse_expression()
            if isinstance(stmt, Identifier) and self._check(TokenType.ASSIGN):
                stmt = self._parse_var_set(stmt)
        self._skip_separators()
        return stmt

    def _parse_var_decl(self) -> VarDecl:
        start = self.eat(TokenType.VAL)
        name = self.eat(TokenType.IDENTIFIER, "variable name").value
        self.eat(TokenType.ASSIGN)
        value = self._parse_expression()
        return VarDecl(self._span_from(start), name, value)

    def _parse_var_set(self, target: Identifier) -> VarSet:
        self.eat(TokenType.ASSIGN)
        value = self._parse_expression()
        return VarSet(SourceSpan(target.span.start, value.span.end), target.name, value)

    def _parse_compound(self) -> Compound:
        """Parse a block: '->' statements '.'"""
        start = self.eat(TokenType.ARROW)
        statements: List[AstNode] = []
        self._skip_separators()
        while not self._check(TokenType.DOT, TokenType.EOF):
            statements.append(self._parse_statement())
        self.eat(TokenType.DOT, "'.' to close the block")
        return Compound(self._span_from(start), tuple(statements))

    def _parse_if(self) -> If:
        start = self.eat(TokenType.IF)
        condition = self._parse_expression()
        then_block = self._parse_compound()

        elif_branches: List[ElifBranch] = []
        while self._check(TokenType.ELIF):
            elif_start = self._advance()
            elif_condition = self._parse_expression()
            elif_block = self._parse_compound()
            elif_branches.append(ElifBranch(self._span_from(elif_start), elif_condition, elif_block))

        else_block = None
        if self._match(TokenType.ELSE):
            else_block = self._parse_compound()

        return If(self._span_from(start), condition, then_block, tuple(elif_branches), else_block)

    def _parse_function(self) -> Function:
        """Parse 'fn name(p, q) -> ... .' (parameter list optional)."""
        start = self.eat(TokenType.FN)
        name = self.eat(TokenType.IDENTIFIER, "function name").value

        params: List[str] = []
        if self._match(TokenType.LPAREN):
            if not self._check(TokenType.RPAREN):
                params.append(self.eat(TokenType.IDENTIFIER, "parameter name").value)
                while self._match(TokenType.COMMA):
                    params.append(self.eat(TokenType.IDENTIFIER, "parameter name").value)
            self.eat(TokenType.RPAREN, "',' or ')'")

        body = self._parse_compound()
        self._skip_separators()
        return Function(self._span_from(start), name, tuple(params), body)

    def parse(self) -> Program:
        """Parse the whole token stream into a Program."""
        start = self.current
        statements: List[AstNode] = []
        self._skip_separators()
        while not self._check(TokenType.EOF):
            if self._check(TokenType.FN):
                statements.append(self._parse_function())
            else:
                statements.append(self._parse_statement())
        end = self.eat(TokenType.EOF)

        logger.debug("parsed %d top-level statement(s)", len(statements))
        return Program(SourceSpan(start.span.start, end.span.end), tuple(statements))


def parse(source: Union[str, TokenSource, Iterable[Token]],
          filename: Optional[str] = None) -> Program:
    """
    Convenience function to parse a program.

    Args:
        source: Source text, a TokenSource, or an iterable of tokens
        filename: Optional filename for error messages (source text only)

    Returns:
        The Program node

    Raises:
        LexerError: If tokenization fails
        SyntaxError: If parsing fails
    """
    if isinstance(source, str):
        token_source: TokenSource = Lexer(source, filename)
    elif isinstance(source, TokenSource):
        token_source = source
    else:
        token_source = TokenStream(source)
    return Parser(token_source).parse()
