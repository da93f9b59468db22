"""
arrowlang - a small scripting language with a tree-walking interpreter.

This module provides:
- Lexer: Tokenizes source code
- Parser: Builds the AST from a token source
- Interpreter: Evaluates the AST
- Errors: Diagnostics for every lexer, parser and runtime failure

Usage:
    from arrowlang import parse, Interpreter, BufferOutput

    source = '''
    fn fact(n) ->
        if n <= 1 -> 1 .
        else -> n * fact(n - 1) .
    .
    println("10! =", fact(10))
    '''
    out = BufferOutput()
    Interpreter(output=out).run(parse(source))
    print(out.getvalue())
"""

import logging
from importlib.metadata import PackageNotFoundError, version

from .tokens import (
    Token,
    TokenType,
    TokenSource,
    TokenStream,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    AstNode,
    Expression,
    Statement,
    Number,
    String,
    Bool,
    Nil,
    Identifier,
    BinaryOp,
    Unary,
    Call,
    Array,
    Compound,
    VarDecl,
    VarSet,
    ElifBranch,
    If,
    Function,
    Program,
    format_ast,
)

from .errors import (
    ArrowError,
    LexerError,
    ParserError,
    EvaluationError,
    NotFinishedStringError,
    UnrecognizedError,
    SyntaxError,
    NotImplementedError,
    TypeError,
    DivisionByZeroError,
    IncorrectArgNumberError,
    NotFoundVarError,
    NotFoundFunctionError,
    NotAFunctionError,
    StackDepthError,
    Diagnostic,
    ErrorSeverity,
    attach_source,
)

from .config import (
    InterpreterConfig,
    ConfigError,
    load_config,
    config_from_dict,
)

from .runtime import (
    Interpreter,
    run_source,
    Value,
    ValueKind,
    NIL,
    CallStack,
    BuiltinFunction,
    BuiltinRegistry,
    OutputSink,
    StreamOutput,
    BufferOutput,
)

try:
    __version__ = version("arrowlang")
except PackageNotFoundError:
    __version__ = "unknown"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'TokenSource',
    'TokenStream',
    'SourceLocation',
    'SourceSpan',
    'KEYWORDS',

    # Lexer
    'Lexer',
    'tokenize',

    # Parser
    'Parser',
    'parse',

    # AST nodes
    'AstNode',
    'Expression',
    'Statement',
    'Number',
    'String',
    'Bool',
    'Nil',
    'Identifier',
    'BinaryOp',
    'Unary',
    'Call',
    'Array',
    'Compound',
    'VarDecl',
    'VarSet',
    'ElifBranch',
    'If',
    'Function',
    'Program',
    'format_ast',

    # Errors
    'ArrowError',
    'LexerError',
    'ParserError',
    'EvaluationError',
    'NotFinishedStringError',
    'UnrecognizedError',
    'SyntaxError',
    'NotImplementedError',
    'TypeError',
    'DivisionByZeroError',
    'IncorrectArgNumberError',
    'NotFoundVarError',
    'NotFoundFunctionError',
    'NotAFunctionError',
    'StackDepthError',
    'Diagnostic',
    'ErrorSeverity',
    'attach_source',

    # Configuration
    'InterpreterConfig',
    'ConfigError',
    'load_config',
    'config_from_dict',

    # Runtime
    'Interpreter',
    'run_source',
    'Value',
    'ValueKind',
    'NIL',
    'CallStack',
    'BuiltinFunction',
    'BuiltinRegistry',
    'OutputSink',
    'StreamOutput',
    'BufferOutput',
]
