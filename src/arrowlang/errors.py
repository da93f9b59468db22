"""
Language exceptions and error handling.

Error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors

Every error is an exception carrying a Diagnostic plus the structured
fields of its kind, so hosts can render a message or inspect the data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional
from .tokens import SourceSpan, SourceLocation


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass
class Diagnostic:
    """A single diagnostic message (error, warning, etc.)."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: Optional[SourceSpan] = None
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        header = f"{self.severity.value}[{self.code}]: {self.message}"
        if self.span is not None:
            header = f"{self.span.start}: {header}"
        parts.append(header)

        # Source line with caret
        if show_source and self.span is not None and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        result = {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "hints": self.hints,
        }
        if self.span is not None:
            result["range"] = {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            }
        return result


def _error(code: str, message: str, span: Optional[SourceSpan] = None,
           hints: Optional[List[str]] = None) -> Diagnostic:
    return Diagnostic(
        code=code,
        message=message,
        severity=ErrorSeverity.ERROR,
        span=span,
        hints=hints or [],
    )


class ArrowError(Exception):
    """Base exception for all language errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    @property
    def code(self) -> str:
        return self.diagnostic.code

    def __str__(self) -> str:
        return self.diagnostic.format()


class LexerError(ArrowError):
    """Error during lexical analysis (E0xx)."""
    pass


class ParserError(ArrowError):
    """Error during parsing (E1xx)."""
    pass


class EvaluationError(ArrowError):
    """Error during evaluation (E4xx)."""
    pass


# --- Lexer errors ---

class NotFinishedStringError(LexerError):
    """E001: Unterminated string literal."""

    def __init__(self, span: SourceSpan):
        self.position = span.start
        super().__init__(_error(
            "E001", "unterminated string literal", span,
            hints=["string literals must be closed with matching quotes"],
        ))


class UnrecognizedError(LexerError):
    """E002: Unknown character or escape sequence."""

    def __init__(self, unrecognizable: str, span: SourceSpan):
        self.unrecognizable = unrecognizable
        self.position = span.start
        super().__init__(_error("E002", f"unrecognized input '{unrecognizable}'", span))


# --- Parser errors ---

class SyntaxError(ParserError):
    """E101: Unexpected token."""

    def __init__(self, expected: str, got: str, span: SourceSpan):
        self.expected = expected
        self.got = got
        self.position = span.start
        super().__init__(_error("E101", f"expected {expected}, found {got}", span))


# --- Runtime errors ---

class NotImplementedError(EvaluationError):
    """E400: Node kind with no evaluation rule."""

    def __init__(self, node: Any):
        self.node = node
        span = getattr(node, "span", None)
        super().__init__(_error(
            "E400", f"no evaluation rule for {node.__class__.__name__}", span,
        ))


class TypeError(EvaluationError):
    """E401: Value could not be coerced for an operation."""

    def __init__(self, expected: str, got: Any, operation: str,
                 span: Optional[SourceSpan] = None):
        self.expected = expected
        self.got = got
        self.operation = operation
        kind = getattr(getattr(got, "kind", None), "value", type(got).__name__)
        super().__init__(_error(
            "E401",
            f"'{operation}' expected {expected}, found {kind} {got}",
            span,
        ))


class DivisionByZeroError(EvaluationError):
    """E402: Right operand of a division is zero."""

    def __init__(self, span: Optional[SourceSpan] = None):
        self.position: Optional[SourceLocation] = span.start if span else None
        super().__init__(_error("E402", "division by zero", span))


class IncorrectArgNumberError(EvaluationError):
    """E403: Call site argument count does not match the callee."""

    def __init__(self, expected: int, got: int, function: Any,
                 span: Optional[SourceSpan] = None):
        self.expected = expected
        self.got = got
        self.function = function
        name = getattr(function, "name", function)
        super().__init__(_error(
            "E403",
            f"'{name}' takes {expected} argument(s) but {got} were given",
            span,
        ))


class NotFoundVarError(EvaluationError):
    """E404: Read or assignment of an undeclared variable."""

    def __init__(self, name: str, span: Optional[SourceSpan] = None):
        self.name = name
        self.position: Optional[SourceLocation] = span.start if span else None
        super().__init__(_error(
            "E404", f"variable '{name}' not found", span,
            hints=["declare it first with 'val name = ...'"],
        ))


class NotFoundFunctionError(EvaluationError):
    """E405: Call to a name that is neither a built-in nor a declared function."""

    def __init__(self, name: str, span: Optional[SourceSpan] = None):
        self.name = name
        self.message = f"function '{name}' not found"
        super().__init__(_error("E405", self.message, span))


class NotAFunctionError(EvaluationError):
    """E406: Call target resolved to a value that is not a function."""

    def __init__(self, value: Any, name: str = "", span: Optional[SourceSpan] = None):
        self.value = value
        self.name = name
        super().__init__(_error("E406", f"'{name}' is not a function (it is {value})", span))


class StackDepthError(EvaluationError):
    """
    E407: Evaluation went too deep.

    Either the call stack grew past the configured depth, or an expression
    was nested too deeply to evaluate (`nesting=True`).
    """

    def __init__(self, limit: int, span: Optional[SourceSpan] = None,
                 nesting: bool = False):
        self.limit = limit
        self.nesting = nesting
        if nesting:
            diagnostic = _error(
                "E407", "program is nested too deeply to evaluate", span,
                hints=["split long or deeply nested expressions into several statements"],
            )
        else:
            diagnostic = _error(
                "E407", f"maximum call depth of {limit} exceeded", span,
                hints=["check for unbounded recursion"],
            )
        super().__init__(diagnostic)


def attach_source(error: ArrowError, source: str) -> ArrowError:
    """Fill in the offending source line so the diagnostic can show a caret."""
    span = error.diagnostic.span
    if span is not None:
        lines = source.splitlines()
        if 1 <= span.start.line <= len(lines):
            error.diagnostic.source_line = lines[span.start.line - 1]
    return error
