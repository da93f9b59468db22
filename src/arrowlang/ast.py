"""
Abstract Syntax Tree (AST) node definitions for the arrow language.

The parser builds the tree once; the interpreter only reads it. Nodes are
frozen dataclasses holding tuples, so a function body can be walked again
on every call without any risk of the previous call having changed it.
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple, Union, Any, List
from .tokens import SourceSpan, TokenType


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class AstNode:
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting


@dataclass(frozen=True)
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass(frozen=True)
class Statement(AstNode):
    """Base class for nodes that only appear in statement position."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Number(Expression):
    """A numeric literal."""
    value: float


@dataclass(frozen=True)
class String(Expression):
    """A string literal."""
    value: str


@dataclass(frozen=True)
class Bool(Expression):
    """A boolean literal."""
    value: bool


@dataclass(frozen=True)
class Nil(Expression):
    """The nil literal."""
    pass


@dataclass(frozen=True)
class Identifier(Expression):
    """A variable reference."""
    name: str


@dataclass(frozen=True)
class BinaryOp(Expression):
    """A binary operation (e.g., a + b, x and y)."""
    operator: TokenType  # Includes AND, OR for logical operators
    left: Expression
    right: Expression


@dataclass(frozen=True)
class Unary(Expression):
    """A unary operation (-x, +x, !x)."""
    operator: TokenType
    operand: Expression


@dataclass(frozen=True)
class Call(Expression):
    """A call by name (e.g., add(1, 2))."""
    name: str
    arguments: Tuple[Expression, ...]


@dataclass(frozen=True)
class Array(Expression):
    """An array literal (e.g., [1, "two", true])."""
    elements: Tuple[Expression, ...]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Compound(Statement):
    """A block of statements delimited by '->' and '.'."""
    statements: Tuple[AstNode, ...]


@dataclass(frozen=True)
class VarDecl(Statement):
    """A variable declaration: val name = value."""
    name: str
    value: Expression


@dataclass(frozen=True)
class VarSet(Statement):
    """An assignment to an existing variable: name = value."""
    name: str
    value: Expression


@dataclass(frozen=True)
class ElifBranch(AstNode):
    """An elif branch of an if statement."""
    condition: Expression
    block: Compound


@dataclass(frozen=True)
class If(Statement):
    """
    An if statement.

    Syntax:
        if condition -> ... .
        elif condition -> ... .
        else -> ... .
    """
    condition: Expression
    then_block: Compound
    elif_branches: Tuple[ElifBranch, ...] = ()
    else_block: Optional[Compound] = None


@dataclass(frozen=True)
class Function(Statement):
    """
    A function definition.

    Syntax:
        fn name(param1, param2) -> ... .
    """
    name: str
    params: Tuple[str, ...]
    body: Compound


@dataclass(frozen=True)
class Program(AstNode):
    """A complete program: the top-level statements in source order."""
    statements: Tuple[AstNode, ...]


Node = Union[Expression, Statement, Program, ElifBranch]


# =============================================================================
# Debug Helpers
# =============================================================================

def _format_into(node: Any, indent: int, lines: List[str], label: str = "") -> None:
    pad = "  " * indent
    prefix = f"{label}: " if label else ""
    if not isinstance(node, AstNode):
        lines.append(f"{pad}{prefix}{node!r}")
        return

    lines.append(f"{pad}{prefix}{node.__class__.__name__}")
    for f in fields(node):
        if f.name == "span":
            continue
        value = getattr(node, f.name)
        if isinstance(value, AstNode):
            _format_into(value, indent + 1, lines, f.name)
        elif isinstance(value, tuple) and any(isinstance(v, AstNode) for v in value):
            lines.append(f"{pad}  {f.name}: [")
            for item in value:
                _format_into(item, indent + 2, lines)
            lines.append(f"{pad}  ]")
        elif isinstance(value, TokenType):
            lines.append(f"{pad}  {f.name}: {value.name}")
        elif value is not None:
            lines.append(f"{pad}  {f.name}: {value!r}")


def format_ast(node: AstNode) -> str:
    """Render an AST as an indented outline for debugging."""
    lines: List[str] = []
    _format_into(node, 0, lines)
    return "\n".join(lines)
