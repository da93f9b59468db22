"""
Runtime values for the interpreter.

A Value pairs a ValueKind tag with the Python data it carries. Arrays hold
tuples of Values, so binding an array to a new name copies it by value.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from ..errors import TypeError
from ..tokens import SourceSpan


class ValueKind(Enum):
    """Runtime type tags."""
    NUMBER = "number"
    STRING = "string"
    BOOL = "bool"
    FUNCTION = "function"
    ARRAY = "array"
    NIL = "nil"


@dataclass(frozen=True, eq=False)
class Value:
    """
    A runtime value.

    The `data` field holds a float, str, bool, tuple of Values, the
    Function AST node, or None for nil.
    """
    kind: ValueKind
    data: Any

    def __repr__(self) -> str:
        return f"Value({self.kind.name}, {self.data!r})"

    def __str__(self) -> str:
        return to_string(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return values_equal(self, other)

    def __hash__(self) -> int:
        if self.kind == ValueKind.FUNCTION:
            return hash((self.kind, id(self.data)))
        return hash((self.kind, self.data))


# Convenience constructors

def number_val(x: float) -> Value:
    """Create a number value."""
    return Value(ValueKind.NUMBER, float(x))


def string_val(s: str) -> Value:
    """Create a string value."""
    return Value(ValueKind.STRING, str(s))


def bool_val(b: bool) -> Value:
    """Create a boolean value."""
    return Value(ValueKind.BOOL, bool(b))


def array_val(items: Iterable[Value]) -> Value:
    """Create an array value from Values."""
    return Value(ValueKind.ARRAY, tuple(items))


def function_val(node: Any) -> Value:
    """Create a function value referencing its definition node."""
    return Value(ValueKind.FUNCTION, node)


NIL = Value(ValueKind.NIL, None)


def nil_val() -> Value:
    return NIL


# Coercions

def to_number(value: Value, operation: str, span: Optional[SourceSpan] = None) -> float:
    """Coerce to a number for `operation`, or raise TypeError."""
    if value.kind == ValueKind.NUMBER:
        return value.data
    raise TypeError("number", value, operation, span)


def to_bool(value: Value, operation: str, span: Optional[SourceSpan] = None) -> bool:
    """
    Coerce to a boolean for `operation`.

    Numbers are true when non-zero and nil is false; strings, arrays and
    functions have no truth value.
    """
    if value.kind == ValueKind.BOOL:
        return value.data
    if value.kind == ValueKind.NUMBER:
        return value.data != 0
    if value.kind == ValueKind.NIL:
        return False
    raise TypeError("bool", value, operation, span)


def format_number(x: float) -> str:
    """Integral numbers print without a trailing '.0'."""
    if math.isfinite(x) and x.is_integer():
        return str(int(x))
    return repr(x)


def to_string(value: Value) -> str:
    """Display form of any value."""
    if value.kind == ValueKind.STRING:
        return value.data
    if value.kind == ValueKind.NUMBER:
        return format_number(value.data)
    if value.kind == ValueKind.BOOL:
        return "true" if value.data else "false"
    if value.kind == ValueKind.NIL:
        return "nil"
    if value.kind == ValueKind.FUNCTION:
        return f"<fn {value.data.name}>"
    # Arrays: nested strings are quoted so ["a"] and [a] stay distinguishable
    parts = []
    for item in value.data:
        if item.kind == ValueKind.STRING:
            parts.append(f'"{item.data}"')
        else:
            parts.append(to_string(item))
    return "[" + ", ".join(parts) + "]"


def values_equal(left: Value, right: Value) -> bool:
    """Strict equality: same kind and same underlying value, no coercion."""
    if left.kind != right.kind:
        return False
    if left.kind == ValueKind.FUNCTION:
        return left.data is right.data
    if left.kind == ValueKind.ARRAY:
        return (len(left.data) == len(right.data)
                and all(values_equal(a, b) for a, b in zip(left.data, right.data)))
    return left.data == right.data
