"""
Built-in function registry for the interpreter.

Built-ins are looked up by name before user functions. Each implementation
is called as `impl(interpreter, *args)` with already-evaluated Values and
returns a Value (or None, which the caller turns into nil).
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
import math

from .values import (
    Value, ValueKind, NIL,
    number_val, string_val, array_val,
    to_number, to_string,
)
from ..errors import IncorrectArgNumberError, TypeError
from ..tokens import SourceSpan


@dataclass
class BuiltinFunction:
    """
    A built-in function with its implementation and arity.

    `arity` of None means the function accepts any number of arguments.
    """
    name: str
    implementation: Callable[..., Optional[Value]]
    arity: Optional[int] = None
    doc: str = ""


class BuiltinRegistry:
    """
    Registry of built-in functions.

    Functions are registered by name and can be looked up for execution.
    """

    def __init__(self, register_defaults: bool = True):
        self._functions: Dict[str, BuiltinFunction] = {}
        if register_defaults:
            self._register_all()

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def names(self) -> List[str]:
        return sorted(self._functions)

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: BuiltinFunction) -> None:
        """Register a function, replacing any previous one of the same name."""
        self._functions[func.name] = func

    def call(self, name: str, interpreter: Any, args: List[Value],
             span: Optional[SourceSpan] = None) -> Value:
        """Validate arity, invoke the built-in, and normalise its result."""
        func = self._functions[name]
        if func.arity is not None and func.arity != len(args):
            raise IncorrectArgNumberError(func.arity, len(args), func, span)
        result = func.implementation(interpreter, *args)
        return NIL if result is None else result

    def _register_all(self) -> None:
        """Register all default built-in functions."""
        self._register_io_functions()
        self._register_conversion_functions()
        self._register_array_functions()
        self._register_math_functions()

    # --- I/O ---

    def _register_io_functions(self) -> None:

        def _print(interp, *args: Value) -> None:
            interp.output.write(" ".join(to_string(a) for a in args))

        def _println(interp, *args: Value) -> None:
            interp.output.write(" ".join(to_string(a) for a in args) + "\n")

        self.register(BuiltinFunction("print", _print, None, "Write values separated by spaces"))
        self.register(BuiltinFunction("println", _println, None, "Like print, followed by a newline"))

    # --- Conversions ---

    def _register_conversion_functions(self) -> None:

        def _str(interp, value: Value) -> Value:
            return string_val(to_string(value))

        def _num(interp, value: Value) -> Value:
            if value.kind == ValueKind.NUMBER:
                return value
            if value.kind == ValueKind.STRING:
                try:
                    return number_val(float(value.data.strip()))
                except ValueError:
                    pass
            raise TypeError("numeric string", value, "num")

        def _type(interp, value: Value) -> Value:
            return string_val(value.kind.value)

        self.register(BuiltinFunction("str", _str, 1, "Display form of a value"))
        self.register(BuiltinFunction("num", _num, 1, "Parse a number from a string"))
        self.register(BuiltinFunction("type", _type, 1, "Kind name of a value"))

    # --- Arrays ---

    def _register_array_functions(self) -> None:

        def _len(interp, value: Value) -> Value:
            if value.kind in (ValueKind.ARRAY, ValueKind.STRING):
                return number_val(len(value.data))
            raise TypeError("array or string", value, "len")

        def _get(interp, array: Value, index: Value) -> Value:
            if array.kind != ValueKind.ARRAY:
                raise TypeError("array", array, "get")
            i = to_number(index, "get")
            if not i.is_integer() or not 0 <= i < len(array.data):
                raise TypeError(f"index in 0..{len(array.data) - 1}", index, "get")
            return array.data[int(i)]

        def _push(interp, array: Value, item: Value) -> Value:
            if array.kind != ValueKind.ARRAY:
                raise TypeError("array", array, "push")
            return array_val(array.data + (item,))

        self.register(BuiltinFunction("len", _len, 1, "Length of an array or string"))
        self.register(BuiltinFunction("get", _get, 2, "Element of an array by index"))
        self.register(BuiltinFunction("push", _push, 2, "New array with an element appended"))

    # --- Math ---

    def _register_math_functions(self) -> None:

        def _abs(interp, x: Value) -> Value:
            return number_val(abs(to_number(x, "abs")))

        def _floor(interp, x: Value) -> Value:
            n = to_number(x, "floor")
            if not math.isfinite(n):
                return x    # inf and nan have no integer part
            return number_val(math.floor(n))

        def _sqrt(interp, x: Value) -> Value:
            n = to_number(x, "sqrt")
            if n < 0:
                raise TypeError("non-negative number", x, "sqrt")
            return number_val(math.sqrt(n))

        self.register(BuiltinFunction("abs", _abs, 1))
        self.register(BuiltinFunction("floor", _floor, 1))
        self.register(BuiltinFunction("sqrt", _sqrt, 1))
