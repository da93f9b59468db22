"""
Tests for built-in functions and the registry.
"""

import io
import math

import pytest

from arrowlang import (
    parse, Interpreter, BufferOutput, StreamOutput,
    BuiltinFunction, BuiltinRegistry, TypeError, IncorrectArgNumberError,
)
from arrowlang.runtime import NIL, number_val, string_val, bool_val, array_val


def run(source, builtins=None):
    out = BufferOutput()
    value = Interpreter(output=out, builtins=builtins).run(parse(source))
    return value, out.getvalue()


class TestRegistry:
    """BuiltinRegistry behavior."""

    def test_defaults(self):
        """The default set is registered."""
        registry = BuiltinRegistry()
        for name in ("print", "println", "len", "str", "num", "type",
                     "get", "push", "abs", "floor", "sqrt"):
            assert name in registry

    def test_empty_registry(self):
        """Defaults can be left out."""
        assert BuiltinRegistry(register_defaults=False).names() == []

    def test_register_custom(self):
        """Hosts can add their own functions."""
        registry = BuiltinRegistry()
        registry.register(BuiltinFunction(
            "twice", lambda interp, v: number_val(v.data * 2), 1))
        value, _ = run("twice(21)", registry)
        assert value == number_val(42)

    def test_none_result_is_nil(self):
        """A built-in returning None evaluates to nil."""
        registry = BuiltinRegistry(register_defaults=False)
        registry.register(BuiltinFunction("noop", lambda interp: None, 0))
        value, _ = run("noop()", registry)
        assert value is NIL

    def test_builtin_can_call_back(self):
        """Built-ins receive the interpreter and may call user functions."""
        registry = BuiltinRegistry()

        def apply(interp, fn, arg):
            return interp.call_function(fn.data, [arg])

        registry.register(BuiltinFunction("apply", apply, 2))
        value, _ = run("fn sq(x) -> x * x .\napply(sq, 5)", registry)
        assert value == number_val(25)

    def test_arity_checked(self):
        """Fixed-arity built-ins reject other argument counts."""
        with pytest.raises(IncorrectArgNumberError) as exc_info:
            run('len("a", "b")')
        assert exc_info.value.expected == 1
        assert exc_info.value.got == 2

    def test_get_function(self):
        """Lookup by name."""
        registry = BuiltinRegistry()
        assert registry.get_function("len").arity == 1
        assert registry.get_function("missing") is None


class TestOutput:
    """print / println."""

    def test_print(self):
        """print joins with spaces and adds no newline."""
        value, output = run('print("a", 1, true, nil)')
        assert output == "a 1 true nil"
        assert value is NIL

    def test_println(self):
        """println ends with a newline."""
        _, output = run('println("x")\nprintln()')
        assert output == "x\n\n"

    def test_stream_output(self):
        """StreamOutput writes to its stream."""
        stream = io.StringIO()
        Interpreter(output=StreamOutput(stream)).run(parse('print("hey")'))
        assert stream.getvalue() == "hey"

    def test_buffer_clear(self):
        """BufferOutput can be reset."""
        out = BufferOutput()
        out.write("abc")
        out.clear()
        assert out.getvalue() == ""


class TestConversions:
    """str / num / type."""

    def test_str(self):
        """str gives the display form."""
        assert run("str(3)")[0] == string_val("3")
        assert run("str([1, 2])")[0] == string_val("[1, 2]")

    def test_num(self):
        """num parses strings."""
        assert run('num("2.5")')[0] == number_val(2.5)
        assert run("num(4)")[0] == number_val(4)

    def test_num_rejects(self):
        """Unparsable strings are a type error."""
        with pytest.raises(TypeError):
            run('num("abc")')

    @pytest.mark.parametrize("source,kind", [
        ("1", "number"), ('"s"', "string"), ("true", "bool"),
        ("nil", "nil"), ("[]", "array"),
    ])
    def test_type(self, source, kind):
        """type names the kind."""
        assert run(f"type({source})")[0] == string_val(kind)

    def test_type_of_function(self):
        """Functions are 'function'."""
        assert run("fn f -> 1 .\ntype(f)")[0] == string_val("function")


class TestArrays:
    """len / get / push."""

    def test_len(self):
        """Length of arrays and strings."""
        assert run("len([1, 2, 3])")[0] == number_val(3)
        assert run('len("abcd")')[0] == number_val(4)

    def test_len_rejects(self):
        """Numbers have no length."""
        with pytest.raises(TypeError):
            run("len(5)")

    def test_get(self):
        """Index into an array."""
        assert run('get([10, "b"], 1)')[0] == string_val("b")

    @pytest.mark.parametrize("index", ["2", "-1", "0.5"])
    def test_get_out_of_range(self, index):
        """Indices must be integral and in range."""
        with pytest.raises(TypeError):
            run(f"get([1, 2], {index})")

    def test_push(self):
        """push returns a new array."""
        value, _ = run("val a = [1]\nval b = push(a, 2)\n[a, b]")
        assert value == array_val([
            array_val([number_val(1)]),
            array_val([number_val(1), number_val(2)]),
        ])


class TestMath:
    """abs / floor / sqrt."""

    def test_math(self):
        """Numeric helpers."""
        assert run("abs(-3)")[0] == number_val(3)
        assert run("floor(2.7)")[0] == number_val(2)
        assert run("sqrt(16)")[0] == number_val(4)

    def test_floor_non_finite(self):
        """floor leaves infinity and NaN unchanged."""
        assert run("floor(2 ^ 2000)")[0] == number_val(math.inf)
        assert run("floor(-(2 ^ 2000))")[0] == number_val(-math.inf)
        result = run("floor(2 ^ 2000 - 2 ^ 2000)")[0]
        assert math.isnan(result.data)

    def test_floor_of_parsed_infinity(self):
        """Infinity from num() is accepted too."""
        assert run('floor(num("1e400"))')[0] == number_val(math.inf)

    def test_sqrt_negative(self):
        """Square root of a negative number is rejected."""
        with pytest.raises(TypeError):
            run("sqrt(-1)")

    def test_math_rejects_strings(self):
        """Math built-ins need numbers."""
        with pytest.raises(TypeError) as exc_info:
            run('abs("x")')
        assert exc_info.value.operation == "abs"

    def test_comparison_of_results(self):
        """Built-in results flow into expressions."""
        assert run("len([1, 2]) == 2")[0] == bool_val(True)
