"""
Tests for call frames and block scopes.
"""

import pytest

from arrowlang import NotFoundVarError, StackDepthError
from arrowlang.runtime import CallFrame, CallStack, number_val, string_val


class TestCallFrame:
    """Scopes within one frame."""

    def test_declare_and_find(self):
        """Declared names are found."""
        frame = CallFrame()
        frame.declare("x", number_val(1))
        assert frame.find("x") == number_val(1)
        assert frame.find("y") is None

    def test_inner_scope_shadows(self):
        """The innermost binding wins."""
        frame = CallFrame()
        frame.declare("x", number_val(1))
        frame.scopes.append({})
        frame.declare("x", number_val(2))
        assert frame.find("x") == number_val(2)
        frame.scopes.pop()
        assert frame.find("x") == number_val(1)

    def test_update_existing(self):
        """update() rebinds in the scope that holds the name."""
        frame = CallFrame()
        frame.declare("x", number_val(1))
        frame.scopes.append({})
        assert frame.update("x", number_val(5)) is True
        frame.scopes.pop()
        assert frame.find("x") == number_val(5)

    def test_update_missing(self):
        """update() reports unknown names."""
        assert CallFrame().update("nope", number_val(1)) is False


class TestCallStack:
    """Frame and scope discipline."""

    def test_starts_with_global_frame(self):
        """A new stack has only the global frame."""
        stack = CallStack()
        assert stack.depth == 0
        assert stack.current is stack.global_frame

    def test_new_scope(self):
        """Block-local names vanish when the scope exits."""
        stack = CallStack()
        stack.declare_var("outer", number_val(1))
        with stack.new_scope():
            stack.declare_var("inner", number_val(2))
            assert stack.find_var("outer") == number_val(1)
            assert stack.find_var("inner") == number_val(2)
        assert stack.find_var("inner") is None
        assert stack.find_var("outer") == number_val(1)

    def test_scope_popped_on_error(self):
        """An exception unwinding through a scope still pops it."""
        stack = CallStack()
        with pytest.raises(RuntimeError):
            with stack.new_scope():
                stack.declare_var("tmp", number_val(1))
                raise RuntimeError("boom")
        assert stack.current.depth == 1
        assert stack.find_var("tmp") is None

    def test_frame_isolation(self):
        """A frame sees its own names and globals, not the caller's locals."""
        stack = CallStack()
        stack.declare_var("g", number_val(1))
        with stack.new_frame("caller"):
            stack.declare_var("local", number_val(2))
            with stack.new_frame("callee"):
                assert stack.find_var("g") == number_val(1)
                assert stack.find_var("local") is None
                assert stack.depth == 2
        assert stack.depth == 0

    def test_frame_popped_on_error(self):
        """An exception unwinding through a call still pops its frame."""
        stack = CallStack()
        with pytest.raises(RuntimeError):
            with stack.new_frame("f"):
                raise RuntimeError("boom")
        assert stack.depth == 0

    def test_set_var_global_from_frame(self):
        """Assignment inside a call can update a global."""
        stack = CallStack()
        stack.declare_var("count", number_val(0))
        with stack.new_frame("f"):
            stack.set_var("count", number_val(1))
        assert stack.find_var("count") == number_val(1)

    def test_set_var_undeclared(self):
        """Assignment to an unknown name raises NotFoundVarError."""
        stack = CallStack()
        with pytest.raises(NotFoundVarError) as exc_info:
            stack.set_var("x", string_val("v"))
        assert exc_info.value.name == "x"

    def test_declare_in_scope_does_not_touch_outer(self):
        """Declaring in a block shadows rather than rebinds."""
        stack = CallStack()
        stack.declare_var("x", number_val(1))
        with stack.new_scope():
            stack.declare_var("x", number_val(2))
        assert stack.find_var("x") == number_val(1)

    def test_max_depth(self):
        """Pushing past max_depth raises StackDepthError."""
        stack = CallStack(max_depth=2)
        with stack.new_frame("a"):
            with stack.new_frame("b"):
                with pytest.raises(StackDepthError) as exc_info:
                    with stack.new_frame("c"):
                        pass
                assert exc_info.value.limit == 2
        assert stack.depth == 0
