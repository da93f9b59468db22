"""
Call frames and block scopes for the interpreter.

The call stack always holds the global frame at the bottom. Every frame
owns a stack of block scopes. Scopes and frames are pushed through context
managers so an error unwinding through a block or call still pops them.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from contextlib import contextmanager

from .values import Value
from ..errors import NotFoundVarError, StackDepthError
from ..tokens import SourceSpan


@dataclass
class CallFrame:
    """
    The variables of one function invocation (or of top-level code).

    `scopes[0]` is the frame's own top-level scope; each entered block
    pushes another dict on top.
    """
    name: str = "<global>"
    scopes: List[Dict[str, Value]] = field(default_factory=lambda: [{}])

    def find(self, name: str) -> Optional[Value]:
        """Look a name up from the innermost scope outwards."""
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def declare(self, name: str, value: Value) -> None:
        """Bind in the innermost scope, shadowing any outer binding."""
        self.scopes[-1][name] = value

    def update(self, name: str, value: Value) -> bool:
        """
        Update an existing binding in place.

        Returns True if found and updated, False if not found.
        """
        for scope in reversed(self.scopes):
            if name in scope:
                scope[name] = value
                return True
        return False

    @property
    def depth(self) -> int:
        return len(self.scopes)


class CallStack:
    """
    The stack of call frames owned by one interpreter.

    Lookups search the current frame, then fall back to the global frame;
    the scopes of intermediate callers are never visible.
    """

    def __init__(self, max_depth: int = 200):
        self.max_depth = max_depth
        self.frames: List[CallFrame] = [CallFrame()]

    @property
    def global_frame(self) -> CallFrame:
        return self.frames[0]

    @property
    def current(self) -> CallFrame:
        return self.frames[-1]

    @property
    def depth(self) -> int:
        """Number of active function calls (0 at top level)."""
        return len(self.frames) - 1

    def find_var(self, name: str) -> Optional[Value]:
        value = self.current.find(name)
        if value is None and self.current is not self.global_frame:
            value = self.global_frame.find(name)
        return value

    def declare_var(self, name: str, value: Value) -> None:
        self.current.declare(name, value)

    def set_var(self, name: str, value: Value, span: Optional[SourceSpan] = None) -> None:
        """Assign to an existing variable, or raise NotFoundVarError."""
        if self.current.update(name, value):
            return
        if self.current is not self.global_frame and self.global_frame.update(name, value):
            return
        raise NotFoundVarError(name, span)

    @contextmanager
    def new_scope(self):
        """
        Context manager for a nested block scope in the current frame.

        Usage:
            with stack.new_scope():
                stack.declare_var("tmp", number_val(1))
        """
        frame = self.current
        frame.scopes.append({})
        try:
            yield frame.scopes[-1]
        finally:
            frame.scopes.pop()

    @contextmanager
    def new_frame(self, name: str, span: Optional[SourceSpan] = None):
        """Context manager for an isolated frame for one function call."""
        if self.depth >= self.max_depth:
            raise StackDepthError(self.max_depth, span)
        frame = CallFrame(name=name)
        self.frames.append(frame)
        try:
            yield frame
        finally:
            self.frames.pop()
