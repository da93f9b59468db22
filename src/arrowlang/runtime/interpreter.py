"""
Tree-walking interpreter.

Evaluates AST nodes to runtime Values, keeping variables in an explicit
call stack owned by the Interpreter instance.
"""

import logging
import math
import operator
import sys
from contextlib import contextmanager
from typing import Callable, Dict, Optional, Sequence

from .values import (
    Value, ValueKind, NIL,
    number_val, string_val, bool_val, array_val, function_val,
    to_number, to_bool, values_equal,
)
from .context import CallStack
from .builtins import BuiltinRegistry
from .output import OutputSink, StreamOutput

from ..ast import (
    AstNode, Program, Compound, VarDecl, VarSet, If, Function,
    Call, Identifier, Number, String, Bool, Nil, Unary, Array, BinaryOp,
)
from ..config import InterpreterConfig
from ..errors import (
    NotImplementedError,
    DivisionByZeroError,
    IncorrectArgNumberError,
    NotFoundVarError,
    NotFoundFunctionError,
    NotAFunctionError,
    StackDepthError,
)
from ..tokens import SourceSpan, TokenType, describe

logger = logging.getLogger(__name__)

# Python frames one language-level call may occupy; used to size the
# host recursion limit so max_call_depth is reached before it.
FRAMES_PER_CALL = 25

ARITHMETIC: Dict[TokenType, Callable[[float, float], float]] = {
    TokenType.PLUS: operator.add,
    TokenType.MINUS: operator.sub,
    TokenType.STAR: operator.mul,
}

COMPARISON: Dict[TokenType, Callable[[float, float], bool]] = {
    TokenType.GT: operator.gt,
    TokenType.LT: operator.lt,
    TokenType.GE: operator.ge,
    TokenType.LE: operator.le,
}


def _symbol(token_type: TokenType) -> str:
    return describe(token_type).strip("'")


class Interpreter:
    """
    Tree-walking interpreter.

    Evaluates AST nodes by dispatching on the node class. Built-ins receive
    the interpreter itself, so they can reach `output` and `call_function`.
    """

    def __init__(
        self,
        output: Optional[OutputSink] = None,
        builtins: Optional[BuiltinRegistry] = None,
        config: Optional[InterpreterConfig] = None,
    ):
        """
        Initialize the interpreter.

        Args:
            output: Sink for built-in output (stdout if omitted)
            builtins: Built-in registry (the default set if omitted)
            config: Interpreter settings
        """
        self.config = config if config is not None else InterpreterConfig()
        self.output = output if output is not None else StreamOutput()
        self.builtins = builtins if builtins is not None else BuiltinRegistry()
        self.call_stack = CallStack(self.config.max_call_depth)

    # =========================================================================
    # Entry Points
    # =========================================================================

    def run(self, program: Program) -> Value:
        """
        Evaluate a program and return the value of its last statement.

        Each run starts from an empty global frame. Any error aborts the
        run and propagates to the caller.
        """
        self.call_stack = CallStack(self.config.max_call_depth)
        logger.debug("running program with %d statement(s)", len(program.statements))
        try:
            with self._recursion_headroom():
                result = self.evaluate(program)
        except RecursionError:
            raise StackDepthError(self.config.max_call_depth, nesting=True) from None
        logger.debug("program finished with %r", result)
        return result

    @contextmanager
    def _recursion_headroom(self):
        previous = sys.getrecursionlimit()
        needed = previous + self.config.max_call_depth * FRAMES_PER_CALL
        sys.setrecursionlimit(needed)
        try:
            yield
        finally:
            sys.setrecursionlimit(previous)

    def call_function(self, func: Function, args: Sequence[Value],
                      span: Optional[SourceSpan] = None) -> Value:
        """
        Invoke a user function with already-evaluated arguments.

        The body runs in a fresh frame that sees only its parameters and
        the global frame.
        """
        if len(func.params) != len(args):
            raise IncorrectArgNumberError(len(func.params), len(args), func, span)

        logger.debug("call %s(%s) at depth %d", func.name,
                     ", ".join(str(a) for a in args), self.call_stack.depth + 1)
        result = NIL
        with self.call_stack.new_frame(func.name, span):
            for name, value in zip(func.params, args):
                self.call_stack.declare_var(name, value)
            for stmt in func.body.statements:
                result = self.evaluate(stmt)
        logger.debug("return from %s: %s", func.name, result)
        return result

    # =========================================================================
    # Dispatch
    # =========================================================================

    def evaluate(self, node: AstNode) -> Value:
        """Evaluate any node to a Value."""
        if isinstance(node, BinaryOp):
            return self._eval_binary_op(node)
        elif isinstance(node, Number):
            return number_val(node.value)
        elif isinstance(node, String):
            return string_val(node.value)
        elif isinstance(node, Bool):
            return bool_val(node.value)
        elif isinstance(node, Nil):
            return NIL
        elif isinstance(node, Identifier):
            return self._eval_identifier(node)
        elif isinstance(node, Call):
            return self._eval_call(node)
        elif isinstance(node, Unary):
            return self._eval_unary(node)
        elif isinstance(node, Array):
            return array_val(self.evaluate(e) for e in node.elements)
        elif isinstance(node, Compound):
            return self._eval_compound(node)
        elif isinstance(node, VarDecl):
            self.call_stack.declare_var(node.name, self.evaluate(node.value))
            return NIL
        elif isinstance(node, VarSet):
            self.call_stack.set_var(node.name, self.evaluate(node.value), node.span)
            return NIL
        elif isinstance(node, If):
            return self._eval_if(node)
        elif isinstance(node, Function):
            self.call_stack.declare_var(node.name, function_val(node))
            return NIL
        elif isinstance(node, Program):
            return self._eval_sequence(node.statements)
        else:
            raise NotImplementedError(node)

    def _eval_sequence(self, statements: Sequence[AstNode]) -> Value:
        result = NIL
        for stmt in statements:
            result = self.evaluate(stmt)
        return result

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_compound(self, block: Compound) -> Value:
        """Run a block in its own scope and return its last value."""
        with self.call_stack.new_scope():
            return self._eval_sequence(block.statements)

    def _eval_if(self, stmt: If) -> Value:
        """Take the first branch whose condition holds, in source order."""
        if to_bool(self.evaluate(stmt.condition), "if", stmt.condition.span):
            return self._eval_compound(stmt.then_block)

        for branch in stmt.elif_branches:
            if to_bool(self.evaluate(branch.condition), "elif", branch.condition.span):
                return self._eval_compound(branch.block)

        if stmt.else_block is not None:
            return self._eval_compound(stmt.else_block)
        return NIL

    # =========================================================================
    # Expressions
    # =========================================================================

    def _eval_identifier(self, ident: Identifier) -> Value:
        value = self.call_stack.find_var(ident.name)
        if value is None:
            raise NotFoundVarError(ident.name, ident.span)
        return value

    def _eval_call(self, call: Call) -> Value:
        """
        Evaluate the arguments left to right, then call a built-in, or else
        a user function bound to the name.
        """
        args = [self.evaluate(arg) for arg in call.arguments]
        if call.name in self.builtins:
            return self.builtins.call(call.name, self, args, call.span)

        callee = self.call_stack.find_var(call.name)
        if callee is None:
            raise NotFoundFunctionError(call.name, call.span)
        if callee.kind != ValueKind.FUNCTION:
            raise NotAFunctionError(callee, call.name, call.span)
        return self.call_function(callee.data, args, call.span)

    def _eval_unary(self, op: Unary) -> Value:
        operand = self.evaluate(op.operand)
        symbol = _symbol(op.operator)

        if op.operator == TokenType.MINUS:
            return number_val(-to_number(operand, symbol, op.span))
        elif op.operator == TokenType.PLUS:
            return number_val(to_number(operand, symbol, op.span))
        elif op.operator == TokenType.BANG:
            return bool_val(not to_bool(operand, symbol, op.span))
        raise NotImplementedError(op)

    def _eval_binary_op(self, op: BinaryOp) -> Value:
        """Evaluate a binary operation."""
        symbol = _symbol(op.operator)

        # Logical operators short-circuit
        if op.operator == TokenType.AND:
            if not to_bool(self.evaluate(op.left), symbol, op.left.span):
                return bool_val(False)
            return bool_val(to_bool(self.evaluate(op.right), symbol, op.right.span))
        if op.operator == TokenType.OR:
            if to_bool(self.evaluate(op.left), symbol, op.left.span):
                return bool_val(True)
            return bool_val(to_bool(self.evaluate(op.right), symbol, op.right.span))

        left = self.evaluate(op.left)
        right = self.evaluate(op.right)

        if op.operator == TokenType.EQ:
            return bool_val(values_equal(left, right))
        if op.operator == TokenType.NE:
            return bool_val(not values_equal(left, right))

        # '+' concatenates only when both sides are strings
        if (op.operator == TokenType.PLUS
                and left.kind == ValueKind.STRING and right.kind == ValueKind.STRING):
            return string_val(left.data + right.data)

        x = to_number(left, symbol, op.left.span)
        y = to_number(right, symbol, op.right.span)

        if op.operator in ARITHMETIC:
            return number_val(ARITHMETIC[op.operator](x, y))
        if op.operator in COMPARISON:
            return bool_val(COMPARISON[op.operator](x, y))
        if op.operator == TokenType.SLASH:
            if y == 0:
                raise DivisionByZeroError(op.right.span)
            return number_val(x / y)
        if op.operator == TokenType.CARET:
            return number_val(self._power(x, y, op))
        raise NotImplementedError(op)

    def _power(self, base: float, exponent: float, op: BinaryOp) -> float:
        try:
            result = base ** exponent
        except ZeroDivisionError:
            raise DivisionByZeroError(op.right.span) from None
        except OverflowError:
            negative = base < 0 and exponent.is_integer() and exponent % 2 == 1
            return -math.inf if negative else math.inf
        if isinstance(result, complex):
            return math.nan
        return result


def run_source(
    source: str,
    output: Optional[OutputSink] = None,
    config: Optional[InterpreterConfig] = None,
    filename: Optional[str] = None,
) -> Value:
    """
    Parse and run source text in a fresh interpreter.

        from arrowlang import run_source

        value = run_source('''
            fn square(x) -> x * x .
            square(7)
        ''')
        assert value == number_val(49)

    Raises:
        ArrowError: lexer, parser or runtime errors, unchanged
    """
    from ..parser import parse

    program = parse(source, filename)
    return Interpreter(output=output, config=config).run(program)
