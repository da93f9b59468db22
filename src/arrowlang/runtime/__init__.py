"""
Runtime - Tree-walking interpreter for arrow programs.

This module provides:
- Interpreter: Evaluates AST nodes to runtime Values
- Value: Runtime values tagged with their ValueKind
- CallStack: Call frames and block scopes
- BuiltinRegistry: Built-in function implementations
- OutputSink: Where built-ins send their text
"""

from .values import (
    Value,
    ValueKind,
    NIL,
    number_val,
    string_val,
    bool_val,
    array_val,
    function_val,
    nil_val,
    to_number,
    to_bool,
    to_string,
    format_number,
    values_equal,
)

from .context import (
    CallFrame,
    CallStack,
)

from .output import (
    OutputSink,
    StreamOutput,
    BufferOutput,
)

from .builtins import (
    BuiltinFunction,
    BuiltinRegistry,
)

from .interpreter import (
    Interpreter,
    run_source,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'NIL',
    'number_val',
    'string_val',
    'bool_val',
    'array_val',
    'function_val',
    'nil_val',
    'to_number',
    'to_bool',
    'to_string',
    'format_number',
    'values_equal',

    # Context
    'CallFrame',
    'CallStack',

    # Output
    'OutputSink',
    'StreamOutput',
    'BufferOutput',

    # Builtins
    'BuiltinFunction',
    'BuiltinRegistry',

    # Interpreter
    'Interpreter',
    'run_source',
]
