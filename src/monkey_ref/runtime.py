from __future__ import annotations

import importlib
import logging
from typing import List, Optional

from .types import (
    MkNull, MkInteger, MkString, MkBool, MkArray, MkHash, HashPair, HashKey,
    MkFn, MkMacro, MkBuiltin, MkQuote, MkReturn, MkError,
    MkValue, Frame, Builtins, BuiltinFn,
    NULL, TRUE, FALSE, native_bool, is_error, is_hashable,
    MonkeyError, ParseError, MacroExpansionError,
)

logger = logging.getLogger(__name__)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("monkey_ref.stdlib")
    _STDLIB_INITIALIZED = True
    logger.debug("registered builtins: %s", ", ".join(sorted(Builtins.stdlib_functions)))

def register_stdlib(name: str, *, arity: Optional[int] = None):
    def dec(fn: BuiltinFn):
        Builtins.stdlib_functions[name] = MkBuiltin(name=name, fn=fn, arity=arity)
        return fn

    return dec

def lookup_builtin(name: str) -> Optional[MkBuiltin]:
    init_stdlib()
    return Builtins.stdlib_functions.get(name)

def call_builtin(builtin: MkBuiltin, args: List[MkValue], frame: Frame) -> MkValue:
    if builtin.arity is not None and len(args) != builtin.arity:
        return MkError(f"wrong number of arguments. got={len(args)}, want={builtin.arity}")

    return builtin.fn(frame, args)

def call_mkfn(fn: MkFn, args: List[MkValue]) -> MkValue:
    """
    Call semantics:
    - arity must match len(fn.parameters)
    - params are bound in a fresh frame whose parent is the closure frame
    - a `return` inside the body stops at this call: callers only see the value
    """
    from .evaluator import eval_node  # local import to avoid cycle

    if len(args) != len(fn.parameters):
        return MkError(f"wrong number of arguments: want={len(fn.parameters)}, got={len(args)}")

    callee_frame = Frame(parent=fn.frame)

    for param, val in zip(fn.parameters, args):
        callee_frame.define(param.value, val)

    return unwrap_return(eval_node(fn.body, callee_frame))

def unwrap_return(value: MkValue) -> MkValue:
    if isinstance(value, MkReturn):
        return value.value

    return value

def hash_key_of(value: MkValue) -> HashKey | MkError:
    if not is_hashable(value):
        return MkError(f"unusable as hash key: {value.type_name}")

    return value.hash_key()
