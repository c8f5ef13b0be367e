from __future__ import annotations

from typing import Callable

from ..runtime import Frame, MkError, MkValue, NULL, is_error, lookup_builtin
from ..tree import LetStatement, Node

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_let(stmt: LetStatement, frame: Frame, eval_func: EvalFunc) -> MkValue:
    val = eval_func(stmt.value, frame)

    if is_error(val):
        return val

    frame.define(stmt.name.value, val)

    return NULL

def eval_identifier(name: str, frame: Frame) -> MkValue:
    """Resolve *name* through the frame chain, then the builtin registry."""
    val = frame.get(name)
    if val is not None:
        return val

    builtin = lookup_builtin(name)
    if builtin is not None:
        return builtin

    return MkError(f"identifier not found: {name}")
