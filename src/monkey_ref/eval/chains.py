from __future__ import annotations

from typing import Callable, List

from ..runtime import (
    Frame,
    MkArray,
    MkBuiltin,
    MkError,
    MkFn,
    MkHash,
    MkInteger,
    MkValue,
    NULL,
    call_builtin,
    call_mkfn,
    is_error,
)
from ..tree import CallExpression, IndexExpression, Node, is_call_to
from .literals import eval_expressions
from .objects import hash_get
from .quote import quote

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_call(node: CallExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    # quote(...) receives its argument as syntax unless a binding shadows it.
    if is_call_to(node, 'quote') and frame.get('quote') is None:
        if len(node.arguments) != 1:
            return MkError(f"wrong number of arguments to quote: got={len(node.arguments)}, want=1")

        return quote(node.arguments[0], frame, eval_func)

    callee = eval_func(node.function, frame)
    if is_error(callee):
        return callee

    args = eval_expressions(node.arguments, frame, eval_func)
    if isinstance(args, MkError):
        return args

    return call_value(callee, args, frame)

def call_value(callee: MkValue, args: List[MkValue], frame: Frame) -> MkValue:
    match callee:
        case MkFn():
            return call_mkfn(callee, args)
        case MkBuiltin():
            return call_builtin(callee, args, frame)
        case _:
            return MkError(f"not a function: {callee.type_name}")

def eval_index(node: IndexExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    left = eval_func(node.left, frame)
    if is_error(left):
        return left

    index = eval_func(node.index, frame)
    if is_error(index):
        return index

    return apply_index(left, index)

def apply_index(left: MkValue, index: MkValue) -> MkValue:
    match (left, index):
        case (MkArray(items=items), MkInteger(value=i)):
            # Out of range is null, not an error.
            if i < 0 or i >= len(items):
                return NULL

            return items[i]
        case (MkHash(), _):
            return hash_get(left, index)
        case _:
            return MkError(f"index operator not supported: {left.type_name}")
