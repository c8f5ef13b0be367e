from __future__ import annotations

from typing import Callable

from ..runtime import Frame, MkReturn, MkValue, NULL, is_error
from ..tree import IfExpression, Node, ReturnStatement
from .helpers import is_truthy

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_if(node: IfExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    condition = eval_func(node.condition, frame)

    if is_error(condition):
        return condition

    if is_truthy(condition):
        return eval_func(node.consequence, frame)

    if node.alternative is not None:
        return eval_func(node.alternative, frame)

    return NULL

def eval_return_stmt(node: ReturnStatement, frame: Frame, eval_func: EvalFunc) -> MkValue:
    val = eval_func(node.value, frame)

    if is_error(val):
        return val

    return MkReturn(val)
