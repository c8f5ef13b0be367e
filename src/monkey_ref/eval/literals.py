from __future__ import annotations

from typing import Callable, List, Union
from typing_extensions import assert_never

from ..runtime import Frame, MkArray, MkError, MkInteger, MkString, MkValue, is_error, native_bool
from ..tree import ArrayLiteral, BooleanLiteral, Expression, IntegerLiteral, Node, StringLiteral

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_literal(node: Union[IntegerLiteral, StringLiteral, BooleanLiteral]) -> MkValue:
    match node:
        case IntegerLiteral(value=v):
            return MkInteger(v)
        case StringLiteral(value=s):
            return MkString(s)
        case BooleanLiteral(value=b):
            return native_bool(b)
        case _:
            assert_never(node)

def eval_expressions(nodes: List[Expression], frame: Frame, eval_func: EvalFunc) -> Union[List[MkValue], MkError]:
    """Evaluate left to right, stopping at the first error."""
    values: List[MkValue] = []

    for node in nodes:
        val = eval_func(node, frame)

        if is_error(val):
            return val

        values.append(val)

    return values

def eval_array_literal(node: ArrayLiteral, frame: Frame, eval_func: EvalFunc) -> MkValue:
    items = eval_expressions(node.elements, frame, eval_func)

    if isinstance(items, MkError):
        return items

    return MkArray(items)
