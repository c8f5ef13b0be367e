from __future__ import annotations

from typing import Callable, List

from ..runtime import Frame, MkError, MkReturn, MkValue, NULL
from ..tree import Node, Statement

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_program(statements: List[Statement], frame: Frame, eval_func: EvalFunc) -> MkValue:
    """Run top-level statements, returning the last value.

    A `return` at top level ends the program with its unwrapped value; an
    error ends it with the error.
    """
    result: MkValue = NULL

    for stmt in statements:
        result = eval_func(stmt, frame)

        if isinstance(result, MkReturn):
            return result.value
        if isinstance(result, MkError):
            return result

    return result

def eval_block(statements: List[Statement], frame: Frame, eval_func: EvalFunc) -> MkValue:
    """Run a block in its own scope.

    Unlike eval_program the return marker is passed up untouched so it can
    cross nested blocks and if-branches until the enclosing call unwraps it.
    """
    result: MkValue = NULL
    scope = frame.child()

    for stmt in statements:
        result = eval_func(stmt, scope)

        if isinstance(result, (MkReturn, MkError)):
            return result

    return result
