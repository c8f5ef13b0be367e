from __future__ import annotations

from typing import Callable

from ..runtime import (
    Frame,
    MkError,
    MkInteger,
    MkString,
    MkValue,
    is_error,
    native_bool,
)
from ..tree import InfixExpression, Node, PrefixExpression
from .helpers import is_truthy

EvalFunc = Callable[[Node, Frame], MkValue]

def eval_prefix(node: PrefixExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    rhs = eval_func(node.right, frame)

    if is_error(rhs):
        return rhs

    return apply_prefix_operator(node.operator, rhs)

def apply_prefix_operator(op: str, rhs: MkValue) -> MkValue:
    match op:
        case '!':
            return native_bool(not is_truthy(rhs))
        case '-':
            if not isinstance(rhs, MkInteger):
                return MkError(f"unknown operator: -{rhs.type_name}")

            return MkInteger(-rhs.value)
        case _:
            return MkError(f"unknown operator: {op}{rhs.type_name}")

def eval_infix(node: InfixExpression, frame: Frame, eval_func: EvalFunc) -> MkValue:
    lhs = eval_func(node.left, frame)
    if is_error(lhs):
        return lhs

    rhs = eval_func(node.right, frame)
    if is_error(rhs):
        return rhs

    return apply_binary_operator(node.operator, lhs, rhs)

def apply_binary_operator(op: str, lhs: MkValue, rhs: MkValue) -> MkValue:
    match (lhs, rhs):
        case (MkInteger(value=a), MkInteger(value=b)):
            return _integer_infix(op, a, b)
        case (MkString(value=a), MkString(value=b)):
            if op != '+':
                return MkError(f"unknown operator: STRING {op} STRING")

            return MkString(a + b)

    # Everything else compares by identity: only the bool/null singletons
    # are ever equal to a separately produced value.
    if op == '==':
        return native_bool(lhs is rhs)
    if op == '!=':
        return native_bool(lhs is not rhs)

    if lhs.type_name != rhs.type_name:
        return MkError(f"type mismatch: {lhs.type_name} {op} {rhs.type_name}")

    return MkError(f"unknown operator: {lhs.type_name} {op} {rhs.type_name}")

def _integer_infix(op: str, a: int, b: int) -> MkValue:
    match op:
        case '+':
            return MkInteger(a + b)
        case '-':
            return MkInteger(a - b)
        case '*':
            return MkInteger(a * b)
        case '/':
            if b == 0:
                return MkError("division by zero")

            return MkInteger(_truncating_div(a, b))
        case '<':
            return native_bool(a < b)
        case '>':
            return native_bool(a > b)
        case '==':
            return native_bool(a == b)
        case '!=':
            return native_bool(a != b)
        case _:
            return MkError(f"unknown operator: INTEGER {op} INTEGER")

def _truncating_div(a: int, b: int) -> int:
    # Rounds toward zero: -7 / 2 == -3.
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
