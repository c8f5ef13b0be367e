"""quote/unquote: turning syntax into values and values back into syntax."""
from __future__ import annotations

from typing import Callable

from ..runtime import (
    Frame,
    MkArray,
    MkBool,
    MkError,
    MkHash,
    MkInteger,
    MkQuote,
    MkString,
    MkValue,
)
from ..tree import (
    ArrayLiteral,
    BooleanLiteral,
    Expression,
    ExpressionStatement,
    HashLiteral,
    IntegerLiteral,
    Node,
    Program,
    StringLiteral,
    is_call_to,
    is_statement,
    modify,
)

EvalFunc = Callable[[Node, Frame], MkValue]

class _UnquoteFailed(Exception):
    def __init__(self, error: MkError):
        super().__init__(error.message)
        self.error = error

def quote(node: Node, frame: Frame, eval_func: EvalFunc) -> MkValue:
    """Wrap a copy of *node* with every ``unquote(x)`` replaced by x's value as syntax.

    The copy is taken first so a macro body used as a template is never
    changed by the substitution.
    """
    try:
        return MkQuote(eval_unquote_calls(node.copy(), frame, eval_func))
    except _UnquoteFailed as exc:
        return exc.error

def eval_unquote_calls(quoted: Node, frame: Frame, eval_func: EvalFunc) -> Node:
    def _replace(node: Node) -> Node:
        if not is_call_to(node, 'unquote') or len(node.arguments) != 1:
            return node

        value = eval_func(node.arguments[0], frame)
        return object_to_node(value)

    return modify(quoted, _replace)

def object_to_node(value: MkValue) -> Expression:
    match value:
        case MkInteger(value=n):
            return IntegerLiteral(n)
        case MkBool(value=b):
            return BooleanLiteral(b)
        case MkString(value=s):
            return StringLiteral(s)
        case MkQuote(node=node):
            return _as_expression(node.copy())
        case MkArray(items=items):
            return ArrayLiteral([object_to_node(item) for item in items])
        case MkHash(pairs=pairs):
            return HashLiteral([(object_to_node(p.key), object_to_node(p.value)) for p in pairs.values()])
        case MkError():
            raise _UnquoteFailed(value)
        case _:
            raise _UnquoteFailed(MkError(f"unquote: cannot convert {value.type_name} to a syntax node"))

def _as_expression(node: Node) -> Expression:
    # A quoted statement (only reachable from hand-built trees) splices its expression.
    if isinstance(node, ExpressionStatement):
        return node.expression
    if isinstance(node, Program) or is_statement(node):
        raise _UnquoteFailed(MkError(f"unquote: cannot splice {type(node).__name__} into an expression"))

    return node
