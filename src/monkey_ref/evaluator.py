from __future__ import annotations

from typing_extensions import assert_never

from .runtime import Frame, MkValue
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MacroLiteral,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)

from .eval.blocks import eval_block, eval_program
from .eval.chains import eval_call, eval_index
from .eval.control import eval_if, eval_return_stmt
from .eval.expr import eval_infix, eval_prefix
from .eval.fn import eval_fn_literal, eval_macro_literal
from .eval.let import eval_identifier, eval_let
from .eval.literals import eval_array_literal, eval_literal
from .eval.objects import eval_hash_literal

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> MkValue:
    match n:
        case Program(statements=stmts):
            return eval_program(stmts, frame, eval_node)
        case BlockStatement(statements=stmts):
            return eval_block(stmts, frame, eval_node)
        case ExpressionStatement(expression=expr):
            return eval_node(expr, frame)
        case LetStatement():
            return eval_let(n, frame, eval_node)
        case ReturnStatement():
            return eval_return_stmt(n, frame, eval_node)
        case IntegerLiteral() | StringLiteral() | BooleanLiteral():
            return eval_literal(n)
        case Identifier(value=name):
            return eval_identifier(name, frame)
        case ArrayLiteral():
            return eval_array_literal(n, frame, eval_node)
        case HashLiteral():
            return eval_hash_literal(n, frame, eval_node)
        case IndexExpression():
            return eval_index(n, frame, eval_node)
        case PrefixExpression():
            return eval_prefix(n, frame, eval_node)
        case InfixExpression():
            return eval_infix(n, frame, eval_node)
        case IfExpression():
            return eval_if(n, frame, eval_node)
        case FunctionLiteral():
            return eval_fn_literal(n, frame)
        case CallExpression():
            return eval_call(n, frame, eval_node)
        case MacroLiteral():
            return eval_macro_literal(n, frame)
        case _:
            assert_never(n)
