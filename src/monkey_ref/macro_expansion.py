"""Macro passes run between parsing and evaluation.

define_macros lifts top-level ``let name = macro(...) { ... };`` statements
out of the program into a frame. expand_macros then replaces every call to
one of those macros with the syntax tree its body quotes.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .evaluator import eval_node
from .runtime import Frame, MacroExpansionError, MkError, MkMacro, MkQuote, init_stdlib, unwrap_return
from .tree import CallExpression, Identifier, LetStatement, MacroLiteral, Node, Program, Statement, modify

logger = logging.getLogger(__name__)

def is_macro_definition(stmt: Statement) -> bool:
    return isinstance(stmt, LetStatement) and isinstance(stmt.value, MacroLiteral)

def define_macros(program: Program, frame: Frame) -> None:
    """Bind every top-level macro definition in *frame* and drop it from *program*."""
    kept: List[Statement] = []

    for stmt in program.statements:
        if not is_macro_definition(stmt):
            kept.append(stmt)
            continue

        assert isinstance(stmt, LetStatement) and isinstance(stmt.value, MacroLiteral)
        literal = stmt.value
        frame.define(stmt.name.value, MkMacro(parameters=literal.parameters, body=literal.body, frame=frame))
        logger.debug("defined macro %s(%s)", stmt.name.value, ", ".join(p.value for p in literal.parameters))

    program.statements[:] = kept

def expand_macros(program: Program, frame: Frame) -> Program:
    """Return a copy of *program* with all macro calls replaced by their expansion.

    Raises MacroExpansionError when a macro body does not produce a quote.
    """
    init_stdlib()

    def _expand(node: Node) -> Node:
        if not isinstance(node, CallExpression):
            return node

        macro = macro_for_call(node, frame)
        if macro is None:
            return node

        return expand_call(node, macro)

    expanded = modify(program.copy(), _expand)
    assert isinstance(expanded, Program)

    return expanded

def macro_for_call(call: CallExpression, frame: Frame) -> Optional[MkMacro]:
    if not isinstance(call.function, Identifier):
        return None

    bound = frame.get(call.function.value)

    return bound if isinstance(bound, MkMacro) else None

def expand_call(call: CallExpression, macro: MkMacro) -> Node:
    name = str(call.function)

    if len(call.arguments) != len(macro.parameters):
        raise MacroExpansionError(MkError(
            f"wrong number of macro arguments: want={len(macro.parameters)}, got={len(call.arguments)}"
        ))

    eval_frame = Frame(parent=macro.frame)

    for param, arg in zip(macro.parameters, call.arguments):
        eval_frame.define(param.value, MkQuote(arg))

    evaluated = unwrap_return(eval_node(macro.body, eval_frame))

    if isinstance(evaluated, MkError):
        raise MacroExpansionError(MkError(f"macro {name}: {evaluated.message}"))
    if not isinstance(evaluated, MkQuote):
        raise MacroExpansionError(MkError(
            f"macro {name} must return a quoted syntax tree, got {evaluated.type_name}"
        ))

    logger.debug("expanded %s into %s", call, evaluated.node)

    return evaluated.node
