from __future__ import annotations

from ..runtime import Frame, MkFn, MkMacro
from ..tree import FunctionLiteral, MacroLiteral

def eval_fn_literal(node: FunctionLiteral, frame: Frame) -> MkFn:
    # Captures the frame itself, not a snapshot: later lets in the same
    # scope are visible to the closure.
    return MkFn(parameters=node.parameters, body=node.body, frame=frame)

def eval_macro_literal(node: MacroLiteral, frame: Frame) -> MkMacro:
    return MkMacro(parameters=node.parameters, body=node.body, frame=frame)
