"""lark front end: grammar.lark -> parse tree -> monkey_ref.tree nodes."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Transformer, UnexpectedInput, v_args

from .types import ParseError
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    HashPairNode,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MacroLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

KEYWORDS = {
    "let": "_LET",
    "return": "_RETURN",
    "fn": "_FN",
    "macro": "_MACRO",
    "if": "_IF",
    "else": "_ELSE",
    "true": "TRUE",
    "false": "FALSE",
}

def _remap_ident(t: Token) -> Token:
    # Only remap exact word matches, never prefixes
    t.type = KEYWORDS.get(t.value, t.type)
    return t

@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str]=None) -> Lark:
    path = Path(grammar_path) if grammar_path else GRAMMAR_PATH
    logger.debug("building LALR parser from %s", path)

    return Lark(
        path.read_text(encoding="utf-8"),
        parser="lalr",
        lexer="basic",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
        lexer_callbacks={"IDENT": _remap_ident},
    )

@v_args(inline=True)
class ToTree(Transformer):
    """Builds tree nodes bottom-up from the lark parse tree."""

    def start(self, *statements: Statement) -> Program:
        return Program(list(statements))

    def let_stmt(self, name: Token, value: Expression) -> LetStatement:
        return LetStatement(Identifier(str(name)), value)

    def return_stmt(self, value: Expression) -> ReturnStatement:
        return ReturnStatement(value)

    def expr_stmt(self, expression: Expression) -> ExpressionStatement:
        return ExpressionStatement(expression)

    def block(self, *statements: Statement) -> BlockStatement:
        return BlockStatement(list(statements))

    def infix(self, left: Expression, op: Token, right: Expression) -> InfixExpression:
        return InfixExpression(left, str(op), right)

    def prefix(self, op: Token, right: Expression) -> PrefixExpression:
        return PrefixExpression(str(op), right)

    def call(self, function: Expression, arguments: Optional[List[Expression]]=None) -> CallExpression:
        return CallExpression(function, arguments or [])

    def index(self, left: Expression, index: Expression) -> IndexExpression:
        return IndexExpression(left, index)

    def integer(self, tok: Token) -> IntegerLiteral:
        return IntegerLiteral(int(tok))

    def string(self, tok: Token) -> StringLiteral:
        return StringLiteral(str(tok)[1:-1])

    def boolean(self, tok: Token) -> BooleanLiteral:
        return BooleanLiteral(tok.type == "TRUE")

    def identifier(self, tok: Token) -> Identifier:
        return Identifier(str(tok))

    def args(self, *exprs: Expression) -> List[Expression]:
        return list(exprs)

    def params(self, *names: Token) -> List[Identifier]:
        return [Identifier(str(n)) for n in names]

    def array(self, elements: Optional[List[Expression]]=None) -> ArrayLiteral:
        return ArrayLiteral(elements or [])

    def pair(self, key: Expression, value: Expression) -> HashPairNode:
        return (key, value)

    def hash(self, *pairs: HashPairNode) -> HashLiteral:
        return HashLiteral(list(pairs))

    def if_expr(self, condition: Expression, consequence: BlockStatement,
                alternative: Optional[BlockStatement]=None) -> IfExpression:
        return IfExpression(condition, consequence, alternative)

    def fn_lit(self, *children) -> FunctionLiteral:
        params, body = _split_params(children)
        return FunctionLiteral(params, body)

    def macro_lit(self, *children) -> MacroLiteral:
        params, body = _split_params(children)
        return MacroLiteral(params, body)

def _split_params(children) -> tuple[List[Identifier], BlockStatement]:
    # `[params]` is dropped entirely when empty, so the body may be the only child.
    if len(children) == 1:
        return [], children[0]

    return children[0], children[1]

def parse_source(source: str) -> Program:
    """Parse *source* into a Program. Raises ParseError on malformed input."""
    try:
        tree = make_parser().parse(source)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", -1)
        column = getattr(exc, "column", -1)
        lines = str(exc).strip().splitlines()
        message = lines[0] if lines else type(exc).__name__

        if line is None or line < 0:
            raise ParseError(message) from exc
        raise ParseError(message, line, column) from exc

    program = ToTree().transform(tree)
    assert isinstance(program, Program)

    return program
