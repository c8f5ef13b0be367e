"""Syntax tree nodes for Monkey programs.

Every node renders back to canonical source text via ``str(node)`` and can be
duplicated with ``node.copy()``. Copies never share sub-nodes with the
original, which lets macro expansion splice fresh subtrees into the program
without touching a macro's stored template.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard, assert_never


# ---------- Statements ----------

@dataclass
class Program:
    statements: List['Statement'] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)

    def copy(self) -> Program:
        return Program([s.copy() for s in self.statements])

@dataclass
class LetStatement:
    name: 'Identifier'
    value: 'Expression'

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"

    def copy(self) -> LetStatement:
        return LetStatement(self.name.copy(), self.value.copy())

@dataclass
class ReturnStatement:
    value: 'Expression'

    def __str__(self) -> str:
        return f"return {self.value};"

    def copy(self) -> ReturnStatement:
        return ReturnStatement(self.value.copy())

@dataclass
class ExpressionStatement:
    expression: 'Expression'

    def __str__(self) -> str:
        return str(self.expression)

    def copy(self) -> ExpressionStatement:
        return ExpressionStatement(self.expression.copy())

@dataclass
class BlockStatement:
    statements: List['Statement'] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"

        return "{ " + " ".join(str(s) for s in self.statements) + " }"

    def copy(self) -> BlockStatement:
        return BlockStatement([s.copy() for s in self.statements])

# ---------- Expressions ----------

@dataclass
class Identifier:
    value: str

    def __str__(self) -> str:
        return self.value

    def copy(self) -> Identifier:
        return Identifier(self.value)

@dataclass
class IntegerLiteral:
    value: int

    def __str__(self) -> str:
        return str(self.value)

    def copy(self) -> IntegerLiteral:
        return IntegerLiteral(self.value)

@dataclass
class StringLiteral:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'

    def copy(self) -> StringLiteral:
        return StringLiteral(self.value)

@dataclass
class BooleanLiteral:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"

    def copy(self) -> BooleanLiteral:
        return BooleanLiteral(self.value)

@dataclass
class ArrayLiteral:
    elements: List['Expression'] = field(default_factory=list)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"

    def copy(self) -> ArrayLiteral:
        return ArrayLiteral([e.copy() for e in self.elements])

HashPairNode: TypeAlias = Tuple['Expression', 'Expression']

@dataclass
class HashLiteral:
    pairs: List[HashPairNode] = field(default_factory=list)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"

    def copy(self) -> HashLiteral:
        return HashLiteral([(k.copy(), v.copy()) for k, v in self.pairs])

@dataclass
class IndexExpression:
    left: 'Expression'
    index: 'Expression'

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"

    def copy(self) -> IndexExpression:
        return IndexExpression(self.left.copy(), self.index.copy())

@dataclass
class PrefixExpression:
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"

    def copy(self) -> PrefixExpression:
        return PrefixExpression(self.operator, self.right.copy())

@dataclass
class InfixExpression:
    left: 'Expression'
    operator: str
    right: 'Expression'

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"

    def copy(self) -> InfixExpression:
        return InfixExpression(self.left.copy(), self.operator, self.right.copy())

@dataclass
class IfExpression:
    condition: 'Expression'
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        out = f"if {self.condition} {self.consequence}"

        if self.alternative is not None:
            out += f" else {self.alternative}"

        return out

    def copy(self) -> IfExpression:
        alternative = self.alternative.copy() if self.alternative is not None else None
        return IfExpression(self.condition.copy(), self.consequence.copy(), alternative)

@dataclass
class FunctionLiteral:
    parameters: List[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        return f"fn({', '.join(str(p) for p in self.parameters)}) {self.body}"

    def copy(self) -> FunctionLiteral:
        return FunctionLiteral([p.copy() for p in self.parameters], self.body.copy())

@dataclass
class CallExpression:
    function: 'Expression'
    arguments: List['Expression'] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.function}({', '.join(str(a) for a in self.arguments)})"

    def copy(self) -> CallExpression:
        return CallExpression(self.function.copy(), [a.copy() for a in self.arguments])

@dataclass
class MacroLiteral:
    parameters: List[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        return f"macro({', '.join(str(p) for p in self.parameters)}) {self.body}"

    def copy(self) -> MacroLiteral:
        return MacroLiteral([p.copy() for p in self.parameters], self.body.copy())


Statement: TypeAlias = Union[LetStatement, ReturnStatement, ExpressionStatement, BlockStatement]

Expression: TypeAlias = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    ArrayLiteral,
    HashLiteral,
    IndexExpression,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    MacroLiteral,
]

Node: TypeAlias = Union[Program, Statement, Expression]

_STATEMENT_TYPES = (LetStatement, ReturnStatement, ExpressionStatement, BlockStatement)

def is_statement(node: Node) -> TypeGuard[Statement]:
    return isinstance(node, _STATEMENT_TYPES)

def is_call_to(node: Node, name: str) -> TypeGuard[CallExpression]:
    """True for ``name(...)`` calls whose callee is the bare identifier *name*."""
    return (
        isinstance(node, CallExpression)
        and isinstance(node.function, Identifier)
        and node.function.value == name
    )

# ---------- Rewriting ----------

Modifier = Callable[[Node], Node]

def modify(node: Node, modifier: Modifier) -> Node:
    """Rebuild *node* bottom-up, letting *modifier* replace each node.

    Children are rewritten before their parent, so the modifier always sees a
    node whose sub-nodes were already processed. Whatever the modifier returns
    is not visited again.
    """
    match node:
        case Program(statements=stmts):
            node = Program([_modify_stmt(s, modifier) for s in stmts])
        case LetStatement(name=name, value=value):
            node = LetStatement(name, _modify_expr(value, modifier))
        case ReturnStatement(value=value):
            node = ReturnStatement(_modify_expr(value, modifier))
        case ExpressionStatement(expression=expr):
            node = ExpressionStatement(_modify_expr(expr, modifier))
        case BlockStatement():
            return _modify_block(node, modifier)
        case Identifier() | IntegerLiteral() | StringLiteral() | BooleanLiteral():
            pass
        case ArrayLiteral(elements=elements):
            node = ArrayLiteral([_modify_expr(e, modifier) for e in elements])
        case HashLiteral(pairs=pairs):
            node = HashLiteral([(_modify_expr(k, modifier), _modify_expr(v, modifier)) for k, v in pairs])
        case IndexExpression(left=left, index=index):
            node = IndexExpression(_modify_expr(left, modifier), _modify_expr(index, modifier))
        case PrefixExpression(operator=op, right=right):
            node = PrefixExpression(op, _modify_expr(right, modifier))
        case InfixExpression(left=left, operator=op, right=right):
            node = InfixExpression(_modify_expr(left, modifier), op, _modify_expr(right, modifier))
        case IfExpression(condition=cond, consequence=cons, alternative=alt):
            node = IfExpression(
                _modify_expr(cond, modifier),
                _modify_block(cons, modifier),
                _modify_block(alt, modifier) if alt is not None else None,
            )
        case FunctionLiteral(parameters=params, body=body):
            node = FunctionLiteral(list(params), _modify_block(body, modifier))
        case CallExpression(function=fn, arguments=args):
            node = CallExpression(_modify_expr(fn, modifier), [_modify_expr(a, modifier) for a in args])
        case MacroLiteral(parameters=params, body=body):
            node = MacroLiteral(list(params), _modify_block(body, modifier))
        case _:
            assert_never(node)

    return modifier(node)

def _modify_block(block: BlockStatement, modifier: Modifier) -> BlockStatement:
    rewritten = BlockStatement([_modify_stmt(s, modifier) for s in block.statements])
    result = modifier(rewritten)

    if not isinstance(result, BlockStatement):
        raise TypeError(f"block rewritten into {type(result).__name__}")

    return result

def _modify_stmt(stmt: Statement, modifier: Modifier) -> Statement:
    result = modify(stmt, modifier)

    if not is_statement(result):
        raise TypeError(f"statement rewritten into {type(result).__name__}")

    return result

def _modify_expr(expr: Expression, modifier: Modifier) -> Expression:
    result = modify(expr, modifier)

    if isinstance(result, Program) or is_statement(result):
        raise TypeError(f"expression rewritten into {type(result).__name__}")

    return result
