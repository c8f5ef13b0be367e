from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List, Optional, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import BlockStatement, Identifier, Node

# ---------- Value Model ----------

@dataclass(frozen=True)
class HashKey:
    type_name: str
    value: Union[int, str, bool]

@dataclass(eq=False)
class MkNull:
    type_name: ClassVar[str] = "NULL"

    def __repr__(self) -> str:
        return "null"

@dataclass(eq=False)
class MkInteger:
    value: int
    type_name: ClassVar[str] = "INTEGER"

    def hash_key(self) -> HashKey:
        return HashKey(self.type_name, self.value)

    def __repr__(self) -> str:
        return str(self.value)

@dataclass(eq=False)
class MkString:
    value: str
    type_name: ClassVar[str] = "STRING"

    def hash_key(self) -> HashKey:
        return HashKey(self.type_name, self.value)

    def __repr__(self) -> str:
        return self.value

@dataclass(eq=False)
class MkBool:
    value: bool
    type_name: ClassVar[str] = "BOOLEAN"

    def hash_key(self) -> HashKey:
        return HashKey(self.type_name, self.value)

    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(eq=False)
class MkArray:
    items: List['MkValue']
    type_name: ClassVar[str] = "ARRAY"

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(x) for x in self.items) + "]"

@dataclass(eq=False)
class HashPair:
    key: 'MkValue'
    value: 'MkValue'

@dataclass(eq=False)
class MkHash:
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)
    type_name: ClassVar[str] = "HASH"

    def __repr__(self) -> str:
        return "{" + ", ".join(f"{p.key!r}: {p.value!r}" for p in self.pairs.values()) + "}"

@dataclass(eq=False)
class MkFn:
    parameters: List[Identifier]
    body: BlockStatement
    frame: 'Frame'                   # Closure frame
    type_name: ClassVar[str] = "FUNCTION"

    def __repr__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"

@dataclass(eq=False)
class MkMacro:
    parameters: List[Identifier]
    body: BlockStatement
    frame: 'Frame'
    type_name: ClassVar[str] = "MACRO"

    def __repr__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"macro({params}) {self.body}"

BuiltinFn = Callable[['Frame', List['MkValue']], 'MkValue']

@dataclass(eq=False)
class MkBuiltin:
    name: str
    fn: BuiltinFn
    arity: Optional[int] = None
    type_name: ClassVar[str] = "BUILTIN"

    def __repr__(self) -> str:
        return f"builtin function {self.name}"

@dataclass(eq=False)
class MkQuote:
    node: Node
    type_name: ClassVar[str] = "QUOTE"

    def __repr__(self) -> str:
        return f"QUOTE({self.node})"

@dataclass(eq=False)
class MkReturn:
    """Wraps the value of a ``return`` until the enclosing call unwraps it."""
    value: 'MkValue'
    type_name: ClassVar[str] = "RETURN_VALUE"

    def __repr__(self) -> str:
        return repr(self.value)

@dataclass(eq=False)
class MkError:
    message: str
    type_name: ClassVar[str] = "ERROR"

    def __repr__(self) -> str:
        return f"ERROR: {self.message}"

MkValue: TypeAlias = (
    MkNull
    | MkInteger
    | MkString
    | MkBool
    | MkArray
    | MkHash
    | MkFn
    | MkMacro
    | MkBuiltin
    | MkQuote
    | MkReturn
    | MkError
)

Hashable: TypeAlias = MkInteger | MkString | MkBool

NULL = MkNull()
TRUE = MkBool(True)
FALSE = MkBool(False)

def native_bool(value: bool) -> MkBool:
    return TRUE if value else FALSE

def is_error(value: Optional[MkValue]) -> TypeGuard[MkError]:
    return isinstance(value, MkError)

def is_hashable(value: MkValue) -> TypeGuard[Hashable]:
    return isinstance(value, (MkInteger, MkString, MkBool))

# ---------- Environment ----------

class Frame:
    """One scope in the environment chain.

    A frame owns its own bindings and points at the frame it was created in.
    Closures keep that parent alive by holding the frame itself.
    """
    def __init__(self, parent: Optional['Frame']=None):
        self.parent = parent
        self.vars: Dict[str, MkValue] = {}

    def define(self, name: str, val: MkValue) -> MkValue:
        self.vars[name] = val
        return val

    def get(self, name: str) -> Optional[MkValue]:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]

            frame = frame.parent

        return None

    def child(self) -> 'Frame':
        return Frame(parent=self)

    def __repr__(self) -> str:
        names = ", ".join(self.vars)
        suffix = " -> ..." if self.parent is not None else ""
        return f"<Frame {{{names}}}{suffix}>"

# ---------- Exceptions ----------

class MonkeyError(Exception):
    """Host-level failure (bad input, malformed macro) as opposed to an ERROR value."""

class ParseError(MonkeyError):
    """Parse error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )

class MacroExpansionError(MonkeyError):
    """A macro call could not be turned into a syntax tree."""
    def __init__(self, error: MkError):
        super().__init__(error.message)
        self.error = error

class Builtins:
    stdlib_functions: Dict[str, MkBuiltin] = {}
