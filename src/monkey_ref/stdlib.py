"""Built-in functions (len, puts, ...) registered via monkey_ref.runtime."""

from __future__ import annotations

from typing import List

from .runtime import register_stdlib, MkArray, MkError, MkInteger, MkString, MkValue, NULL

def _expect_array(name: str, value: MkValue) -> MkArray | MkError:
    if isinstance(value, MkArray):
        return value

    return MkError(f"argument to `{name}` must be ARRAY, got {value.type_name}")

@register_stdlib("len", arity=1)
def std_len(_frame, args: List[MkValue]) -> MkValue:
    match args[0]:
        case MkString(value=s):
            return MkInteger(len(s))
        case MkArray(items=items):
            return MkInteger(len(items))
        case other:
            return MkError(f"argument to `len` not supported, got {other.type_name}")

@register_stdlib("puts")
def std_puts(_frame, args: List[MkValue]) -> MkValue:
    for arg in args:
        print(repr(arg))

    return NULL

@register_stdlib("first", arity=1)
def std_first(_frame, args: List[MkValue]) -> MkValue:
    arr = _expect_array("first", args[0])
    if isinstance(arr, MkError):
        return arr

    return arr.items[0] if arr.items else NULL

@register_stdlib("last", arity=1)
def std_last(_frame, args: List[MkValue]) -> MkValue:
    arr = _expect_array("last", args[0])
    if isinstance(arr, MkError):
        return arr

    return arr.items[-1] if arr.items else NULL

@register_stdlib("rest", arity=1)
def std_rest(_frame, args: List[MkValue]) -> MkValue:
    arr = _expect_array("rest", args[0])
    if isinstance(arr, MkError):
        return arr

    if not arr.items:
        return NULL

    return MkArray(list(arr.items[1:]))

@register_stdlib("push", arity=2)
def std_push(_frame, args: List[MkValue]) -> MkValue:
    arr = _expect_array("push", args[0])
    if isinstance(arr, MkError):
        return arr

    return MkArray([*arr.items, args[1]])
