from __future__ import annotations

from typing import Optional, Tuple

import pytest

from monkey_ref.macro_expansion import define_macros, expand_macros
from monkey_ref.parser import parse_source
from monkey_ref.runner import run as run_program
from monkey_ref.runtime import (
    Frame,
    MacroExpansionError,
    MkArray,
    MkBool,
    MkError,
    MkHash,
    MkInteger,
    MkMacro,
    MkNull,
    MkQuote,
    MkString,
    MkValue,
    MonkeyError,
    NULL,
    ParseError,
)
from monkey_ref.tree import Program

RuntimeExpectation = Optional[Tuple[str, object]]

def parse_program(code: str) -> Program:
    return parse_source(code)

def render(code: str) -> str:
    """Canonical rendering of *code* after a parse."""
    return str(parse_source(code))

def expand_source(code: str) -> Tuple[Program, Frame]:
    """Run both macro passes over *code* and return the expanded program."""
    program = parse_source(code)
    macro_frame = Frame()
    define_macros(program, macro_frame)

    return expand_macros(program, macro_frame), macro_frame

def verify_result(value: object, kind: str, expected: object) -> None:
    """Assert runtime result shape/value compatibility."""
    match kind:
        case "integer":
            assert isinstance(
                value, MkInteger
            ), f"expected MkInteger, got {type(value).__name__}: {value!r}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "string":
            assert isinstance(
                value, MkString
            ), f"expected MkString, got {type(value).__name__}: {value!r}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "bool":
            assert isinstance(
                value, MkBool
            ), f"expected MkBool, got {type(value).__name__}: {value!r}"
            assert (
                value.value is expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "null":
            assert value is NULL, f"expected null, got {value!r}"
            return
        case "array":
            assert isinstance(
                value, MkArray
            ), f"expected MkArray, got {type(value).__name__}: {value!r}"
            assert (
                repr(value) == expected
            ), f"expected {expected}, got {value!r}"
            return
        case "inspect":
            assert repr(value) == expected, f"expected {expected}, got {value!r}"
            return
        case "error":
            assert isinstance(
                value, MkError
            ), f"expected MkError, got {type(value).__name__}: {value!r}"
            assert (
                value.message == expected
            ), f"expected error {expected!r}, got {value.message!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind!r}")

def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source)
        return

    result = run_program(source)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])
