from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    Frame,
    MacroExpansionError,
    MkMacro,
    expand_source,
    parse_program,
    render,
    run_program,
    run_runtime_case,
)
from monkey_ref.macro_expansion import define_macros, expand_macros, is_macro_definition

QUOTE_SCENARIOS = [
    pytest.param("quote(5)", ("inspect", "QUOTE(5)"), None, id="quote-integer"),
    pytest.param("quote(5 + 8)", ("inspect", "QUOTE((5 + 8))"), None, id="quote-infix"),
    pytest.param("quote(foobar)", ("inspect", "QUOTE(foobar)"), None, id="quote-identifier"),
    pytest.param("quote(foobar + barfoo)", ("inspect", "QUOTE((foobar + barfoo))"), None, id="quote-unbound-names"),
    pytest.param("quote(unquote(4))", ("inspect", "QUOTE(4)"), None, id="unquote-integer"),
    pytest.param("quote(unquote(4 + 4))", ("inspect", "QUOTE(8)"), None, id="unquote-evaluates"),
    pytest.param("quote(8 + unquote(4 + 4))", ("inspect", "QUOTE((8 + 8))"), None, id="unquote-right"),
    pytest.param("quote(unquote(4 + 4) + 8)", ("inspect", "QUOTE((8 + 8))"), None, id="unquote-left"),
    pytest.param("let foobar = 8; quote(foobar)", ("inspect", "QUOTE(foobar)"), None, id="quote-does-not-resolve"),
    pytest.param("let foobar = 8; quote(unquote(foobar))", ("inspect", "QUOTE(8)"), None, id="unquote-resolves"),
    pytest.param("quote(unquote(true))", ("inspect", "QUOTE(true)"), None, id="unquote-true"),
    pytest.param("quote(unquote(true == false))", ("inspect", "QUOTE(false)"), None, id="unquote-bool-expression"),
    pytest.param("quote(unquote(quote(4 + 4)))", ("inspect", "QUOTE((4 + 4))"), None, id="unquote-quote"),
    pytest.param(
        dedent(
            """\
            let quotedInfixExpression = quote(4 + 4);
            quote(unquote(4 + 4) + unquote(quotedInfixExpression))
        """
        ),
        ("inspect", "QUOTE((8 + (4 + 4)))"),
        None,
        id="unquote-bound-quote",
    ),
    pytest.param('quote(unquote("a" + "b"))', ("inspect", 'QUOTE("ab")'), None, id="unquote-string"),
    pytest.param("quote(unquote([1, 1 + 1]))", ("inspect", "QUOTE([1, 2])"), None, id="unquote-array"),
    pytest.param('quote(unquote({"k": 2}))', ("inspect", 'QUOTE({"k": 2})'), None, id="unquote-hash"),
    pytest.param("quote(fn(x) { unquote(1 + 1) })", ("inspect", "QUOTE(fn(x) { 2 })"), None, id="unquote-in-body"),
    pytest.param("quote(f(unquote(1 + 1)))", ("inspect", "QUOTE(f(2))"), None, id="unquote-in-call-args"),
    pytest.param("quote(unquote(1, 2))", ("inspect", "QUOTE(unquote(1, 2))"), None, id="two-arg-unquote-untouched"),
    pytest.param(
        "quote()",
        ("error", "wrong number of arguments to quote: got=0, want=1"),
        None,
        id="quote-arity",
    ),
    pytest.param(
        "quote(unquote(fn(x) { x }))",
        ("error", "unquote: cannot convert FUNCTION to a syntax node"),
        None,
        id="unquote-function",
    ),
    pytest.param(
        "quote(unquote(if (false) { 1 }))",
        ("error", "unquote: cannot convert NULL to a syntax node"),
        None,
        id="unquote-null",
    ),
    pytest.param("quote(unquote(nope))", ("error", "identifier not found: nope"), None, id="unquote-error"),
    pytest.param("let quote = fn(x) { x * 2 }; quote(3)", ("integer", 6), None, id="user-binding-shadows-quote"),
    pytest.param(
        "let f = fn(quote) { quote(1) }; f(fn(x) { x + 1 })",
        ("integer", 2),
        None,
        id="parameter-shadows-quote",
    ),
    pytest.param(
        "let f = fn(quote) { quote }; quote(f(1) + 1)",
        ("inspect", "QUOTE((f(1) + 1))"),
        None,
        id="quote-outside-shadowing-scope",
    ),
]

@pytest.mark.parametrize("source, expectation, expected_exc", QUOTE_SCENARIOS)
def test_quote_unquote(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)

def test_define_macros_binds_and_removes_definitions() -> None:
    program = parse_program(
        dedent(
            """\
            let number = 1;
            let function = fn(x, y) { x + y };
            let mymacro = macro(x, y) { x + y; };
        """
        )
    )
    frame = Frame()

    define_macros(program, frame)

    assert len(program.statements) == 2
    assert [str(s) for s in program.statements] == [
        "let number = 1;",
        "let function = fn(x, y) { (x + y) };",
    ]
    assert frame.get("number") is None
    assert frame.get("function") is None

    macro = frame.get("mymacro")
    assert isinstance(macro, MkMacro)
    assert [p.value for p in macro.parameters] == ["x", "y"]
    assert str(macro.body) == "{ (x + y) }"
    assert macro.frame is frame

def test_define_macros_keeps_statement_order() -> None:
    program = parse_program("1; let m = macro() { quote(1) }; 2; 3;")

    define_macros(program, Frame())

    assert [str(s) for s in program.statements] == ["1", "2", "3"]

def test_define_macros_ignores_nested_definitions() -> None:
    program = parse_program("let f = fn() { let m = macro() { quote(1) }; m() };")
    frame = Frame()

    define_macros(program, frame)

    assert len(program.statements) == 1
    assert frame.get("m") is None

def test_is_macro_definition() -> None:
    let_macro, let_fn, bare_macro = parse_program(
        "let m = macro() { 1 }; let f = fn() { 1 }; macro() { 1 };"
    ).statements

    assert is_macro_definition(let_macro)
    assert not is_macro_definition(let_fn)
    assert not is_macro_definition(bare_macro)

EXPANSION_CASES = [
    pytest.param(
        dedent(
            """\
            let infixExpression = macro() { quote(1 + 2); };
            infixExpression();
        """
        ),
        "(1 + 2)",
        id="no-arg-macro",
    ),
    pytest.param(
        dedent(
            """\
            let reverse = macro(a, b) { quote(unquote(b) - unquote(a)); };
            reverse(2 + 2, 10 - 5);
        """
        ),
        "(10 - 5) - (2 + 2)",
        id="reverse-args",
    ),
    pytest.param(
        dedent(
            """\
            let unless = macro(condition, consequence, alternative) {
              quote(if (!(unquote(condition))) {
                unquote(consequence);
              } else {
                unquote(alternative);
              });
            };
            unless(10 > 5, puts("not greater"), puts("greater"));
        """
        ),
        'if (!(10 > 5)) { puts("not greater") } else { puts("greater") }',
        id="unless",
    ),
    pytest.param(
        dedent(
            """\
            let id = macro(x) { x };
            id(id(1 + 1));
        """
        ),
        "1 + 1",
        id="nested-macro-calls",
    ),
    pytest.param(
        dedent(
            """\
            let twice = macro(x) { quote(unquote(x) * 2) };
            let f = fn(y) { twice(y) };
        """
        ),
        "let f = fn(y) { y * 2 };",
        id="expands-inside-function-body",
    ),
    pytest.param(
        dedent(
            """\
            let one = macro() { quote(1) };
            [one(), {one(): one()}, f(one())[one()]];
        """
        ),
        "[1, {1: 1}, f(1)[1]];",
        id="expands-inside-literals-and-calls",
    ),
    pytest.param(
        dedent(
            """\
            let reverse = macro(a, b) { quote(unquote(b) - unquote(a)); };
            reverse(1, 2);
            reverse(3, 4);
        """
        ),
        "(2 - 1); (4 - 3);",
        id="template-reused",
    ),
    pytest.param(
        dedent(
            """\
            let m = macro() { return quote(7); 99 };
            m();
        """
        ),
        "7",
        id="return-in-macro-body",
    ),
    pytest.param("puts(1); len([]);", "puts(1); len([]);", id="no-macros"),
]

@pytest.mark.parametrize("source, expected_source", EXPANSION_CASES)
def test_expand_macros(source: str, expected_source: str) -> None:
    expanded, _ = expand_source(source)

    assert str(expanded) == render(expected_source)

def test_expand_macros_leaves_input_program_alone() -> None:
    program = parse_program(
        dedent(
            """\
            let infixExpression = macro() { quote(1 + 2); };
            infixExpression();
        """
        )
    )
    frame = Frame()
    define_macros(program, frame)

    expanded = expand_macros(program, frame)

    assert str(program) == "infixExpression()"
    assert str(expanded) == "(1 + 2)"
    assert expanded is not program

def test_expansion_does_not_mutate_macro_body() -> None:
    source = dedent(
        """\
        let reverse = macro(a, b) { quote(unquote(b) - unquote(a)); };
        reverse(1, 2);
    """
    )
    _, frame = expand_source(source)

    macro = frame.get("reverse")
    assert isinstance(macro, MkMacro)
    assert str(macro.body) == "{ quote((unquote(b) - unquote(a))) }"

@pytest.mark.parametrize(
    "source, message",
    [
        pytest.param(
            "let m = macro() { 1 }; m();",
            "macro m must return a quoted syntax tree, got INTEGER",
            id="non-quote-result",
        ),
        pytest.param(
            "let m = macro(a) { quote(1) }; m();",
            "wrong number of macro arguments: want=1, got=0",
            id="macro-arity",
        ),
        pytest.param(
            "let m = macro() { nope }; m();",
            "macro m: identifier not found: nope",
            id="body-error",
        ),
        pytest.param(
            "let m = macro() { quote(unquote(x)) }; let x = 1; m();",
            "macro m: identifier not found: x",
            id="runtime-bindings-invisible",
        ),
    ],
)
def test_malformed_macro_raises(source: str, message: str) -> None:
    with pytest.raises(MacroExpansionError) as exc_info:
        expand_source(source)

    assert exc_info.value.error.message == message

def test_run_turns_expansion_failure_into_error_value() -> None:
    run_runtime_case(
        "let m = macro() { 1 }; m();",
        ("error", "macro m must return a quoted syntax tree, got INTEGER"),
        None,
    )

def test_unless_macro_runs_alternative(capsys: pytest.CaptureFixture[str]) -> None:
    result = run_program(
        dedent(
            """\
            let unless = macro(condition, consequence, alternative) {
              quote(if (!(unquote(condition))) {
                unquote(consequence);
              } else {
                unquote(alternative);
              });
            };
            unless(10 > 5, puts("not greater"), puts("greater"));
        """
        )
    )

    assert repr(result) == "null"
    assert capsys.readouterr().out == "greater\n"

def test_macro_arguments_are_not_evaluated(capsys: pytest.CaptureFixture[str]) -> None:
    result = run_program(
        dedent(
            """\
            let ignore = macro(x) { quote(0) };
            ignore(puts("never"));
        """
        )
    )

    run_runtime_case("let ignore = macro(x) { quote(0) }; ignore(nope);", ("integer", 0), None)
    assert repr(result) == "0"
    assert capsys.readouterr().out == ""

def test_expanded_macro_evaluates_with_runtime_bindings() -> None:
    run_runtime_case(
        dedent(
            """\
            let twice = macro(x) { quote(unquote(x) * 2) };
            let f = fn(y) { twice(y) };
            f(21)
        """
        ),
        ("integer", 42),
        None,
    )
