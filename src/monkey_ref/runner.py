from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from .evaluator import eval_node
from .macro_expansion import define_macros, expand_macros
from .parser import parse_source
from .runtime import Frame, MacroExpansionError, MkError, MkValue, MonkeyError, init_stdlib
from .tree import LetStatement
from .utils import call_with_deep_stack, configure_logging

logger = logging.getLogger(__name__)

@dataclass
class Session:
    """Top-level state reused across REPL lines: values and macros live apart."""
    frame: Frame = field(default_factory=Frame)
    macro_frame: Frame = field(default_factory=Frame)

    def reset(self) -> None:
        self.frame = Frame()
        self.macro_frame = Frame()

def run(src: str, frame: Optional[Frame]=None, macro_frame: Optional[Frame]=None) -> MkValue:
    """Parse, expand macros and evaluate *src*.

    Raises ParseError on malformed input. A macro that fails to expand turns
    into the ERROR value of the run.
    """
    init_stdlib()

    if frame is None:
        frame = Frame()
    if macro_frame is None:
        macro_frame = Frame()

    return call_with_deep_stack(_run, src, frame, macro_frame)

def _run(src: str, frame: Frame, macro_frame: Frame) -> MkValue:
    program = parse_source(src)
    logger.debug("parsed %d statement(s)", len(program.statements))

    define_macros(program, macro_frame)

    try:
        expanded = expand_macros(program, macro_frame)
    except MacroExpansionError as exc:
        logger.debug("macro expansion failed: %s", exc)
        return exc.error

    return eval_node(expanded, frame)

def repl_eval(src: str, session: Session) -> Tuple[MkValue, bool]:
    """Evaluate one REPL submission; the flag is True when it ended in a let."""
    return call_with_deep_stack(_repl_eval, src, session)

def _repl_eval(src: str, session: Session) -> Tuple[MkValue, bool]:
    program = parse_source(src)
    is_let = bool(program.statements) and isinstance(program.statements[-1], LetStatement)

    define_macros(program, session.macro_frame)

    try:
        expanded = expand_macros(program, session.macro_frame)
    except MacroExpansionError as exc:
        return exc.error, False

    return eval_node(expanded, session.frame), is_let

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def main() -> None:
    configure_logging()

    args = sys.argv[1:]
    if len(args) > 1:
        raise SystemExit(f"Unexpected argument: {args[1]}")

    source = _load_source(args[0] if args else "-")

    try:
        result = run(source)
    except MonkeyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from None
    except RecursionError:
        print("Error: maximum recursion depth exceeded", file=sys.stderr)
        raise SystemExit(1) from None

    print(repr(result))

    if isinstance(result, MkError):
        raise SystemExit(1)

if __name__ == "__main__":
    main()
