from __future__ import annotations

import logging
import os
import sys
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

DEBUG_PY_TRACE_VAR = "MONKEY_DEBUG_PY_TRACE"
LOG_LEVEL_VAR = "MONKEY_LOG_LEVEL"

_TRUTHY = ("1", "true", "yes", "on")

def debug_py_trace_enabled() -> bool:
    """True when Python tracebacks should accompany REPL errors."""
    return os.environ.get(DEBUG_PY_TRACE_VAR, "").strip().lower() in _TRUTHY

def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_VAR] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_VAR, None)

def log_level_from_env(default: int=logging.WARNING) -> int:
    raw: Optional[str] = os.environ.get(LOG_LEVEL_VAR)
    if not raw:
        return default

    raw = raw.strip()
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw.upper())

    return level if isinstance(level, int) else default

def configure_logging(level: Optional[int]=None) -> None:
    logging.basicConfig(
        level=log_level_from_env() if level is None else level,
        format="%(levelname)s %(name)s: %(message)s",
    )

# Each Monkey call costs a dozen or so Python frames.
EVAL_RECURSION_LIMIT = 60_000
EVAL_STACK_SIZE = 512 * 1024 * 1024

T = TypeVar("T")

def call_with_deep_stack(func: Callable[..., T], *args: Any) -> T:
    """Run *func* on a worker thread with a large stack and recursion limit.

    Whatever *func* raises is re-raised in the calling thread.
    """
    outcome: Dict[str, Any] = {}

    def runner() -> None:
        try:
            outcome["value"] = func(*args)
        except BaseException as exc:
            outcome["error"] = exc

    old_limit = sys.getrecursionlimit()
    old_size = threading.stack_size(EVAL_STACK_SIZE)
    sys.setrecursionlimit(max(old_limit, EVAL_RECURSION_LIMIT))
    try:
        thread = threading.Thread(target=runner, name="monkey-eval")
        thread.start()
        thread.join()
    finally:
        threading.stack_size(old_size)
        sys.setrecursionlimit(old_limit)

    if "error" in outcome:
        raise outcome["error"]

    return outcome["value"]
