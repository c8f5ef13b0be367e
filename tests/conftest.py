from __future__ import annotations

import pytest

@pytest.fixture(autouse=True)
def _isolated_monkey_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's MONKEY_* settings out of the test run."""
    monkeypatch.delenv("MONKEY_DEBUG_PY_TRACE", raising=False)
    monkeypatch.delenv("MONKEY_LOG_LEVEL", raising=False)
