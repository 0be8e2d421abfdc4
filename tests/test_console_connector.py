# tests/test_console_connector.py

from __future__ import annotations

from collections.abc import Iterable

import pytest

from task_tracker.connectors import console_connector
from task_tracker.connectors.console_connector import run_console_loop


def _scripted(lines: Iterable[str], end: type[BaseException] = EOFError):
    it = iter(lines)

    def read(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise end() from None

    return read


def test_console_runs_commands_until_exit(state) -> None:
    out: list[str] = []
    run_console_loop(
        state,
        read=_scripted(["", "/add Walk dog due=2024-01-02", "hello", "/exit", "/list"]),
        write=out.append,
    )

    assert len(state.tasks) == 1
    assert any(o.startswith("Task added successfully!") for o in out)
    assert any("Commands start with '/'" in o for o in out)
    # input after /exit is never read
    assert not any(o.startswith("ALL TASKS") for o in out)


@pytest.mark.parametrize("end", [EOFError, KeyboardInterrupt])
def test_console_stops_on_eof_and_interrupt(state, end) -> None:
    out: list[str] = []
    run_console_loop(state, read=_scripted(["/list"], end=end), write=out.append)
    assert "No tasks available.\n" in out


def test_console_survives_crashing_handler(state, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(state, line):
        raise RuntimeError("kaput")

    monkeypatch.setattr(console_connector.command_registry, "handle", boom)
    out: list[str] = []
    run_console_loop(state, read=_scripted(["/stats"]), write=out.append)
    assert "Internal error while handling a command.\n" in out
