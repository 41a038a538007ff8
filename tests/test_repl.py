import builtins
from typing import Iterator

import pytest

from rdcalc.rdcalc_repl import HELP_TEXT, PROMPT, ReplSession, start_repl


def feed(monkeypatch: pytest.MonkeyPatch, *lines: str) -> list[str]:
    """Replaces `input` with one that yields `lines`, then raises EOFError."""
    prompts: list[str] = []
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)
    return prompts


@pytest.fixture  # type: ignore[misc]
def session() -> ReplSession:
    return ReplSession(color=False)


def test_repl_quit(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    prompts = feed(monkeypatch, ":quit", "1 + 1")
    start_repl(color=False)
    out = capsys.readouterr().out
    assert "Type ':help' for help" in out
    assert "Exiting rdcalc." in out
    assert "2" not in out.splitlines()
    assert prompts == [PROMPT]


def test_repl_exit_alias(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch, ":exit")
    start_repl(color=False)
    assert "Exiting rdcalc." in capsys.readouterr().out


def test_repl_eof_exits(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(monkeypatch)
    start_repl(color=False)
    assert "Exiting rdcalc." in capsys.readouterr().out


def test_repl_keyboard_interrupt_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def interrupt(prompt: str) -> str:
        raise KeyboardInterrupt

    monkeypatch.setattr(builtins, "input", interrupt)
    start_repl(color=False)
    assert "Exiting rdcalc." in capsys.readouterr().out


def test_repl_evaluates_lines(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    feed(
        monkeypatch,
        ":define sq = func (n) { n * n }",
        "sq(7)",
        "2 * 3 + 4",
        ":quit",
    )
    start_repl(color=False)
    lines = capsys.readouterr().out.splitlines()
    assert "<func (n) { (n * n) }>" in lines
    assert "49" in lines
    assert "10" in lines


def test_repl_keeps_going_after_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, ")", "1 / 0", "undefined", "5", ":quit")
    start_repl(color=False)
    out = capsys.readouterr().out
    assert "error: Illegal term in expression: ')'" in out
    assert "error: Division by zero" in out
    assert "error: Undefined variable 'undefined'" in out
    assert "5" in out.splitlines()


def test_run_line_returns_value(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    assert session.run_line("  :define x = 10  ") == 10
    assert session.run_line("x * 2") == 20
    assert capsys.readouterr().out.splitlines() == ["10", "20"]


def test_run_line_skips_blank_and_comment_lines(
    session: ReplSession, capsys: pytest.CaptureFixture[str]
) -> None:
    assert session.run_line("") is None
    assert session.run_line("   ") is None
    assert session.run_line("# just a note") is None
    assert capsys.readouterr().out == ""


def test_run_line_parse_error_points_at_token(
    session: ReplSession, capsys: pytest.CaptureFixture[str]
) -> None:
    assert session.run_line("1 + )") is None
    out = capsys.readouterr().out
    assert "error: Illegal term in expression: ')'" in out
    assert "  1 + )" in out
    assert "      ^" in out
    assert session.error_handler.line is None


def test_run_line_malformed_conditional(
    session: ReplSession, capsys: pytest.CaptureFixture[str]
) -> None:
    assert session.run_line("if a < b c else d") is None
    assert "Expected 'then' in 'if'" in capsys.readouterr().out


def test_run_line_eval_error_returns_none(
    session: ReplSession, capsys: pytest.CaptureFixture[str]
) -> None:
    assert session.run_line("1 / 0") is None
    assert "Division by zero" in capsys.readouterr().out


def test_run_line_recursion_limit(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    session.run_line(":define loop = func (n) { loop(n + 1) }")
    assert session.run_line("loop(0)") is None
    assert "maximum recursion depth exceeded" in capsys.readouterr().out


def test_help_command(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    session.run_line(":help")
    assert HELP_TEXT in capsys.readouterr().out


def test_vars_command(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    session.run_line(":vars")
    assert "[vars] >>> No variables defined." in capsys.readouterr().out

    session.run_line(":define b = 2")
    session.run_line(":define a = 1")
    capsys.readouterr()
    session.run_line(":vars")
    assert capsys.readouterr().out.splitlines() == [
        "           a = 1",
        "           b = 2",
    ]


def test_verbose_toggle_prints_tree(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    session.run_line(":verbose")
    assert "[mode] >>> Verbose mode ON" in capsys.readouterr().out
    assert session.error_handler.verbose

    session.run_line("1 - 2 - 3")
    out = capsys.readouterr().out
    assert "[tree] >>> ((1 - 2) - 3)" in out
    assert "-4" in out.splitlines()

    session.run_line(":verbose")
    assert "[mode] >>> Verbose mode OFF" in capsys.readouterr().out


def test_right_assoc_session(capsys: pytest.CaptureFixture[str]) -> None:
    session = ReplSession(right_assoc=True, color=False)
    assert session.run_line("1 - 2 - 3") == 2


def test_load_command_warns(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    assert session.run_line(":load prelude.rdc") is None
    assert "warning: :load is not supported" in capsys.readouterr().out


def test_unknown_command(session: ReplSession, capsys: pytest.CaptureFixture[str]) -> None:
    session.run_line(":frobnicate")
    assert "error: Unknown command ':frobnicate'" in capsys.readouterr().out
    assert not session.done


def test_quit_sets_done(session: ReplSession) -> None:
    session.run_line(":quit")
    assert session.done


def test_deeply_nested_line_is_reported(
    session: ReplSession, capsys: pytest.CaptureFixture[str]
) -> None:
    assert session.run_line("(" * 1000 + "1" + ")" * 1000) is None
    assert "error: Expression is nested too deeply" in capsys.readouterr().out
    assert session.run_line("1 + 1") == 2


def test_verbose_long_chain_is_reported(capsys: pytest.CaptureFixture[str]) -> None:
    session = ReplSession(verbose=True, color=False)
    assert session.run_line(" + ".join(["1"] * 3000)) is None
    assert "maximum recursion depth exceeded" in capsys.readouterr().out
    assert session.run_line("2 * 3") == 6


def test_repl_survives_deep_nesting(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    feed(monkeypatch, "(" * 1000 + "1" + ")" * 1000, "7", ":quit")
    start_repl(color=False)
    out = capsys.readouterr().out
    assert "nested too deeply" in out
    assert "7" in out.splitlines()
    assert "Exiting rdcalc." in out
