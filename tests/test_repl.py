import builtins
from collections.abc import Callable

import pytest

from llcalc.llcalc_config import CalcConfig
from llcalc.llcalc_repl import evaluate_line, format_symbol_table, start_repl
from llcalc.llcalc_session import Session


def feed(lines: list[str]) -> Callable[[str], str]:
    calls = iter(lines)

    def fake_input(_: str) -> str:
        try:
            return next(calls)
        except StopIteration:
            raise EOFError from None

    return fake_input


def run(monkeypatch: pytest.MonkeyPatch, lines: list[str], **kwargs: object) -> None:
    monkeypatch.setattr(builtins, "input", feed(lines))
    start_repl(**kwargs)  # type: ignore[arg-type]


def test_repl_quit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["quit"])
    out = capsys.readouterr().out
    assert "llcalc REPL [numeric=real]" in out
    assert "Exiting llcalc REPL" in out


def test_repl_exit(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["exit"])
    assert "Exiting llcalc REPL" in capsys.readouterr().out


def test_repl_eof_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, [])
    assert "Exiting llcalc REPL" in capsys.readouterr().out


def test_repl_keyboard_interrupt(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        builtins, "input", lambda _: (_ for _ in ()).throw(KeyboardInterrupt())
    )
    start_repl()
    assert "Exiting llcalc REPL" in capsys.readouterr().out


def test_repl_evaluates_and_keeps_symbols(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["x = 3 + 4", "x * 2", "quit"])
    lines = capsys.readouterr().out.splitlines()
    assert "7" in lines
    assert "14" in lines


def test_repl_reports_errors_and_continues(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["zzz", "1 + 1", "quit"])
    out = capsys.readouterr().out
    assert '[error] >>> Unknown identifier: "zzz"' in out
    assert "\n2\n" in out


def test_repl_skips_blank_and_comment_lines(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["   ", "# note", "quit"])
    out = capsys.readouterr().out
    assert "[error]" not in out
    assert "0\n" not in out


def test_repl_symbols_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["y = 2", ":symbols", "quit"])
    out = capsys.readouterr().out
    assert "Symbol table:\n\tpi = 3.14159265\n\ty = 2" in out


def test_repl_show_symbols_after_each_line(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["1", "2", "quit"], show_symbols=True)
    assert capsys.readouterr().out.count("Symbol table:") == 2


def test_repl_verbose_toggle(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, [":verbose", "1 + 2", ":verbose", "quit"])
    out = capsys.readouterr().out
    assert "[mode] >>> Verbose mode ON" in out
    assert "[tokens] >>> [Token(NUMBER, 1.0), Token(PLUS, +), Token(NUMBER, 2.0)]" in out
    assert "[mode] >>> Verbose mode OFF" in out


def test_repl_help_and_unknown_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, [":help", ":bogus", "quit"])
    out = capsys.readouterr().out
    assert "sqrt" in out
    assert "[error] >>> Unknown command: :bogus" in out


def test_repl_integer_config(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    run(monkeypatch, ["255", "quit"], config=CalcConfig(numeric="integer", base=16))
    out = capsys.readouterr().out
    assert "numeric=integer" in out
    assert "ff" in out.splitlines()


def test_evaluate_line_returns_text(capsys: pytest.CaptureFixture[str]) -> None:
    with Session() as s:
        assert evaluate_line(s, "1 / 4") == "0.25"
    assert capsys.readouterr().out == "0.25\n"


def test_format_symbol_table() -> None:
    with Session() as s:
        s.parse("a = 1")
        assert format_symbol_table(s) == "Symbol table:\n\tpi = 3.14159265\n\ta = 1"
