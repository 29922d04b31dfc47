import io
import json
import logging

import minargs
from minargs import cli, logger


class TtyInput(io.StringIO):
    def isatty(self) -> bool:
        return True


def run(capsys, argv: list[str], stdin: str = "") -> tuple[int, dict]:
    code = cli.exec(argv, io.StringIO(stdin))
    out = capsys.readouterr().out
    return code, json.loads(out)


# --- Input ------------------------------------------------------------------ #


def test_cli_args_flag(capsys):
    code, res = run(capsys, ["--args=--foo=bar baz"])
    assert code == 0
    assert res["args"] == {"foo": ["bar"]}
    assert res["positionals"] == ["baz"]


def test_cli_args_flag_quoted(capsys):
    code, res = run(capsys, ['--args=--name="John Doe" -- rest'])
    assert code == 0
    assert res["args"] == {"name": ["John Doe"]}
    assert res["remainder"] == ["rest"]


def test_cli_stdin(capsys):
    code, res = run(capsys, [], "--foo bar\n")
    assert code == 0
    assert res["args"] == {"foo": [""]}
    assert res["positionals"] == ["bar"]
    assert res["argv"][0] == {
        "index": 0,
        "type": "argument",
        "value": {"name": "foo", "value": ""},
    }


def test_cli_no_input_on_tty(capsys):
    code = cli.exec([], TtyInput())
    captured = capsys.readouterr()
    assert code == 1
    assert "no args passed" in captured.err
    assert "Usage:" in captured.out


# --- Options ---------------------------------------------------------------- #


def test_cli_positional_values(capsys):
    code, res = run(capsys, ["--positionalValues"], "--foo bar")
    assert res["args"] == {"foo": ["bar"]}
    assert res["positionals"] == []

    code, res = run(capsys, ["-p"], "--foo bar")
    assert res["args"] == {"foo": ["bar"]}


def test_cli_alias(capsys):
    code, res = run(capsys, ["--alias", "f:foo", "-a=b:bar"], "-fb")
    assert code == 0
    assert res["args"] == {"foo": [""], "bar": [""]}


def test_cli_multiple(capsys):
    code, res = run(capsys, ["-m", "foo"], "--foo=a --foo=b --bar=a --bar=b")
    assert res["values"] == {"foo": ["a", "b"], "bar": "b"}


def test_cli_known(capsys):
    code, res = run(capsys, ["-k", "foo", "-k", "bar"], "--foo")
    assert res["exists"] == {"foo": True, "bar": False}


def test_cli_recursive(capsys):
    code, res = run(capsys, ["-r"], "a -- b")
    assert res["positionals"] == ["a", "--", "b"]
    assert res["remainder"] == []


def test_cli_operands_are_ignored(capsys):
    code = cli.exec(["extra", "--args=x"], io.StringIO())
    captured = capsys.readouterr()
    assert code == 0
    assert "Ignoring unexpected operand 'extra'" in captured.err
    assert json.loads(captured.out)["positionals"] == ["x"]


# --- Help ------------------------------------------------------------------- #


def test_cli_help(capsys):
    code = cli.exec(["-h"], io.StringIO())
    out = capsys.readouterr().out
    assert code == 0
    assert "Options:" in out
    for flag in cli.FLAGS:
        assert f"--{flag.longName}" in out


def test_fill():
    assert cli.fill([5, 5], ["a", "b"]) == "a     b"
    assert cli.fill([2], ["toolong"]) == "toolong"


# --- Errors ----------------------------------------------------------------- #


def test_main_strict_unknown(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("--foo --bar"))
    assert minargs.main(["--known", "foo", "--strict"]) == 1
    captured = capsys.readouterr()
    assert "Unknown option 'bar'" in captured.err
    assert captured.out == ""


def test_main_bad_alias(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert minargs.main(["--alias=foo"]) == 1
    assert "<alias>:<option>" in capsys.readouterr().err


def test_main_unknown_flag(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert minargs.main(["--nope"]) == 1
    assert "Unknown option 'nope'" in capsys.readouterr().err


def test_main_success(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("a b"))
    assert minargs.main([]) == 0
    assert json.loads(capsys.readouterr().out)["positionals"] == ["a", "b"]


class BadInput(io.StringIO):
    def read(self, *args) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


def test_main_decode_error(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", BadInput())
    assert minargs.main([]) == 1
    captured = capsys.readouterr()
    assert "Error:" in captured.err
    assert "invalid start byte" in captured.err
    assert captured.out == ""


# --- Logging ---------------------------------------------------------------- #


def test_logger_setup_is_reapplied():
    root = logging.getLogger()
    try:
        logger.setup(False)
        assert root.level == logging.WARNING
        logger.setup(True)
        assert root.level == logging.DEBUG
    finally:
        logger.setup(False)


def test_cli_verbose_twice(capsys):
    run(capsys, [], "a")
    assert logging.getLogger().level == logging.WARNING
    run(capsys, ["-v"], "a")
    assert logging.getLogger().level == logging.DEBUG
    logger.setup(False)
