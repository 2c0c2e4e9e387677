"""Tests for the shell dispatcher.

The shell normalises a line, picks the first matching grammar, runs the
built-in, and reports any failure on stderr as ``<command>: <reason>``.
Output streams are in-memory so every test can inspect exactly what
was printed where.
"""

import io
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from myshell.config import ShellConfig
from myshell.logging import LogLevel
from myshell.shell import Shell, Status


def _shell(config: ShellConfig | None = None) -> tuple[Shell, io.BytesIO, io.StringIO]:
    """Create a shell writing to in-memory streams."""
    out = io.BytesIO()
    err = io.StringIO()
    return Shell(config, stdout=out, stderr=err), out, err


@pytest.fixture(autouse=True)
def _in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from a fresh temporary directory."""
    monkeypatch.chdir(tmp_path)


class TestShellExecute:
    """Verify line handling and the unrecognised-command path."""

    def test_empty_line_is_silent(self) -> None:
        """An empty line produces no output and succeeds."""
        shell, out, err = _shell()
        assert shell.execute("") is Status.SUCCESS
        assert out.getvalue() == b""
        assert err.getvalue() == ""

    def test_blank_line_is_silent(self) -> None:
        """A whitespace-only line is treated as empty."""
        shell, out, err = _shell()
        assert shell.execute("  \t\n") is Status.SUCCESS
        assert out.getvalue() == b""
        assert err.getvalue() == ""

    def test_unknown_command(self) -> None:
        """An unknown line is echoed back as 'No such file or directory'."""
        shell, _out, err = _shell()
        assert shell.execute("frobnicate now\n") is Status.FAILURE
        assert err.getvalue() == "myshell: frobnicate now: No such file or directory\n"

    @pytest.mark.parametrize("command", ["cat", "stat", "mkdir", "rmdir", "rm"])
    def test_missing_argument_falls_through(self, command: str) -> None:
        """A bare command needing an argument reports the whole line."""
        shell, _out, err = _shell()
        assert shell.execute(command) is Status.FAILURE
        assert err.getvalue() == f"myshell: {command}: No such file or directory\n"

    def test_cdsomething_unrecognised(self) -> None:
        """A glued word is not cd."""
        shell, _out, err = _shell()
        cwd = Path.cwd()
        assert shell.execute("cdsomething") is Status.FAILURE
        assert err.getvalue() == "myshell: cdsomething: No such file or directory\n"
        assert Path.cwd() == cwd

    def test_undecodable_bytes_escaped_in_message(self) -> None:
        """Raw bytes in an unknown line are echoed as backslash escapes."""
        shell, _out, err = _shell()
        assert shell.execute(os.fsdecode(b"frob\xe9")) is Status.FAILURE
        assert err.getvalue() == "myshell: frob\\xe9: No such file or directory\n"

    def test_custom_name_in_message(self) -> None:
        """The configured shell name prefixes the message."""
        shell, _out, err = _shell(ShellConfig(name="sh"))
        shell.execute("nope")
        assert err.getvalue() == "sh: nope: No such file or directory\n"

    def test_long_line_truncated(self) -> None:
        """Input beyond the buffer size is cut off before parsing."""
        shell, _out, err = _shell(ShellConfig(max_line_length=8))
        shell.execute("mkdir abcdefgh")
        assert Path("ab").is_dir()
        assert err.getvalue() == ""

    def test_exit(self) -> None:
        """Exit returns the EXIT status."""
        shell, _out, _err = _shell()
        assert shell.execute("exit\n") is Status.EXIT

    def test_exit_with_argument_unrecognised(self) -> None:
        """'exit 0' is not the exit grammar."""
        shell, _out, err = _shell()
        assert shell.execute("exit 0") is Status.FAILURE
        assert "exit 0: No such file or directory" in err.getvalue()

    def test_command_names_in_priority_order(self) -> None:
        """Command names follow the dispatch order."""
        shell, _out, _err = _shell()
        assert shell.command_names[:2] == ["cd", "exit"]
        assert shell.command_names[-1] == "pwd"


class TestDispatch:
    """Verify each command reaches its handler and failures are reported."""

    def test_ls_equals_ls_dot(self) -> None:
        """Bare ls lists the current directory."""
        Path("one").touch()
        Path("two").mkdir()
        shell, out, _err = _shell()
        shell.execute("ls")
        bare = sorted(out.getvalue().splitlines())
        out.seek(0)
        out.truncate()
        shell.execute("ls .")
        assert sorted(out.getvalue().splitlines()) == bare
        assert b"one" in bare

    def test_cd_and_pwd(self, tmp_path: Path) -> None:
        """Cd changes the directory pwd reports."""
        Path("sub").mkdir()
        shell, out, _err = _shell()
        assert shell.execute("cd sub") is Status.SUCCESS
        shell.execute("pwd")
        assert out.getvalue() == os.fsencode(str(tmp_path / "sub")) + b"\n"

    def test_bare_cd_goes_home(self, tmp_path: Path) -> None:
        """Cd without a path goes to the resolved home directory."""
        home = tmp_path / "home"
        home.mkdir()
        shell, _out, _err = _shell()
        with patch("myshell.builtins.resolve_home", return_value=str(home)):
            assert shell.execute("cd") is Status.SUCCESS
        assert Path.cwd() == home

    def test_cd_nonexistent(self, tmp_path: Path) -> None:
        """A failed cd is reported and leaves the cwd alone."""
        shell, _out, err = _shell()
        assert shell.execute("cd /nonexistent") is Status.FAILURE
        assert err.getvalue() == "cd: No such file or directory\n"
        assert Path.cwd() == tmp_path

    def test_cat_byte_exact(self) -> None:
        """Cat reproduces the file on stdout."""
        Path("data").write_bytes(b"\x00\x01binary\xff\n")
        shell, out, err = _shell()
        assert shell.execute("cat data") is Status.SUCCESS
        assert out.getvalue() == b"\x00\x01binary\xff\n"
        assert err.getvalue() == ""

    def test_cat_empty_file(self) -> None:
        """Cat of an empty file is silent and successful."""
        Path("empty").touch()
        shell, out, err = _shell()
        assert shell.execute("cat empty") is Status.SUCCESS
        assert out.getvalue() == b""
        assert err.getvalue() == ""

    def test_cat_missing(self) -> None:
        """Cat of a missing file reports a FileError."""
        shell, _out, err = _shell()
        assert shell.execute("cat missing") is Status.FAILURE
        assert err.getvalue() == "cat: No such file or directory\n"

    def test_mkdir_rmdir_round_trip(self) -> None:
        """Mkdir then rmdir restores the directory; rmdir again fails."""
        shell, _out, err = _shell()
        before = sorted(os.listdir())  # noqa: PTH208
        assert shell.execute("mkdir foo") is Status.SUCCESS
        assert shell.execute("rmdir foo") is Status.SUCCESS
        assert sorted(os.listdir()) == before  # noqa: PTH208
        assert shell.execute("rmdir foo") is Status.FAILURE
        assert err.getvalue() == "rmdir: No such file or directory\n"

    def test_rm(self) -> None:
        """Rm removes a file."""
        Path("old.log").touch()
        shell, _out, _err = _shell()
        assert shell.execute("rm old.log") is Status.SUCCESS
        assert not Path("old.log").exists()

    def test_stat_fresh_file(self) -> None:
        """Stat reports size 0 and one link for a new empty file."""
        Path("new").touch()
        shell, out, _err = _shell()
        shell.execute("stat new")
        lines = out.getvalue().decode().splitlines()
        assert lines[:3] == ["File: new", "Size: 0 bytes", "Links: 1"]

    def test_failure_does_not_stop_next_command(self) -> None:
        """After an error the shell keeps working."""
        shell, out, _err = _shell()
        shell.execute("rm missing")
        Path("f").write_bytes(b"ok")
        assert shell.execute("cat f") is Status.SUCCESS
        assert out.getvalue() == b"ok"

    def test_pwd_failure_is_silent(self) -> None:
        """Pwd prints nothing when the cwd cannot be resolved."""
        shell, out, err = _shell()
        with patch("myshell.builtins.os.getcwd", side_effect=FileNotFoundError(2, "gone")):
            assert shell.execute("pwd") is Status.SUCCESS
        assert out.getvalue() == b""
        assert err.getvalue() == ""


class TestShellLog:
    """Verify the session audit log."""

    def test_commands_logged_at_debug(self) -> None:
        """Each dispatched line is recorded under its command."""
        shell, _out, _err = _shell()
        shell.execute("ls")
        entries = shell.log.filter(source="ls")
        assert len(entries) == 1
        assert entries[0].level is LogLevel.DEBUG
        assert entries[0].message == "ls"

    def test_failures_logged_at_error(self) -> None:
        """A handler failure is recorded with its description."""
        shell, _out, _err = _shell()
        shell.execute("rm missing")
        errors = shell.log.filter(min_level=LogLevel.ERROR)
        assert [(e.source, e.message) for e in errors] == [("rm", "No such file or directory")]

    def test_unrecognised_logged_at_warning(self) -> None:
        """Unrecognised lines are recorded as warnings."""
        shell, _out, _err = _shell()
        shell.execute("cat")
        warnings = shell.log.filter(min_level=LogLevel.WARNING, source="shell")
        assert warnings[0].message == "unrecognised: cat"

    def test_empty_line_not_logged(self) -> None:
        """Empty lines leave no trace."""
        shell, _out, _err = _shell()
        shell.execute("")
        assert shell.log.entries == []
