"""The shell: command dispatcher for the built-in command set.

The shell takes one raw line, normalises it, finds the first grammar
that matches, and runs the corresponding built-in.  Failures never
escape: a handler's ``ShellError`` is printed to stderr as
``<command>: <description>`` and the shell is ready for the next line.

Design choices:
    - **Streams are injected.**  Results go to a binary stdout and
      errors to a text stderr, both passed in, so the dispatcher is
      testable without touching the real terminal.
    - **Command dispatch via a dict.**  The grammar table decides
      *which* command a line names; the dict maps that name to its
      handler method.
    - **Status, not exit codes.**  ``execute`` returns a ``Status`` the
      REPL uses only to know when to stop; individual failures are
      never turned into the process exit code.
"""

import os
import sys
from collections.abc import Callable
from enum import Enum
from typing import BinaryIO, TextIO, TypeAlias

from myshell import builtins
from myshell.config import ShellConfig
from myshell.errors import ShellError
from myshell.grammar import GRAMMARS, parse, strip_trailing_whitespace, truncate
from myshell.logging import LogLevel, SessionLog

# A handler receives the parsed argument (or None) and raises on failure.
_Handler: TypeAlias = Callable[[str | None], None]


class Status(Enum):
    """Outcome of executing one line."""

    SUCCESS = "success"
    FAILURE = "failure"
    EXIT = "exit"


class Shell:
    """Line dispatcher over the real filesystem.

    The only state that outlives a call to ``execute`` is the process
    working directory (changed by ``cd``) and the session log.
    """

    def __init__(
        self,
        config: ShellConfig | None = None,
        *,
        stdout: BinaryIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Create a shell.

        Args:
            config: Shell settings; defaults to ``ShellConfig()``.
            stdout: Binary stream for command output (default: the
                process's stdout buffer).
            stderr: Text stream for error reports (default: stderr).

        """
        self._config = config or ShellConfig()
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._stderr = stderr if stderr is not None else sys.stderr
        self._log = SessionLog()

        self._commands: dict[str, _Handler] = {
            "cd": self._cmd_cd,
            "cat": self._cmd_cat,
            "stat": self._cmd_stat,
            "mkdir": self._cmd_mkdir,
            "rmdir": self._cmd_rmdir,
            "rm": self._cmd_rm,
            "ls": self._cmd_ls,
            "pwd": self._cmd_pwd,
        }

    @property
    def config(self) -> ShellConfig:
        """Return the shell's settings."""
        return self._config

    @property
    def log(self) -> SessionLog:
        """Return the session audit log."""
        return self._log

    @property
    def command_names(self) -> list[str]:
        """Return every command name in dispatch priority order."""
        return [grammar.name for grammar in GRAMMARS]

    def execute(self, line: str) -> Status:
        """Normalise, parse, and run one command line.

        Args:
            line: The raw line as read from the terminal.

        Returns:
            ``Status.EXIT`` for ``exit``, ``Status.FAILURE`` if the
            command failed or was not recognised, otherwise
            ``Status.SUCCESS`` (including for an empty line).

        """
        line = strip_trailing_whitespace(truncate(line, self._config.max_line_length))
        if not line:
            return Status.SUCCESS

        invocation = parse(line)
        if invocation is None:
            self._report(f"{self._config.name}: {line}: No such file or directory")
            self._log.log(
                LogLevel.WARNING, f"unrecognised: {line}", source="shell", cwd=_current_dir()
            )
            return Status.FAILURE

        self._log.log(LogLevel.DEBUG, line, source=invocation.command, cwd=_current_dir())
        if invocation.command == "exit":
            return Status.EXIT

        handler = self._commands[invocation.command]
        try:
            handler(invocation.argument)
        except ShellError as e:
            self._report(str(e))
            self._log.log(LogLevel.ERROR, e.description, source=e.command, cwd=_current_dir())
            return Status.FAILURE
        finally:
            self._stdout.flush()
        return Status.SUCCESS

    def _report(self, message: str) -> None:
        """Write an error line to stderr after any pending output.

        Bytes that are not valid UTF-8 are shown as backslash escapes.
        """
        message = os.fsencode(message).decode(errors="backslashreplace")
        self._stdout.flush()
        print(message, file=self._stderr, flush=True)

    # -- Command handlers ------------------------------------------------

    def _cmd_cd(self, path: str | None) -> None:
        builtins.do_cd(path)

    def _cmd_cat(self, path: str | None) -> None:
        builtins.do_cat(_required(path), self._stdout, self._config.chunk_size)

    def _cmd_stat(self, path: str | None) -> None:
        builtins.do_stat(_required(path), self._stdout)

    def _cmd_mkdir(self, path: str | None) -> None:
        builtins.do_mkdir(_required(path), self._config.dir_mode)

    def _cmd_rmdir(self, path: str | None) -> None:
        builtins.do_rmdir(_required(path))

    def _cmd_rm(self, path: str | None) -> None:
        builtins.do_rm(_required(path))

    def _cmd_ls(self, path: str | None) -> None:
        builtins.do_ls(path or ".", self._stdout)

    def _cmd_pwd(self, _path: str | None) -> None:
        """Print the working directory; failure is silent but logged."""
        if not builtins.do_pwd(self._stdout):
            self._log.log(LogLevel.WARNING, "cannot resolve working directory", source="pwd")


def _required(path: str | None) -> str:
    # The grammar never matches a REQUIRED command without its argument.
    assert path is not None  # noqa: S101
    return path


def _current_dir() -> str:
    try:
        return os.getcwd()  # noqa: PTH109
    except OSError:
        return ""
