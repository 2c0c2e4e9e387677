"""Interactive REPL (Read-Eval-Print Loop) for the shell.

The REPL is the thin I/O layer around the dispatcher:

    1. **Prompt**: show ``myshell:<cwd>> `` with the cwd in green.
    2. **Read**: block for one line, truncated to the buffer size.
    3. **Dispatch**: hand the line to ``Shell.execute()``.
    4. **Loop**: repeat until ``exit`` or end of input.

The helpers (``build_prompt``, ``read_line``) are small and testable;
``run()`` is the I/O entrypoint and ``main()`` its command-line front.
"""

import argparse
import io
import os
import readline
import sys

from myshell.completer import Completer
from myshell.config import ShellConfig
from myshell.grammar import truncate
from myshell.logging import LogLevel
from myshell.shell import Shell, Status

_GREEN = "\033[32;1m"
_RESET = "\033[0m"


def build_prompt(config: ShellConfig) -> str:
    """Build the prompt string showing the working directory.

    Args:
        config: Shell settings (name and colour).

    Returns:
        A prompt like ``myshell:/home/alice> ``, or ``""`` if the
        working directory cannot be determined (e.g. it was removed).

    """
    try:
        cwd = os.getcwd()  # noqa: PTH109
    except OSError:
        return ""
    if config.color:
        return f"{config.name}:{_GREEN}{cwd}{_RESET}> "
    return f"{config.name}:{cwd}> "


def read_line(prompt: str, limit: int) -> str | None:
    """Read one line from the terminal.

    Args:
        prompt: Text shown before reading.
        limit: Maximum number of bytes kept; the rest is dropped.

    Returns:
        The (possibly truncated) line, or ``None`` at end of input.  A
        line that cannot be decoded is reported and read as empty.

    """
    try:
        line = input(prompt)
    except EOFError:
        return None
    except UnicodeDecodeError as e:
        print(f"input: {e.reason}", file=sys.stderr)  # noqa: T201
        return ""
    return truncate(line, limit)


def run(config: ShellConfig | None = None, *, audit: LogLevel | None = None) -> int:
    """Run the interactive shell until ``exit`` or end of input.

    Args:
        config: Shell settings; defaults to ``ShellConfig()``.
        audit: If set, print the session log records at or above this
            level to stderr when the loop ends.

    Returns:
        The process exit code, always ``0``: command failures are
        reported but never become the shell's exit status.

    """
    shell = Shell(config)
    config = shell.config

    # Undecodable bytes pass through to the handlers and are re-encoded by os.
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="surrogateescape")

    # Wire up tab completion via readline.
    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    shell.log.log(LogLevel.INFO, "session started", source="repl")
    try:
        while True:
            line = read_line(build_prompt(config), config.max_line_length)
            if line is None:
                # Ctrl+D, same as exit
                print()  # noqa: T201
                break
            if shell.execute(line) is Status.EXIT:
                break

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        shell.log.log(LogLevel.INFO, "session ended", source="repl")
        if audit is not None:
            shell.log.dump(sys.stderr, min_level=audit)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse command-line options and start the shell."""
    parser = argparse.ArgumentParser(
        prog="myshell",
        description="A minimal interactive shell with built-in filesystem commands.",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        help="Do not colour the working directory in the prompt",
    )
    parser.add_argument(
        "--audit",
        nargs="?",
        const="debug",
        choices=[level.name.lower() for level in LogLevel],
        metavar="LEVEL",
        help="Print session log records at or above LEVEL (default: debug) to stderr on exit",
    )
    args = parser.parse_args(argv)
    audit = LogLevel[args.audit.upper()] if args.audit else None
    return run(ShellConfig(color=args.color), audit=audit)
