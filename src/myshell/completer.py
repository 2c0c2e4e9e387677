"""Tab completion for the shell.

The completer separates **what to complete** (pure logic, testable
without a terminal) from **how to wire it** (readline setup in the
REPL).

``complete(text, state)`` is the readline callback.  It delegates to
``completions(text, line)``, which looks at the line so far and
returns candidate strings: command names for the first word, real
filesystem paths for the argument of a path-taking command.
"""

from __future__ import annotations

import os
import readline
from typing import TYPE_CHECKING

from myshell.grammar import GRAMMARS, Arity

if TYPE_CHECKING:
    from myshell.shell import Shell

# Commands whose argument is a filesystem path.
_PATH_COMMANDS: frozenset[str] = frozenset(g.name for g in GRAMMARS if g.arity is not Arity.NONE)


class Completer:
    """Context-aware tab completer for the shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance.

        Args:
            shell: The shell whose command names are offered.

        """
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback: return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Matching candidates; paths are sorted.

        """
        words = line.split()

        # Still typing the first word: command names.
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return [cmd for cmd in self._shell.command_names if cmd.startswith(text)]

        # Each command takes a single argument.
        typing_second = len(words) == 1 or (len(words) == 2 and not line.endswith(" "))  # noqa: PLR2004
        if words[0] in _PATH_COMMANDS and typing_second:
            return self._complete_paths(text)
        return []

    @staticmethod
    def _complete_paths(text: str) -> list[str]:
        """Complete filesystem paths relative to the working directory.

        Split the partial path into a directory and a name prefix, list
        the directory, and filter by prefix.  Directories get a trailing
        ``/``.  Hidden entries are offered only when the prefix starts
        with a dot.
        """
        last_slash = text.rfind("/")
        directory = text[: last_slash + 1]
        prefix = text[last_slash + 1 :]

        try:
            with os.scandir(directory or ".") as entries:
                candidates = [
                    directory + entry.name + ("/" if _is_dir(entry) else "")
                    for entry in entries
                    if entry.name.startswith(prefix)
                    and (prefix.startswith(".") or not entry.name.startswith("."))
                ]
        except OSError:
            return []
        return sorted(candidates)


def _is_dir(entry: os.DirEntry[str]) -> bool:
    """Return True if *entry* is (or links to) a directory."""
    try:
        return entry.is_dir()
    except OSError:
        return False
