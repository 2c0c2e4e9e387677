"""Command grammars: turning a raw line into a command and its argument.

Every built-in accepts at most one argument, so a grammar is just a
command name plus a rule about that argument:

- ``NONE``: the line must be the bare word (``exit``, ``pwd``).
- ``OPTIONAL``: bare word or word plus one token (``cd``, ``ls``).
- ``REQUIRED``: word plus one token (``cat``, ``stat``, ...).

Grammars are tried in a fixed order and the first match wins.  A
grammar that needs an argument and finds none simply does not match,
so bare ``cat`` falls all the way through to the unrecognised-command
report instead of producing a usage message.

The command word must sit at the very start of the line and be followed
by whitespace or the end of the line: ``cdsomething`` is not ``cd``.
Tokens after the first argument are ignored.
"""

import os
import re
from dataclasses import dataclass
from enum import Enum

# The C locale's isspace() set.
WHITESPACE = " \t\n\r\f\v"

_TOKEN = re.compile(r"[^ \t\n\r\f\v]+")


class Arity(Enum):
    """How many arguments a grammar accepts after the command word."""

    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


@dataclass(frozen=True)
class Grammar:
    """One command's textual pattern.

    Attributes:
        name: The command word.
        arity: Whether an argument is forbidden, optional, or required.
        default: Argument used when an optional one is omitted.

    """

    name: str
    arity: Arity
    default: str | None = None


@dataclass(frozen=True)
class Invocation:
    """A matched command: which built-in to run and with what argument."""

    command: str
    argument: str | None = None


# Priority order matters: the first grammar that matches wins.
GRAMMARS: tuple[Grammar, ...] = (
    Grammar("cd", Arity.OPTIONAL),
    Grammar("exit", Arity.NONE),
    Grammar("cat", Arity.REQUIRED),
    Grammar("stat", Arity.REQUIRED),
    Grammar("mkdir", Arity.REQUIRED),
    Grammar("rmdir", Arity.REQUIRED),
    Grammar("rm", Arity.REQUIRED),
    Grammar("ls", Arity.OPTIONAL, default="."),
    Grammar("pwd", Arity.NONE),
)


def strip_trailing_whitespace(line: str) -> str:
    """Remove the trailing run of whitespace (including the newline)."""
    return line.rstrip(WHITESPACE)


def truncate(line: str, limit: int) -> str:
    """Keep at most *limit* bytes of *line*, as a fixed-size buffer would.

    A multi-byte character cut in half survives as surrogate escapes, so
    ``os.fsencode`` gives back exactly the bytes that were kept.
    """
    data = os.fsencode(line)
    if len(data) <= limit:
        return line
    return os.fsdecode(data[:limit])


def match(grammar: Grammar, line: str) -> Invocation | None:
    """Match a normalised *line* against a single *grammar*.

    Args:
        grammar: The pattern to try.
        line: A line with trailing whitespace already stripped.

    Returns:
        The invocation if the line fits the grammar, otherwise ``None``.

    """
    if not line.startswith(grammar.name):
        return None

    rest = line[len(grammar.name) :]
    if not rest:
        if grammar.arity is Arity.REQUIRED:
            return None
        return Invocation(grammar.name, grammar.default)

    # Token boundary: the word must be followed by whitespace.
    if rest[0] not in WHITESPACE or grammar.arity is Arity.NONE:
        return None

    token = _TOKEN.search(rest)
    if token is None:
        # Only reachable when the caller skipped stripping.
        if grammar.arity is Arity.REQUIRED:
            return None
        return Invocation(grammar.name, grammar.default)
    return Invocation(grammar.name, token.group())


def parse(line: str, grammars: tuple[Grammar, ...] = GRAMMARS) -> Invocation | None:
    """Return the first grammar match for *line*, or ``None``.

    Args:
        line: A normalised command line.
        grammars: The ordered grammar table to try.

    Returns:
        The winning invocation, or ``None`` if nothing matched.

    """
    for grammar in grammars:
        invocation = match(grammar, line)
        if invocation is not None:
            return invocation
    return None
