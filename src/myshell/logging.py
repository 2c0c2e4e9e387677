"""Session audit log.

Every line the shell dispatches, every handler failure, and every line
it could not make sense of is recorded here, in memory, for the length
of one session.  Nothing reaches the terminal unless the REPL is started
with ``--audit``, in which case the records at or above the chosen
level are written to stderr when the session ends.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    """How serious a record is; higher values are more severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One thing that happened during the session.

    Attributes:
        level: Severity.
        message: The command line, or the failure description.
        source: Command name, ``shell`` or ``repl``.
        cwd: Working directory at the time, ``""`` if it was gone.

    """

    level: LogLevel
    message: str
    source: str
    cwd: str = ""

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class SessionLog:
    """Chronological record of one shell session."""

    def __init__(self) -> None:
        """Start with no records."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every record, oldest first."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str, cwd: str = "") -> None:
        """Record one event."""
        self._entries.append(LogEntry(level=level, message=message, source=source, cwd=cwd))

    def filter(
        self,
        *,
        min_level: LogLevel = LogLevel.DEBUG,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return the records at or above *min_level*, optionally from one *source*."""
        return [
            e
            for e in self._entries
            if e.level >= min_level and (source is None or e.source == source)
        ]

    def dump(self, stream: TextIO, *, min_level: LogLevel = LogLevel.DEBUG) -> int:
        """Write the records at or above *min_level* to *stream*, one per line.

        Returns:
            How many records were written.

        """
        selected = self.filter(min_level=min_level)
        for entry in selected:
            print(entry, file=stream)  # noqa: T201
        return len(selected)
