"""Errors raised by the built-in commands.

Two kinds are enough for the whole command set:

- **FileError**: an operation on a single file failed (cat, stat, rm).
- **DirectoryError**: an operation on a directory failed (cd, ls,
  mkdir, rmdir).

Both carry the command name and a human-readable description, usually
the OS's own ``strerror`` text.  Their string form is exactly what the
shell prints to stderr: ``<command>: <description>``.
"""


class ShellError(Exception):
    """Base class for every failure a built-in command can report."""

    def __init__(self, command: str, description: str) -> None:
        """Create an error for *command* with an OS-style *description*."""
        super().__init__(f"{command}: {description}")
        self.command = command
        self.description = description

    @classmethod
    def from_os_error(cls, command: str, exc: OSError) -> "ShellError":
        """Wrap an ``OSError``, keeping only its human-readable text.

        Args:
            command: The built-in that was running.
            exc: The error raised by the OS call.

        Returns:
            An instance of the class this was called on.

        """
        return cls(command, exc.strerror or str(exc))


class FileError(ShellError):
    """A single-file operation failed."""


class DirectoryError(ShellError):
    """A directory operation failed."""
