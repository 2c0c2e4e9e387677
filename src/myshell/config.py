"""Shell configuration: the handful of knobs the interpreter exposes.

The interpreter has no configuration files and reads no environment
variables.  Everything it can vary lives in one frozen dataclass that
is handed to the shell and the REPL at construction time:

- **name**: the prefix shown in the prompt and in the
  unrecognised-command message (``myshell: foo: No such file ...``).
- **max_line_length**: the input buffer size in bytes.  A longer line
  is truncated; the rest is dropped.
- **chunk_size**: how many bytes ``cat`` reads per ``read()`` call.
- **dir_mode**: permission bits for ``mkdir`` (the umask still applies).
- **color**: whether the prompt paints the working directory green.
"""

from dataclasses import dataclass

DEFAULT_MAX_LINE_LENGTH = 255
DEFAULT_CHUNK_SIZE = 256
DEFAULT_DIR_MODE = 0o755

_MAX_MODE = 0o7777


@dataclass(frozen=True)
class ShellConfig:
    """Immutable settings shared by the shell and the REPL.

    Attributes:
        name: Shell name used in the prompt and error messages.
        max_line_length: Maximum number of bytes kept from a line.
        chunk_size: Read size in bytes for streaming file contents.
        dir_mode: Permission bits for newly created directories.
        color: Paint the prompt's working directory with ANSI colour.

    """

    name: str = "myshell"
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    chunk_size: int = DEFAULT_CHUNK_SIZE
    dir_mode: int = DEFAULT_DIR_MODE
    color: bool = True

    def __post_init__(self) -> None:
        """Reject settings the shell cannot work with.

        Raises:
            ValueError: If a size is not positive or the mode is invalid.

        """
        if self.max_line_length <= 0:
            msg = f"max_line_length must be positive, got {self.max_line_length}"
            raise ValueError(msg)
        if self.chunk_size <= 0:
            msg = f"chunk_size must be positive, got {self.chunk_size}"
            raise ValueError(msg)
        if not 0 <= self.dir_mode <= _MAX_MODE:
            msg = f"dir_mode must be between 0 and 0o7777, got {self.dir_mode:#o}"
            raise ValueError(msg)
