"""Built-in commands: one OS operation each.

Every handler here does exactly one thing to the real filesystem and
either succeeds quietly (or by writing its result) or raises a
``FileError`` / ``DirectoryError`` carrying the OS's description.  The
handlers never print errors themselves; reporting is the dispatcher's
job.

Output is written to a *binary* stream.  ``cat`` must reproduce file
contents byte for byte, and directory entries or paths that are not
valid UTF-8 must survive the trip too, so text is encoded with
``os.fsencode`` rather than a fixed codec.
"""

import os
import pwd
from typing import BinaryIO

from myshell.config import DEFAULT_CHUNK_SIZE, DEFAULT_DIR_MODE
from myshell.errors import DirectoryError, FileError


def resolve_home() -> str | None:
    """Look up the invoking user's home directory in the user database.

    Returns:
        The home directory, or ``None`` if the account cannot be found.

    """
    try:
        return pwd.getpwuid(os.getuid()).pw_dir
    except KeyError:
        return None


def _writeline(out: BinaryIO, text: str) -> None:
    out.write(os.fsencode(text) + b"\n")


def do_cd(path: str | None) -> None:
    """Change the working directory; no *path* means the home directory.

    Raises:
        DirectoryError: If the home directory cannot be resolved or the
            target does not exist, is not a directory, or is not
            accessible.  The working directory is left unchanged.

    """
    if path is None:
        path = resolve_home()
        if path is None:
            raise DirectoryError("cd", "cannot determine home directory")
    try:
        os.chdir(path)
    except OSError as e:
        raise DirectoryError.from_os_error("cd", e) from e


def do_ls(path: str, out: BinaryIO) -> None:
    """Write every entry of directory *path*, one name per line.

    Entries come in whatever order the directory yields them, preceded
    by ``.`` and ``..`` as ``readdir`` reports them.

    Raises:
        DirectoryError: If *path* cannot be opened as a directory.

    """
    try:
        with os.scandir(path) as entries:
            _writeline(out, ".")
            _writeline(out, "..")
            for entry in entries:
                _writeline(out, entry.name)
    except OSError as e:
        raise DirectoryError.from_os_error("ls", e) from e


def do_cat(path: str, out: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
    """Copy the bytes of *path* to *out* in fixed-size chunks.

    Bytes written before a read error are not taken back.

    Raises:
        FileError: If the file cannot be opened or a read fails.

    """
    try:
        with open(path, "rb") as f:  # noqa: PTH123
            while chunk := f.read(chunk_size):
                out.write(chunk)
    except OSError as e:
        raise FileError.from_os_error("cat", e) from e
    out.flush()


def do_mkdir(path: str, mode: int = DEFAULT_DIR_MODE) -> None:
    """Create directory *path*.

    Raises:
        DirectoryError: If it already exists, the parent is missing, or
            permission is denied.

    """
    try:
        os.mkdir(path, mode)  # noqa: PTH102
    except OSError as e:
        raise DirectoryError.from_os_error("mkdir", e) from e


def do_rmdir(path: str) -> None:
    """Remove the empty directory *path*.

    Raises:
        DirectoryError: If it does not exist, is not empty, or is not a
            directory.

    """
    try:
        os.rmdir(path)  # noqa: PTH106
    except OSError as e:
        raise DirectoryError.from_os_error("rmdir", e) from e


def do_rm(path: str) -> None:
    """Unlink the file *path*.

    Raises:
        FileError: If it does not exist, is a directory, or permission
            is denied.

    """
    try:
        os.unlink(path)  # noqa: PTH108
    except OSError as e:
        raise FileError.from_os_error("rm", e) from e


def do_stat(path: str, out: BinaryIO) -> None:
    """Write the path, size, link count, and inode number of *path*.

    Raises:
        FileError: If the metadata cannot be read.

    """
    try:
        st = os.stat(path)  # noqa: PTH116
    except OSError as e:
        raise FileError.from_os_error("stat", e) from e
    _writeline(out, f"File: {path}")
    _writeline(out, f"Size: {st.st_size} bytes")
    _writeline(out, f"Links: {st.st_nlink}")
    _writeline(out, f"Inode: {st.st_ino}")


def do_pwd(out: BinaryIO) -> bool:
    """Write the working directory.

    Returns:
        ``False`` (having written nothing) if the working directory
        cannot be resolved, e.g. because it was deleted.

    """
    try:
        cwd = os.getcwd()  # noqa: PTH109
    except OSError:
        return False
    _writeline(out, cwd)
    return True
