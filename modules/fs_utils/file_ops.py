"""
File operations module for Filekit.

Stateless wrappers over the host filesystem: line counting, copying,
whole-file read/write/append, existence checks, renaming, recursive
removal, directory creation, clearing and listing.

Every handle is released before a function returns. A failed release
overrides an otherwise successful result, and when several sub-steps fail
the caller receives a CompositeError naming all of them.
"""

import os
import shutil
import stat
import tempfile
from contextlib import suppress
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union

from core.config import DEFAULT_BUFFER_SIZE, DEFAULT_ENCODING
from core.errors import CompositeError, FileOpError, IOFaultError, map_os_error


FILE_MODE = 0o644
DIR_MODE = 0o755

_BINARY = getattr(os, "O_BINARY", 0)

PathLike = Union[str, "os.PathLike[str]"]


class Presence(Enum):
    """Outcome of an existence probe."""
    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"


class _Scope:
    """
    Scoped acquisition of one or more handles.

    Handles are closed in acquisition order when the block exits. Close
    failures are collected together with the block's own OSError, if any,
    and re-raised as a single mapped error or a CompositeError.

    Any other exception leaving the block propagates unchanged once every
    handle is closed; close failures seen on that path are not reported.
    """

    def __init__(self):
        self._handles: List[Tuple[str, Any]] = []
        self.stage: Optional[str] = None

    def acquire(self, open_step: str, close_step: str, opener: Callable[[], Any]) -> Any:
        try:
            handle = opener()
        except OSError as exc:
            raise map_os_error(exc, open_step) from exc
        self._handles.append((close_step, handle))
        return handle

    def __enter__(self) -> "_Scope":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        failures: List[Tuple[str, BaseException]] = []
        if isinstance(exc, OSError):
            failures.append((self.stage, exc))

        for close_step, handle in self._handles:
            try:
                handle.close()
            except OSError as close_exc:
                failures.append((close_step, close_exc))
        self._handles = []

        # A non-OS exception (KeyboardInterrupt, ...) wins; close failures are discarded.
        if exc is not None and not isinstance(exc, OSError):
            return False
        if not failures:
            return False
        if len(failures) == 1:
            step, error = failures[0]
            if error is exc and isinstance(exc, FileOpError):
                return False
            raise map_os_error(error, step)
        mapped = [map_os_error(error, step) for step, error in failures]
        raise CompositeError([(error.step or "unknown", error) for error in mapped])


def _open_fd(path: PathLike, flags: int, mode: str, buffering: int = -1):
    """Open ``path`` with explicit os flags and wrap the descriptor."""
    fd = os.open(path, flags | _BINARY, FILE_MODE)
    try:
        return os.fdopen(fd, mode, buffering=buffering)
    except BaseException:
        os.close(fd)
        raise


def _adopt_fd(fd: int, mode: str):
    """Wrap an already open descriptor, closing it if wrapping fails."""
    try:
        return os.fdopen(fd, mode)
    except BaseException:
        os.close(fd)
        raise


def _check_buffer_size(buffer_size: int) -> None:
    if isinstance(buffer_size, bool) or not isinstance(buffer_size, int):
        raise ValueError(f"buffer_size must be an integer, got {buffer_size!r}")
    if buffer_size <= 0:
        raise ValueError(f"buffer_size must be positive, got {buffer_size}")


# Undecodable bytes map to lone surrogates and back, so text round-trips any byte sequence.
_TEXT_ERRORS = "surrogateescape"


def _encode(data: Union[str, bytes], encoding: str) -> bytes:
    if isinstance(data, str):
        try:
            return data.encode(encoding, _TEXT_ERRORS)
        except UnicodeEncodeError as exc:
            raise IOFaultError(str(exc), step="encode") from exc
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"data must be str or bytes, not {type(data).__name__}")


def _decode(content: bytes, encoding: str) -> str:
    try:
        return content.decode(encoding, _TEXT_ERRORS)
    except UnicodeDecodeError as exc:
        raise IOFaultError(str(exc), step="decode") from exc


def _extension(name: str) -> str:
    """Text from the last dot of ``name``, or an empty string."""
    index = name.rfind(".")
    return name[index:] if index >= 0 else ""


def count_lines(path: PathLike, buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """
    Count the lines of a file without loading it into memory.

    Lines end at ``\\n``. A trailing line without a terminator still counts
    when it holds at least one byte.

    Args:
        path: File to count
        buffer_size: Bytes read per chunk

    Returns:
        Number of lines

    Raises:
        FileOpError: If the file cannot be opened, read or closed
        ValueError: If buffer_size is not a positive integer
    """
    _check_buffer_size(buffer_size)
    count = 0
    partial = False
    with _Scope() as scope:
        handle = scope.acquire("open", "close", lambda: open(path, "rb", buffering=buffer_size))
        scope.stage = "read"
        while True:
            chunk = handle.read(buffer_size)
            if not chunk:
                break
            count += chunk.count(b"\n")
            partial = not chunk.endswith(b"\n")
    if partial:
        count += 1
    return count


def copy(src: PathLike, dst: PathLike, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
    """
    Copy the bytes of ``src`` into ``dst``.

    The destination is created when missing but never truncated, so a
    longer pre-existing destination keeps its trailing bytes.

    Raises:
        FileOpError: If opening, streaming or releasing either file fails.
            Failures of several steps arrive as one CompositeError.
    """
    _check_buffer_size(buffer_size)
    with _Scope() as scope:
        reader = scope.acquire(
            "open source", "close source",
            lambda: open(src, "rb", buffering=buffer_size)
        )
        writer = scope.acquire(
            "open destination", "close destination",
            lambda: _open_fd(dst, os.O_WRONLY | os.O_CREAT, "wb", buffering=buffer_size)
        )
        scope.stage = "copy"
        shutil.copyfileobj(reader, writer, buffer_size)


def read(path: PathLike, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Read the whole file as text.

    Bytes that are not valid in ``encoding`` come back as lone surrogates
    (``surrogateescape``), and ``write`` turns them back into the same bytes.
    """
    with _Scope() as scope:
        handle = scope.acquire("open", "close", lambda: open(path, "rb"))
        scope.stage = "read"
        content = handle.read()
    return _decode(content, encoding)


def read_bytes(path: PathLike) -> bytes:
    """Read the whole file as bytes."""
    with _Scope() as scope:
        handle = scope.acquire("open", "close", lambda: open(path, "rb"))
        scope.stage = "read"
        return handle.read()


def write(path: PathLike, data: Union[str, bytes], encoding: str = DEFAULT_ENCODING) -> None:
    """
    Write ``data`` to ``path``, creating or truncating it.

    Not atomic: a failure mid-write leaves a partially written file.
    Use ``atomic_write`` when readers must never see partial content.
    """
    payload = _encode(data, encoding)
    with _Scope() as scope:
        handle = scope.acquire(
            "open", "close",
            lambda: _open_fd(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, "wb")
        )
        scope.stage = "write"
        handle.write(payload)


def append(
    path: PathLike,
    data: Union[str, bytes],
    encoding: str = DEFAULT_ENCODING,
    buffer_size: int = DEFAULT_BUFFER_SIZE
) -> None:
    """
    Append ``data`` to the end of ``path``, creating it if needed.

    The buffered writer is flushed explicitly before the file is released.
    """
    _check_buffer_size(buffer_size)
    payload = _encode(data, encoding)
    with _Scope() as scope:
        handle = scope.acquire(
            "open", "close",
            lambda: _open_fd(
                path, os.O_RDWR | os.O_CREAT | os.O_APPEND, "ab", buffering=buffer_size
            )
        )
        scope.stage = "write"
        handle.write(payload)
        scope.stage = "flush"
        handle.flush()


def atomic_write(path: PathLike, data: Union[str, bytes], encoding: str = DEFAULT_ENCODING) -> None:
    """
    Write ``data`` to a temporary sibling of ``path`` and move it into place.

    Readers see either the old content or the new content, never a mix.
    The temporary file is removed if anything fails.
    """
    payload = _encode(data, encoding)
    target = os.fspath(path)
    directory = os.path.dirname(os.path.abspath(target))

    try:
        fd, temp_path = tempfile.mkstemp(
            prefix=f".{os.path.basename(target)}.", suffix=".tmp", dir=directory
        )
    except OSError as exc:
        raise map_os_error(exc, "create temp") from exc

    try:
        with _Scope() as scope:
            handle = scope.acquire("open temp", "close temp", lambda: _adopt_fd(fd, "wb"))
            scope.stage = "write"
            handle.write(payload)
            scope.stage = "sync"
            handle.flush()
            os.fsync(handle.fileno())

        try:
            if os.path.exists(target):
                shutil.copymode(target, temp_path)
            else:
                os.chmod(temp_path, FILE_MODE)
            os.replace(temp_path, target)
        except OSError as exc:
            raise map_os_error(exc, "replace") from exc
    except BaseException:
        with suppress(OSError):
            os.remove(temp_path)
        raise


def probe(path: PathLike) -> Presence:
    """
    Report whether something is present at ``path``.

    ``UNKNOWN`` means the stat call failed for a reason other than the
    path being absent (permission denied on a parent, I/O error, ...).
    """
    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return Presence.ABSENT
    except OSError:
        return Presence.UNKNOWN
    return Presence.PRESENT


def exists(path: PathLike) -> bool:
    """True only when a stat of ``path`` succeeds."""
    return probe(path) is Presence.PRESENT


def is_readable(path: PathLike) -> bool:
    return os.access(path, os.R_OK)


def rename(old_path: PathLike, new_path: PathLike) -> None:
    try:
        os.rename(old_path, new_path)
    except OSError as exc:
        raise map_os_error(exc, "rename") from exc


def remove(path: PathLike) -> None:
    """
    Remove ``path`` and everything below it.

    A missing path is not an error. Symlinks are removed, not followed.
    """
    try:
        info = os.lstat(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise map_os_error(exc, "stat") from exc

    try:
        if stat.S_ISDIR(info.st_mode):
            shutil.rmtree(path)
        else:
            os.remove(path)
    except OSError as exc:
        raise map_os_error(exc, "remove") from exc


def make_dir(path: PathLike) -> None:
    """Create ``path`` and any missing parents. An existing directory is fine."""
    try:
        os.makedirs(path, DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise map_os_error(exc, "mkdir") from exc


def _entry_names(path: PathLike) -> List[str]:
    with _Scope() as scope:
        entries = scope.acquire("open", "close", lambda: os.scandir(path))
        scope.stage = "list"
        return [entry.name for entry in entries]


def clear_dir(path: PathLike) -> None:
    """
    Remove every child of ``path`` and keep the directory itself.

    Stops at the first child that cannot be removed; children already
    removed stay removed.
    """
    for name in _entry_names(path):
        remove(os.path.join(path, name))


def list_files(path: PathLike, suffix: str = "") -> List[str]:
    """
    List the immediate entries of a directory.

    Args:
        path: Directory to list
        suffix: Keep only entries with this extension, dot included
            (e.g. ".txt"). Empty keeps everything.

    Returns:
        Paths joined onto ``path`` in directory order (not sorted)
    """
    return [
        os.path.join(path, name)
        for name in _entry_names(path)
        if not suffix or _extension(name) == suffix
    ]
