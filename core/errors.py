"""
Error taxonomy for Filekit.

Host OS errors are mapped onto a closed set of error kinds at the boundary.
Every mapped error remembers which sub-step of an operation failed.
"""

import errno
from enum import Enum
from typing import List, Optional, Tuple, Type


class ErrorKind(Enum):
    """Closed set of failure kinds reported by file operations."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    ALREADY_EXISTS = "already_exists"
    IS_DIRECTORY = "is_directory"
    IO_FAULT = "io_fault"
    UNSUPPORTED = "unsupported"


class FileOpError(OSError):
    """
    Base error for all file operations.

    Carries the host errno/strerror/filename like any OSError, plus the
    mapped ``kind`` and the ``step`` that failed.
    """
    kind = ErrorKind.IO_FAULT

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        errno_code: Optional[int] = None,
        filename: Optional[str] = None
    ):
        if errno_code is not None:
            super().__init__(errno_code, message, filename)
        else:
            super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        text = self.message
        if self.filename is not None:
            text = f"{text}: {self.filename!r}"
        if self.step:
            text = f"{self.step}: {text}"
        return text


class NotFoundError(FileOpError, FileNotFoundError):
    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(FileOpError, PermissionError):
    kind = ErrorKind.PERMISSION_DENIED


class AlreadyExistsError(FileOpError, FileExistsError):
    kind = ErrorKind.ALREADY_EXISTS


class IsDirectoryError(FileOpError, IsADirectoryError):
    kind = ErrorKind.IS_DIRECTORY


class IOFaultError(FileOpError):
    kind = ErrorKind.IO_FAULT


class UnsupportedError(FileOpError):
    kind = ErrorKind.UNSUPPORTED


class CompositeError(FileOpError):
    """Several sub-steps of one operation failed; all of them are kept."""
    kind = ErrorKind.IO_FAULT

    def __init__(self, failures: List[Tuple[str, BaseException]]):
        self.failures = list(failures)
        parts = [f"{step}: {_describe(exc)}" for step, exc in self.failures]
        super().__init__("multiple failures (" + "; ".join(parts) + ")")

    @property
    def steps(self) -> List[str]:
        return [step for step, _ in self.failures]


# Order matters: subclasses before their bases.
_CLASS_KINDS: List[Tuple[Type[OSError], Type[FileOpError]]] = [
    (FileNotFoundError, NotFoundError),
    (NotADirectoryError, NotFoundError),
    (PermissionError, PermissionDeniedError),
    (FileExistsError, AlreadyExistsError),
    (IsADirectoryError, IsDirectoryError),
]

_ERRNO_KINDS = {
    errno.ENOENT: NotFoundError,
    errno.ENOTDIR: NotFoundError,
    errno.EACCES: PermissionDeniedError,
    errno.EPERM: PermissionDeniedError,
    errno.EROFS: PermissionDeniedError,
    errno.EEXIST: AlreadyExistsError,
    errno.ENOTEMPTY: AlreadyExistsError,
    errno.EISDIR: IsDirectoryError,
    errno.EXDEV: UnsupportedError,
    errno.ENOTSUP: UnsupportedError,
    errno.EOPNOTSUPP: UnsupportedError,
}


def _describe(exc: BaseException) -> str:
    if isinstance(exc, FileOpError):
        return exc.message
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc)


def map_os_error(exc: OSError, step: Optional[str] = None) -> FileOpError:
    """
    Convert a host OSError into the matching FileOpError.

    Args:
        exc: Error raised by the host filesystem API
        step: Name of the sub-step that failed

    Returns:
        A FileOpError subclass instance with ``exc`` as its cause
    """
    if isinstance(exc, FileOpError):
        if exc.step is None:
            exc.step = step
        return exc

    error_cls: Type[FileOpError] = IOFaultError
    for os_cls, mapped in _CLASS_KINDS:
        if isinstance(exc, os_cls):
            error_cls = mapped
            break
    else:
        if exc.errno is not None:
            error_cls = _ERRNO_KINDS.get(exc.errno, IOFaultError)

    filename = exc.filename
    if filename is not None and not isinstance(filename, str):
        filename = str(filename)

    mapped_exc = error_cls(
        exc.strerror or str(exc),
        step=step,
        errno_code=exc.errno,
        filename=filename
    )
    mapped_exc.__cause__ = exc
    return mapped_exc
