"""
Audited file operations for Filekit.

FileOperator runs the stateless functions from ``file_ops`` with the
configured buffer size and encoding, and records every outcome in the
audit log.
"""

import os
from typing import Any, Callable, Dict, List, Optional

from core.config import FilekitConfig
from core.errors import FileOpError
from core.logger import AuditLogger, ActionType, ActionStatus

from . import file_ops
from .file_ops import Presence


class FileOperator:
    """File operations with audit logging."""

    def __init__(self, config: Optional[FilekitConfig] = None, logger: Optional[AuditLogger] = None):
        """
        Initialize FileOperator.

        Args:
            config: Settings; defaults are used when omitted
            logger: Audit logger instance, or None to skip auditing
        """
        self.config = config or FilekitConfig()
        self.logger = logger

    def _record(
        self,
        action_type: ActionType,
        operation: str,
        target: str,
        status: ActionStatus,
        result: Optional[str] = None,
        error_kind: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        if self.logger is None:
            return
        self.logger.log_action(
            action_type=action_type,
            operation=operation,
            target=target,
            status=status,
            result=result,
            error_kind=error_kind,
            metadata=metadata
        )

    def _run(
        self,
        action_type: ActionType,
        operation: str,
        target,
        call: Callable[[], Any],
        summarize: Optional[Callable[[Any], str]] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Any:
        target = os.fspath(target)
        try:
            value = call()
        except Exception as e:
            self._record(
                action_type, operation, target, ActionStatus.FAILED,
                result=f"Error: {e}",
                error_kind=e.kind.value if isinstance(e, FileOpError) else None,
                metadata=metadata
            )
            raise

        self._record(
            action_type, operation, target, ActionStatus.EXECUTED,
            result=summarize(value) if summarize else None,
            metadata=metadata
        )
        return value

    def count_lines(self, path) -> int:
        return self._run(
            ActionType.READ, "count_lines", path,
            lambda: file_ops.count_lines(path, buffer_size=self.config.buffer_size),
            summarize=lambda n: f"{n} lines"
        )

    def copy(self, src, dst) -> None:
        self._run(
            ActionType.WRITE, "copy", dst,
            lambda: file_ops.copy(src, dst, buffer_size=self.config.buffer_size),
            summarize=lambda _: f"Copied from {os.fspath(src)}",
            metadata={"source": os.fspath(src)}
        )

    def read(self, path) -> str:
        return self._run(
            ActionType.READ, "read", path,
            lambda: file_ops.read(path, encoding=self.config.encoding),
            summarize=lambda text: f"{len(text)} characters"
        )

    def write(self, path, data, atomic: bool = False) -> None:
        """
        Write ``data`` to ``path``.

        Args:
            path: Target file
            data: Text or bytes to write
            atomic: Replace the file through a temporary sibling
        """
        writer = file_ops.atomic_write if atomic else file_ops.write
        self._run(
            ActionType.WRITE, "atomic_write" if atomic else "write", path,
            lambda: writer(path, data, encoding=self.config.encoding),
            summarize=lambda _: f"{len(data)} {'characters' if isinstance(data, str) else 'bytes'} written"
        )

    def append(self, path, data) -> None:
        self._run(
            ActionType.WRITE, "append", path,
            lambda: file_ops.append(
                path, data,
                encoding=self.config.encoding,
                buffer_size=self.config.buffer_size
            ),
            summarize=lambda _: f"{len(data)} appended"
        )

    def probe(self, path) -> Presence:
        return self._run(
            ActionType.QUERY, "probe", path,
            lambda: file_ops.probe(path),
            summarize=lambda presence: presence.value
        )

    def exists(self, path) -> bool:
        return self.probe(path) is Presence.PRESENT

    def is_readable(self, path) -> bool:
        return self._run(
            ActionType.QUERY, "is_readable", path,
            lambda: file_ops.is_readable(path),
            summarize=str
        )

    def rename(self, old_path, new_path) -> None:
        self._run(
            ActionType.WRITE, "rename", old_path,
            lambda: file_ops.rename(old_path, new_path),
            summarize=lambda _: f"Renamed to {os.fspath(new_path)}",
            metadata={"destination": os.fspath(new_path)}
        )

    def remove(self, path) -> None:
        self._run(ActionType.DELETE, "remove", path, lambda: file_ops.remove(path))

    def make_dir(self, path) -> None:
        self._run(ActionType.WRITE, "make_dir", path, lambda: file_ops.make_dir(path))

    def clear_dir(self, path) -> None:
        self._run(ActionType.DELETE, "clear_dir", path, lambda: file_ops.clear_dir(path))

    def list_files(self, path, suffix: str = "") -> List[str]:
        return self._run(
            ActionType.READ, "list_files", path,
            lambda: file_ops.list_files(path, suffix),
            summarize=lambda paths: f"{len(paths)} entries",
            metadata={"suffix": suffix} if suffix else None
        )
