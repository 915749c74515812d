"""
Audit Logger for Filekit.

Provides append-only logging of file operations with timestamps, targets
and outcomes for auditing and debugging.
"""

import csv
import io
import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Dict, Any
from enum import Enum

from .config import DEFAULT_AUDIT_LOG


class ActionType(Enum):
    """Types of actions that can be logged."""
    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    QUERY = "query"


class ActionStatus(Enum):
    """Outcome of an action."""
    EXECUTED = "executed"
    FAILED = "failed"


@dataclass
class AuditEntry:
    """Represents a single audit log entry."""
    timestamp: str
    action_type: str
    operation: str
    target: Optional[str]
    status: str
    result: Optional[str]
    error_kind: Optional[str]
    metadata: Dict[str, Any]

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        operation: str,
        target: Optional[str] = None,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        error_kind: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "AuditEntry":
        """Factory method to create an audit entry with current timestamp."""
        return cls(
            timestamp=datetime.now().isoformat(),
            action_type=action_type.value,
            operation=operation,
            target=target,
            status=status.value,
            result=result,
            error_kind=error_kind,
            metadata=metadata or {}
        )

    def to_json(self) -> str:
        """Convert entry to JSON string."""
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> "AuditEntry":
        """Create entry from JSON string."""
        data = json.loads(json_str)
        return cls(**data)


class AuditLogger:
    """
    Append-only audit logger for Filekit.

    Every operation run through FileOperator is logged to a JSONL file.
    Lines that cannot be parsed are skipped when reading.
    """

    def __init__(self, log_path: str = DEFAULT_AUDIT_LOG):
        """
        Initialize the audit logger.

        Args:
            log_path: Path to the JSONL log file
        """
        self.log_path = Path(log_path)
        self._ensure_log_directory()

    def _ensure_log_directory(self) -> None:
        """Create the log directory and file if they don't exist."""
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.log_path.exists():
            self.log_path.touch()

    def log(self, entry: AuditEntry) -> None:
        """Append an audit entry to the log."""
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(entry.to_json() + "\n")

    def log_action(
        self,
        action_type: ActionType,
        operation: str,
        target: Optional[str] = None,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        error_kind: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> AuditEntry:
        """
        Convenience method to create and log an entry in one call.

        Returns the created AuditEntry.
        """
        entry = AuditEntry.create(
            action_type=action_type,
            operation=operation,
            target=target,
            status=status,
            result=result,
            error_kind=error_kind,
            metadata=metadata
        )
        self.log(entry)
        return entry

    def _read_entries(self) -> List[AuditEntry]:
        entries = []

        if not self.log_path.exists():
            return entries

        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(AuditEntry.from_json(line))
                except (json.JSONDecodeError, TypeError):
                    continue

        return entries

    def get_recent(self, limit: int = 100) -> List[AuditEntry]:
        """
        Get the most recent audit entries.

        Args:
            limit: Maximum number of entries to return

        Returns:
            List of AuditEntry objects, most recent first
        """
        if limit <= 0:
            return []
        entries = self._read_entries()
        return list(reversed(entries[-limit:]))

    def get_by_date(self, date: datetime) -> List[AuditEntry]:
        """Get all audit entries logged on the given date."""
        date_str = date.strftime("%Y-%m-%d")
        return [e for e in self._read_entries() if e.timestamp.startswith(date_str)]

    def get_by_action_type(self, action_type: ActionType, limit: int = 100) -> List[AuditEntry]:
        """
        Get audit entries filtered by action type, oldest first.

        Args:
            action_type: The ActionType to filter by
            limit: Maximum number of entries to return
        """
        matches = [e for e in self._read_entries() if e.action_type == action_type.value]
        return matches[:limit]

    def get_failures(self, limit: int = 50) -> List[AuditEntry]:
        """
        Get operations that failed, oldest first.

        Useful for reviewing permission and I/O problems.
        """
        failed = [e for e in self._read_entries() if e.status == ActionStatus.FAILED.value]
        return failed[:limit]

    def export(self, format: str = "json") -> str:
        """
        Export the entire audit log.

        Args:
            format: Export format ("json" or "csv")

        Returns:
            String containing the exported data
        """
        entries = self.get_recent(limit=10000)
        header = ["timestamp", "action_type", "operation", "target", "status", "result", "error_kind"]

        if format == "json":
            return json.dumps([asdict(e) for e in entries], indent=2)
        elif format == "csv":
            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            writer.writerow(header)
            for e in entries:
                writer.writerow([
                    e.timestamp, e.action_type, e.operation, e.target or "",
                    e.status, e.result or "", e.error_kind or ""
                ])
            return buffer.getvalue()
        else:
            raise ValueError(f"Unsupported export format: {format}")

    def clear(self, confirm: bool = False) -> bool:
        """
        Clear the audit log.

        The current log is moved to a timestamped backup first.

        Args:
            confirm: Must be True to actually clear the log

        Returns:
            True if cleared, False otherwise
        """
        if not confirm:
            return False

        if self.log_path.exists():
            stamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
            backup_path = self.log_path.with_suffix(f".backup.{stamp}.jsonl")
            self.log_path.rename(backup_path)
            self.log_path.touch()
            return True

        return False
