"""
Audit Logger for Pathfinder.

Provides append-only logging of every filesystem command with timestamps
and results, so a session's changes can be reviewed afterwards.
"""

import csv
import io
import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Dict, Any
from enum import Enum


CSV_FIELDS = ["timestamp", "action_type", "action_description", "status", "result"]


class ActionType(Enum):
    """Types of actions that can be logged."""
    NAVIGATE = "navigate"
    CREATE = "create"
    REMOVE = "remove"
    COPY = "copy"
    MOVE = "move"
    SEARCH = "search"


class ActionStatus(Enum):
    """Status of an action execution."""
    EXECUTED = "executed"
    FAILED = "failed"


@dataclass
class AuditEntry:
    """Represents a single audit log entry."""
    timestamp: str
    action_type: str
    action_description: str
    status: str
    result: Optional[str]
    metadata: Dict[str, Any]

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        action_description: str,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "AuditEntry":
        """Factory method to create an audit entry with current timestamp."""
        return cls(
            timestamp=datetime.now().isoformat(),
            action_type=action_type.value,
            action_description=action_description,
            status=status.value,
            result=result,
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
    Append-only audit logger for Pathfinder.

    Every command that touches the filesystem is logged to a JSONL file.
    Entries are only ever appended.
    """

    def __init__(self, log_path: str = "~/.local/state/pathfinder/audit_log.jsonl"):
        """
        Initialize the audit logger.

        Args:
            log_path: Path to the JSONL log file (``~`` is expanded)
        """
        self.log_path = Path(log_path).expanduser()
        self._ensure_log_directory()

    def _ensure_log_directory(self) -> None:
        """Create the log directory if it doesn't exist."""
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.log_path.exists():
            self.log_path.touch()

    def log(self, entry: AuditEntry) -> None:
        """
        Append an audit entry to the log.

        Args:
            entry: The AuditEntry to log
        """
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(entry.to_json() + "\n")

    def log_action(
        self,
        action_type: ActionType,
        description: str,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> AuditEntry:
        """
        Convenience method to create and log an entry in one call.

        Returns the created AuditEntry.
        """
        entry = AuditEntry.create(
            action_type=action_type,
            action_description=description,
            status=status,
            result=result,
            metadata=metadata
        )
        self.log(entry)
        return entry

    def _read_entries(self) -> List[AuditEntry]:
        """Read every parseable entry in file order."""
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
        return list(reversed(self._read_entries()[-limit:]))

    def get_by_action_type(self, action_type: ActionType, limit: int = 100) -> List[AuditEntry]:
        """
        Get audit entries filtered by action type, most recent first.

        Args:
            action_type: The ActionType to filter by
            limit: Maximum number of entries to return
        """
        matching = [e for e in self._read_entries() if e.action_type == action_type.value]
        return list(reversed(matching))[:limit]

    def get_failed_actions(self, limit: int = 50) -> List[AuditEntry]:
        """
        Get commands that failed, most recent first.

        Useful for reviewing what went wrong during a session.
        """
        failed = [e for e in self._read_entries() if e.status == ActionStatus.FAILED.value]
        return list(reversed(failed))[:limit]

    def export(self, format: str = "json", entries: Optional[List[AuditEntry]] = None) -> str:
        """
        Export audit entries.

        Args:
            format: Export format ("json" or "csv")
            entries: Entries to export (default: the whole log, most recent first)

        Returns:
            String containing the exported data
        """
        if entries is None:
            entries = self.get_recent(limit=10000)

        if format == "json":
            return json.dumps([asdict(e) for e in entries], indent=2)
        elif format == "csv":
            output = io.StringIO()
            csv.writer(output, lineterminator="\n").writerow(CSV_FIELDS)
            writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
            for e in entries:
                writer.writerow([e.timestamp, e.action_type, e.action_description, e.status, e.result or ""])
            return output.getvalue()
        else:
            raise ValueError(f"Unsupported export format: {format}")
