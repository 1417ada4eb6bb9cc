"""
CamManager - Activity Log Service
Append-only history of committed changes across the inventory
"""
import logging
import uuid
from collections import Counter, deque
from datetime import datetime, timedelta, timezone
from typing import Deque, Dict, List, Optional

from cammanager.models.audit import LogAction, LogEntry, TargetType

logger = logging.getLogger(__name__)


class AuditLog:
    """
    Write-once, read-many activity log.

    Entries are only ever added; nothing here edits or removes one, so the
    history outlives the records it talks about.
    """

    def __init__(self) -> None:
        self._entries: Deque[LogEntry] = deque()

    def __len__(self) -> int:
        return len(self._entries)

    def append(
        self,
        action: LogAction,
        target_type: TargetType,
        target_name: str,
        details: str,
        user: Optional[str],
    ) -> LogEntry:
        """
        Record a committed change.

        Args:
            action: Add, Edit or Delete
            target_type: Type of the affected record
            target_name: Name of the affected record
            details: Human-readable summary (a diff for edits)
            user: Username of the acting account ("SYSTEM" when None)

        Returns:
            The new entry
        """
        entry = LogEntry(
            id=f"log_{uuid.uuid4().hex[:12]}",
            action=action,
            target_type=target_type,
            target_name=target_name,
            details=details,
            timestamp=datetime.now(timezone.utc),
            user=user or "SYSTEM",
        )
        self._entries.appendleft(entry)

        logger.info(f"[AUDIT] {entry.user}: {entry.action} {entry.target_type} '{target_name}' - {details}")

        return entry

    def entries(self) -> List[LogEntry]:
        """All entries, newest first."""
        return sorted(self._entries, key=lambda e: e.timestamp, reverse=True)

    def query(
        self,
        user: Optional[str] = None,
        action: Optional[LogAction] = None,
        target_type: Optional[TargetType] = None,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[LogEntry]:
        """Filtered entries, newest first. `user` matches as a case-insensitive substring."""
        results = []
        for entry in self.entries():
            if user and user.lower() not in entry.user.lower():
                continue
            if action and entry.action != action:
                continue
            if target_type and entry.target_type != target_type:
                continue
            if start_time and entry.timestamp < _aware(start_time):
                continue
            if end_time and entry.timestamp > _aware(end_time):
                continue
            results.append(entry)
        return results

    def stats(self, days: int = 7) -> Dict:
        """Summary counts for the last `days` days."""
        end_time = datetime.now(timezone.utc)
        start_time = end_time - timedelta(days=days)
        today_start = end_time.replace(hour=0, minute=0, second=0, microsecond=0)

        in_period = [e for e in self._entries if e.timestamp >= start_time]

        return {
            "total_logs": len(in_period),
            "logs_today": sum(1 for e in in_period if e.timestamp >= today_start),
            "unique_users": len({e.user for e in in_period}),
            "actions_breakdown": dict(Counter(e.action for e in in_period)),
            "period_start": start_time,
            "period_end": end_time,
        }


def _aware(value: datetime) -> datetime:
    # Naive datetimes from query strings are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
