from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cammanager.models.audit import LogAction, TargetType
from cammanager.services.audit import AuditLog


def _log() -> AuditLog:
    log = AuditLog()
    log.append(LogAction.ADD, TargetType.CAMERA, "Door", "Added", "admin")
    log.append(LogAction.EDIT, TargetType.CAMERA, "Door", "Changed", "staff")
    log.append(LogAction.DELETE, TargetType.RECORDER, "NVR", "Deleted", None)
    return log


def test_newest_first_and_system_user() -> None:
    entries = _log().entries()
    assert [e.action for e in entries] == ["Delete", "Edit", "Add"]
    assert entries[0].user == "SYSTEM"
    assert entries[0].id.startswith("log_")


def test_query_filters() -> None:
    log = _log()
    assert [e.user for e in log.query(user="STA")] == ["staff"]
    assert [e.target_name for e in log.query(target_type=TargetType.RECORDER)] == ["NVR"]
    assert [e.action for e in log.query(action=LogAction.ADD)] == ["Add"]

    future = datetime.now(timezone.utc) + timedelta(hours=1)
    assert log.query(start_time=future) == []
    # Naive datetimes are read as UTC
    assert len(log.query(end_time=future.replace(tzinfo=None))) == 3


def test_stats() -> None:
    stats = _log().stats(days=7)
    assert stats["total_logs"] == 3
    assert stats["logs_today"] == 3
    assert stats["unique_users"] == 3
    assert stats["actions_breakdown"] == {"Add": 1, "Edit": 1, "Delete": 1}
