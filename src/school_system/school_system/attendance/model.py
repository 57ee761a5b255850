from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's presence at one scheduled lesson on a date."""

    attendance_id: int
    student_id: int
    schedule_id: int
    attendance_date: date
    status: AttendanceStatus
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student": self.student_id,
            "schedule": self.schedule_id,
            "date": isoformat(self.attendance_date),
            "status": self.status.value,
            "note": self.note,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
