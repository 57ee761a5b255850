from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import DayOfWeek


@dataclass(frozen=True)
class Schedule:
    """One lesson slot: a group in a classroom, optionally repeating weekly."""

    schedule_id: int
    group_id: int
    classroom_id: int
    start_time: datetime
    end_time: datetime
    day_of_week: DayOfWeek
    is_recurring: bool = False
    recurrence_end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "group": self.group_id,
            "classroom": self.classroom_id,
            "startTime": isoformat(self.start_time),
            "endTime": isoformat(self.end_time),
            "dayOfWeek": self.day_of_week.value,
            "isRecurring": self.is_recurring,
            "recurrenceEndDate": isoformat(self.recurrence_end_date),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
