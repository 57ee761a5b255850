from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DayOfWeek
from .model import Schedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Schedule]:
        raise NotImplementedError

    def list_for_classroom(self, classroom_id: int) -> Sequence[Schedule]:
        raise NotImplementedError

    def count_for_classroom(self, classroom_id: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        group_id: int,
        classroom_id: int,
        start_time: datetime,
        end_time: datetime,
        day_of_week: DayOfWeek,
        is_recurring: bool,
        recurrence_end_date: Optional[datetime],
    ) -> int:
        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError
