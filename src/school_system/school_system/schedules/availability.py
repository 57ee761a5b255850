"""Classroom occupancy for a day, week or month view.

Only booked intervals are reported; free slots are never synthesized. A
recurring schedule contributes its stored anchor occurrence only: it is
matched by ``start_time`` like any other schedule and is not expanded into
weekly repeats.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Sequence

from ..classrooms.model import Classroom
from ..classrooms.repository import ClassroomRepository
from ..common.datetime_utils import isoformat, now_local
from ..core.constants import OCCUPIED, UNASSIGNED_TEACHER
from ..core.enums import ScheduleView
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.model import Group
from ..groups.repository import GroupRepository
from ..users.repository import UserRepository
from .model import Schedule
from .repository import ScheduleRepository

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class ViewWindow:
    view: ScheduleView
    start_date: datetime
    end_date: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start_date <= moment <= self.end_date

    def to_dict(self) -> dict:
        return {
            "view": self.view.value,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
        }


def parse_view(value: Any) -> ScheduleView:
    if value is None or value == "":
        return ScheduleView.WEEK
    try:
        return ScheduleView(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Invalid view parameter. Use 'day', 'week', or 'month'")


def _day_bounds(first: date, last: date) -> tuple[datetime, datetime]:
    return datetime.combine(first, time.min), datetime.combine(last, END_OF_DAY)


def compute_window(view: Any, reference: datetime) -> ViewWindow:
    """Window ``[start_date, end_date]`` (both inclusive) around ``reference``."""

    view = parse_view(view)
    day = reference.date()

    if view == ScheduleView.DAY:
        start, end = _day_bounds(day, day)
    elif view == ScheduleView.WEEK:
        # Sunday=0 .. Saturday=6; weeks start on Monday.
        sunday_index = (day.weekday() + 1) % 7
        offset = 6 if sunday_index == 0 else sunday_index - 1
        monday = day - timedelta(days=offset)
        start, end = _day_bounds(monday, monday + timedelta(days=6))
    else:
        last_day = calendar.monthrange(day.year, day.month)[1]
        start, end = _day_bounds(day.replace(day=1), day.replace(day=last_day))

    return ViewWindow(view=view, start_date=start, end_date=end)


class ScheduleAvailabilityResolver:
    """Resolves which schedules occupy a classroom inside a view window."""

    def __init__(
        self,
        schedules: ScheduleRepository,
        classrooms: ClassroomRepository,
        groups: GroupRepository,
        users: UserRepository,
    ):
        self._schedules = schedules
        self._classrooms = classrooms
        self._groups = groups
        self._users = users

    def for_classroom(self, classroom_id: int, *, view: Any = None, reference: Optional[datetime] = None) -> dict:
        window = compute_window(view, reference or now_local())

        classroom = self._classrooms.get_by_id(int(classroom_id))
        if not classroom:
            raise NotFoundError("Classroom not found")

        occupied = self._occupied(self._schedules.list_for_classroom(classroom.classroom_id), window)
        return {**window.to_dict(), "classroom": classroom.to_dict(), "schedule": occupied}

    def for_all_classrooms(self, *, view: Any = None, reference: Optional[datetime] = None) -> dict:
        window = compute_window(view, reference or now_local())

        by_classroom: dict[int, list[Schedule]] = {}
        for schedule in self._schedules.list_all():
            by_classroom.setdefault(schedule.classroom_id, []).append(schedule)

        # Every classroom is listed, in store order, even with nothing booked.
        lookup = _LessonLookup(self._groups, self._users)
        rooms = [
            self._room_entry(classroom, self._occupied(by_classroom.get(classroom.classroom_id, []), window, lookup))
            for classroom in self._classrooms.list_all()
        ]
        return {**window.to_dict(), "classrooms": rooms}

    @staticmethod
    def _room_entry(classroom: Classroom, occupied: list[dict]) -> dict:
        return {"classroom": classroom.to_dict(), "schedule": occupied}

    def _occupied(
        self,
        schedules: Sequence[Schedule],
        window: ViewWindow,
        lookup: Optional["_LessonLookup"] = None,
    ) -> list[dict]:
        lookup = lookup or _LessonLookup(self._groups, self._users)
        matched = sorted(
            (s for s in schedules if window.contains(s.start_time)),
            key=lambda s: (s.start_time, s.schedule_id),
        )
        return [
            {
                "id": s.schedule_id,
                "startTime": isoformat(s.start_time),
                "endTime": isoformat(s.end_time),
                "dayOfWeek": s.day_of_week.value,
                "isRecurring": s.is_recurring,
                "recurrenceEndDate": isoformat(s.recurrence_end_date),
                "status": OCCUPIED,
                "lesson": lookup.lesson(s.group_id),
            }
            for s in matched
        ]


class _LessonLookup:
    """Per-request memo of group -> lesson block."""

    def __init__(self, groups: GroupRepository, users: UserRepository):
        self._groups = groups
        self._users = users
        self._cache: dict[int, dict] = {}

    def lesson(self, group_id: int) -> dict:
        if group_id not in self._cache:
            self._cache[group_id] = self._build(self._groups.get_by_id(group_id))
        return self._cache[group_id]

    def _build(self, group: Optional[Group]) -> dict:
        if not group:
            return {"groupName": None, "subject": None, "teacher": UNASSIGNED_TEACHER}

        teacher = self._users.get_by_id(group.teacher_id) if group.teacher_id else None
        return {
            "groupName": group.name,
            "subject": group.subject,
            "teacher": teacher.full_name if teacher else UNASSIGNED_TEACHER,
        }
