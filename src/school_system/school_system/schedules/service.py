from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..classrooms.repository import ClassroomRepository
from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_enum, require_id
from ..core.enums import DayOfWeek, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from .model import Schedule
from .repository import ScheduleRepository

_REQUIRED = ("group", "classroom", "startTime", "endTime", "dayOfWeek")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None or value == "":
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in {"true", "1", "yes", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "0", "no", "off"}:
        return False
    raise ValidationError("isRecurring must be a boolean")


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, groups: GroupRepository, classrooms: ClassroomRepository):
        self._schedules = schedules
        self._groups = groups
        self._classrooms = classrooms

    def create(self, *, current_role: Role, data: Mapping[str, Any]) -> Schedule:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")
        if any(not data.get(k) for k in _REQUIRED):
            raise ValidationError("All schedule details are required")

        group_id = require_id(data.get("group"), "Group")
        classroom_id = require_id(data.get("classroom"), "Classroom")
        if not self._groups.get_by_id(group_id):
            raise ValidationError("Group not found")
        if not self._classrooms.get_by_id(classroom_id):
            raise ValidationError("Classroom not found")

        start_time = parse_iso_datetime(data.get("startTime"), "startTime")
        end_time = parse_iso_datetime(data.get("endTime"), "endTime")
        if start_time >= end_time:
            raise ValidationError("startTime must be before endTime")

        is_recurring = _parse_bool(data.get("isRecurring"))
        recurrence_end_date = None
        if is_recurring:
            recurrence_end_date = parse_iso_datetime(data.get("recurrenceEndDate"), "recurrenceEndDate")
            if recurrence_end_date < start_time:
                raise ValidationError("recurrenceEndDate cannot be before startTime")

        schedule_id = self._schedules.create(
            group_id=group_id,
            classroom_id=classroom_id,
            start_time=start_time,
            end_time=end_time,
            day_of_week=require_enum(data.get("dayOfWeek"), DayOfWeek, "dayOfWeek"),
            is_recurring=is_recurring,
            recurrence_end_date=recurrence_end_date,
        )
        return self.get(schedule_id)

    def get(self, schedule_id: int) -> Schedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def list_all(self) -> Sequence[Schedule]:
        return self._schedules.list_all()

    def delete(self, *, current_role: Role, schedule_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")
        if not self._schedules.delete(int(schedule_id)):
            raise NotFoundError("Schedule not found")

    def populate(self, schedule: Schedule) -> dict:
        """Schedule JSON with group and classroom expanded."""

        out = schedule.to_dict()
        group = self._groups.get_by_id(schedule.group_id)
        classroom = self._classrooms.get_by_id(schedule.classroom_id)
        out["group"] = group.to_dict() if group else None
        out["classroom"] = classroom.to_dict() if classroom else None
        return out
