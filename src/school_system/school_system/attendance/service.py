from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, require_enum, require_id
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..schedules.repository import ScheduleRepository
from ..users.repository import UserRepository
from ..users.tokens import TokenClaims
from .model import AttendanceRecord
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository, schedules: ScheduleRepository):
        self._attendance = attendance
        self._users = users
        self._schedules = schedules

    def record(self, *, current_role: Role, data: Mapping[str, Any]) -> AttendanceRecord:
        if current_role not in (Role.TEACHER, Role.ADMIN):
            raise AuthorizationError("You do not have permission to perform this action")
        if any(not data.get(k) for k in ("student", "schedule", "date", "status")):
            raise ValidationError("All attendance details are required")

        student_id = require_id(data.get("student"), "Student")
        schedule_id = require_id(data.get("schedule"), "Schedule")
        student = self._users.get_by_id(student_id)
        if not student or student.role != Role.STUDENT:
            raise ValidationError("Student not found")
        if not self._schedules.get_by_id(schedule_id):
            raise ValidationError("Schedule not found")

        attendance_id = self._attendance.create(
            student_id=student_id,
            schedule_id=schedule_id,
            attendance_date=parse_iso_date(data.get("date"), "date"),
            status=require_enum(data.get("status"), AttendanceStatus, "status"),
            note=optional_text(data.get("note")),
        )
        created = self._attendance.get_by_id(attendance_id)
        if not created:
            raise RuntimeError(f"attendance {attendance_id} vanished after insert")
        return created

    def list_for(self, caller: TokenClaims) -> Sequence[AttendanceRecord]:
        if caller.role == Role.STUDENT:
            return self._attendance.list_for_student(caller.user_id)
        return self._attendance.list_all()
