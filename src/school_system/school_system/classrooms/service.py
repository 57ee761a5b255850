from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..schedules.repository import ScheduleRepository
from .model import Classroom
from .repository import ClassroomRepository


def _parse_capacity(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("Capacity must be a whole number")
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacity must be a whole number")
    if not math.isfinite(as_float) or not as_float.is_integer():
        raise ValidationError("Capacity must be a whole number")
    capacity = int(as_float)
    if capacity < 1:
        raise ValidationError("Capacity must be at least 1")
    return capacity


def _parse_equipment(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Equipment must be a list of strings")
    return tuple(str(v).strip() for v in value if str(v).strip())


class ClassroomService:
    def __init__(self, classrooms: ClassroomRepository, schedules: ScheduleRepository):
        self._classrooms = classrooms
        self._schedules = schedules

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")

    def list_all(self) -> Sequence[Classroom]:
        return self._classrooms.list_all()

    def get(self, classroom_id: int) -> Classroom:
        classroom = self._classrooms.get_by_id(int(classroom_id))
        if not classroom:
            raise NotFoundError("Classroom not found")
        return classroom

    def create(self, *, current_role: Role, data: Mapping[str, Any]) -> Classroom:
        self._require_admin(current_role)
        if not data.get("name") or data.get("capacity") in (None, ""):
            raise ValidationError("Name and capacity are required")

        classroom_id = self._classrooms.create(
            name=require_non_empty(data.get("name"), "Name"),
            capacity=_parse_capacity(data.get("capacity")),
            description=optional_text(data.get("description")),
            location=optional_text(data.get("location")),
            equipment=_parse_equipment(data.get("equipment")),
        )
        return self.get(classroom_id)

    def update(self, *, current_role: Role, classroom_id: int, data: Mapping[str, Any]) -> Classroom:
        """Partial update: only keys present in ``data`` are changed."""

        self._require_admin(current_role)
        existing = self.get(classroom_id)

        fields: dict = {}
        if "name" in data:
            fields["name"] = require_non_empty(data.get("name"), "Name")
        if "capacity" in data:
            fields["capacity"] = _parse_capacity(data.get("capacity"))
        if "description" in data:
            fields["description"] = optional_text(data.get("description"))
        if "location" in data:
            fields["location"] = optional_text(data.get("location"))
        if "equipment" in data:
            fields["equipment"] = _parse_equipment(data.get("equipment"))

        if fields:
            self._classrooms.update(existing.classroom_id, fields=fields)
        return self.get(existing.classroom_id)

    def delete(self, *, current_role: Role, classroom_id: int) -> None:
        self._require_admin(current_role)
        existing = self.get(classroom_id)

        if self._schedules.count_for_classroom(existing.classroom_id) > 0:
            raise ConflictError("Cannot delete classroom with existing schedules")

        if not self._classrooms.delete(existing.classroom_id):
            raise NotFoundError("Classroom not found")
