from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.validators import require_id, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..users.tokens import TokenClaims
from .model import Group
from .repository import GroupRepository


class GroupService:
    def __init__(self, groups: GroupRepository, users: UserRepository):
        self._groups = groups
        self._users = users

    def create(self, *, current_role: Role, data: Mapping[str, Any]) -> Group:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")
        if not data.get("name") or not data.get("teacher") or not data.get("subject"):
            raise ValidationError("Name, teacher, and subject are required")

        teacher_id = require_id(data.get("teacher"), "Teacher")
        teacher = self._users.get_by_id(teacher_id)
        if not teacher or teacher.role == Role.STUDENT:
            raise ValidationError("Teacher not found")

        raw_students = data.get("students") or []
        if not isinstance(raw_students, (list, tuple)):
            raise ValidationError("Students must be a list of user ids")
        student_ids = list(dict.fromkeys(require_id(s, "Student") for s in raw_students))
        for student_id in student_ids:
            student = self._users.get_by_id(student_id)
            if not student or student.role != Role.STUDENT:
                raise ValidationError(f"Student {student_id} not found")

        group_id = self._groups.create(
            name=require_non_empty(data.get("name"), "Name"),
            subject=require_non_empty(data.get("subject"), "Subject"),
            teacher_id=teacher_id,
            student_ids=student_ids,
        )
        return self.get(group_id)

    def get(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise NotFoundError("Group not found")
        return group

    def list_for(self, caller: TokenClaims) -> Sequence[Group]:
        if caller.role == Role.ADMIN:
            return self._groups.list_all()
        return self._groups.list_for_member(caller.user_id)

    def get_for(self, caller: TokenClaims, group_id: int) -> Group:
        group = self.get(group_id)
        if caller.role != Role.ADMIN and caller.user_id != group.teacher_id and caller.user_id not in group.student_ids:
            raise NotFoundError("Group not found")
        return group

    def populate(self, group: Group) -> dict:
        """Group JSON with teacher and students expanded to user objects."""

        out = group.to_dict()
        teacher = self._users.get_by_id(group.teacher_id) if group.teacher_id else None
        out["teacher"] = teacher.to_dict() if teacher else None
        students = [self._users.get_by_id(s) for s in group.student_ids]
        out["students"] = [s.to_dict() for s in students if s]
        return out
