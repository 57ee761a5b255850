from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Group:
    group_id: int
    name: str
    subject: str
    teacher_id: Optional[int]
    student_ids: tuple[int, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.group_id,
            "name": self.name,
            "subject": self.subject,
            "teacher": self.teacher_id,
            "students": list(self.student_ids),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
