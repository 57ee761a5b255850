from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat


@dataclass(frozen=True)
class Classroom:
    classroom_id: int
    name: str
    capacity: int
    description: Optional[str] = None
    location: Optional[str] = None
    equipment: tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.classroom_id,
            "name": self.name,
            "capacity": self.capacity,
            "description": self.description,
            "location": self.location,
            "equipment": list(self.equipment),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
