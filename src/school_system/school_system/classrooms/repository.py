from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Classroom


class ClassroomRepository(Protocol):
    def get_by_id(self, classroom_id: int) -> Optional[Classroom]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Classroom]:
        """Classrooms in store (insertion) order."""

        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        capacity: int,
        description: Optional[str],
        location: Optional[str],
        equipment: Sequence[str],
    ) -> int:
        raise NotImplementedError

    def update(self, classroom_id: int, *, fields: dict) -> bool:
        """Partial update; ``fields`` keys are column names (name, capacity, ...)."""

        raise NotImplementedError

    def delete(self, classroom_id: int) -> bool:
        raise NotImplementedError
