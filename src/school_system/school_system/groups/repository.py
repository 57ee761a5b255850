from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def list_for_member(self, user_id: int) -> Sequence[Group]:
        """Groups where the user is the teacher or on the roster."""

        raise NotImplementedError

    def create(self, *, name: str, subject: str, teacher_id: int, student_ids: Sequence[int]) -> int:
        raise NotImplementedError
