from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Group
from .repository import GroupRepository


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, where: str = "1=1", params: tuple = ()) -> list[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT g.group_id, g.name, g.subject, g.teacher_id, g.created_at, g.updated_at
                FROM `groups` g
                WHERE {where}
                ORDER BY g.group_id ASC
                """,
                params,
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["group_id"]) for r in rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT group_id, student_id
                FROM group_students
                WHERE group_id IN ({placeholders})
                ORDER BY student_id ASC
                """,
                tuple(ids),
            )
            roster: Dict[int, list[int]] = {}
            for r in fetchall(cur):
                roster.setdefault(int(r["group_id"]), []).append(int(r["student_id"]))

            return [self._row_to_group(r, roster.get(int(r["group_id"]), [])) for r in rows]

    @staticmethod
    def _row_to_group(r: Dict[str, Any], student_ids: list[int]) -> Group:
        return Group(
            group_id=int(r["group_id"]),
            name=r["name"],
            subject=r["subject"],
            teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
            student_ids=tuple(student_ids),
            created_at=r.get("created_at"),
            updated_at=r.get("updated_at"),
        )

    def get_by_id(self, group_id: int) -> Optional[Group]:
        found = self._load("g.group_id=%s", (int(group_id),))
        return found[0] if found else None

    def list_all(self) -> Sequence[Group]:
        return self._load()

    def list_for_member(self, user_id: int) -> Sequence[Group]:
        return self._load(
            "g.teacher_id=%s OR g.group_id IN (SELECT group_id FROM group_students WHERE student_id=%s)",
            (int(user_id), int(user_id)),
        )

    def create(self, *, name: str, subject: str, teacher_id: int, student_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO `groups`(name, subject, teacher_id) VALUES(%s,%s,%s)",
                (name, subject, int(teacher_id)),
            )
            group_id = int(cur.lastrowid)
            if student_ids:
                cur.executemany(
                    "INSERT INTO group_students(group_id, student_id) VALUES(%s,%s)",
                    [(group_id, int(s)) for s in student_ids],
                )
            return group_id
