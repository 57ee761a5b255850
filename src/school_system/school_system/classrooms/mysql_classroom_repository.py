from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_list, fetchall, fetchone, load_json_list
from .model import Classroom
from .repository import ClassroomRepository

_UPDATABLE = ("name", "capacity", "description", "location", "equipment")


def _row_to_classroom(r: Dict[str, Any]) -> Classroom:
    return Classroom(
        classroom_id=int(r["classroom_id"]),
        name=r["name"],
        capacity=int(r["capacity"]),
        description=r.get("description"),
        location=r.get("location"),
        equipment=load_json_list(r.get("equipment")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLClassroomRepository(ClassroomRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, classroom_id: int) -> Optional[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT classroom_id, name, capacity, description, location, equipment, created_at, updated_at
                FROM classrooms
                WHERE classroom_id=%s
                """,
                (int(classroom_id),),
            )
            r = fetchone(cur)
            return _row_to_classroom(r) if r else None

    def list_all(self) -> Sequence[Classroom]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT classroom_id, name, capacity, description, location, equipment, created_at, updated_at
                FROM classrooms
                ORDER BY classroom_id ASC
                """
            )
            return [_row_to_classroom(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        capacity: int,
        description: Optional[str],
        location: Optional[str],
        equipment: Sequence[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO classrooms(name, capacity, description, location, equipment)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, int(capacity), description, location, dump_json_list(equipment)),
            )
            return int(cur.lastrowid)

    def update(self, classroom_id: int, *, fields: dict) -> bool:
        sets: list[str] = []
        params: list[object] = []
        for column in _UPDATABLE:
            if column not in fields:
                continue
            value = fields[column]
            sets.append(f"{column}=%s")
            params.append(dump_json_list(value) if column == "equipment" else value)

        if not sets:
            return self.get_by_id(classroom_id) is not None

        params.append(int(classroom_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE classrooms SET {', '.join(sets)} WHERE classroom_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete(self, classroom_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classrooms WHERE classroom_id=%s", (int(classroom_id),))
            return cur.rowcount > 0
