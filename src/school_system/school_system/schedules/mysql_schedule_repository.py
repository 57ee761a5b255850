from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Schedule
from .repository import ScheduleRepository

_SELECT = """
    SELECT schedule_id, group_id, classroom_id, start_time, end_time, day_of_week,
           is_recurring, recurrence_end_date, created_at, updated_at
    FROM schedules
"""


def _row_to_schedule(r: Dict[str, Any]) -> Schedule:
    return Schedule(
        schedule_id=int(r["schedule_id"]),
        group_id=int(r["group_id"]),
        classroom_id=int(r["classroom_id"]),
        start_time=r["start_time"],
        end_time=r["end_time"],
        day_of_week=DayOfWeek(r["day_of_week"]),
        is_recurring=bool(r.get("is_recurring")),
        recurrence_end_date=r.get("recurrence_end_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _row_to_schedule(r) if r else None

    def list_all(self) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY start_time ASC, schedule_id ASC")
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def list_for_classroom(self, classroom_id: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE classroom_id=%s ORDER BY start_time ASC, schedule_id ASC",
                (int(classroom_id),),
            )
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def count_for_classroom(self, classroom_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM schedules WHERE classroom_id=%s", (int(classroom_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def create(
        self,
        *,
        group_id: int,
        classroom_id: int,
        start_time: datetime,
        end_time: datetime,
        day_of_week: DayOfWeek,
        is_recurring: bool,
        recurrence_end_date: Optional[datetime],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(group_id, classroom_id, start_time, end_time, day_of_week,
                                      is_recurring, recurrence_end_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(group_id),
                    int(classroom_id),
                    start_time,
                    end_time,
                    day_of_week.value,
                    int(is_recurring),
                    recurrence_end_date,
                ),
            )
            return int(cur.lastrowid)

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0
