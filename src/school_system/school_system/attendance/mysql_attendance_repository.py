from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        schedule_id=int(r["schedule_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        note=r.get("note"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_id, schedule_id, attendance_date, status, note, created_at, updated_at
                FROM attendances
                WHERE attendance_id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_id, schedule_id, attendance_date, status, note, created_at, updated_at
                FROM attendances
                ORDER BY attendance_date DESC, attendance_id DESC
                """
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_id, schedule_id, attendance_date, status, note, created_at, updated_at
                FROM attendances
                WHERE student_id=%s
                ORDER BY attendance_date DESC, attendance_id DESC
                """,
                (int(student_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        student_id: int,
        schedule_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendances(student_id, schedule_id, attendance_date, status, note)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(schedule_id), attendance_date, status.value, note),
            )
            return int(cur.lastrowid)
