from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Payment
from .repository import PaymentRepository

_SELECT = """
    SELECT payment_id, student_id, amount, payment_date, due_date, status, description, created_at, updated_at
    FROM payments
"""


def _row_to_payment(r: Dict[str, Any]) -> Payment:
    return Payment(
        payment_id=int(r["payment_id"]),
        student_id=int(r["student_id"]),
        amount=Decimal(str(r["amount"])),
        payment_date=r["payment_date"],
        due_date=r["due_date"],
        status=PaymentStatus(r["status"]),
        description=r.get("description"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE payment_id=%s", (int(payment_id),))
            r = fetchone(cur)
            return _row_to_payment(r) if r else None

    def list_all(self) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY due_date DESC, payment_id DESC")
            return [_row_to_payment(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE student_id=%s ORDER BY due_date DESC, payment_id DESC", (int(student_id),))
            return [_row_to_payment(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        student_id: int,
        amount: Decimal,
        payment_date: datetime,
        due_date: datetime,
        status: PaymentStatus,
        description: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payments(student_id, amount, payment_date, due_date, status, description)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(student_id), amount, payment_date, due_date, status.value, description),
            )
            return int(cur.lastrowid)
