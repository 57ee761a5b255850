from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import Payment


class PaymentRepository(Protocol):
    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Payment]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[Payment]:
        raise NotImplementedError

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
        raise NotImplementedError
