from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class Payment:
    payment_id: int
    student_id: int
    amount: Decimal
    payment_date: datetime
    due_date: datetime
    status: PaymentStatus = PaymentStatus.PENDING
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "student": self.student_id,
            "amount": float(self.amount),
            "paymentDate": isoformat(self.payment_date),
            "dueDate": isoformat(self.due_date),
            "status": self.status.value,
            "description": self.description,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
