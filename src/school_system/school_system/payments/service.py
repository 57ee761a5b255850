from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import optional_text, require_enum, require_id, require_number
from ..core.enums import NotificationType, PaymentStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from ..users.tokens import TokenClaims
from .model import Payment
from .repository import PaymentRepository


class PaymentService:
    def __init__(self, payments: PaymentRepository, users: UserRepository, notifications: NotificationService):
        self._payments = payments
        self._users = users
        self._notifications = notifications

    def create(self, *, current_role: Role, data: Mapping[str, Any]) -> Payment:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")
        if not data.get("student") or data.get("amount") in (None, "") or not data.get("paymentDate") or not data.get("dueDate"):
            raise ValidationError("All payment details are required")

        student_id = require_id(data.get("student"), "Student")
        student = self._users.get_by_id(student_id)
        if not student or student.role != Role.STUDENT:
            raise ValidationError("Student not found")

        amount = Decimal(str(require_number(data.get("amount"), "Amount", minimum=0))).quantize(Decimal("0.01"))
        status = require_enum(data.get("status") or PaymentStatus.PENDING.value, PaymentStatus, "status")
        due_date = parse_iso_datetime(data.get("dueDate"), "dueDate")

        payment_id = self._payments.create(
            student_id=student_id,
            amount=amount,
            payment_date=parse_iso_datetime(data.get("paymentDate"), "paymentDate"),
            due_date=due_date,
            status=status,
            description=optional_text(data.get("description")),
        )

        if status != PaymentStatus.PAID:
            self._notifications.notify(
                [student_id],
                title="Payment Due",
                message=f"A payment of {amount} is due by {due_date.date().isoformat()}.",
                type=NotificationType.PAYMENT,
            )

        created = self._payments.get_by_id(payment_id)
        if not created:
            raise RuntimeError(f"payment {payment_id} vanished after insert")
        return created

    def list_for(self, caller: TokenClaims) -> Sequence[Payment]:
        if caller.role == Role.STUDENT:
            return self._payments.list_for_student(caller.user_id)
        return self._payments.list_all()
