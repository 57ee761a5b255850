from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.school_system.school_system.attendance.model import AttendanceRecord
from src.school_system.school_system.classrooms.model import Classroom
from src.school_system.school_system.container import wire_container
from src.school_system.school_system.core.enums import AttendanceStatus, DayOfWeek, NotificationType, PaymentStatus, Role
from src.school_system.school_system.core.exceptions import ServiceUnavailableError
from src.school_system.school_system.groups.model import Group
from src.school_system.school_system.main import create_app
from src.school_system.school_system.notifications.model import Notification
from src.school_system.school_system.payments.model import Payment
from src.school_system.school_system.schedules.model import Schedule
from src.school_system.school_system.users.model import User
from src.school_system.school_system.users.tokens import AuthSettings

SECRET = "test-secret"
ADMIN_KEY = "test-admin-key"
RESET_URL = "http://localhost/reset-password"
PASSWORD = "secret123"


class InMemoryUsers:
    def __init__(self):
        self.rows: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.rows.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return next((u for u in self.rows.values() if token and u.reset_token == token), None)

    def create_user(self, *, email, password_hash, first_name, last_name, role, phone, address, is_approved) -> int:
        self._id += 1
        self.rows[self._id] = User(
            user_id=self._id,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            phone=phone,
            address=address,
            is_approved=is_approved,
            created_at=datetime(2024, 1, 1, 9, 0),
            updated_at=datetime(2024, 1, 1, 9, 0),
        )
        return self._id

    def set_approved(self, user_id: int) -> bool:
        user = self.rows.get(user_id)
        if not user or user.is_approved:
            return False
        self.rows[user_id] = replace(user, is_approved=True)
        return True

    def set_reset_token(self, user_id: int, *, token, expires_at) -> bool:
        self.rows[user_id] = replace(self.rows[user_id], reset_token=token, reset_token_expires_at=expires_at)
        return True

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        self.rows[user_id] = replace(
            self.rows[user_id], password_hash=password_hash, reset_token=None, reset_token_expires_at=None
        )
        return True

    def list_all(self):
        return list(self.rows.values())

    def list_pending(self):
        return [u for u in self.rows.values() if not u.is_approved]

    def list_approved_by_role(self, role: Role):
        return [u for u in self.rows.values() if u.is_approved and u.role == role]


class InMemoryNotifications:
    def __init__(self):
        self.rows: dict[int, Notification] = {}
        self.fail_for: set[int] = set()
        self._id = 0

    def create(self, *, user_id: int, title: str, message: str, type: NotificationType) -> int:
        if user_id in self.fail_for:
            raise RuntimeError("write failed")
        self._id += 1
        self.rows[self._id] = Notification(
            notification_id=self._id, user_id=user_id, title=title, message=message, type=type
        )
        return self._id

    def list_for_user(self, user_id: int):
        mine = [n for n in self.rows.values() if n.user_id == user_id]
        return sorted(mine, key=lambda n: n.notification_id, reverse=True)

    def get_for_user(self, *, notification_id: int, user_id: int):
        n = self.rows.get(notification_id)
        return n if n and n.user_id == user_id else None

    def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        n = self.get_for_user(notification_id=notification_id, user_id=user_id)
        if not n:
            return False
        self.rows[notification_id] = replace(n, is_read=True)
        return True


class InMemoryClassrooms:
    def __init__(self):
        self.rows: dict[int, Classroom] = {}
        self._id = 0

    def get_by_id(self, classroom_id: int):
        return self.rows.get(classroom_id)

    def list_all(self):
        return list(self.rows.values())

    def create(self, *, name, capacity, description=None, location=None, equipment=()) -> int:
        self._id += 1
        self.rows[self._id] = Classroom(
            classroom_id=self._id,
            name=name,
            capacity=capacity,
            description=description,
            location=location,
            equipment=tuple(equipment),
        )
        return self._id

    def update(self, classroom_id: int, *, fields: dict) -> bool:
        self.rows[classroom_id] = replace(self.rows[classroom_id], **fields)
        return True

    def delete(self, classroom_id: int) -> bool:
        return self.rows.pop(classroom_id, None) is not None


class InMemoryGroups:
    def __init__(self):
        self.rows: dict[int, Group] = {}
        self._id = 0

    def get_by_id(self, group_id: int):
        return self.rows.get(group_id)

    def list_all(self):
        return list(self.rows.values())

    def list_for_member(self, user_id: int):
        return [g for g in self.rows.values() if g.teacher_id == user_id or user_id in g.student_ids]

    def create(self, *, name, subject, teacher_id, student_ids=()) -> int:
        self._id += 1
        self.rows[self._id] = Group(
            group_id=self._id, name=name, subject=subject, teacher_id=teacher_id, student_ids=tuple(student_ids)
        )
        return self._id


class InMemorySchedules:
    def __init__(self):
        self.rows: dict[int, Schedule] = {}
        self._id = 0

    def get_by_id(self, schedule_id: int):
        return self.rows.get(schedule_id)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda s: (s.start_time, s.schedule_id))

    def list_for_classroom(self, classroom_id: int):
        return [s for s in self.list_all() if s.classroom_id == classroom_id]

    def count_for_classroom(self, classroom_id: int) -> int:
        return len(self.list_for_classroom(classroom_id))

    def create(
        self,
        *,
        group_id,
        classroom_id,
        start_time,
        end_time,
        day_of_week=DayOfWeek.MONDAY,
        is_recurring=False,
        recurrence_end_date=None,
    ) -> int:
        self._id += 1
        self.rows[self._id] = Schedule(
            schedule_id=self._id,
            group_id=group_id,
            classroom_id=classroom_id,
            start_time=start_time,
            end_time=end_time,
            day_of_week=day_of_week,
            is_recurring=is_recurring,
            recurrence_end_date=recurrence_end_date,
        )
        return self._id

    def delete(self, schedule_id: int) -> bool:
        return self.rows.pop(schedule_id, None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int):
        return self.rows.get(attendance_id)

    def list_all(self):
        return list(self.rows.values())

    def list_for_student(self, student_id: int):
        return [r for r in self.rows.values() if r.student_id == student_id]

    def create(self, *, student_id: int, schedule_id: int, attendance_date: date, status: AttendanceStatus, note=None) -> int:
        self._id += 1
        self.rows[self._id] = AttendanceRecord(
            attendance_id=self._id,
            student_id=student_id,
            schedule_id=schedule_id,
            attendance_date=attendance_date,
            status=status,
            note=note,
        )
        return self._id


class InMemoryPayments:
    def __init__(self):
        self.rows: dict[int, Payment] = {}
        self._id = 0

    def get_by_id(self, payment_id: int):
        return self.rows.get(payment_id)

    def list_all(self):
        return list(self.rows.values())

    def list_for_student(self, student_id: int):
        return [p for p in self.rows.values() if p.student_id == student_id]

    def create(
        self, *, student_id: int, amount: Decimal, payment_date: datetime, due_date: datetime, status: PaymentStatus, description
    ) -> int:
        self._id += 1
        self.rows[self._id] = Payment(
            payment_id=self._id,
            student_id=student_id,
            amount=amount,
            payment_date=payment_date,
            due_date=due_date,
            status=status,
            description=description,
        )
        return self._id


class FakeMailer:
    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, text: str) -> None:
        if self.fail:
            raise ServiceUnavailableError("Error sending email")
        self.sent.append((to, subject, text))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 14, 10, 0)


@pytest.fixture
def repos():
    return SimpleNamespace(
        users=InMemoryUsers(),
        classrooms=InMemoryClassrooms(),
        groups=InMemoryGroups(),
        schedules=InMemorySchedules(),
        attendance=InMemoryAttendance(),
        payments=InMemoryPayments(),
        notifications=InMemoryNotifications(),
    )


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def container(repos, mailer):
    return wire_container(
        users_repo=repos.users,
        classrooms_repo=repos.classrooms,
        groups_repo=repos.groups,
        schedules_repo=repos.schedules,
        attendance_repo=repos.attendance,
        payments_repo=repos.payments,
        notifications_repo=repos.notifications,
        auth_settings=AuthSettings(secret_key=SECRET, admin_registration_key=ADMIN_KEY),
        mailer=mailer,
        reset_url=RESET_URL,
    )


@pytest.fixture
def make_user(repos):
    """Insert a user straight into the fake store; returns the User."""

    def _make(role: Role = Role.STUDENT, *, email: Optional[str] = None, approved: bool = True,
              first_name: str = "Test", last_name: Optional[str] = None, password: str = PASSWORD) -> User:
        n = repos.users._id + 1
        user_id = repos.users.create_user(
            email=email or f"{role.value}{n}@school.test",
            password_hash=generate_password_hash(password),
            first_name=first_name,
            last_name=last_name or role.value.capitalize(),
            role=role,
            phone=None,
            address=None,
            is_approved=approved,
        )
        return repos.users.get_by_id(user_id)

    return _make


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _header(user: User) -> dict:
        return {"Authorization": f"Bearer {container.token_service.issue(user)}"}

    return _header
