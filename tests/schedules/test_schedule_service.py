from __future__ import annotations

from datetime import datetime

import pytest

from src.school_system.school_system.core.enums import DayOfWeek, Role
from src.school_system.school_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture
def refs(repos, make_user):
    teacher = make_user(Role.TEACHER)
    return {
        "group": repos.groups.create(name="Watercolor I", subject="Painting", teacher_id=teacher.user_id),
        "classroom": repos.classrooms.create(name="Studio A", capacity=10),
    }


def _payload(refs, **overrides):
    data = {
        "group": refs["group"],
        "classroom": refs["classroom"],
        "startTime": "2024-03-13T10:00:00",
        "endTime": "2024-03-13T11:30:00",
        "dayOfWeek": "Wednesday",
    }
    data.update(overrides)
    return data


def test_create_one_off_schedule(container, refs):
    schedule = container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs))

    assert schedule.start_time == datetime(2024, 3, 13, 10, 0)
    assert schedule.day_of_week == DayOfWeek.WEDNESDAY
    assert schedule.is_recurring is False
    assert schedule.recurrence_end_date is None

    populated = container.schedule_service.populate(schedule)
    assert populated["group"]["name"] == "Watercolor I"
    assert populated["classroom"]["name"] == "Studio A"


def test_create_recurring_schedule_needs_end_date(container, refs):
    with pytest.raises(ValidationError):
        container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs, isRecurring=True))
    with pytest.raises(ValidationError):
        container.schedule_service.create(
            current_role=Role.ADMIN, data=_payload(refs, isRecurring=True, recurrenceEndDate="2024-03-01")
        )

    schedule = container.schedule_service.create(
        current_role=Role.ADMIN, data=_payload(refs, isRecurring="true", recurrenceEndDate="2024-06-30")
    )
    assert schedule.is_recurring is True
    assert schedule.recurrence_end_date == datetime(2024, 6, 30)


def test_create_validates_input(container, refs):
    with pytest.raises(ValidationError) as exc:
        container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs, dayOfWeek=None))
    assert str(exc.value) == "All schedule details are required"

    with pytest.raises(ValidationError):
        container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs, endTime="2024-03-13T09:00:00"))
    with pytest.raises(ValidationError):
        container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs, group=99))
    with pytest.raises(ValidationError):
        container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs, dayOfWeek="funday"))


def test_only_admin_creates_and_deletes(container, refs):
    with pytest.raises(AuthorizationError):
        container.schedule_service.create(current_role=Role.TEACHER, data=_payload(refs))

    schedule = container.schedule_service.create(current_role=Role.ADMIN, data=_payload(refs))
    with pytest.raises(AuthorizationError):
        container.schedule_service.delete(current_role=Role.STUDENT, schedule_id=schedule.schedule_id)

    container.schedule_service.delete(current_role=Role.ADMIN, schedule_id=schedule.schedule_id)
    with pytest.raises(NotFoundError):
        container.schedule_service.get(schedule.schedule_id)
    with pytest.raises(NotFoundError):
        container.schedule_service.delete(current_role=Role.ADMIN, schedule_id=schedule.schedule_id)
