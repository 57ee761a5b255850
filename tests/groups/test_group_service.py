from __future__ import annotations

import pytest

from src.school_system.school_system.core.enums import Role
from src.school_system.school_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.school_system.school_system.users.tokens import TokenClaims


def _claims(user) -> TokenClaims:
    return TokenClaims(user_id=user.user_id, email=user.email, role=user.role)


@pytest.fixture
def people(make_user):
    return {
        "teacher": make_user(Role.TEACHER, first_name="Marta", last_name="Kowalska"),
        "s1": make_user(Role.STUDENT),
        "s2": make_user(Role.STUDENT),
        "admin": make_user(Role.ADMIN),
    }


def test_create_group_with_roster(container, people):
    group = container.group_service.create(
        current_role=Role.ADMIN,
        data={
            "name": "Watercolor I",
            "subject": "Painting",
            "teacher": people["teacher"].user_id,
            "students": [people["s1"].user_id, people["s1"].user_id],
        },
    )

    assert group.teacher_id == people["teacher"].user_id
    assert group.student_ids == (people["s1"].user_id,)

    populated = container.group_service.populate(group)
    assert populated["teacher"]["firstName"] == "Marta"
    assert [s["id"] for s in populated["students"]] == [people["s1"].user_id]


def test_create_group_requires_fields(container):
    with pytest.raises(ValidationError) as exc:
        container.group_service.create(current_role=Role.ADMIN, data={"name": "X"})
    assert str(exc.value) == "Name, teacher, and subject are required"


def test_create_group_validates_people(container, people):
    with pytest.raises(ValidationError):
        container.group_service.create(
            current_role=Role.ADMIN,
            data={"name": "X", "subject": "Y", "teacher": people["s1"].user_id},
        )
    with pytest.raises(ValidationError):
        container.group_service.create(
            current_role=Role.ADMIN,
            data={"name": "X", "subject": "Y", "teacher": people["teacher"].user_id, "students": [people["teacher"].user_id]},
        )


def test_create_group_is_admin_only(container, people):
    with pytest.raises(AuthorizationError):
        container.group_service.create(
            current_role=Role.TEACHER,
            data={"name": "X", "subject": "Y", "teacher": people["teacher"].user_id},
        )


def test_members_only_see_their_groups(container, repos, people):
    mine = repos.groups.create(name="A", subject="Drawing", teacher_id=people["teacher"].user_id, student_ids=[people["s1"].user_id])
    other = repos.groups.create(name="B", subject="Drawing", teacher_id=people["teacher"].user_id, student_ids=[])

    assert [g.group_id for g in container.group_service.list_for(_claims(people["s1"]))] == [mine]
    assert [g.group_id for g in container.group_service.list_for(_claims(people["teacher"]))] == [mine, other]
    assert len(container.group_service.list_for(_claims(people["admin"]))) == 2

    with pytest.raises(NotFoundError):
        container.group_service.get_for(_claims(people["s2"]), mine)
    assert container.group_service.get_for(_claims(people["s1"]), mine).name == "A"
