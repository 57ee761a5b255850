from __future__ import annotations

from datetime import timedelta

import pytest

from src.school_system.school_system.core.enums import NotificationType, Role
from src.school_system.school_system.core.exceptions import (
    AlreadyApprovedError,
    AuthorizationError,
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from src.school_system.school_system.users.service import parse_profile


def _profile(**overrides):
    data = {
        "email": "Ana@School.test",
        "password": "secret123",
        "firstName": "Ana",
        "lastName": "Lopez",
        "role": "student",
    }
    data.update(overrides)
    return parse_profile(data)


def test_parse_profile_rejects_missing_fields():
    with pytest.raises(ValidationError) as exc:
        parse_profile({"email": "a@b.co", "password": "secret123"})
    assert str(exc.value) == "All required fields must be provided"


def test_parse_profile_normalizes_email():
    assert _profile().email == "ana@school.test"


def test_register_student_is_pending_and_notifies_approved_admins(container, repos, make_user):
    admin = make_user(Role.ADMIN)
    pending_admin = make_user(Role.ADMIN, approved=False)

    result = container.auth_service.register(_profile())

    assert result.user.is_approved is False
    assert result.token
    notes = repos.notifications.list_for_user(admin.user_id)
    assert len(notes) == 1
    assert notes[0].type == NotificationType.ACCOUNT
    assert repos.notifications.list_for_user(pending_admin.user_id) == []


def test_register_duplicate_email_conflicts(container):
    container.auth_service.register(_profile())

    with pytest.raises(ConflictError) as exc:
        container.auth_service.register(_profile(firstName="Other"))
    assert str(exc.value) == "Email already registered"


def test_admin_self_registration_needs_matching_key(container):
    with pytest.raises(AuthorizationError):
        container.auth_service.register(_profile(role="admin"))
    with pytest.raises(AuthorizationError):
        container.auth_service.register(_profile(role="admin"), admin_key="wrong")

    result = container.auth_service.register(_profile(role="admin"), admin_key="test-admin-key")
    assert result.user.is_approved is True
    assert result.user.role == Role.ADMIN
    assert container.auth_service.login("ana@school.test", "secret123").user.user_id == result.user.user_id


def test_login_blocked_until_approved(container, make_user):
    admin = make_user(Role.ADMIN)
    user = container.auth_service.register(_profile()).user

    with pytest.raises(AuthorizationError):
        container.auth_service.login("ana@school.test", "secret123")

    container.auth_service.approve_user(current_role=admin.role, user_id=user.user_id)
    result = container.auth_service.login("ANA@school.test", "secret123")

    assert result.user.user_id == user.user_id
    assert result.token


def test_login_with_wrong_password_or_unknown_email(container, make_user):
    make_user(Role.TEACHER, email="t@school.test")

    with pytest.raises(InvalidCredentialsError) as exc:
        container.auth_service.login("t@school.test", "nope-nope")
    assert str(exc.value) == "Invalid credentials"
    with pytest.raises(InvalidCredentialsError):
        container.auth_service.login("ghost@school.test", "secret123")


def test_approve_user_errors(container, repos, make_user):
    admin = make_user(Role.ADMIN)
    student = make_user(Role.STUDENT, approved=False)

    with pytest.raises(AuthorizationError):
        container.auth_service.approve_user(current_role=Role.TEACHER, user_id=student.user_id)
    with pytest.raises(NotFoundError):
        container.auth_service.approve_user(current_role=admin.role, user_id=999)

    approved = container.auth_service.approve_user(current_role=admin.role, user_id=student.user_id)
    assert approved.is_approved is True
    assert [n.title for n in repos.notifications.list_for_user(student.user_id)] == ["Account approved"]

    with pytest.raises(AlreadyApprovedError):
        container.auth_service.approve_user(current_role=admin.role, user_id=student.user_id)


def test_list_pending_is_admin_only(container, make_user):
    make_user(Role.STUDENT, approved=False)
    make_user(Role.TEACHER)

    assert len(container.auth_service.list_pending(current_role=Role.ADMIN)) == 1
    with pytest.raises(AuthorizationError):
        container.auth_service.list_pending(current_role=Role.TEACHER)


def test_register_by_admin_creates_approved_account(container):
    result = container.auth_service.register_by_admin(_profile(role="teacher"), current_role=Role.ADMIN)
    assert result.user.is_approved is True

    with pytest.raises(AuthorizationError):
        container.auth_service.register_by_admin(_profile(email="x@school.test"), current_role=Role.STUDENT)


def test_password_reset_flow_is_single_use(container, repos, mailer, make_user, fixed_now):
    user = make_user(Role.STUDENT, email="s@school.test")

    container.auth_service.request_password_reset("s@school.test", now=fixed_now)

    token = repos.users.get_by_id(user.user_id).reset_token
    assert len(token) == 40
    assert repos.users.get_by_id(user.user_id).reset_token_expires_at == fixed_now + timedelta(hours=1)
    to, _, text = mailer.sent[0]
    assert to == "s@school.test"
    assert f"http://localhost/reset-password/{token}" in text

    container.auth_service.reset_password(token, "brand-new", now=fixed_now + timedelta(minutes=30))
    assert container.auth_service.login("s@school.test", "brand-new").user.user_id == user.user_id
    assert repos.users.get_by_id(user.user_id).reset_token is None

    with pytest.raises(InvalidTokenError):
        container.auth_service.reset_password(token, "another-one", now=fixed_now + timedelta(minutes=31))


def test_password_reset_token_expires(container, repos, make_user, fixed_now):
    user = make_user(Role.STUDENT, email="s@school.test")
    container.auth_service.request_password_reset("s@school.test", now=fixed_now)
    token = repos.users.get_by_id(user.user_id).reset_token

    with pytest.raises(InvalidTokenError):
        container.auth_service.reset_password(token, "brand-new", now=fixed_now + timedelta(hours=1))


def test_password_reset_unknown_email(container):
    with pytest.raises(NotFoundError):
        container.auth_service.request_password_reset("ghost@school.test")


def test_password_reset_mail_failure_clears_token(container, repos, mailer, make_user):
    user = make_user(Role.STUDENT, email="s@school.test")
    mailer.fail = True

    with pytest.raises(ServiceUnavailableError):
        container.auth_service.request_password_reset("s@school.test")

    stored = repos.users.get_by_id(user.user_id)
    assert stored.reset_token is None
    assert stored.reset_token_expires_at is None
