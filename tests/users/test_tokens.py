from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest

from src.school_system.school_system.core.enums import Role
from src.school_system.school_system.core.exceptions import AuthenticationError
from src.school_system.school_system.users.tokens import AuthSettings, TokenService


def test_issue_and_verify(container, make_user):
    teacher = make_user(Role.TEACHER, email="t@school.test")

    claims = container.token_service.verify(container.token_service.issue(teacher))

    assert claims.user_id == teacher.user_id
    assert claims.email == "t@school.test"
    assert claims.role == Role.TEACHER


def test_tampered_token_is_rejected(container, make_user):
    student = make_user(Role.STUDENT)
    head, _, sig = container.token_service.issue(student).split(".")
    forged_claims = {"sub": str(student.user_id), "email": student.email, "role": "admin", "exp": 4102444800}
    forged = base64.urlsafe_b64encode(json.dumps(forged_claims).encode()).rstrip(b"=").decode()

    with pytest.raises(AuthenticationError):
        container.token_service.verify(f"{head}.{forged}.{sig}")
    with pytest.raises(AuthenticationError):
        container.token_service.verify("not-a-jwt")


def test_token_signed_with_other_secret_is_rejected(container, make_user):
    other = TokenService(AuthSettings(secret_key="someone-else"))
    with pytest.raises(AuthenticationError):
        container.token_service.verify(other.issue(make_user(Role.ADMIN)))


def test_expired_token_is_rejected(container, make_user):
    issued = datetime.now(timezone.utc) - timedelta(days=2)
    token = container.token_service.issue(make_user(Role.STUDENT), now=issued)

    with pytest.raises(AuthenticationError):
        container.token_service.verify(token)


def test_secret_key_is_required():
    with pytest.raises(ValueError):
        TokenService(AuthSettings(secret_key=""))
