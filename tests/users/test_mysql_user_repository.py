from __future__ import annotations

import pytest
from mysql.connector.errors import IntegrityError

from src.school_system.school_system.core.enums import Role
from src.school_system.school_system.core.exceptions import ConflictError
from src.school_system.school_system.users.mysql_user_repository import MySQLUserRepository


class DuplicateKeyCursor:
    def execute(self, sql, params=None):
        raise IntegrityError(msg="Duplicate entry 'a@school.test' for key 'users.email'", errno=1062)

    def close(self):
        pass


class FakeConnection:
    def __init__(self):
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return DuplicateKeyCursor()

    def commit(self):
        raise AssertionError("commit after a failed insert")

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self):
        self.last = None

    def connect(self):
        self.last = FakeConnection()
        return self.last


def test_duplicate_email_on_insert_is_a_conflict():
    factory = FakeConnectionFactory()
    repo = MySQLUserRepository(factory)

    with pytest.raises(ConflictError) as exc:
        repo.create_user(
            email="a@school.test",
            password_hash="x",
            first_name="A",
            last_name="B",
            role=Role.STUDENT,
            phone=None,
            address=None,
            is_approved=False,
        )

    assert str(exc.value) == "Email already registered"
    assert factory.last.rolled_back is True
    assert factory.last.closed is True


def test_racing_registration_surfaces_as_400(client, repos, monkeypatch):
    def lost_race(**kwargs):
        raise ConflictError("Email already registered")

    monkeypatch.setattr(repos.users, "create_user", lost_race)

    resp = client.post(
        "/auth/register",
        json={"email": "a@school.test", "password": "secret123", "firstName": "A", "lastName": "B", "role": "student"},
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"message": "Email already registered"}
