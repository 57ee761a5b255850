from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, email, password_hash, first_name, last_name, role, phone, address,
    is_approved, reset_token, reset_token_expires_at, created_at, updated_at
"""


def _row_to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=int(r["user_id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        role=Role(r["role"]),
        phone=r.get("phone"),
        address=r.get("address"),
        is_approved=bool(r.get("is_approved")),
        reset_token=r.get("reset_token"),
        reset_token_expires_at=r.get("reset_token_expires_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def _get_many(self, where: str = "1=1", params: tuple = ()) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where} ORDER BY user_id ASC", params)
            return [_row_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", (email,))

    def get_by_reset_token(self, token: str) -> Optional[User]:
        return self._get_one("reset_token=%s", (token,))

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role,
        phone: Optional[str],
        address: Optional[str],
        is_approved: bool,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(email, password_hash, first_name, last_name, role, phone, address, is_approved)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (email, password_hash, first_name, last_name, role.value, phone, address, int(is_approved)),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            # UNIQUE(email) lost a race with a concurrent registration
            raise ConflictError("Email already registered") from e

    def set_approved(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_approved=1 WHERE user_id=%s AND is_approved=0", (int(user_id),))
            return cur.rowcount > 0

    def set_reset_token(self, user_id: int, *, token: Optional[str], expires_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET reset_token=%s, reset_token_expires_at=%s WHERE user_id=%s",
                (token, expires_at, int(user_id)),
            )
            return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET password_hash=%s, reset_token=NULL, reset_token_expires_at=NULL
                WHERE user_id=%s
                """,
                (password_hash, int(user_id)),
            )
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        return self._get_many()

    def list_pending(self) -> Sequence[User]:
        return self._get_many("is_approved=0")

    def list_approved_by_role(self, role: Role) -> Sequence[User]:
        return self._get_many("role=%s AND is_approved=1", (role.value,))
