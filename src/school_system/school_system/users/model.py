from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object; credentials and reset token never leave through ``to_dict``.
    """

    user_id: int
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role
    phone: Optional[str] = None
    address: Optional[str] = None
    is_approved: bool = False
    reset_token: Optional[str] = None
    reset_token_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "phone": self.phone,
            "address": self.address,
            "isApproved": self.is_approved,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class NewUser:
    """Validated registration payload."""

    email: str
    password: str
    first_name: str
    last_name: str
    role: Role
    phone: Optional[str] = None
    address: Optional[str] = None
