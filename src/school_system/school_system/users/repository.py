from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_reset_token(self, token: str) -> Optional[User]:
        raise NotImplementedError

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
        raise NotImplementedError

    def set_approved(self, user_id: int) -> bool:
        """Flip the approval flag; returns False if the user was already approved."""

        raise NotImplementedError

    def set_reset_token(self, user_id: int, *, token: Optional[str], expires_at: Optional[datetime]) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        """Replace the password hash and clear any reset token."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_pending(self) -> Sequence[User]:
        raise NotImplementedError

    def list_approved_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError
