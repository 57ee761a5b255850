from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_email, require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, RESET_TOKEN_BYTES
from ..core.enums import NotificationType, Role
from ..core.exceptions import (
    AlreadyApprovedError,
    AuthorizationError,
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from ..mail.sender import EmailSender
from ..notifications.service import NotificationService
from .model import NewUser, User
from .repository import UserRepository
from .tokens import AuthSettings, TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """What the auth endpoints hand back: the account plus a session token."""

    user: User
    token: str


def parse_profile(data: Mapping[str, Any]) -> NewUser:
    """Validate a registration body (camelCase keys, as sent by the client)."""

    missing = [k for k in ("email", "password", "firstName", "lastName", "role") if not data.get(k)]
    if missing:
        raise ValidationError("All required fields must be provided")

    return NewUser(
        email=require_email(data.get("email")),
        password=require_min_length(data.get("password"), "Password", MIN_PASSWORD_LENGTH),
        first_name=require_non_empty(data.get("firstName"), "First name"),
        last_name=require_non_empty(data.get("lastName"), "Last name"),
        role=require_enum(data.get("role"), Role, "Role"),
        phone=optional_text(data.get("phone")),
        address=optional_text(data.get("address")),
    )


class AuthService:
    """Use cases: registration, login, password reset, account approval."""

    def __init__(
        self,
        users: UserRepository,
        notifications: NotificationService,
        tokens: TokenService,
        mailer: EmailSender,
        settings: AuthSettings,
        *,
        reset_url: str = "http://localhost:3000/reset-password",
    ):
        self._users = users
        self._notifications = notifications
        self._tokens = tokens
        self._mailer = mailer
        self._settings = settings
        self._reset_url = reset_url.rstrip("/")

    def _create(self, profile: NewUser, *, is_approved: bool) -> User:
        if self._users.get_by_email(profile.email):
            raise ConflictError("Email already registered")

        user_id = self._users.create_user(
            email=profile.email,
            password_hash=generate_password_hash(profile.password),
            first_name=profile.first_name,
            last_name=profile.last_name,
            role=profile.role,
            phone=profile.phone,
            address=profile.address,
            is_approved=is_approved,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise RuntimeError(f"user {user_id} vanished after insert")
        return user

    def register(self, profile: NewUser, *, admin_key: Optional[str] = None) -> AuthResult:
        if profile.role == Role.ADMIN:
            expected = self._settings.admin_registration_key
            if not expected or not admin_key or not secrets.compare_digest(str(admin_key), expected):
                raise AuthorizationError("Invalid admin registration key")

        user = self._create(profile, is_approved=profile.role == Role.ADMIN)
        logger.info("registered user %s (role=%s, approved=%s)", user.user_id, user.role.value, user.is_approved)

        if not user.is_approved:
            admins = self._users.list_approved_by_role(Role.ADMIN)
            self._notifications.notify(
                [a.user_id for a in admins],
                title="New registration pending approval",
                message=f"{user.full_name} ({user.email}) registered as {user.role.value} and is waiting for approval.",
                type=NotificationType.ACCOUNT,
            )

        return AuthResult(user=user, token=self._tokens.issue(user))

    def register_by_admin(self, profile: NewUser, *, current_role: Role) -> AuthResult:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")

        user = self._create(profile, is_approved=True)
        logger.info("admin created user %s (role=%s)", user.user_id, user.role.value)
        return AuthResult(user=user, token=self._tokens.issue(user))

    def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            raise InvalidCredentialsError("Email and password are required")

        user = self._users.get_by_email(str(email).strip().lower())
        try:
            ok = bool(user) and check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise InvalidCredentialsError("Invalid credentials")
        if not user.is_approved:
            raise AuthorizationError("Your account is pending approval by an administrator")

        return AuthResult(user=user, token=self._tokens.issue(user))

    def request_password_reset(self, email: str, *, now: Optional[datetime] = None) -> None:
        user = self._users.get_by_email(require_email(email))
        if not user:
            raise NotFoundError("No user with that email")

        token = secrets.token_hex(RESET_TOKEN_BYTES)
        expires_at = (now or now_local()) + self._settings.reset_token_ttl
        self._users.set_reset_token(user.user_id, token=token, expires_at=expires_at)

        text = (
            "You requested a password reset.\n\n"
            f"Use the following link within {int(self._settings.reset_token_ttl.total_seconds() // 60)} minutes:\n"
            f"{self._reset_url}/{token}\n\n"
            "If you did not request this, you can ignore this email."
        )
        try:
            self._mailer.send(user.email, "Password reset", text)
        except ServiceUnavailableError:
            self._users.set_reset_token(user.user_id, token=None, expires_at=None)
            raise

    def reset_password(self, token: str, new_password: str, *, now: Optional[datetime] = None) -> None:
        if not token:
            raise InvalidTokenError("Invalid or expired token")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_reset_token(str(token))
        current = now or now_local()
        if not user or not user.reset_token_expires_at or user.reset_token_expires_at <= current:
            raise InvalidTokenError("Invalid or expired token")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("password reset for user %s", user.user_id)

    def approve_user(self, *, current_role: Role, user_id: int) -> User:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if user.is_approved or not self._users.set_approved(user.user_id):
            raise AlreadyApprovedError("User is already approved")

        self._notifications.notify(
            [user.user_id],
            title="Account approved",
            message="Your account has been approved. You can now log in.",
            type=NotificationType.ACCOUNT,
        )
        logger.info("approved user %s", user.user_id)
        return self._users.get_by_id(user.user_id) or user

    def list_pending(self, *, current_role: Role) -> Sequence[User]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to perform this action")
        return self._users.list_pending()


class UserService:
    """Use case: read user accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user
