from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import JWT_ALGORITHM, RESET_TOKEN_TTL_HOURS, SESSION_TOKEN_TTL_DAYS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import User


@dataclass(frozen=True)
class AuthSettings:
    """Secrets and lifetimes handed to the auth layer at construction time."""

    secret_key: str
    admin_registration_key: Optional[str] = None
    token_ttl: timedelta = field(default_factory=lambda: timedelta(days=SESSION_TOKEN_TTL_DAYS))
    reset_token_ttl: timedelta = field(default_factory=lambda: timedelta(hours=RESET_TOKEN_TTL_HOURS))


@dataclass(frozen=True)
class TokenClaims:
    """What a verified session token asserts about the caller."""

    user_id: int
    email: str
    role: Role


class TokenService:
    """Issues and verifies signed session tokens (JWT, HS256)."""

    def __init__(self, settings: AuthSettings):
        if not settings.secret_key:
            raise ValueError("secret_key must be configured")
        self._settings = settings

    def issue(self, user: User, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.user_id),
            "email": user.email,
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + self._settings.token_ttl,
        }
        return jwt.encode(claims, self._settings.secret_key, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._settings.secret_key, algorithms=[JWT_ALGORITHM])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        try:
            return TokenClaims(
                user_id=int(payload["sub"]),
                email=str(payload["email"]),
                role=Role(payload["role"]),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid or expired token")
