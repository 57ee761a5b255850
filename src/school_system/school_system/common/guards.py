from __future__ import annotations

from functools import wraps

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.tokens import TokenClaims, TokenService


class AuthGuard:
    """Bearer-token authentication and role checks for Flask views."""

    def __init__(self, tokens: TokenService):
        self._tokens = tokens

    def _claims_from_request(self) -> TokenClaims:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("Not authorized, no token")
        return self._tokens.verify(token.strip())

    def required(self, *roles: Role):
        """Require a valid session token; when roles are given, require one of them."""

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                claims = self._claims_from_request()
                if roles and claims.role not in roles:
                    raise AuthorizationError("You do not have permission to perform this action")
                g.current_user = claims
                return view(*args, **kwargs)

            return wrapper

        return decorator


def current_user() -> TokenClaims:
    claims = g.get("current_user")
    if claims is None:
        raise AuthenticationError("Not authorized")
    return claims
