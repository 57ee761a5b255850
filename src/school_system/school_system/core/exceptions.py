class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a write collides with existing state (duplicate email, referenced classroom)."""


class InvalidCredentialsError(DomainError):
    """Raised when login email/password do not match."""


class InvalidTokenError(DomainError):
    """Raised when a password-reset token is unknown or expired."""


class AlreadyApprovedError(DomainError):
    """Raised when approving an account that is already approved."""


class AuthenticationError(DomainError):
    """Raised when the session token is missing, expired or tampered."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ServiceUnavailableError(DomainError):
    """Raised when a downstream dependency (e.g. mail server) fails."""

    status_code = 500
