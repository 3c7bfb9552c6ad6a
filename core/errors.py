"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Anything that is not an ``AppError`` is treated as a
server error by the web layer and its details are only logged.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {"success": False, "message": self.message}
        payload.update(self.extra)
        return payload


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(ValidationError):
    """Duplicate record (existing account, already saved job)."""


class InvalidStatus(ValidationError):
    default_message = "Invalid status value"


class AuthenticationFailure(AppError):
    status_code = 401
    default_message = "Authentication failed"


class Unauthenticated(AuthenticationFailure):
    default_message = "Unauthorized. Please log in."


class InvalidCredentials(AuthenticationFailure):
    default_message = "Incorrect password"


class NotVerified(AuthenticationFailure):
    default_message = "Please verify your email"


class InvalidOrExpired(AuthenticationFailure):
    status_code = 400
    default_message = "Invalid or expired verification link"


class WrongMethod(AuthenticationFailure):
    status_code = 400
    default_message = "Use Google login for this account"


class Deactivated(AuthenticationFailure):
    status_code = 403
    default_message = "Account is deactivated. Please contact support."


class Locked(AuthenticationFailure):
    status_code = 423

    def __init__(self, minutes: int, message: Optional[str] = None):
        self.minutes = minutes
        super().__init__(
            message
            or f"Account locked due to multiple failed login attempts. Try again in {minutes} minute(s).",
            minutes=minutes,
        )


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class ServerError(AppError):
    status_code = 500
