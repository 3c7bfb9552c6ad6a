"""Cross-cutting pieces: the error taxonomy and the application context."""

from .errors import (
    AppError,
    ValidationError,
    Conflict,
    InvalidStatus,
    AuthenticationFailure,
    Unauthenticated,
    InvalidCredentials,
    NotVerified,
    InvalidOrExpired,
    WrongMethod,
    Deactivated,
    Locked,
    NotFound,
    Forbidden,
    ServerError,
)

__all__ = [
    "AppError",
    "ValidationError",
    "Conflict",
    "InvalidStatus",
    "AuthenticationFailure",
    "Unauthenticated",
    "InvalidCredentials",
    "NotVerified",
    "InvalidOrExpired",
    "WrongMethod",
    "Deactivated",
    "Locked",
    "NotFound",
    "Forbidden",
    "ServerError",
]
