"""One-time email tokens and admin bearer tokens."""

import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import jwt

from database import utcnow

JWT_ALGORITHM = "HS256"


def issue_email_token(ttl_minutes: int, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Random hex token plus its expiry time."""
    now = now or utcnow()
    return secrets.token_hex(20), now + timedelta(minutes=ttl_minutes)


def issue_admin_token(admin: Dict[str, Any], secret: str, ttl_hours: int = 24) -> str:
    now = utcnow()
    payload = {
        'sub': admin['id'],
        'email': admin['email'],
        'is_admin': bool(admin.get('is_admin')),
        'iat': now,
        'exp': now + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_admin_token(token: str, secret: str) -> Dict[str, Any]:
    """Decode and verify a bearer token.

    Raises ``jwt.ExpiredSignatureError`` or ``jwt.InvalidTokenError``.
    """
    return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
