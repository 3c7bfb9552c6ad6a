"""Identity: passwords, tokens, login flows and OAuth."""

from .passwords import hash_password, verify_password
from .tokens import issue_email_token, issue_admin_token, decode_admin_token
from .oauth import GoogleOAuth

__all__ = [
    "hash_password",
    "verify_password",
    "issue_email_token",
    "issue_admin_token",
    "decode_admin_token",
    "GoogleOAuth",
]
