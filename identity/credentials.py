"""Credential verification and account lifecycle for users and companies.

Both account kinds share the same flows. Companies additionally carry a
failed-login counter with a temporary lock, and are the only kind with
password reset.
"""

import logging
import math
from datetime import timedelta
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from core.errors import (
    Conflict, Deactivated, InvalidCredentials, InvalidOrExpired, Locked,
    NotFound, NotVerified, ValidationError, WrongMethod,
)
from database import (
    create_account, create_company_profile, create_user_profile,
    find_account_by_token, get_account_by_email, get_user_profile,
    get_company_profile, parse_iso, to_iso, update_account, utcnow,
)
from identity.passwords import hash_password, verify_password
from identity.tokens import issue_email_token
from notifier import messages

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

_LABELS = {'user': 'User', 'company': 'Company'}
_VERIFY_PATHS = {'user': '/api/auth/verify-email', 'company': '/api/company/auth/verify-email'}
_LOGIN_PATHS = {'user': '/login', 'company': '/company/login'}


def login_redirect(settings, kind: str, **params: str) -> str:
    query = f"?{urlencode(params)}" if params else ""
    return f"{settings.FRONTEND_URL}{_LOGIN_PATHS[kind]}{query}"


def _send_verification(ctx, kind: str, email: str, token: str) -> None:
    query = urlencode({'token': token, 'email': email})
    link = f"{ctx.settings.BACKEND_URL}{_VERIFY_PATHS[kind]}?{query}"
    ctx.dispatcher.send(messages.verification_email(email, link))


def register_user(ctx, name: str, email: str, password: str) -> Dict[str, Any]:
    """Create an unverified job seeker with a profile and mail the verification link."""
    email = email.strip().lower()
    if get_account_by_email(ctx.db, 'user', email):
        raise Conflict("User already exists")

    token, expires = issue_email_token(ctx.settings.VERIFICATION_TOKEN_TTL_MINUTES)
    user = create_account(
        ctx.db, 'user', email,
        password_hash=hash_password(password),
        role='jobSeeker',
        is_verified=False,
        verification_token=token,
        verification_token_expires=to_iso(expires),
    )
    create_user_profile(ctx.db, user['id'], name)
    logger.info(f"Registered user {user['id']}")
    _send_verification(ctx, 'user', email, token)
    return user


def register_company(ctx, data: Dict[str, Any]) -> Dict[str, Any]:
    email = data['email'].strip().lower()
    if get_account_by_email(ctx.db, 'company', email):
        raise Conflict("Company already exists")

    token, expires = issue_email_token(ctx.settings.VERIFICATION_TOKEN_TTL_MINUTES)
    company = create_account(
        ctx.db, 'company', email,
        password_hash=hash_password(data['password']),
        is_verified=False,
        verification_token=token,
        verification_token_expires=to_iso(expires),
    )
    create_company_profile(
        ctx.db, company['id'], data['company_name'],
        phone=data.get('phone') or '',
        company_address=data.get('company_address') or '',
        industry=data.get('industry') or '',
        website=data.get('website') or '',
    )
    logger.info(f"Registered company {company['id']}")
    _send_verification(ctx, 'company', email, token)
    return company


def verify_email(ctx, kind: str, token: Optional[str], email: Optional[str]) -> Dict[str, Any]:
    """Consume a verification token. Tokens are single use and expire."""
    if not token or not email:
        raise ValidationError("Invalid verification link")
    account = find_account_by_token(ctx.db, kind, email, token)
    if account is None:
        raise InvalidOrExpired("Invalid or expired verification link")
    return update_account(ctx.db, kind, account['id'], {
        'is_verified': True,
        'verification_token': None,
        'verification_token_expires': None,
    })


def resend_verification(ctx, kind: str, email: str) -> None:
    account = get_account_by_email(ctx.db, kind, email)
    if account is None:
        raise NotFound(f"{_LABELS[kind]} not found")
    if account['is_verified']:
        raise ValidationError("Email already verified")
    token, expires = issue_email_token(ctx.settings.VERIFICATION_TOKEN_TTL_MINUTES)
    update_account(ctx.db, kind, account['id'], {
        'verification_token': token,
        'verification_token_expires': to_iso(expires),
    })
    _send_verification(ctx, kind, account['email'], token)


def _lock_minutes_left(account: Dict[str, Any]) -> int:
    lock_until = parse_iso(account.get('lock_until'))
    if lock_until is None:
        return 0
    remaining = (lock_until - utcnow()).total_seconds()
    return math.ceil(remaining / 60) if remaining > 0 else 0


def _record_failed_login(ctx, company: Dict[str, Any]) -> None:
    attempts = (company.get('failed_login_attempts') or 0) + 1
    limit = ctx.settings.MAX_FAILED_LOGINS
    if attempts >= limit:
        lock_minutes = ctx.settings.LOCKOUT_MINUTES
        update_account(ctx.db, 'company', company['id'], {
            'failed_login_attempts': attempts,
            'lock_until': to_iso(utcnow() + timedelta(minutes=lock_minutes)),
        })
        logger.warning(f"Company {company['id']} locked after {attempts} failed logins")
        raise Locked(
            lock_minutes,
            f"Account locked due to multiple failed login attempts. Try again in {lock_minutes} minutes.",
        )
    update_account(ctx.db, 'company', company['id'], {'failed_login_attempts': attempts})
    raise InvalidCredentials(f"Incorrect password. {limit - attempts} attempt(s) left before lockout.")


def _notify_deactivated(ctx, kind: str, account: Dict[str, Any]) -> None:
    if kind == 'user':
        profile = get_user_profile(ctx.db, account['id'])
        name = messages.display_name(account, profile and profile.get('name'))
    else:
        profile = get_company_profile(ctx.db, account['id'])
        name = messages.display_name(account, profile and profile.get('company_name'))
    ctx.dispatcher.send_later(messages.deactivated_login_email(account['email'], name))


def login(ctx, kind: str, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    """Check local credentials and return the account, or raise why not."""
    if not email or not password:
        raise ValidationError("Email and password are required")

    account = get_account_by_email(ctx.db, kind, email)
    if account is None:
        raise NotFound(f"{_LABELS[kind]} not found")
    if not account.get('password_hash'):
        raise WrongMethod("Use Google login for this account")

    if kind == 'company':
        minutes = _lock_minutes_left(account)
        if minutes > 0:
            raise Locked(minutes)

    if not account['is_verified']:
        raise NotVerified("Please verify your email")

    if not verify_password(account['password_hash'], password):
        if kind == 'company':
            _record_failed_login(ctx, account)
        raise InvalidCredentials("Incorrect password")

    if not account['is_active']:
        _notify_deactivated(ctx, kind, account)
        raise Deactivated(f"{_LABELS[kind]} account is deactivated. Please contact support.")

    updates: Dict[str, Any] = {}
    if kind == 'company':
        updates.update({'failed_login_attempts': 0, 'lock_until': None})
    else:
        updates['last_login'] = to_iso(utcnow())
    return update_account(ctx.db, kind, account['id'], updates)


def oauth_login(ctx, kind: str, profile: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve an external identity to an account, creating it on first sight."""
    email = (profile.get('email') or '').strip().lower()
    if not email:
        raise ValidationError("No email found in Google profile")

    account = get_account_by_email(ctx.db, kind, email)
    if account is None:
        display_name = profile.get('name') or email.split('@')[0]
        if kind == 'user':
            account = create_account(ctx.db, 'user', email, google_id=profile.get('id'),
                                     auth_method='google', role='jobSeeker')
            create_user_profile(ctx.db, account['id'], display_name)
        else:
            account = create_account(ctx.db, 'company', email, google_id=profile.get('id'),
                                     auth_method='google', is_verified=True)
            create_company_profile(ctx.db, account['id'], display_name)
        logger.info(f"Created {kind} {account['id']} from Google profile")

    if not account['is_active']:
        raise Deactivated(f"{_LABELS[kind]} account is deactivated. Please contact support.")

    if kind == 'user':
        account = update_account(ctx.db, 'user', account['id'], {'last_login': to_iso(utcnow())})
    return account


def request_password_reset(ctx, email: str) -> None:
    """Mail a reset link when the company exists; callers never learn which."""
    company = get_account_by_email(ctx.db, 'company', email or '')
    if company is None:
        logger.info("Password reset requested for unknown email")
        return
    token, expires = issue_email_token(ctx.settings.RESET_TOKEN_TTL_MINUTES)
    update_account(ctx.db, 'company', company['id'], {
        'reset_password_token': token,
        'reset_password_expires': to_iso(expires),
    })
    query = urlencode({'token': token, 'email': company['email']})
    link = f"{ctx.settings.FRONTEND_URL}/company/reset-password?{query}"
    ctx.dispatcher.send(messages.password_reset_email(company['email'], link))


def reset_password(ctx, email: str, token: str, password: str) -> None:
    company = find_account_by_token(ctx.db, 'company', email, token, token_field='reset_password_token')
    if company is None:
        raise InvalidOrExpired("Invalid or expired reset link")
    update_account(ctx.db, 'company', company['id'], {
        'password_hash': hash_password(password),
        'reset_password_token': None,
        'reset_password_expires': None,
        'failed_login_attempts': 0,
        'lock_until': None,
    })
    logger.info(f"Password reset for company {company['id']}")


def admin_login(ctx, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    """Check admin credentials. Non-admin accounts are rejected like bad passwords."""
    if not email or not password:
        raise ValidationError("Email and password are required")
    account = get_account_by_email(ctx.db, 'user', email)
    if account is None or not account.get('is_admin'):
        raise InvalidCredentials("Invalid admin credentials")
    if not verify_password(account.get('password_hash'), password):
        raise InvalidCredentials("Invalid admin credentials")
    if not account['is_active']:
        raise Deactivated("Admin account is deactivated.")
    return update_account(ctx.db, 'user', account['id'], {'last_login': to_iso(utcnow())})


def create_admin(ctx, email: str, password: str, name: str = "Admin") -> Dict[str, Any]:
    if get_account_by_email(ctx.db, 'user', email):
        raise Conflict("Admin already exists")
    admin = create_account(
        ctx.db, 'user', email,
        password_hash=hash_password(password),
        role='admin',
        is_admin=True,
        is_verified=True,
    )
    create_user_profile(ctx.db, admin['id'], name)
    logger.info(f"Created admin {admin['id']}")
    return admin


def ensure_admin(ctx, email: str, password: str) -> bool:
    """Create the seed admin unless an account with that email exists. Returns True if created."""
    if get_account_by_email(ctx.db, 'user', email):
        logger.info(f"Admin {email} already exists")
        return False
    create_admin(ctx, email, password)
    return True
