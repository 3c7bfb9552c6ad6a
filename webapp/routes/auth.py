"""Login, registration and verification routes for users and companies."""

import logging
from typing import Any, Dict

from flask import Blueprint, jsonify, redirect, request

from core.errors import AppError, Deactivated
from database import get_company_profile, get_user_profile
from identity import credentials
from services.admin import public_account
from webapp.auth import current_account, get_context
from webapp.schemas import (
    CompanyRegistration, Credentials, EmailRequest, PasswordReset, UserRegistration,
)
from webapp.validation import query_arg, validate_body

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

user_auth_bp = Blueprint('user_auth', __name__, url_prefix='/api/auth')
company_auth_bp = Blueprint('company_auth', __name__, url_prefix='/api/company/auth')

_CALLBACK_PATHS = {'user': '/api/auth/google/callback', 'company': '/api/company/auth/google/callback'}
_AFTER_OAUTH_PATHS = {'user': '', 'company': '/company/dashboard'}


def user_summary(ctx, user: Dict[str, Any]) -> Dict[str, Any]:
    profile = get_user_profile(ctx.db, user['id']) or {}
    return {
        'id': user['id'],
        'email': user['email'],
        'role': user.get('role'),
        'name': profile.get('name', ''),
        'profile_image': profile.get('profile_image', ''),
    }


def company_summary(ctx, company: Dict[str, Any]) -> Dict[str, Any]:
    """Company account merged with its profile fields, without secrets."""
    profile = get_company_profile(ctx.db, company['id']) or {}
    data = {**profile, **public_account(company)}
    data.pop('failed_login_attempts', None)
    data.pop('lock_until', None)
    return data


def _callback_url(ctx, kind: str) -> str:
    return f"{ctx.settings.BACKEND_URL}{_CALLBACK_PATHS[kind]}"


def _google_callback(kind: str):
    ctx = get_context()
    try:
        ctx.oauth.check_state(request.args.get('state'), kind)
        profile = ctx.oauth.fetch_profile(request.args.get('code'), _callback_url(ctx, kind))
        account = credentials.oauth_login(ctx, kind, profile)
    except Deactivated:
        error = 'UserDeactivated' if kind == 'user' else 'CompanyDeactivated'
        return redirect(credentials.login_redirect(ctx.settings, kind, error=error))
    except AppError as e:
        logger.warning(f"Google {kind} login failed: {e.message}")
        return redirect(credentials.login_redirect(ctx.settings, kind))
    ctx.sessions[kind].login(account, kind)
    return redirect(f"{ctx.settings.FRONTEND_URL}{_AFTER_OAUTH_PATHS[kind]}")


# ---------------------------------------------------------------------------
# Job seekers
# ---------------------------------------------------------------------------

@user_auth_bp.route('/register', methods=['POST'])
@validate_body(UserRegistration)
def register_user(body):
    credentials.register_user(get_context(), body['name'], body['email'], body['password'])
    return jsonify({'success': True, 'message': "Registration successful. Please Login."}), 201


@user_auth_bp.route('/verify-email', methods=['GET'])
def verify_user_email():
    ctx = get_context()
    credentials.verify_email(ctx, 'user', request.args.get('token'), request.args.get('email'))
    return redirect(credentials.login_redirect(ctx.settings, 'user', verified='true'))


@user_auth_bp.route('/login', methods=['POST'])
@validate_body(Credentials)
def login_user(body):
    ctx = get_context()
    user = credentials.login(ctx, 'user', body.get('email'), body.get('password'))
    ctx.sessions['user'].login(user, 'user')
    logger.info(f"User {user['id']} logged in")
    return jsonify({'success': True, 'message': "Login successful", 'user': user_summary(ctx, user)})


@user_auth_bp.route('/logout', methods=['GET', 'POST'])
def logout_user():
    get_context().sessions['user'].logout()
    return jsonify({'success': True, 'message': "Logged out successfully"})


@user_auth_bp.route('/status', methods=['GET'])
def user_status():
    user = current_account('user')
    if user and user.get('role') == 'jobSeeker':
        return jsonify({'logged_in': True, 'type': 'user', 'user': user_summary(get_context(), user)})
    return jsonify({'logged_in': False, 'type': None})


@user_auth_bp.route('/google', methods=['GET'])
def google_user_login():
    ctx = get_context()
    return redirect(ctx.oauth.authorization_url(_callback_url(ctx, 'user'), 'user'))


@user_auth_bp.route('/google/callback', methods=['GET'])
def google_user_callback():
    return _google_callback('user')


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

@company_auth_bp.route('/register', methods=['POST'])
@validate_body(CompanyRegistration)
def register_company(body):
    credentials.register_company(get_context(), body)
    return jsonify({
        'success': True,
        'message': "Registration successful. Please check your email to verify your account.",
    }), 201


@company_auth_bp.route('/verify-email', methods=['GET'])
def verify_company_email():
    ctx = get_context()
    credentials.verify_email(ctx, 'company', query_arg('token'), query_arg('email'))
    return redirect(credentials.login_redirect(ctx.settings, 'company', verified='true'))


@company_auth_bp.route('/resend-verification', methods=['POST'])
@validate_body(EmailRequest)
def resend_company_verification(body):
    credentials.resend_verification(get_context(), 'company', body['email'])
    return jsonify({'success': True, 'message': "Verification email resent."})


@company_auth_bp.route('/login', methods=['POST'])
@validate_body(Credentials)
def login_company(body):
    ctx = get_context()
    company = credentials.login(ctx, 'company', body.get('email'), body.get('password'))
    ctx.sessions['company'].login(company, 'company')
    logger.info(f"Company {company['id']} logged in")
    return jsonify({'success': True, 'message': "Login successful", 'company': company_summary(ctx, company)})


@company_auth_bp.route('/forgot-password', methods=['POST'])
@validate_body(EmailRequest)
def forgot_company_password(body):
    credentials.request_password_reset(get_context(), body['email'])
    return jsonify({'success': True, 'message': "If this email exists, a reset link has been sent."})


@company_auth_bp.route('/reset-password', methods=['POST'])
@validate_body(PasswordReset)
def reset_company_password(body):
    credentials.reset_password(get_context(), body['email'], body['token'], body['password'])
    return jsonify({'success': True, 'message': "Password reset successful. You can now log in."})


@company_auth_bp.route('/logout', methods=['GET', 'POST'])
def logout_company():
    get_context().sessions['company'].logout()
    return jsonify({'success': True, 'message': "Logged out successfully"})


@company_auth_bp.route('/status', methods=['GET'])
def company_status():
    company = current_account('company')
    if company:
        return jsonify({'logged_in': True, 'type': 'company', 'company': company_summary(get_context(), company)})
    return jsonify({'logged_in': False, 'type': None})


@company_auth_bp.route('/google', methods=['GET'])
def google_company_login():
    ctx = get_context()
    return redirect(ctx.oauth.authorization_url(_callback_url(ctx, 'company'), 'company'))


@company_auth_bp.route('/google/callback', methods=['GET'])
def google_company_callback():
    return _google_callback('company')
