"""Admin routes: bearer-token login and the management dashboard."""

import logging

from flask import Blueprint, g, jsonify, request

from identity import credentials, issue_admin_token
from services import admin
from webapp.auth import get_context, login_required
from webapp.schemas import AdminAccountUpdate, AdminCreate, AdminJobUpdate, BulkToggle, Credentials
from webapp.validation import query_args, validate_body

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

admin_auth_bp = Blueprint('admin_auth', __name__, url_prefix='/admin/auth')
admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

USER_LIST_ARGS = ('search', 'status', 'sort_by', 'sort_order', 'order', 'page', 'limit')
GROWTH_ARGS = ('interval', 'date', 'month', 'year')


@admin_bp.before_request
@login_required('admin')
def require_admin():
    """Every dashboard route needs a valid admin bearer token."""
    return None


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@admin_auth_bp.route('/login', methods=['POST'])
@validate_body(Credentials)
def admin_login(body):
    ctx = get_context()
    account = credentials.admin_login(ctx, body.get('email'), body.get('password'))
    token = issue_admin_token(account, ctx.settings.JWT_SECRET, ctx.settings.ADMIN_TOKEN_TTL_HOURS)
    ctx.sessions['admin'].login(account, 'admin')
    logger.info(f"Admin {account['id']} logged in")
    return jsonify({'success': True, 'token': token, 'admin': {'id': account['id'], 'email': account['email']}})


@admin_auth_bp.route('/add', methods=['POST'])
@login_required('admin')
@validate_body(AdminCreate)
def add_admin(body):
    ctx = get_context()
    created = credentials.create_admin(ctx, body['email'], body['password'], body.get('name') or "Admin")
    admin.log_action(ctx, g.account, "Add Admin", {'admin_id': created['id']})
    return jsonify({
        'success': True,
        'message': "Admin user created successfully",
        'admin': {'id': created['id'], 'email': created['email']},
    }), 201


@admin_auth_bp.route('/logout', methods=['GET', 'POST'])
def admin_logout():
    get_context().sessions['admin'].logout()
    return jsonify({'success': True, 'message': "Logged out successfully"})


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------

@admin_bp.route('/stats', methods=['GET'])
def stats():
    return jsonify({'success': True, **admin.stats(get_context())})


@admin_bp.route('/recent-activities', methods=['GET'])
def recent_activities():
    return jsonify({'success': True, **admin.recent_activities(get_context())})


@admin_bp.route('/engagement', methods=['GET'])
def engagement():
    return jsonify({'success': True, **admin.engagement(get_context())})


@admin_bp.route('/application-stats', methods=['GET'])
def application_stats():
    return jsonify({'success': True, **admin.application_stats(get_context())})


@admin_bp.route('/user-growth', methods=['GET'])
def user_growth():
    return jsonify({'success': True, 'growth': admin.growth(get_context(), 'users', query_args(*GROWTH_ARGS))})


@admin_bp.route('/job-trends', methods=['GET'])
def job_trends():
    return jsonify({'success': True, 'trends': admin.growth(get_context(), 'jobs', query_args(*GROWTH_ARGS))})


@admin_bp.route('/job-stats', methods=['GET'])
def job_stats():
    return jsonify({'success': True, 'stats': admin.job_stats(get_context())})


@admin_bp.route('/company-stats', methods=['GET'])
def company_stats():
    return jsonify({'success': True, **admin.company_stats(get_context())})


@admin_bp.route('/audit-log', methods=['GET'])
def audit_log():
    return jsonify({'success': True, 'entries': admin.audit_log(get_context(), request.args.get('limit', 50))})


# ---------------------------------------------------------------------------
# Users and companies
# ---------------------------------------------------------------------------

@admin_bp.route('/users', methods=['GET'])
def list_users():
    return jsonify({'success': True, **admin.list_users(get_context(), query_args(*USER_LIST_ARGS))})


@admin_bp.route('/companies', methods=['GET'])
def list_companies():
    params = query_args('page', 'limit')
    return jsonify({'success': True, **admin.list_companies(get_context(), params)})


@admin_bp.route('/companies/<company_id>/details', methods=['GET'])
def company_details(company_id: str):
    return jsonify({'success': True, **admin.company_details(get_context(), company_id)})


def _update_account(kind: str, account_id: str, body):
    fields = {k: v for k, v in body.items() if v is not None}
    account = admin.update_account_by_admin(get_context(), g.account, kind, account_id, fields)
    return jsonify({'success': True, 'message': f"{kind.title()} updated successfully", kind: account})


def _delete_account(kind: str, account_id: str):
    admin.delete_account_by_admin(get_context(), g.account, kind, account_id)
    return jsonify({'success': True, 'message': f"{kind.title()} deleted successfully"})


def _toggle_account(kind: str, account_id: str):
    is_active = admin.toggle_active(get_context(), g.account, kind, account_id)
    state = "activated" if is_active else "deactivated"
    return jsonify({'success': True, 'message': f"{kind.title()} {state} successfully", 'is_active': is_active})


def _bulk_toggle(kind: str, body):
    updated, failed = admin.bulk_set_active(get_context(), g.account, kind, body.get('ids'), body.get('is_active'))
    return jsonify({
        'success': True,
        'message': f"{updated} {kind} account(s) updated",
        'updated': updated,
        'failed': failed,
    })


@admin_bp.route('/users/<user_id>', methods=['PUT'])
@validate_body(AdminAccountUpdate, partial=True)
def update_user(user_id: str, body):
    return _update_account('user', user_id, body)


@admin_bp.route('/users/<user_id>', methods=['DELETE'])
def delete_user(user_id: str):
    return _delete_account('user', user_id)


@admin_bp.route('/users/<user_id>/toggle-active', methods=['PATCH'])
def toggle_user(user_id: str):
    return _toggle_account('user', user_id)


@admin_bp.route('/users/bulk-toggle-active', methods=['PATCH'])
@validate_body(BulkToggle)
def bulk_toggle_users(body):
    return _bulk_toggle('user', body)


@admin_bp.route('/companies/<company_id>', methods=['PUT'])
@validate_body(AdminAccountUpdate, partial=True)
def update_company(company_id: str, body):
    return _update_account('company', company_id, body)


@admin_bp.route('/companies/<company_id>', methods=['DELETE'])
def delete_company(company_id: str):
    return _delete_account('company', company_id)


@admin_bp.route('/companies/<company_id>/toggle-active', methods=['PATCH'])
def toggle_company(company_id: str):
    return _toggle_account('company', company_id)


@admin_bp.route('/companies/bulk-toggle-active', methods=['PATCH'])
@validate_body(BulkToggle)
def bulk_toggle_companies(body):
    return _bulk_toggle('company', body)


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

@admin_bp.route('/jobs', methods=['GET'])
def list_jobs():
    result = admin.list_jobs(get_context())
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


@admin_bp.route('/jobs/<job_id>', methods=['PUT'])
@validate_body(AdminJobUpdate, partial=True)
def update_job(job_id: str, body):
    job = admin.update_job_by_admin(get_context(), g.account, job_id, body)
    return jsonify({'success': True, 'message': "Job updated successfully", 'job': job})


@admin_bp.route('/jobs/<job_id>', methods=['DELETE'])
def delete_job(job_id: str):
    admin.delete_job_by_admin(get_context(), g.account, job_id)
    return jsonify({'success': True, 'message': "Job deleted successfully"})
