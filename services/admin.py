"""Admin dashboard: aggregate reads and audited account/job management.

Every mutation is written to the audit log. Deletion notices are sent inline
and activation notices in the background; in both cases a failed email is
only logged.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Tuple

from config.industries import INDUSTRIES
from core.errors import InvalidStatus, NotFound, ValidationError
from database import (
    count_accounts, count_active_users, count_applications, count_applications_per_job,
    count_jobs, count_jobs_by_company,
    count_jobs_by_status, delete_company as db_delete_company,
    delete_job as db_delete_job, delete_user as db_delete_user, get_account,
    get_accounts, get_all_jobs, get_company_profile, get_company_profiles,
    get_audit_log, get_educations, get_experiences, get_interviews, get_job,
    get_jobs_by_ids, get_skill_names, get_user_profiles, growth_series, is_valid_id,
    list_accounts, list_job_seekers, log_admin_action, parse_iso, recent_records, update_account,
    update_job as db_update_job,
)
from notifier import messages
from services.jobs import JOB_STATUSES, job_fields, serialize_job

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

BULK_MAX_WORKERS = 4

_LABELS = {'user': 'User', 'company': 'Company'}
_ID_KEYS = {'user': 'user_id', 'company': 'company_id'}
_PLURALS = {'user': 'Users', 'company': 'Companies'}


def public_account(account: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Account record without secrets."""
    if account is None:
        return None
    hidden = {'password_hash', 'verification_token', 'reset_password_token'}
    return {k: v for k, v in account.items() if k not in hidden}


def _account_name(ctx, kind: str, account: Dict[str, Any]) -> str:
    if kind == 'company':
        profile = get_company_profile(ctx.db, account['id']) or {}
        return messages.display_name(account, profile.get('company_name'))
    profile = get_user_profiles(ctx.db, [account['id']]).get(account['id']) or {}
    return messages.display_name(account, profile.get('name'))


def _parse_page(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------

def stats(ctx) -> Dict[str, int]:
    return {
        'users': count_accounts(ctx.db, 'user'),
        'companies': count_accounts(ctx.db, 'company'),
        'jobs': count_jobs(ctx.db),
    }


def recent_activities(ctx) -> Dict[str, Any]:
    recent_companies = recent_records(ctx.db, 'companies', 'id, email, created_at')
    profiles = get_company_profiles(ctx.db, [c['id'] for c in recent_companies])
    for company in recent_companies:
        company['company_name'] = (profiles.get(company['id']) or {}).get('company_name', '')
    return {
        'recent_users': recent_records(ctx.db, 'users', 'id, email, role, created_at'),
        'recent_jobs': recent_records(ctx.db, 'jobs', 'id, job_title, company_id, created_at'),
        'recent_companies': recent_companies,
    }


def engagement(ctx) -> Dict[str, int]:
    return {
        'active_users_count': count_active_users(ctx.db, days=7),
        'total_applications': count_applications(ctx.db),
    }


def application_stats(ctx) -> Dict[str, Any]:
    """Five most applied-to jobs. Time to fill is not tracked."""
    counts = count_applications_per_job(ctx.db)
    jobs = get_jobs_by_ids(ctx.db, list(counts))
    top = [
        {'job_id': job_id, 'job_title': jobs[job_id]['job_title'], 'application_count': count}
        for job_id, count in counts.items() if job_id in jobs
    ][:5]
    return {'applications_per_job': top, 'avg_time_to_fill': None}


def _parse_bounded(params: Dict[str, Any], key: str, low: int, high: int) -> Optional[int]:
    value = params.get(key)
    if value in (None, ''):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {key}")
    if not low <= number <= high:
        raise ValidationError(f"Invalid {key}")
    return number


def growth(ctx, table: str, params: Dict[str, Any]) -> List[Dict[str, int]]:
    date = params.get('date') or None
    if date:
        try:
            parse_iso(date)
        except ValueError:
            raise ValidationError("Invalid date")
    return growth_series(
        ctx.db, table,
        interval=params.get('interval') or 'monthly',
        date=date,
        month=_parse_bounded(params, 'month', 1, 12),
        year=_parse_bounded(params, 'year', 1, 9998),
    )


# ---------------------------------------------------------------------------
# Users and companies
# ---------------------------------------------------------------------------

def list_users(ctx, params: Dict[str, Any]) -> Dict[str, Any]:
    page = _parse_page(params.get('page'), 1)
    limit = _parse_page(params.get('limit'), 0)
    users, total = list_job_seekers(
        ctx.db,
        search=params.get('search'),
        status=params.get('status'),
        sort_by=params.get('sort_by') or 'created_at',
        descending=(params.get('sort_order') or params.get('order') or 'desc') == 'desc',
        page=page,
        limit=limit,
    )
    profiles = get_user_profiles(ctx.db, [u['id'] for u in users])
    result = []
    for user in users:
        profile = dict(profiles.get(user['id']) or {})
        if profile:
            profile['skills'] = get_skill_names(ctx.db, profile.get('skills') or [])
        profile['education'] = get_educations(ctx.db, user['id'])
        profile['experience'] = get_experiences(ctx.db, user['id'])
        result.append({**public_account(user), 'profile': profile})
    return {'users': result, 'total': total, 'page': page, 'limit': limit}


def list_companies(ctx, params: Dict[str, Any]) -> Dict[str, Any]:
    page = _parse_page(params.get('page'), 1)
    limit = _parse_page(params.get('limit'), 0)
    companies, total = list_accounts(ctx.db, 'company', page=page, limit=limit)
    profiles = get_company_profiles(ctx.db, [c['id'] for c in companies])
    rows = [
        {
            'id': c['id'],
            'email': c['email'],
            'is_active': c['is_active'],
            'company_name': (profiles.get(c['id']) or {}).get('company_name', ''),
        }
        for c in companies
    ]
    return {'companies': rows, 'total': total, 'page': page, 'limit': limit}


def company_details(ctx, company_id: str) -> Dict[str, Any]:
    jobs = get_all_jobs(ctx.db, company_id=company_id)
    interviews = get_interviews(ctx.db, [job['id'] for job in jobs])
    profile = get_company_profile(ctx.db, company_id)
    return {
        'company_profile': profile,
        'jobs': [serialize_job(job, profile) for job in jobs],
        'interviews': interviews,
        'hiring_data': {
            'active_jobs_count': sum(1 for job in jobs if job.get('status') == 'Open'),
            'total_interviews': len(interviews),
        },
    }


def _require_account(ctx, kind: str, account_id: str) -> Dict[str, Any]:
    account = get_account(ctx.db, kind, account_id) if is_valid_id(account_id) else None
    if account is None:
        raise NotFound(f"{_LABELS[kind]} not found")
    return account


def update_account_by_admin(ctx, admin: Dict[str, Any], kind: str, account_id: str,
                            fields: Dict[str, Any]) -> Dict[str, Any]:
    _require_account(ctx, kind, account_id)
    updated = update_account(ctx.db, kind, account_id, fields)
    log_admin_action(ctx.db, f"Update {_LABELS[kind]}", admin['id'],
                     {_ID_KEYS[kind]: account_id, 'fields': sorted(fields)})
    return public_account(updated)


def delete_account_by_admin(ctx, admin: Dict[str, Any], kind: str, account_id: str) -> None:
    account = _require_account(ctx, kind, account_id)
    name = _account_name(ctx, kind, account)
    if kind == 'company':
        db_delete_company(ctx.db, account_id)
    else:
        db_delete_user(ctx.db, account_id)
    log_admin_action(ctx.db, f"Delete {_LABELS[kind]}", admin['id'], {_ID_KEYS[kind]: account_id})
    ctx.dispatcher.send_quietly(messages.account_deleted_email(account['email'], name, company=kind == 'company'))


def _apply_active(ctx, admin: Dict[str, Any], kind: str, account: Dict[str, Any],
                  is_active: bool) -> Dict[str, Any]:
    previous = account['is_active']
    updated = update_account(ctx.db, kind, account['id'], {'is_active': is_active})
    action = f"{'Activate' if is_active else 'Deactivate'} {_LABELS[kind]}"
    log_admin_action(ctx.db, action, admin['id'], {_ID_KEYS[kind]: account['id']})
    if previous != is_active:
        name = _account_name(ctx, kind, account)
        ctx.dispatcher.send_later(
            messages.account_status_email(account['email'], name, is_active, company=kind == 'company')
        )
    return updated


def toggle_active(ctx, admin: Dict[str, Any], kind: str, account_id: str) -> bool:
    """Flip an account's active flag and return the new value."""
    account = _require_account(ctx, kind, account_id)
    updated = _apply_active(ctx, admin, kind, account, not account['is_active'])
    return updated['is_active']


def bulk_set_active(ctx, admin: Dict[str, Any], kind: str, ids: Any, is_active: Any) -> Tuple[int, int]:
    """Set the active flag on many accounts concurrently.

    Each account is saved on its own; one failure does not undo the others.
    Returns ``(updated, failed)``.
    """
    if not isinstance(ids, list) or not isinstance(is_active, bool):
        raise ValidationError("Invalid request body")
    accounts = get_accounts(ctx.db, kind, [i for i in ids if isinstance(i, str)])
    if not accounts:
        return 0, 0

    updated = failed = 0
    with ThreadPoolExecutor(max_workers=BULK_MAX_WORKERS, thread_name_prefix="admin-bulk") as executor:
        futures = {
            executor.submit(_apply_active, ctx, admin, kind, account, is_active): account_id
            for account_id, account in accounts.items()
        }
        for future in as_completed(futures):
            account_id = futures[future]
            try:
                future.result()
                updated += 1
            except Exception as exc:
                failed += 1
                logger.error(f"Bulk update of {kind} {account_id} failed: {exc}")
    log_admin_action(ctx.db, f"Bulk {'Activate' if is_active else 'Deactivate'} {_PLURALS[kind]}", admin['id'],
                     {'ids': list(accounts), 'updated': updated, 'failed': failed})
    logger.info(f"Bulk {'activation' if is_active else 'deactivation'} of {kind}s: {updated} updated, {failed} failed")
    return updated, failed


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

def list_jobs(ctx) -> List[Dict[str, Any]]:
    jobs = get_all_jobs(ctx.db)
    profiles = get_company_profiles(ctx.db, list({job['company_id'] for job in jobs}))
    return [serialize_job(job, profiles.get(job['company_id'])) for job in jobs]


def _require_job(ctx, job_id: str) -> Dict[str, Any]:
    job = get_job(ctx.db, job_id) if is_valid_id(job_id) else None
    if job is None:
        raise NotFound("Job not found")
    return job


def update_job_by_admin(ctx, admin: Dict[str, Any], job_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    _require_job(ctx, job_id)
    fields = job_fields(fields)
    if 'status' in fields and fields['status'] not in JOB_STATUSES:
        raise InvalidStatus("Invalid status")
    job = db_update_job(ctx.db, job_id, fields)
    log_admin_action(ctx.db, "Update Job", admin['id'], {'job_id': job_id, 'fields': sorted(fields)})
    return serialize_job(job, get_company_profile(ctx.db, job['company_id']))


def delete_job_by_admin(ctx, admin: Dict[str, Any], job_id: str) -> None:
    job = _require_job(ctx, job_id)
    db_delete_job(ctx.db, job_id)
    log_admin_action(ctx.db, "Delete Job", admin['id'], {'job_id': job_id})
    company = get_account(ctx.db, 'company', job['company_id'])
    if company is not None:
        name = _account_name(ctx, 'company', company)
        ctx.dispatcher.send_quietly(messages.job_deleted_email(company['email'], name, job['job_title']))


def job_stats(ctx) -> List[Dict[str, Any]]:
    return count_jobs_by_status(ctx.db)


def company_stats(ctx) -> Dict[str, Any]:
    """Company counts per known industry, plus the five companies with most jobs."""
    canonical = {name.strip().lower(): name for name in INDUSTRIES}
    counts = {name: 0 for name in INDUSTRIES}
    unmatched: Dict[str, int] = {}
    for profile in get_company_profiles(ctx.db).values():
        industry = (profile.get('industry') or '').strip()
        if not industry:
            unmatched['Missing'] = unmatched.get('Missing', 0) + 1
        elif industry.lower() in canonical:
            counts[canonical[industry.lower()]] += 1
        else:
            logger.info(f"Unmatched industry '{industry}' for company {profile['company_name']}")
            unmatched[industry] = unmatched.get(industry, 0) + 1

    top = count_jobs_by_company(ctx.db, limit=5)
    profiles = get_company_profiles(ctx.db, [row['company_id'] for row in top])
    return {
        'industry_stats': [{'industry': name, 'count': counts[name]} for name in INDUSTRIES],
        'top_companies': [
            {'name': profiles[row['company_id']]['company_name'], 'job_count': row['job_count']}
            for row in top if row['company_id'] in profiles
        ],
        'unmatched_industries': [{'industry': k, 'count': v} for k, v in unmatched.items()],
    }


def audit_log(ctx, limit: Any = 50) -> List[Dict[str, Any]]:
    return get_audit_log(ctx.db, limit=_parse_page(limit, 50))


def log_action(ctx, admin: Dict[str, Any], action: str, details: Optional[Dict[str, Any]] = None) -> None:
    log_admin_action(ctx.db, action, admin['id'], details or {})
