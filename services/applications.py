"""Job applications from both sides: seekers applying, companies deciding."""

import logging
from typing import Any, Dict, List, Optional

from core.errors import Forbidden, InvalidStatus, NotFound
from database import (
    add_application, get_accounts, get_all_jobs, get_application, get_applications,
    get_job, get_jobs_by_ids, get_user_profile, get_user_profiles, is_valid_id,
    set_application_status,
)
from services.jobs import owned_job, serialize_jobs

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

DECISION_STATUSES = ('hired', 'rejected')


def absolute_url(base_url: str, path: Optional[str]) -> Optional[str]:
    """Prefix server-relative paths with ``base_url``; leave anything else alone."""
    if path and path.startswith('/'):
        return f"{base_url.rstrip('/')}{path}"
    return path


def submit_application(ctx, user: Dict[str, Any], job_id: str,
                       cover_letter: Optional[str] = None) -> Dict[str, Any]:
    """Record an application with a snapshot of the user's current resume.

    The job id is stored as given; repeat submissions create new records.
    """
    profile = get_user_profile(ctx.db, user['id']) or {}
    application = add_application(
        ctx.db, user['id'], job_id,
        cover_letter=cover_letter or '',
        resume=profile.get('resume') or '',
    )
    logger.info(f"User {user['id']} applied to job {job_id}")
    return application


def my_applications(ctx, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return get_applications(ctx.db, user_id=user['id'])


def my_application_for_job(ctx, user: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    if not is_valid_id(job_id):
        raise NotFound("No application found")
    applications = get_applications(ctx.db, user_id=user['id'], job_ids=[job_id])
    if not applications:
        raise NotFound("No application found")
    return applications[0]


def applied_jobs(ctx, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Jobs the user has applied to that still exist, most recent application first."""
    applications = get_applications(ctx.db, user_id=user['id'])
    job_ids = list(dict.fromkeys(app['job_id'] for app in applications))
    jobs = get_jobs_by_ids(ctx.db, job_ids)
    return serialize_jobs(ctx, [jobs[job_id] for job_id in job_ids if job_id in jobs])


def company_applications(ctx, company: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Every application to any of the company's jobs, with job title and applicant."""
    jobs = {job['id']: job for job in get_all_jobs(ctx.db, company_id=company['id'])}
    applications = get_applications(ctx.db, job_ids=list(jobs))
    user_ids = [app['user_id'] for app in applications]
    users = get_accounts(ctx.db, 'user', user_ids)
    profiles = get_user_profiles(ctx.db, user_ids)
    for app in applications:
        user = users.get(app['user_id'])
        profile = profiles.get(app['user_id']) or {}
        app['job'] = {'id': app['job_id'], 'job_title': jobs[app['job_id']]['job_title']}
        app['user'] = {
            'id': app['user_id'],
            'email': user['email'] if user else None,
            'name': profile.get('name'),
            'phone': profile.get('phone'),
        }
    return applications


def job_applications(ctx, company: Dict[str, Any], job_id: str) -> List[Dict[str, Any]]:
    """Applicants for one owned job, merged with their profile data.

    Applications whose applicant account no longer exists are skipped.
    """
    owned_job(ctx, company, job_id)
    applications = get_applications(ctx.db, job_ids=[job_id])
    user_ids = [app['user_id'] for app in applications]
    users = get_accounts(ctx.db, 'user', user_ids)
    profiles = get_user_profiles(ctx.db, user_ids)

    result = []
    for app in applications:
        user = users.get(app['user_id'])
        if user is None:
            continue
        merged = {'id': user['id'], 'email': user['email']}
        profile = profiles.get(user['id'])
        if profile:
            merged.update({k: v for k, v in profile.items() if k not in ('id', 'user_id')})
        merged['resume'] = absolute_url(ctx.settings.BACKEND_URL, merged.get('resume') or app.get('resume'))
        result.append({**app, 'user': merged})
    return result


def decide_application(ctx, company: Dict[str, Any], application_id: str,
                       status: Optional[str]) -> Dict[str, Any]:
    """Mark an application hired or rejected. No notification is sent."""
    if status not in DECISION_STATUSES:
        raise InvalidStatus("Invalid status value")
    application = get_application(ctx.db, application_id) if is_valid_id(application_id) else None
    if application is None:
        raise NotFound("Application not found")
    job = get_job(ctx.db, application['job_id'])
    if job is None or job['company_id'] != company['id']:
        raise Forbidden("Unauthorized")
    updated = set_application_status(ctx.db, application_id, status)
    logger.info(f"Application {application_id} marked {status} by company {company['id']}")
    return updated
