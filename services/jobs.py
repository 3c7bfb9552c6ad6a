"""Job postings: creation, public listings and owner-only changes."""

import logging
import re
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from core.errors import Forbidden, InvalidStatus, NotFound
from database import (
    add_job, add_notifications, count_applications_per_job, delete_job as db_delete_job,
    get_accounts, get_all_jobs, get_all_user_profiles, get_applications,
    get_company_profile_by_id, get_company_profiles, get_job, get_search_queries,
    get_skill_map, get_skill_names, get_user_profile, is_valid_id, parse_iso,
    update_job as db_update_job, utcnow,
)
from matcher import rank_jobs, recommendation_keywords

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

JOB_STATUSES = ('Open', 'Closed')
DEFAULT_COMPANY_NAME = "Unknown Company"
DEFAULT_COMPANY_LOGO = "/demo.png"
CATEGORY_GROWTH = (75, 60, 45)

RECENCY_WINDOWS = {
    '24h': timedelta(hours=24),
    'week': timedelta(days=7),
    'month': timedelta(days=30),
}

_LIST_FIELDS = ('benefits', 'responsibilities', 'qualifications')


# ---------------------------------------------------------------------------
# Representation
# ---------------------------------------------------------------------------

def effective_status(job: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """Closed when stored as Closed or the application deadline has passed.

    The stored status is never rewritten; every read path reports this value.
    """
    if job.get('status') == 'Closed':
        return 'Closed'
    deadline = parse_iso(job.get('application_deadline'))
    if deadline is not None and deadline < (now or utcnow()):
        return 'Closed'
    return job.get('status') or 'Open'


def serialize_job(job: Dict[str, Any], company_profile: Optional[Dict[str, Any]] = None,
                  now: Optional[datetime] = None) -> Dict[str, Any]:
    """Job record plus the owning company's display fields."""
    profile = company_profile or {}
    data = dict(job)
    data['company_name'] = (profile.get('company_name') or '').strip() or DEFAULT_COMPANY_NAME
    data['company_logo'] = (profile.get('logo') or '').strip() or DEFAULT_COMPANY_LOGO
    data['effective_status'] = effective_status(job, now)
    return data


def serialize_jobs(ctx, jobs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    profiles = get_company_profiles(ctx.db, list({job['company_id'] for job in jobs}))
    now = utcnow()
    return [serialize_job(job, profiles.get(job['company_id']), now) for job in jobs]


# ---------------------------------------------------------------------------
# Input normalisation
# ---------------------------------------------------------------------------

def split_list(value: Union[str, List[str], None], separator: str = "\n") -> List[str]:
    """Accept either a list or ``separator``-delimited text; drop blank entries."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(separator)
    else:
        items = value
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def _number(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else float(value)


def parse_salary(min_salary: Optional[float] = None, max_salary: Optional[float] = None,
                 currency: Optional[str] = None,
                 salary_range: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Salary from explicit bounds, else from a "$50,000 - $80,000" style range in USD."""
    if min_salary is not None and max_salary is not None and currency:
        return {'min': _number(min_salary), 'max': _number(max_salary), 'currency': currency.strip().upper()}
    if salary_range:
        parts = [p.strip() for p in re.sub(r'[$,]', '', salary_range).split('-')]
        if len(parts) == 2:
            try:
                low, high = float(parts[0]), float(parts[1])
            except ValueError:
                return None
            return {'min': _number(low), 'max': _number(high), 'currency': 'USD'}
    return None


def job_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map validated request data onto stored job columns."""
    fields = {k: v for k, v in data.items()
              if k not in ('min_salary', 'max_salary', 'currency', 'salary_range')}
    if 'skills' in fields:
        fields['skills'] = split_list(fields['skills'], separator=",")
    for key in _LIST_FIELDS:
        if key in fields:
            fields[key] = split_list(fields[key])
    salary = parse_salary(data.get('min_salary'), data.get('max_salary'),
                          data.get('currency'), data.get('salary_range'))
    if salary is not None:
        fields['salary'] = salary
    return fields


# ---------------------------------------------------------------------------
# Company-side lifecycle
# ---------------------------------------------------------------------------

def _notify_matching_users(ctx, job: Dict[str, Any]) -> int:
    """Tell job seekers whose title or skills match about a new posting."""
    profiles = get_all_user_profiles(ctx.db)
    if not profiles:
        return 0
    skill_names = get_skill_map(ctx.db, [sid for p in profiles for sid in (p.get('skills') or [])])
    job_skills = {s.lower() for s in job.get('skills') or []}
    title = (job.get('job_title') or '').lower()

    recipients = []
    for profile in profiles:
        user_skills = {skill_names[sid].lower() for sid in profile.get('skills') or [] if sid in skill_names}
        title_match = (profile.get('title') or '').lower() == title
        if title_match or user_skills & job_skills:
            recipients.append(profile['user_id'])

    message = f"New job posted: {job['job_title']} in {job['location']}"
    return add_notifications(ctx.db, recipients, job['id'], message)


def create_job(ctx, company: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    fields = job_fields(data)
    fields['contact_email'] = company['email']
    fields['status'] = 'Open'
    job = add_job(ctx.db, company['id'], fields)
    notified = _notify_matching_users(ctx, job)
    logger.info(f"Job {job['id']} posted by company {company['id']}, {notified} users notified")
    return serialize_job(job, get_company_profiles(ctx.db, [company['id']]).get(company['id']))


def owned_job(ctx, company: Dict[str, Any], job_id: str) -> Dict[str, Any]:
    """The job, if it exists and belongs to ``company``."""
    job = get_job(ctx.db, job_id) if is_valid_id(job_id) else None
    if job is None:
        raise NotFound("Job not found")
    if job['company_id'] != company['id']:
        raise Forbidden("Unauthorized")
    return job


def update_job(ctx, company: Dict[str, Any], job_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    owned_job(ctx, company, job_id)
    fields = job_fields(data)
    if 'status' in fields and fields['status'] not in JOB_STATUSES:
        raise InvalidStatus("Invalid status")
    fields.pop('contact_email', None)
    job = db_update_job(ctx.db, job_id, fields)
    return serialize_job(job, get_company_profiles(ctx.db, [company['id']]).get(company['id']))


def delete_job(ctx, company: Dict[str, Any], job_id: str) -> None:
    owned_job(ctx, company, job_id)
    db_delete_job(ctx.db, job_id)
    logger.info(f"Company {company['id']} deleted job {job_id}")


def set_job_status(ctx, company: Dict[str, Any], job_id: str, status: Optional[str]) -> Dict[str, Any]:
    if status not in JOB_STATUSES:
        raise InvalidStatus("Invalid status")
    owned_job(ctx, company, job_id)
    job = db_update_job(ctx.db, job_id, {'status': status})
    return serialize_job(job, get_company_profiles(ctx.db, [company['id']]).get(company['id']))


def posted_jobs(ctx, company: Dict[str, Any]) -> List[Dict[str, Any]]:
    """The company's own jobs with their application counts."""
    jobs = get_all_jobs(ctx.db, company_id=company['id'])
    counts = count_applications_per_job(ctx.db, [job['id'] for job in jobs])
    result = serialize_jobs(ctx, jobs)
    for job in result:
        job['application_count'] = counts.get(job['id'], 0)
    return result


def job_applicants(ctx, company: Dict[str, Any], job_id: str) -> List[Dict[str, Any]]:
    owned_job(ctx, company, job_id)
    applications = get_applications(ctx.db, job_ids=[job_id])
    users = get_accounts(ctx.db, 'user', [app['user_id'] for app in applications])
    for app in applications:
        user = users.get(app['user_id'])
        app['user'] = {'id': user['id'], 'email': user['email']} if user else None
    return applications


# ---------------------------------------------------------------------------
# Public listings
# ---------------------------------------------------------------------------

def _is_set(value: Optional[str]) -> bool:
    return bool(value) and value != 'any'


def filter_jobs(jobs: List[Dict[str, Any]], filters: Dict[str, Any],
                now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Apply listing filters to jobs already sorted newest first."""
    now = now or utcnow()
    search = (filters.get('search') or '').strip().lower()
    if search:
        jobs = [j for j in jobs if search in (j.get('job_title') or '').lower()
                or search in (j.get('location') or '').lower()]

    location = (filters.get('location') or '').strip().lower()
    if location:
        jobs = [j for j in jobs if location in (j.get('location') or '').lower()]

    window = RECENCY_WINDOWS.get(filters.get('date_posted') or '')
    if window is not None:
        cutoff = now - window
        jobs = [j for j in jobs if (parse_iso(j.get('created_at')) or now) >= cutoff]

    if _is_set(filters.get('experience')):
        jobs = [j for j in jobs if j.get('experience_level') == filters['experience']]

    if _is_set(filters.get('remote')):
        wanted = str(filters['remote']).lower() == 'true'
        jobs = [j for j in jobs if bool(j.get('remote_option')) == wanted]

    if _is_set(filters.get('job_type')):
        jobs = [j for j in jobs if j.get('job_type') == filters['job_type']]

    industries = split_list(filters.get('industry'), separator=",")
    if industries:
        jobs = [j for j in jobs if j.get('industry') in industries]
    return jobs


def list_jobs(ctx, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
    jobs = filter_jobs(get_all_jobs(ctx.db), filters)
    return serialize_jobs(ctx, jobs)


def recommended_jobs(ctx, user: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """Open jobs, with the ones matching the user's skills or searches first."""
    now = utcnow()
    jobs = [job for job in get_all_jobs(ctx.db) if effective_status(job, now) == 'Open']
    keywords = set()
    if user is not None:
        profile = get_user_profile(ctx.db, user['id']) or {}
        keywords = recommendation_keywords(
            get_skill_names(ctx.db, profile.get('skills') or []),
            get_search_queries(ctx.db, user['id']),
        )
    return serialize_jobs(ctx, rank_jobs(jobs, keywords))


def job_details(ctx, job_id: str) -> Dict[str, Any]:
    job = get_job(ctx.db, job_id) if is_valid_id(job_id) else None
    if job is None:
        raise NotFound("Job not found")
    return serialize_jobs(ctx, [job])[0]


def jobs_by_company_profile(ctx, profile_id: str) -> List[Dict[str, Any]]:
    profile = get_company_profile_by_id(ctx.db, profile_id) if is_valid_id(profile_id) else None
    if profile is None:
        raise NotFound("Company not found")
    jobs = get_all_jobs(ctx.db, status='Open', company_id=profile['company_id'])
    now = utcnow()
    return [serialize_job(job, profile, now) for job in jobs]


def job_categories(ctx) -> List[Dict[str, Any]]:
    """Top three industries by open job count, with their most common titles."""
    by_industry: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for job in get_all_jobs(ctx.db, status='Open', order_by="created_at ASC"):
        by_industry[job.get('industry') or ''].append(job)

    top = sorted(by_industry.items(), key=lambda item: len(item[1]), reverse=True)[:3]
    categories = []
    for index, (industry, jobs) in enumerate(top):
        titles = Counter(job['job_title'] for job in jobs)
        first_ids = {}
        for job in jobs:
            first_ids.setdefault(job['job_title'], job['id'])
        categories.append({
            'industry': industry or "Others",
            'total_jobs': len(jobs),
            'growth': CATEGORY_GROWTH[index % len(CATEGORY_GROWTH)],
            'popular_roles': [
                {'title': title, 'job_id': first_ids[title]}
                for title, _ in titles.most_common(3)
            ],
        })
    return categories
