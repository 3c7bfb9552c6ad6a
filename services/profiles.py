"""Job seeker and company profiles, their uploads and dashboards."""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from core.errors import NotFound, ValidationError
from database import (
    add_certificate, count_accounts, count_applications, count_jobs,
    delete_certificate as db_delete_certificate, get_accounts, get_account,
    get_all_jobs, get_applications, get_certificates, get_company_profile,
    get_company_profile_by_id, get_company_profiles, get_educations,
    get_experiences, get_interviews, get_oldest_company_profiles,
    get_skill_names, get_user_profile, is_valid_id, parse_iso, replace_educations,
    replace_experiences, to_iso, update_company_profile, update_user_profile,
    upsert_skills, create_company_profile, utcnow, application_trends,
)
from services.jobs import split_list

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

SOCIAL_NETWORKS = ('linkedin', 'github', 'twitter', 'portfolio')
DEFAULT_COMPANY_NAME = "Your Company Name"
INCOMPLETE_PROFILE_MESSAGE = (
    "Your profile is incomplete. Please complete your profile for a better experience."
)


# ---------------------------------------------------------------------------
# Job seeker profiles
# ---------------------------------------------------------------------------

def _require_user_profile(ctx, user_id: str) -> Dict[str, Any]:
    profile = get_user_profile(ctx.db, user_id)
    if profile is None:
        raise NotFound("User profile not found")
    return profile


def _full_user_profile(ctx, profile: Dict[str, Any], email: Optional[str]) -> Dict[str, Any]:
    data = dict(profile)
    data['skills'] = get_skill_names(ctx.db, profile.get('skills') or [])
    data['experience'] = get_experiences(ctx.db, profile['user_id'])
    data['education'] = get_educations(ctx.db, profile['user_id'])
    data['certificates'] = get_certificates(ctx.db, profile['user_id'])
    data['email'] = email
    return data


def get_profile(ctx, user: Dict[str, Any]) -> Dict[str, Any]:
    return _full_user_profile(ctx, _require_user_profile(ctx, user['id']), user['email'])


def update_profile(ctx, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace the editable profile fields; experience and education lists replace stored ones."""
    _require_user_profile(ctx, user['id'])
    social = data.get('social_links') or {}
    fields = {
        'name': data['name'],
        'title': data['title'],
        'location': data['location'],
        'phone': data.get('phone') or '',
        'about': data.get('about') or '',
        'skills': upsert_skills(ctx.db, data.get('skills') or []),
        'social_links': {network: social.get(network) or data.get(network) or ''
                         for network in SOCIAL_NETWORKS},
    }
    profile = update_user_profile(ctx.db, user['id'], fields)
    if data.get('experience') is not None:
        replace_experiences(ctx.db, user['id'], data['experience'])
    if data.get('education') is not None:
        replace_educations(ctx.db, user['id'], data['education'])
    logger.info(f"Updated profile for user {user['id']}")
    return _full_user_profile(ctx, profile, user['email'])


def public_profile(ctx, user_id: str) -> Dict[str, Any]:
    """Profile view for other visitors; contact details are left out."""
    if not is_valid_id(user_id):
        raise NotFound("User profile not found")
    profile = _require_user_profile(ctx, user_id)
    account = get_account(ctx.db, 'user', user_id)
    data = _full_user_profile(ctx, profile, account['email'] if account else None)
    data.pop('phone', None)
    return data


def upload_photo(ctx, user: Dict[str, Any], file) -> Dict[str, Any]:
    _require_user_profile(ctx, user['id'])
    stored = ctx.assets.save(file, 'photos', ctx.settings.MAX_PHOTO_SIZE,
                             mimetype_prefixes=('image/',), type_error="Only image files are allowed")
    update_user_profile(ctx.db, user['id'], {'profile_image': stored['path']})
    return {'profile_image': stored['path']}


def upload_resume(ctx, user: Dict[str, Any], file) -> Dict[str, Any]:
    profile = _require_user_profile(ctx, user['id'])
    stored = ctx.assets.save(file, 'resumes', ctx.settings.MAX_RESUME_SIZE)
    update_user_profile(ctx.db, user['id'], {'resume': stored['path'], 'resume_name': stored['original_name']})
    # Applications keep their own snapshot, so the old file may still be referenced.
    if profile.get('resume'):
        logger.info(f"User {user['id']} replaced resume {profile['resume']}")
    return {'resume': stored['path'], 'resume_name': stored['original_name']}


def remove_resume(ctx, user: Dict[str, Any]) -> Dict[str, Any]:
    _require_user_profile(ctx, user['id'])
    update_user_profile(ctx.db, user['id'], {'resume': '', 'resume_name': ''})
    return {'resume': None, 'resume_name': None}


def upload_certificate(ctx, user: Dict[str, Any], file, title: Optional[str]) -> Dict[str, Any]:
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    if not title or not title.strip():
        raise ValidationError("Certificate title is required")
    stored = ctx.assets.save(file, 'certificates', ctx.settings.MAX_CERTIFICATE_SIZE)
    return add_certificate(ctx.db, user['id'], title.strip(), stored['path'])


def delete_certificate(ctx, user: Dict[str, Any], certificate_id: str) -> Dict[str, Any]:
    certificate = db_delete_certificate(ctx.db, user['id'], certificate_id) if is_valid_id(certificate_id) else None
    if certificate is None:
        raise NotFound("Certificate not found")
    ctx.assets.delete(certificate['file_url'])
    return certificate


def upload_video(ctx, user: Dict[str, Any], file) -> Dict[str, Any]:
    _require_user_profile(ctx, user['id'])
    if file is None or not file.filename:
        raise ValidationError("No video uploaded")
    stored = ctx.assets.save(file, 'video', ctx.settings.MAX_VIDEO_SIZE,
                             mimetype_prefixes=('video/',), type_error="Only video files are allowed")
    update_user_profile(ctx.db, user['id'], {'video_introduction': stored['path']})
    return {'video_introduction': stored['path']}


def delete_video(ctx, user: Dict[str, Any]) -> None:
    profile = _require_user_profile(ctx, user['id'])
    if profile.get('video_introduction'):
        ctx.assets.delete(profile['video_introduction'])
    update_user_profile(ctx.db, user['id'], {'video_introduction': ''})


def analytics(ctx, user: Dict[str, Any]) -> Dict[str, Any]:
    profile = _require_user_profile(ctx, user['id'])
    return {
        'profile_views': profile.get('profile_views') or 0,
        'interactions': profile.get('interactions') or 0,
        'job_match_rank': profile.get('job_match_rank') or 0,
        'views_over_time': profile.get('views_over_time') or [],
    }


def overview(ctx) -> Dict[str, Any]:
    """Site-wide totals shown on the job seeker dashboard."""
    total_jobs = count_jobs(ctx.db)
    total_applications = count_applications(ctx.db)
    return {
        'total_job_postings': total_jobs,
        'total_companies': count_accounts(ctx.db, 'company'),
        'success_rate': round(total_applications / total_jobs * 100) if total_jobs else 0,
    }


# ---------------------------------------------------------------------------
# Company profiles
# ---------------------------------------------------------------------------

def _company_view(profile: Dict[str, Any], company: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(profile)
    data['contact_email'] = company['email']
    data['contact_phone'] = data.get('phone') or ''
    return data


def get_company_profile_view(ctx, company: Dict[str, Any]) -> Dict[str, Any]:
    """The company's profile, created with defaults on first read."""
    profile = get_company_profile(ctx.db, company['id'])
    if profile is None:
        profile = create_company_profile(ctx.db, company['id'], DEFAULT_COMPANY_NAME, specialties=[])
        logger.info(f"Created default profile for company {company['id']}")
    elif not profile.get('headquarters') and profile.get('company_address'):
        profile = update_company_profile(ctx.db, company['id'], {'headquarters': profile['company_address']})
    return _company_view(profile, company)


def update_company_profile_view(ctx, company: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply profile edits. The contact email always reflects the account email."""
    if get_company_profile(ctx.db, company['id']) is None:
        create_company_profile(ctx.db, company['id'], data.get('company_name') or DEFAULT_COMPANY_NAME)
    fields = {k: v for k, v in data.items() if v is not None}
    if 'specialties' in fields:
        fields['specialties'] = split_list(fields['specialties'], separator=",")
    contact_phone = fields.pop('contact_phone', None)
    if contact_phone:
        fields['phone'] = contact_phone
    fields.pop('contact_email', None)
    profile = update_company_profile(ctx.db, company['id'], fields)
    return _company_view(profile, company)


def upload_logo(ctx, company: Dict[str, Any], file) -> Dict[str, Any]:
    stored = ctx.assets.save(file, 'logos', ctx.settings.MAX_LOGO_SIZE,
                             mimetype_prefixes=('image/',), type_error="Only image files are allowed")
    if get_company_profile(ctx.db, company['id']) is None:
        create_company_profile(ctx.db, company['id'], DEFAULT_COMPANY_NAME)
    profile = update_company_profile(ctx.db, company['id'], {'logo': stored['path']})
    return {'logo': profile['logo']}


def oldest_companies(ctx, limit: int = 4) -> List[Dict[str, Any]]:
    profiles = get_oldest_company_profiles(ctx.db, limit)
    if not profiles:
        raise NotFound("No companies found")
    result = []
    for profile in profiles:
        data = dict(profile)
        data['total_active_jobs'] = count_jobs(ctx.db, company_id=profile['company_id'], status='Open')
        result.append(data)
    return result


def list_companies(ctx) -> List[Dict[str, Any]]:
    return list(get_company_profiles(ctx.db).values())


def company_by_id(ctx, profile_id: str) -> Dict[str, Any]:
    profile = get_company_profile_by_id(ctx.db, profile_id) if is_valid_id(profile_id) else None
    if profile is None:
        raise NotFound("Company not found")
    return profile


def company_dashboard(ctx, company: Dict[str, Any], interval: str = 'months') -> Dict[str, Any]:
    """Totals, recent application notices, upcoming interviews and a trend series."""
    now = utcnow()
    profile = get_company_profile(ctx.db, company['id'])
    company_data = {**company, **(profile or {}), 'id': company['id'], 'email': company['email']}
    company_data.pop('password_hash', None)
    name = (company_data.get('company_name') or '').strip()
    incomplete = not profile or not name
    if not name:
        company_data['company_name'] = company['email'].split('@')[0] or DEFAULT_COMPANY_NAME

    jobs = {job['id']: job for job in get_all_jobs(ctx.db, company_id=company['id'])}
    job_ids = list(jobs)

    recent = get_applications(ctx.db, job_ids=job_ids, since=to_iso(now - timedelta(days=7)))[:10]
    users = get_accounts(ctx.db, 'user', [app['user_id'] for app in recent])
    notifications = []
    for app in recent:
        hours = int((now - parse_iso(app['created_at'])).total_seconds() // 3600)
        when = "just now" if hours < 1 else f"{hours} hour{'s' if hours > 1 else ''} ago"
        email = users[app['user_id']]['email'] if app['user_id'] in users else "a candidate"
        notifications.append(f"New application from {email} for {jobs[app['job_id']]['job_title']} ({when})")

    upcoming = get_interviews(ctx.db, job_ids, upcoming_after=to_iso(now))
    candidates = get_accounts(ctx.db, 'user', [i['user_id'] for i in upcoming[:5]])
    upcoming_interviews = [
        {
            'candidate_email': candidates[i['user_id']]['email'] if i['user_id'] in candidates else "Candidate",
            'position': jobs[i['job_id']]['job_title'] if i['job_id'] in jobs else "Position",
            'date': i['date'][:10],
        }
        for i in upcoming[:5]
    ]

    return {
        'company': company_data,
        'metrics': {
            'total_job_postings': len(jobs),
            'total_applications': count_applications(ctx.db, job_ids) if job_ids else 0,
            'interviews_scheduled': len(upcoming),
            'notifications': notifications,
            'upcoming_interviews': upcoming_interviews,
            'application_trends': application_trends(ctx.db, job_ids, interval, now),
        },
        'incomplete_profile': incomplete,
        'incomplete_profile_message': INCOMPLETE_PROFILE_MESSAGE if incomplete else "",
    }
