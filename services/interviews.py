"""Interview scheduling, rescheduling and cancellation for companies."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from core.errors import Forbidden, NotFound, ValidationError
from database import (
    find_interview, get_account, get_accounts, get_application, get_company_profile,
    get_interview, get_interviews, get_job, get_user_profile, is_valid_id,
    parse_iso, replace_interview, set_interview_status, to_iso,
)
from notifier import messages
from services.jobs import owned_job

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

MEETING_BASE_URL = "https://meet.jit.si"


def new_room_id(job_id: str, application_id: str) -> str:
    return f"WorkSphere_Interview_{job_id}_{application_id}_{uuid.uuid4()}"


def meeting_link(room_id: str) -> str:
    return f"{MEETING_BASE_URL}/{room_id}"


def _candidate_name(ctx, user: Dict[str, Any]) -> str:
    profile = get_user_profile(ctx.db, user['id']) or {}
    return profile.get('name') or "Candidate"


def _company_name(ctx, company_id: str) -> str:
    profile = get_company_profile(ctx.db, company_id) or {}
    return profile.get('company_name') or "N/A"


def schedule_interview(ctx, company: Dict[str, Any], job_id: str, user_id: str,
                       application_id: str, when: datetime,
                       notes: Optional[str] = None) -> Tuple[Dict[str, Any], bool]:
    """Schedule an interview, replacing any existing one for the same job and candidate.

    Returns ``(interview, is_reschedule)``. Every call gets a new meeting room,
    so links from an earlier schedule stop working.
    """
    if not all(is_valid_id(value) for value in (job_id, user_id, application_id)):
        raise ValidationError("Invalid ID format")

    application = get_application(ctx.db, application_id)
    job = get_job(ctx.db, application['job_id']) if application else None
    if application is None or job is None or job['company_id'] != company['id']:
        raise Forbidden("Unauthorized or invalid application")

    # The applicant on record wins over the caller-supplied user id.
    if user_id != application['user_id']:
        logger.warning(f"Interview user {user_id} does not match application {application_id}; using applicant")
    candidate = get_account(ctx.db, 'user', application['user_id'])
    if candidate is None:
        raise NotFound("User not found")

    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    is_reschedule = find_interview(ctx.db, job['id'], candidate['id']) is not None
    room_id = new_room_id(job['id'], application_id)
    interview = replace_interview(ctx.db, {
        'job_id': job['id'],
        'user_id': candidate['id'],
        'application_id': application_id,
        'date': to_iso(when),
        'room_id': room_id,
        'notes': notes or '',
        'status': 'scheduled',
    })
    interview['meeting_link'] = meeting_link(room_id)

    ctx.dispatcher.send(messages.interview_email(
        candidate['email'],
        _candidate_name(ctx, candidate),
        job.get('job_title') or "N/A",
        _company_name(ctx, company['id']),
        when.astimezone(timezone.utc),
        interview['meeting_link'],
        notes or '',
        reschedule=is_reschedule,
    ))
    logger.info(f"Interview {'rescheduled' if is_reschedule else 'scheduled'} for job {job['id']}, user {candidate['id']}")
    return interview, is_reschedule


def interviews_for_job(ctx, company: Dict[str, Any], job_id: str) -> List[Dict[str, Any]]:
    if not is_valid_id(job_id):
        raise ValidationError("Invalid jobId format")
    owned_job(ctx, company, job_id)
    interviews = get_interviews(ctx.db, [job_id])
    users = get_accounts(ctx.db, 'user', [i['user_id'] for i in interviews])
    for interview in interviews:
        user = users.get(interview['user_id'])
        interview['user'] = {'id': user['id'], 'email': user['email']} if user else None
        interview['meeting_link'] = meeting_link(interview['room_id'])
    return interviews


def cancel_interview(ctx, company: Dict[str, Any], interview_id: str) -> Dict[str, Any]:
    """Mark an interview cancelled and tell the candidate. The record is kept."""
    if not is_valid_id(interview_id):
        raise ValidationError("Invalid interviewId format")
    interview = get_interview(ctx.db, interview_id)
    if interview is None:
        raise NotFound("Interview not found")
    job = get_job(ctx.db, interview['job_id'])
    if job is None or job['company_id'] != company['id']:
        raise Forbidden("Unauthorized")

    updated = set_interview_status(ctx.db, interview_id, 'cancelled')
    candidate = get_account(ctx.db, 'user', interview['user_id'])
    if candidate is not None:
        ctx.dispatcher.send(messages.interview_cancelled_email(
            candidate['email'],
            _candidate_name(ctx, candidate),
            job.get('job_title') or "N/A",
            _company_name(ctx, company['id']),
            parse_iso(interview['date']),
        ))
    logger.info(f"Interview {interview_id} cancelled by company {company['id']}")
    return updated
