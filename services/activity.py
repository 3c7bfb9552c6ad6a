"""Saved jobs, in-app notifications and the search log."""

import logging
from typing import Any, Dict, List, Optional

from core.errors import Conflict, NotFound, ValidationError
from database import (
    add_search, delete_notifications, get_jobs_by_ids, get_notifications,
    get_saved_jobs, is_valid_id, mark_notification_read, remove_saved_job, save_job,
)
from services.jobs import serialize_jobs

logger = logging.getLogger(__name__)


def save_job_for_user(ctx, user: Dict[str, Any], job_id: str) -> None:
    if not is_valid_id(job_id):
        raise NotFound("Job not found")
    if not save_job(ctx.db, user['id'], job_id):
        raise Conflict("Job already saved.")


def remove_job_for_user(ctx, user: Dict[str, Any], job_id: str) -> None:
    if not remove_saved_job(ctx.db, user['id'], job_id):
        raise NotFound("Saved job not found.")


def saved_jobs(ctx, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Bookmarked jobs that still exist, most recently saved first."""
    saved = get_saved_jobs(ctx.db, user['id'])
    jobs = get_jobs_by_ids(ctx.db, [s['job_id'] for s in saved])
    return serialize_jobs(ctx, [jobs[s['job_id']] for s in saved if s['job_id'] in jobs])


def notifications(ctx, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return get_notifications(ctx.db, user['id'])


def mark_read(ctx, user: Dict[str, Any], notification_id: str) -> Dict[str, Any]:
    notification = mark_notification_read(ctx.db, user['id'], notification_id)
    if notification is None:
        raise NotFound("Notification not found")
    return notification


def clear_notifications(ctx, user: Dict[str, Any], notification_id: Optional[str] = None) -> int:
    deleted = delete_notifications(ctx.db, user['id'], notification_id)
    if notification_id and not deleted:
        raise NotFound("Notification not found")
    return deleted


def record_search(ctx, query: Optional[str], user: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Log a search; attributed searches feed job recommendations."""
    query = (query or '').strip()
    if not query:
        raise ValidationError("Search query is required")
    return add_search(ctx.db, query, user['id'] if user else None)
