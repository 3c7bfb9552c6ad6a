"""Per-user activity records and the admin audit trail."""

import json
import sqlite3
import logging
from typing import Optional, List, Dict, Any

from database.connection import Database, new_id, utcnow, to_iso, row_to_dict

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

def add_notifications(db: Database, user_ids: List[str], job_id: Optional[str], message: str) -> int:
    """Create the same notification for each of ``user_ids``."""
    if not user_ids:
        return 0
    now = to_iso(utcnow())
    with db.connection() as conn:
        conn.executemany(
            "INSERT INTO notifications (id, user_id, job_id, message, is_read, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, 0, ?, ?)",
            [(new_id(), user_id, job_id, message, now, now) for user_id in user_ids],
        )
    return len(user_ids)


def get_notifications(db: Database, user_id: str) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM notifications WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        ).fetchall()
    return [row_to_dict(row, bool_fields=('is_read',)) for row in rows]


def mark_notification_read(db: Database, user_id: str, notification_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        conn.execute(
            "UPDATE notifications SET is_read = 1, updated_at = ? WHERE id = ? AND user_id = ?",
            (to_iso(utcnow()), notification_id, user_id),
        )
        row = conn.execute(
            "SELECT * FROM notifications WHERE id = ? AND user_id = ?", (notification_id, user_id)
        ).fetchone()
    return row_to_dict(row, bool_fields=('is_read',))


def delete_notifications(db: Database, user_id: str, notification_id: Optional[str] = None) -> int:
    """Delete one notification, or all of the user's when no id is given."""
    with db.connection() as conn:
        if notification_id:
            cursor = conn.execute(
                "DELETE FROM notifications WHERE id = ? AND user_id = ?", (notification_id, user_id)
            )
        else:
            cursor = conn.execute("DELETE FROM notifications WHERE user_id = ?", (user_id,))
        return cursor.rowcount


# ---------------------------------------------------------------------------
# Saved jobs
# ---------------------------------------------------------------------------

def save_job(db: Database, user_id: str, job_id: str) -> bool:
    """Bookmark a job. Returns False when the pair is already saved."""
    try:
        with db.connection() as conn:
            conn.execute(
                "INSERT INTO saved_jobs (id, user_id, job_id, created_at) VALUES (?, ?, ?, ?)",
                (new_id(), user_id, job_id, to_iso(utcnow())),
            )
        return True
    except sqlite3.IntegrityError:
        return False


def remove_saved_job(db: Database, user_id: str, job_id: str) -> bool:
    with db.connection() as conn:
        cursor = conn.execute(
            "DELETE FROM saved_jobs WHERE user_id = ? AND job_id = ?", (user_id, job_id)
        )
        return cursor.rowcount > 0


def get_saved_jobs(db: Database, user_id: str) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM saved_jobs WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        ).fetchall()
    return [row_to_dict(row) for row in rows]


# ---------------------------------------------------------------------------
# Search log
# ---------------------------------------------------------------------------

def add_search(db: Database, query: str, user_id: Optional[str] = None) -> Dict[str, Any]:
    record = {'id': new_id(), 'query': query, 'user_id': user_id, 'created_at': to_iso(utcnow())}
    with db.connection() as conn:
        conn.execute(
            "INSERT INTO searches (id, query, user_id, created_at) VALUES (?, ?, ?, ?)",
            tuple(record.values()),
        )
    return record


def get_search_queries(db: Database, user_id: str) -> List[str]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT query FROM searches WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        ).fetchall()
    return [row['query'] for row in rows]


# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------

def log_admin_action(db: Database, action: str, performed_by: Optional[str],
                     details: Optional[Dict[str, Any]] = None) -> bool:
    """Append an admin action to the audit log; failures are logged, not raised."""
    try:
        with db.connection() as conn:
            conn.execute(
                "INSERT INTO audit_logs (id, action, performed_by, details, timestamp) VALUES (?, ?, ?, ?, ?)",
                (new_id(), action, performed_by, json.dumps(details or {}), to_iso(utcnow())),
            )
        return True
    except Exception as e:
        logger.error(f"Failed to log admin action {action}: {e}")
        return False


def get_audit_log(db: Database, limit: int = 50) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM audit_logs ORDER BY timestamp DESC LIMIT ?", (limit,)
        ).fetchall()
    return [row_to_dict(row, json_fields=('details',)) for row in rows]
