"""Database operations for applications and interviews."""

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
# Applications
# ---------------------------------------------------------------------------

def add_application(db: Database, user_id: str, job_id: str,
                    cover_letter: str = '', resume: str = '') -> Dict[str, Any]:
    """Store an application. The job id is not checked against the jobs table."""
    now = to_iso(utcnow())
    record = {
        'id': new_id(),
        'job_id': job_id,
        'user_id': user_id,
        'cover_letter': cover_letter or '',
        'resume': resume or '',
        'status': 'pending',
        'created_at': now,
        'updated_at': now,
    }
    columns = ", ".join(record)
    placeholders = ", ".join("?" for _ in record)
    with db.connection() as conn:
        conn.execute(f"INSERT INTO applications ({columns}) VALUES ({placeholders})", list(record.values()))
    return record


def get_application(db: Database, application_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM applications WHERE id = ?", (application_id,)).fetchone()
    return row_to_dict(row)


def get_applications(db: Database, user_id: Optional[str] = None,
                     job_ids: Optional[List[str]] = None,
                     since: Optional[str] = None) -> List[Dict[str, Any]]:
    """Applications filtered by applicant and/or job set, newest first."""
    query = "SELECT * FROM applications WHERE 1=1"
    params: List[Any] = []
    if user_id:
        query += " AND user_id = ?"
        params.append(user_id)
    if job_ids is not None:
        if not job_ids:
            return []
        query += f" AND job_id IN ({', '.join('?' for _ in job_ids)})"
        params.extend(job_ids)
    if since:
        query += " AND created_at >= ?"
        params.append(since)
    query += " ORDER BY created_at DESC"
    with db.connection() as conn:
        rows = conn.execute(query, params).fetchall()
    return [row_to_dict(row) for row in rows]


def set_application_status(db: Database, application_id: str, status: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        conn.execute(
            "UPDATE applications SET status = ?, updated_at = ? WHERE id = ?",
            (status, to_iso(utcnow()), application_id),
        )
        row = conn.execute("SELECT * FROM applications WHERE id = ?", (application_id,)).fetchone()
    return row_to_dict(row)


def count_applications(db: Database, job_ids: Optional[List[str]] = None) -> int:
    query = "SELECT COUNT(*) FROM applications"
    params: List[Any] = []
    if job_ids is not None:
        if not job_ids:
            return 0
        query += f" WHERE job_id IN ({', '.join('?' for _ in job_ids)})"
        params.extend(job_ids)
    with db.connection() as conn:
        return conn.execute(query, params).fetchone()[0]


def count_applications_per_job(db: Database, job_ids: Optional[List[str]] = None) -> Dict[str, int]:
    query = "SELECT job_id, COUNT(*) AS count FROM applications"
    params: List[Any] = []
    if job_ids is not None:
        if not job_ids:
            return {}
        query += f" WHERE job_id IN ({', '.join('?' for _ in job_ids)})"
        params.extend(job_ids)
    query += " GROUP BY job_id ORDER BY count DESC"
    with db.connection() as conn:
        rows = conn.execute(query, params).fetchall()
    return {row['job_id']: row['count'] for row in rows}


# ---------------------------------------------------------------------------
# Interviews
# ---------------------------------------------------------------------------

def find_interview(db: Database, job_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute(
            "SELECT * FROM interviews WHERE job_id = ? AND user_id = ?", (job_id, user_id)
        ).fetchone()
    return row_to_dict(row)


def replace_interview(db: Database, interview: Dict[str, Any]) -> Dict[str, Any]:
    """Drop any interview for the same (job, user) pair, then insert ``interview``.

    The two steps run in separate transactions; a crash between them leaves
    the pair without an interview rather than with two.
    """
    with db.connection() as conn:
        conn.execute(
            "DELETE FROM interviews WHERE job_id = ? AND user_id = ?",
            (interview['job_id'], interview['user_id']),
        )
    now = to_iso(utcnow())
    record = dict(interview)
    record.setdefault('id', new_id())
    record.setdefault('status', 'scheduled')
    record.setdefault('notes', '')
    record['created_at'] = now
    record['updated_at'] = now
    columns = ", ".join(record)
    placeholders = ", ".join("?" for _ in record)
    with db.connection() as conn:
        conn.execute(f"INSERT INTO interviews ({columns}) VALUES ({placeholders})", list(record.values()))
    return record


def get_interview(db: Database, interview_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM interviews WHERE id = ?", (interview_id,)).fetchone()
    return row_to_dict(row)


def get_interviews(db: Database, job_ids: List[str], upcoming_after: Optional[str] = None,
                   limit: Optional[int] = None) -> List[Dict[str, Any]]:
    if not job_ids:
        return []
    query = f"SELECT * FROM interviews WHERE job_id IN ({', '.join('?' for _ in job_ids)})"
    params: List[Any] = list(job_ids)
    if upcoming_after:
        query += " AND date >= ? AND status != 'cancelled'"
        params.append(upcoming_after)
        query += " ORDER BY date ASC"
    else:
        query += " ORDER BY date DESC"
    if limit:
        query += " LIMIT ?"
        params.append(limit)
    with db.connection() as conn:
        rows = conn.execute(query, params).fetchall()
    return [row_to_dict(row) for row in rows]


def set_interview_status(db: Database, interview_id: str, status: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        conn.execute(
            "UPDATE interviews SET status = ?, updated_at = ? WHERE id = ?",
            (status, to_iso(utcnow()), interview_id),
        )
        row = conn.execute("SELECT * FROM interviews WHERE id = ?", (interview_id,)).fetchone()
    return row_to_dict(row)
