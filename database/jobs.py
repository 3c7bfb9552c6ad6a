"""Database operations for job postings."""

import logging
from typing import Optional, List, Dict, Any

from database.connection import (
    Database, new_id, utcnow, to_iso, row_to_dict, encode_fields, build_update,
)

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

JOB_JSON_FIELDS = ('salary', 'skills', 'benefits', 'responsibilities', 'qualifications')
JOB_BOOL_FIELDS = ('remote_option',)
JOB_COLUMNS = {
    'job_title', 'description', 'job_type', 'location', 'industry',
    'remote_option', 'salary', 'skills', 'experience_level',
    'application_deadline', 'contact_email', 'benefits', 'responsibilities',
    'qualifications', 'status',
}


def _job(row) -> Optional[Dict[str, Any]]:
    return row_to_dict(row, json_fields=JOB_JSON_FIELDS, bool_fields=JOB_BOOL_FIELDS)


def add_job(db: Database, company_id: str, job_data: Dict[str, Any]) -> Dict[str, Any]:
    """Add a new job posting owned by ``company_id`` and return it."""
    now = to_iso(utcnow())
    data = {k: v for k, v in job_data.items() if k in JOB_COLUMNS}
    data.setdefault('status', 'Open')
    data = encode_fields(data, json_fields=JOB_JSON_FIELDS, bool_fields=JOB_BOOL_FIELDS)
    data.update({
        'id': new_id(),
        'company_id': company_id,
        'created_at': job_data.get('created_at') or now,
        'updated_at': now,
    })
    columns = ", ".join(data)
    placeholders = ", ".join("?" for _ in data)
    with db.connection() as conn:
        conn.execute(f"INSERT INTO jobs ({columns}) VALUES ({placeholders})", list(data.values()))
        row = conn.execute("SELECT * FROM jobs WHERE id = ?", (data['id'],)).fetchone()
    logger.info(f"Job {data['id']} created for company {company_id}")
    return _job(row)


def get_job(db: Database, job_id: str) -> Optional[Dict[str, Any]]:
    """Get a job posting by ID."""
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
    return _job(row)


def get_jobs_by_ids(db: Database, job_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    if not job_ids:
        return {}
    unique_ids = list(dict.fromkeys(job_ids))
    placeholders = ", ".join("?" for _ in unique_ids)
    with db.connection() as conn:
        rows = conn.execute(f"SELECT * FROM jobs WHERE id IN ({placeholders})", unique_ids).fetchall()
    return {row['id']: _job(row) for row in rows}


def get_all_jobs(
    db: Database,
    status: Optional[str] = None,
    company_id: Optional[str] = None,
    order_by: str = "created_at DESC"
) -> List[Dict[str, Any]]:
    """Get job postings, newest first unless ``order_by`` says otherwise."""
    query = "SELECT * FROM jobs WHERE 1=1"
    params: List[Any] = []
    if status:
        query += " AND status = ?"
        params.append(status)
    if company_id:
        query += " AND company_id = ?"
        params.append(company_id)
    query += f" ORDER BY {order_by}"
    with db.connection() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_job(row) for row in rows]


def update_job(db: Database, job_id: str, job_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Update an existing job posting and return the fresh record."""
    data = encode_fields(job_data, json_fields=JOB_JSON_FIELDS, bool_fields=JOB_BOOL_FIELDS)
    data['updated_at'] = to_iso(utcnow())
    sql, params = build_update('jobs', job_id, data, JOB_COLUMNS | {'updated_at'})
    with db.connection() as conn:
        if sql:
            conn.execute(sql, params)
        row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
    return _job(row)


def delete_job(db: Database, job_id: str) -> Optional[Dict[str, Any]]:
    """Delete a job together with its applications, interviews and bookmarks."""
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
        if row is None:
            return None
        for table in ('applications', 'interviews', 'saved_jobs', 'notifications'):
            conn.execute(f"DELETE FROM {table} WHERE job_id = ?", (job_id,))
        conn.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
    logger.info(f"Deleted job {job_id}")
    return _job(row)


def count_jobs(db: Database, company_id: Optional[str] = None, status: Optional[str] = None) -> int:
    query = "SELECT COUNT(*) FROM jobs WHERE 1=1"
    params: List[Any] = []
    if company_id:
        query += " AND company_id = ?"
        params.append(company_id)
    if status:
        query += " AND status = ?"
        params.append(status)
    with db.connection() as conn:
        return conn.execute(query, params).fetchone()[0]


def count_jobs_by_status(db: Database) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT status, COUNT(*) AS count FROM jobs GROUP BY status ORDER BY status"
        ).fetchall()
    return [{'status': row['status'], 'count': row['count']} for row in rows]


def count_jobs_by_company(db: Database, limit: int = 5) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT company_id, COUNT(*) AS job_count FROM jobs "
            "GROUP BY company_id ORDER BY job_count DESC LIMIT ?", (limit,)
        ).fetchall()
    return [dict(row) for row in rows]
