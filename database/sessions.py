"""Server-side session records, one table per session domain."""

import json
import logging
from datetime import datetime
from typing import Optional, Dict, Any

from database.connection import Database, utcnow, to_iso
from database.models import SESSION_DOMAINS

logger = logging.getLogger(__name__)


def _table(domain: str) -> str:
    if domain not in SESSION_DOMAINS:
        raise ValueError(f"Unknown session domain: {domain}")
    return f"{domain}_sessions"


def create_session(db: Database, domain: str, sid: str, payload: Dict[str, Any],
                   expires_at: datetime) -> None:
    with db.connection() as conn:
        conn.execute(
            f"INSERT INTO {_table(domain)} (sid, payload, expires_at, created_at) VALUES (?, ?, ?, ?)",
            (sid, json.dumps(payload), to_iso(expires_at), to_iso(utcnow())),
        )


def get_session(db: Database, domain: str, sid: str) -> Optional[Dict[str, Any]]:
    """Return the payload of a live session; expired records are purged on read."""
    now = to_iso(utcnow())
    with db.connection() as conn:
        row = conn.execute(
            f"SELECT payload, expires_at FROM {_table(domain)} WHERE sid = ?", (sid,)
        ).fetchone()
        if row is None:
            return None
        if row['expires_at'] <= now:
            conn.execute(f"DELETE FROM {_table(domain)} WHERE sid = ?", (sid,))
            return None
    return json.loads(row['payload'])


def destroy_session(db: Database, domain: str, sid: str) -> bool:
    with db.connection() as conn:
        cursor = conn.execute(f"DELETE FROM {_table(domain)} WHERE sid = ?", (sid,))
        return cursor.rowcount > 0


def purge_expired_sessions(db: Database) -> int:
    now = to_iso(utcnow())
    removed = 0
    with db.connection() as conn:
        for domain in SESSION_DOMAINS:
            removed += conn.execute(
                f"DELETE FROM {_table(domain)} WHERE expires_at <= ?", (now,)
            ).rowcount
    if removed:
        logger.info(f"Purged {removed} expired sessions")
    return removed
