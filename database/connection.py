"""Database handle, connection lifecycle and row helpers."""

import json
import re
import sqlite3
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from fasteners import InterProcessLock

from database.models import ALL_SCHEMAS, CREATE_INDEXES

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')


class Database:
    """A sqlite file plus the inter-process lock guarding writes to it."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.lock_path = self.path.with_suffix('.lock')

    def __repr__(self) -> str:
        return f"Database({str(self.path)!r})"

    @contextmanager
    def connection(self):
        """Context manager for database connections with WAL and locking."""
        conn = None
        lock = InterProcessLock(str(self.lock_path))
        lock.acquire()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            conn = sqlite3.connect(str(self.path), timeout=30.0, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute('PRAGMA journal_mode=WAL;')
            conn.execute('PRAGMA busy_timeout = 30000;')
            conn.execute('BEGIN IMMEDIATE;')

            yield conn
            conn.commit()
        except Exception as e:
            if conn:
                conn.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            if conn:
                conn.close()
            lock.release()


def init_database(db: Database):
    """Initialize the database with tables and indexes."""
    try:
        with db.connection() as conn:
            for schema in ALL_SCHEMAS:
                conn.executescript(schema)
            conn.executescript(CREATE_INDEXES)
            logger.info(f"Database initialized at {db.path}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: Any) -> bool:
    """True when ``value`` has the shape of a record id."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime as a sortable UTC ISO-8601 string."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='microseconds')


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def row_to_dict(row: Optional[sqlite3.Row],
                json_fields: Iterable[str] = (),
                bool_fields: Iterable[str] = ()) -> Optional[Dict[str, Any]]:
    """Convert a row into a plain dict, decoding JSON and boolean columns."""
    if row is None:
        return None
    record = dict(row)
    for field in json_fields:
        raw = record.get(field)
        if isinstance(raw, str):
            try:
                record[field] = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning(f"Malformed JSON in column {field}")
                record[field] = None
    for field in bool_fields:
        if field in record and record[field] is not None:
            record[field] = bool(record[field])
    return record


def encode_fields(data: Dict[str, Any], json_fields: Iterable[str] = (),
                  bool_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """Inverse of ``row_to_dict`` for values about to be written."""
    encoded = dict(data)
    for field in json_fields:
        if field in encoded and encoded[field] is not None and not isinstance(encoded[field], str):
            encoded[field] = json.dumps(encoded[field])
    for field in bool_fields:
        if field in encoded and encoded[field] is not None:
            encoded[field] = 1 if encoded[field] else 0
    for key, value in list(encoded.items()):
        if isinstance(value, datetime):
            encoded[key] = to_iso(value)
    return encoded


def build_update(table: str, record_id: str, fields: Dict[str, Any],
                 allowed: Iterable[str]):
    """Build an UPDATE statement restricted to ``allowed`` columns.

    Returns ``(sql, params)`` or ``(None, None)`` when nothing is left to set.
    """
    allowed = set(allowed)
    filtered = {k: v for k, v in fields.items() if k in allowed}
    if not filtered:
        return None, None
    assignments = ", ".join(f"{column} = ?" for column in filtered)
    sql = f"UPDATE {table} SET {assignments} WHERE id = ?"
    return sql, list(filtered.values()) + [record_id]
