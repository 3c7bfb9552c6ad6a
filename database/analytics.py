"""Time-bucketed counts used by the admin and company dashboards."""

import calendar
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any

from database.connection import Database, parse_iso, to_iso, utcnow

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_TIMESTAMPED_TABLES = {'users', 'companies', 'jobs', 'applications'}


def _created_between(db: Database, table: str, start: datetime, end: datetime,
                     job_ids: Optional[List[str]] = None) -> List[datetime]:
    if table not in _TIMESTAMPED_TABLES:
        raise ValueError(f"No creation timestamps for {table}")
    query = f"SELECT created_at FROM {table} WHERE created_at >= ? AND created_at < ?"
    params: List[Any] = [to_iso(start), to_iso(end)]
    if job_ids is not None:
        if not job_ids:
            return []
        query += f" AND job_id IN ({', '.join('?' for _ in job_ids)})"
        params.extend(job_ids)
    with db.connection() as conn:
        rows = conn.execute(query, params).fetchall()
    return [parse_iso(row['created_at']) for row in rows]


def growth_series(db: Database, table: str, interval: str = 'monthly',
                  date: Optional[str] = None, month: Optional[int] = None,
                  year: Optional[int] = None) -> List[Dict[str, int]]:
    """Count records created per bucket.

    ``hourly`` covers one UTC day in 24 buckets, ``yearly`` one year by month,
    anything else one month by day.
    """
    now = utcnow()
    if interval == 'hourly':
        day = parse_iso(date) if date else now
        start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        labels = list(range(24))
        bucket = lambda ts: ts.hour
    elif interval == 'yearly':
        y = year or now.year
        start = datetime(y, 1, 1, tzinfo=timezone.utc)
        end = datetime(y + 1, 1, 1, tzinfo=timezone.utc)
        labels = list(range(1, 13))
        bucket = lambda ts: ts.month
    else:
        y = year or now.year
        m = month or now.month
        start = datetime(y, m, 1, tzinfo=timezone.utc)
        days = calendar.monthrange(y, m)[1]
        end = start + timedelta(days=days)
        labels = list(range(1, days + 1))
        bucket = lambda ts: ts.day

    counts = Counter(bucket(ts) for ts in _created_between(db, table, start, end))
    return [{'interval': label, 'count': counts.get(label, 0)} for label in labels]


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def application_trends(db: Database, job_ids: List[str], interval: str = 'months',
                       now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Application counts for a company's jobs over a rolling window.

    ``hours`` is the last 24 hours, ``years`` the last 5 years, and the
    default is the last 6 months.
    """
    now = now or utcnow()
    if interval == 'years':
        start = datetime(now.year - 4, 1, 1, tzinfo=timezone.utc)
        stamps = _created_between(db, 'applications', start, now + timedelta(seconds=1), job_ids)
        counts = Counter(ts.year for ts in stamps)
        return [{'name': str(y), 'applications': counts.get(y, 0)}
                for y in range(now.year - 4, now.year + 1)]

    if interval == 'hours':
        current = now.replace(minute=0, second=0, microsecond=0)
        start = current - timedelta(hours=23)
        stamps = _created_between(db, 'applications', start, now + timedelta(seconds=1), job_ids)
        counts = Counter(ts.replace(minute=0, second=0, microsecond=0) for ts in stamps)
        series = []
        for offset in range(23, -1, -1):
            slot = current - timedelta(hours=offset)
            series.append({'name': f"{slot.hour}:00", 'applications': counts.get(slot, 0)})
        return series

    first_year, first_month = _shift_month(now.year, now.month, -5)
    start = datetime(first_year, first_month, 1, tzinfo=timezone.utc)
    stamps = _created_between(db, 'applications', start, now + timedelta(seconds=1), job_ids)
    counts = Counter((ts.year, ts.month) for ts in stamps)
    series = []
    for offset in range(5, -1, -1):
        y, m = _shift_month(now.year, now.month, -offset)
        series.append({'name': MONTH_NAMES[m - 1], 'applications': counts.get((y, m), 0)})
    return series


def recent_records(db: Database, table: str, columns: str, limit: int = 5) -> List[Dict[str, Any]]:
    if table not in _TIMESTAMPED_TABLES:
        raise ValueError(f"No creation timestamps for {table}")
    with db.connection() as conn:
        rows = conn.execute(
            f"SELECT {columns} FROM {table} ORDER BY created_at DESC LIMIT ?", (limit,)
        ).fetchall()
    return [dict(row) for row in rows]


def count_active_users(db: Database, days: int = 7) -> int:
    since = to_iso(utcnow() - timedelta(days=days))
    with db.connection() as conn:
        return conn.execute("SELECT COUNT(*) FROM users WHERE last_login >= ?", (since,)).fetchone()[0]
