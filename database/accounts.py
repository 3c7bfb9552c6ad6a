"""Storage for accounts (users and companies) and their profiles."""

import logging
from typing import Optional, List, Dict, Any, Tuple

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

ACCOUNT_TABLES = {'user': 'users', 'company': 'companies'}

_ACCOUNT_BOOL_FIELDS = ('is_verified', 'is_active', 'is_admin')

_ACCOUNT_COLUMNS = {
    'user': {
        'email', 'password_hash', 'google_id', 'auth_method', 'role',
        'is_verified', 'is_active', 'is_admin', 'verification_token',
        'verification_token_expires', 'last_login',
    },
    'company': {
        'email', 'password_hash', 'google_id', 'auth_method', 'is_verified',
        'is_active', 'verification_token', 'verification_token_expires',
        'reset_password_token', 'reset_password_expires',
        'failed_login_attempts', 'lock_until',
    },
}

_USER_PROFILE_JSON = ('skills', 'social_links', 'views_over_time')
_USER_PROFILE_COLUMNS = {
    'name', 'profile_image', 'title', 'location', 'phone', 'about', 'skills',
    'social_links', 'profile_views', 'interactions', 'views_over_time',
    'job_match_rank', 'resume', 'resume_name', 'video_introduction',
}

_COMPANY_PROFILE_JSON = ('specialties',)
_COMPANY_PROFILE_COLUMNS = {
    'company_name', 'tagline', 'phone', 'company_address', 'website', 'logo',
    'description', 'industry', 'headquarters', 'company_type', 'company_size',
    'founded', 'specialties', 'mission', 'vision',
}


def _table(kind: str) -> str:
    try:
        return ACCOUNT_TABLES[kind]
    except KeyError:
        raise ValueError(f"Unknown account kind: {kind}")


def _account(row) -> Optional[Dict[str, Any]]:
    return row_to_dict(row, bool_fields=_ACCOUNT_BOOL_FIELDS)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def create_account(db: Database, kind: str, email: str, **fields: Any) -> Dict[str, Any]:
    """Insert a user or company account and return it."""
    now = to_iso(utcnow())
    data = {k: v for k, v in fields.items() if k in _ACCOUNT_COLUMNS[kind]}
    data['email'] = email.strip().lower()
    data = encode_fields(data, bool_fields=_ACCOUNT_BOOL_FIELDS)
    data.update({'id': new_id(), 'created_at': now, 'updated_at': now})

    columns = ", ".join(data)
    placeholders = ", ".join("?" for _ in data)
    with db.connection() as conn:
        conn.execute(
            f"INSERT INTO {_table(kind)} ({columns}) VALUES ({placeholders})",
            list(data.values()),
        )
        row = conn.execute(f"SELECT * FROM {_table(kind)} WHERE id = ?", (data['id'],)).fetchone()
    return _account(row)


def get_account(db: Database, kind: str, account_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute(f"SELECT * FROM {_table(kind)} WHERE id = ?", (account_id,)).fetchone()
    return _account(row)


def get_account_by_email(db: Database, kind: str, email: str) -> Optional[Dict[str, Any]]:
    """Case-insensitive lookup by email."""
    if not email:
        return None
    with db.connection() as conn:
        row = conn.execute(
            f"SELECT * FROM {_table(kind)} WHERE email = ? COLLATE NOCASE",
            (email.strip().lower(),),
        ).fetchone()
    return _account(row)


def get_accounts(db: Database, kind: str, account_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    """Fetch several accounts keyed by id."""
    if not account_ids:
        return {}
    placeholders = ", ".join("?" for _ in account_ids)
    with db.connection() as conn:
        rows = conn.execute(
            f"SELECT * FROM {_table(kind)} WHERE id IN ({placeholders})", list(account_ids)
        ).fetchall()
    return {row['id']: _account(row) for row in rows}


def update_account(db: Database, kind: str, account_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Update whitelisted account columns and return the fresh record."""
    data = encode_fields(fields, bool_fields=_ACCOUNT_BOOL_FIELDS)
    if 'email' in data and data['email']:
        data['email'] = data['email'].strip().lower()
    data['updated_at'] = to_iso(utcnow())
    sql, params = build_update(_table(kind), account_id, data, _ACCOUNT_COLUMNS[kind] | {'updated_at'})
    with db.connection() as conn:
        if sql:
            conn.execute(sql, params)
        row = conn.execute(f"SELECT * FROM {_table(kind)} WHERE id = ?", (account_id,)).fetchone()
    return _account(row)


def find_account_by_token(db: Database, kind: str, email: str, token: str,
                          token_field: str = 'verification_token') -> Optional[Dict[str, Any]]:
    """Look up the account holding ``token`` in ``token_field`` for ``email``."""
    expires_field = {
        'verification_token': 'verification_token_expires',
        'reset_password_token': 'reset_password_expires',
    }[token_field]
    with db.connection() as conn:
        row = conn.execute(
            f"SELECT * FROM {_table(kind)} WHERE email = ? COLLATE NOCASE "
            f"AND {token_field} = ? AND {expires_field} > ?",
            (email.strip().lower(), token, to_iso(utcnow())),
        ).fetchone()
    return _account(row)


def count_accounts(db: Database, kind: str, since: Optional[str] = None) -> int:
    sql = f"SELECT COUNT(*) FROM {_table(kind)}"
    params: List[Any] = []
    if since:
        sql += " WHERE created_at >= ?"
        params.append(since)
    with db.connection() as conn:
        return conn.execute(sql, params).fetchone()[0]


def list_job_seekers(db: Database, search: Optional[str] = None, status: Optional[str] = None,
                     sort_by: str = 'created_at', descending: bool = True,
                     page: int = 1, limit: int = 0) -> Tuple[List[Dict[str, Any]], int]:
    """Admin listing of job seeker accounts with filtering and paging.

    ``limit`` of 0 or less returns every match.
    """
    clauses = ["role = 'jobSeeker'"]
    params: List[Any] = []
    if search:
        like = f"%{search.lower()}%"
        clauses.append("(LOWER(email) LIKE ? OR LOWER(role) LIKE ?)")
        params.extend([like, like])
    if status:
        if status.lower() == 'active':
            clauses.append("is_active = 1")
        elif status.lower() == 'deactivated':
            clauses.append("is_active = 0")

    sortable = {'created_at', 'email', 'last_login', 'is_active', 'updated_at'}
    order_column = sort_by if sort_by in sortable else 'created_at'
    where = " AND ".join(clauses)
    sql = f"SELECT * FROM users WHERE {where} ORDER BY {order_column} {'DESC' if descending else 'ASC'}"
    query_params = list(params)
    if limit > 0:
        sql += " LIMIT ? OFFSET ?"
        query_params.extend([limit, (max(page, 1) - 1) * limit])

    with db.connection() as conn:
        rows = conn.execute(sql, query_params).fetchall()
        total = conn.execute(f"SELECT COUNT(*) FROM users WHERE {where}", params).fetchone()[0]
    return [_account(row) for row in rows], total


def list_accounts(db: Database, kind: str, page: int = 1, limit: int = 0) -> Tuple[List[Dict[str, Any]], int]:
    sql = f"SELECT * FROM {_table(kind)} ORDER BY created_at ASC"
    params: List[Any] = []
    if limit > 0:
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit, (max(page, 1) - 1) * limit])
    with db.connection() as conn:
        rows = conn.execute(sql, params).fetchall()
        total = conn.execute(f"SELECT COUNT(*) FROM {_table(kind)}").fetchone()[0]
    return [_account(row) for row in rows], total


def set_all_companies_active(db: Database) -> int:
    with db.connection() as conn:
        cursor = conn.execute(
            "UPDATE companies SET is_active = 1, updated_at = ? WHERE is_active = 0",
            (to_iso(utcnow()),),
        )
        return cursor.rowcount


def delete_user(db: Database, user_id: str) -> Optional[Dict[str, Any]]:
    """Delete a user together with everything the user owns."""
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        for table in ('user_profiles', 'experiences', 'educations', 'certificates',
                      'applications', 'notifications', 'saved_jobs', 'searches', 'interviews'):
            conn.execute(f"DELETE FROM {table} WHERE user_id = ?", (user_id,))
        conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
    logger.info(f"Deleted user {user_id} and owned records")
    return _account(row)


def delete_company(db: Database, company_id: str) -> Optional[Dict[str, Any]]:
    """Delete a company, its profile, its jobs and their pipelines."""
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM companies WHERE id = ?", (company_id,)).fetchone()
        if row is None:
            return None
        job_ids = [r['id'] for r in conn.execute(
            "SELECT id FROM jobs WHERE company_id = ?", (company_id,)
        ).fetchall()]
        if job_ids:
            placeholders = ", ".join("?" for _ in job_ids)
            for table in ('applications', 'interviews', 'saved_jobs', 'notifications'):
                conn.execute(f"DELETE FROM {table} WHERE job_id IN ({placeholders})", job_ids)
        conn.execute("DELETE FROM jobs WHERE company_id = ?", (company_id,))
        conn.execute("DELETE FROM company_profiles WHERE company_id = ?", (company_id,))
        conn.execute("DELETE FROM companies WHERE id = ?", (company_id,))
    logger.info(f"Deleted company {company_id} with {len(job_ids)} jobs")
    return _account(row)


# ---------------------------------------------------------------------------
# User profiles
# ---------------------------------------------------------------------------

def _user_profile(row) -> Optional[Dict[str, Any]]:
    return row_to_dict(row, json_fields=_USER_PROFILE_JSON)


def create_user_profile(db: Database, user_id: str, name: str, **fields: Any) -> Dict[str, Any]:
    now = to_iso(utcnow())
    data = {k: v for k, v in fields.items() if k in _USER_PROFILE_COLUMNS}
    data = encode_fields(data, json_fields=_USER_PROFILE_JSON)
    data.update({'id': new_id(), 'user_id': user_id, 'name': name,
                 'created_at': now, 'updated_at': now})
    columns = ", ".join(data)
    placeholders = ", ".join("?" for _ in data)
    with db.connection() as conn:
        conn.execute(f"INSERT INTO user_profiles ({columns}) VALUES ({placeholders})", list(data.values()))
        row = conn.execute("SELECT * FROM user_profiles WHERE id = ?", (data['id'],)).fetchone()
    return _user_profile(row)


def get_user_profile(db: Database, user_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)).fetchone()
    return _user_profile(row)


def get_user_profiles(db: Database, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
    if not user_ids:
        return {}
    placeholders = ", ".join("?" for _ in user_ids)
    with db.connection() as conn:
        rows = conn.execute(
            f"SELECT * FROM user_profiles WHERE user_id IN ({placeholders})", list(user_ids)
        ).fetchall()
    return {row['user_id']: _user_profile(row) for row in rows}


def get_all_user_profiles(db: Database) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute("SELECT * FROM user_profiles").fetchall()
    return [_user_profile(row) for row in rows]


def update_user_profile(db: Database, user_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    data = encode_fields(fields, json_fields=_USER_PROFILE_JSON)
    data['updated_at'] = to_iso(utcnow())
    allowed = _USER_PROFILE_COLUMNS | {'updated_at'}
    filtered = {k: v for k, v in data.items() if k in allowed}
    assignments = ", ".join(f"{column} = ?" for column in filtered)
    with db.connection() as conn:
        conn.execute(
            f"UPDATE user_profiles SET {assignments} WHERE user_id = ?",
            list(filtered.values()) + [user_id],
        )
        row = conn.execute("SELECT * FROM user_profiles WHERE user_id = ?", (user_id,)).fetchone()
    return _user_profile(row)


def replace_experiences(db: Database, user_id: str, entries: List[Dict[str, Any]]) -> None:
    now = to_iso(utcnow())
    with db.connection() as conn:
        conn.execute("DELETE FROM experiences WHERE user_id = ?", (user_id,))
        for entry in entries:
            conn.execute(
                "INSERT INTO experiences (id, user_id, company, position, start_date, end_date, description, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (new_id(), user_id, entry.get('company'), entry.get('position'),
                 entry.get('start'), entry.get('end'), entry.get('description'), now),
            )


def replace_educations(db: Database, user_id: str, entries: List[Dict[str, Any]]) -> None:
    now = to_iso(utcnow())
    with db.connection() as conn:
        conn.execute("DELETE FROM educations WHERE user_id = ?", (user_id,))
        for entry in entries:
            conn.execute(
                "INSERT INTO educations (id, user_id, institution, degree, year, created_at) VALUES (?, ?, ?, ?, ?, ?)",
                (new_id(), user_id, entry.get('institution'), entry.get('degree'), entry.get('year'), now),
            )


def get_experiences(db: Database, user_id: str) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM experiences WHERE user_id = ? ORDER BY created_at", (user_id,)
        ).fetchall()
    return [
        {'id': r['id'], 'company': r['company'], 'position': r['position'],
         'start': r['start_date'], 'end': r['end_date'], 'description': r['description']}
        for r in rows
    ]


def get_educations(db: Database, user_id: str) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM educations WHERE user_id = ? ORDER BY created_at", (user_id,)
        ).fetchall()
    return [row_to_dict(r) for r in rows]


def add_certificate(db: Database, user_id: str, title: str, file_url: str) -> Dict[str, Any]:
    record = {'id': new_id(), 'user_id': user_id, 'title': title,
              'file_url': file_url, 'uploaded_at': to_iso(utcnow())}
    with db.connection() as conn:
        conn.execute(
            "INSERT INTO certificates (id, user_id, title, file_url, uploaded_at) VALUES (?, ?, ?, ?, ?)",
            tuple(record.values()),
        )
    return record


def get_certificates(db: Database, user_id: str) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM certificates WHERE user_id = ? ORDER BY uploaded_at DESC", (user_id,)
        ).fetchall()
    return [row_to_dict(r) for r in rows]


def delete_certificate(db: Database, user_id: str, certificate_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute(
            "SELECT * FROM certificates WHERE id = ? AND user_id = ?", (certificate_id, user_id)
        ).fetchone()
        if row is not None:
            conn.execute("DELETE FROM certificates WHERE id = ?", (certificate_id,))
    return row_to_dict(row)


# ---------------------------------------------------------------------------
# Skill vocabulary
# ---------------------------------------------------------------------------

def upsert_skills(db: Database, names: List[str]) -> List[str]:
    """Return skill ids for ``names``, creating unknown skills on the way."""
    ids: List[str] = []
    with db.connection() as conn:
        for name in names:
            name = name.strip()
            if not name:
                continue
            row = conn.execute("SELECT id FROM skills WHERE name = ? COLLATE NOCASE", (name,)).fetchone()
            if row is None:
                skill_id = new_id()
                conn.execute(
                    "INSERT INTO skills (id, name, created_at) VALUES (?, ?, ?)",
                    (skill_id, name, to_iso(utcnow())),
                )
            else:
                skill_id = row['id']
            if skill_id not in ids:
                ids.append(skill_id)
    return ids


def get_skill_map(db: Database, skill_ids: List[str]) -> Dict[str, str]:
    """Skill names keyed by id."""
    if not skill_ids:
        return {}
    unique_ids = list(dict.fromkeys(skill_ids))
    placeholders = ", ".join("?" for _ in unique_ids)
    with db.connection() as conn:
        rows = conn.execute(
            f"SELECT id, name FROM skills WHERE id IN ({placeholders})", unique_ids
        ).fetchall()
    return {row['id']: row['name'] for row in rows}


def get_skill_names(db: Database, skill_ids: List[str]) -> List[str]:
    """Resolve skill ids to names, keeping the profile's ordering."""
    names = get_skill_map(db, skill_ids)
    return [names[skill_id] for skill_id in skill_ids or [] if skill_id in names]


# ---------------------------------------------------------------------------
# Company profiles
# ---------------------------------------------------------------------------

def _company_profile(row) -> Optional[Dict[str, Any]]:
    return row_to_dict(row, json_fields=_COMPANY_PROFILE_JSON)


def create_company_profile(db: Database, company_id: str, company_name: str, **fields: Any) -> Dict[str, Any]:
    now = to_iso(utcnow())
    data = {k: v for k, v in fields.items() if k in _COMPANY_PROFILE_COLUMNS}
    data = encode_fields(data, json_fields=_COMPANY_PROFILE_JSON)
    data.update({'id': new_id(), 'company_id': company_id, 'company_name': company_name,
                 'created_at': now, 'updated_at': now})
    columns = ", ".join(data)
    placeholders = ", ".join("?" for _ in data)
    with db.connection() as conn:
        conn.execute(f"INSERT INTO company_profiles ({columns}) VALUES ({placeholders})", list(data.values()))
        row = conn.execute("SELECT * FROM company_profiles WHERE id = ?", (data['id'],)).fetchone()
    return _company_profile(row)


def get_company_profile(db: Database, company_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM company_profiles WHERE company_id = ?", (company_id,)).fetchone()
    return _company_profile(row)


def get_company_profile_by_id(db: Database, profile_id: str) -> Optional[Dict[str, Any]]:
    with db.connection() as conn:
        row = conn.execute("SELECT * FROM company_profiles WHERE id = ?", (profile_id,)).fetchone()
    return _company_profile(row)


def get_company_profiles(db: Database, company_ids: Optional[List[str]] = None) -> Dict[str, Dict[str, Any]]:
    """Profiles keyed by company id; every profile when ``company_ids`` is None."""
    with db.connection() as conn:
        if company_ids is None:
            rows = conn.execute("SELECT * FROM company_profiles ORDER BY created_at").fetchall()
        elif not company_ids:
            return {}
        else:
            placeholders = ", ".join("?" for _ in company_ids)
            rows = conn.execute(
                f"SELECT * FROM company_profiles WHERE company_id IN ({placeholders})", list(company_ids)
            ).fetchall()
    return {row['company_id']: _company_profile(row) for row in rows}


def get_oldest_company_profiles(db: Database, limit: int = 4) -> List[Dict[str, Any]]:
    with db.connection() as conn:
        rows = conn.execute(
            "SELECT * FROM company_profiles ORDER BY created_at ASC LIMIT ?", (limit,)
        ).fetchall()
    return [_company_profile(row) for row in rows]


def update_company_profile(db: Database, company_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    data = encode_fields(fields, json_fields=_COMPANY_PROFILE_JSON)
    data['updated_at'] = to_iso(utcnow())
    allowed = _COMPANY_PROFILE_COLUMNS | {'updated_at'}
    filtered = {k: v for k, v in data.items() if k in allowed}
    assignments = ", ".join(f"{column} = ?" for column in filtered)
    with db.connection() as conn:
        conn.execute(
            f"UPDATE company_profiles SET {assignments} WHERE company_id = ?",
            list(filtered.values()) + [company_id],
        )
        row = conn.execute("SELECT * FROM company_profiles WHERE company_id = ?", (company_id,)).fetchone()
    return _company_profile(row)
