"""Database schema definitions for the job board."""

# Accounts
USERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
    password_hash TEXT,
    google_id TEXT,
    auth_method TEXT DEFAULT 'local',
    role TEXT DEFAULT 'jobSeeker',
    is_verified INTEGER DEFAULT 0,
    is_active INTEGER DEFAULT 1,
    is_admin INTEGER DEFAULT 0,
    verification_token TEXT,
    verification_token_expires TIMESTAMP,
    last_login TIMESTAMP,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);
"""

COMPANIES_SCHEMA = """
CREATE TABLE IF NOT EXISTS companies (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
    password_hash TEXT,
    google_id TEXT,
    auth_method TEXT DEFAULT 'local',
    is_verified INTEGER DEFAULT 0,
    is_active INTEGER DEFAULT 1,
    verification_token TEXT,
    verification_token_expires TIMESTAMP,
    reset_password_token TEXT,
    reset_password_expires TIMESTAMP,
    failed_login_attempts INTEGER DEFAULT 0,
    lock_until TIMESTAMP,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);
"""

# Profiles
USER_PROFILES_SCHEMA = """
CREATE TABLE IF NOT EXISTS user_profiles (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    profile_image TEXT DEFAULT '',
    title TEXT DEFAULT '',
    location TEXT DEFAULT '',
    phone TEXT DEFAULT '',
    about TEXT DEFAULT '',
    skills TEXT DEFAULT '[]',
    social_links TEXT DEFAULT '{}',
    profile_views INTEGER DEFAULT 0,
    interactions INTEGER DEFAULT 0,
    views_over_time TEXT DEFAULT '[]',
    job_match_rank INTEGER DEFAULT 0,
    resume TEXT DEFAULT '',
    resume_name TEXT DEFAULT '',
    video_introduction TEXT DEFAULT '',
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS experiences (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    company TEXT,
    position TEXT,
    start_date TEXT,
    end_date TEXT,
    description TEXT,
    created_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS educations (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    institution TEXT,
    degree TEXT,
    year TEXT,
    created_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS certificates (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    file_url TEXT NOT NULL,
    uploaded_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS skills (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE COLLATE NOCASE,
    created_at TIMESTAMP
);
"""

COMPANY_PROFILES_SCHEMA = """
CREATE TABLE IF NOT EXISTS company_profiles (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL UNIQUE,
    company_name TEXT NOT NULL,
    tagline TEXT DEFAULT '',
    phone TEXT DEFAULT '',
    company_address TEXT DEFAULT '',
    website TEXT DEFAULT '',
    logo TEXT DEFAULT '',
    description TEXT DEFAULT '',
    industry TEXT DEFAULT '',
    headquarters TEXT DEFAULT '',
    company_type TEXT DEFAULT '',
    company_size TEXT DEFAULT '',
    founded TEXT DEFAULT '',
    specialties TEXT DEFAULT '[]',
    mission TEXT DEFAULT '',
    vision TEXT DEFAULT '',
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);
"""

# Jobs and hiring pipeline
JOBS_SCHEMA = """
CREATE TABLE IF NOT EXISTS jobs (
    id TEXT PRIMARY KEY,
    company_id TEXT NOT NULL,
    job_title TEXT NOT NULL,
    description TEXT NOT NULL,
    job_type TEXT NOT NULL,
    location TEXT NOT NULL,
    industry TEXT DEFAULT '',
    remote_option INTEGER DEFAULT 0,
    salary TEXT,
    skills TEXT DEFAULT '[]',
    experience_level TEXT,
    application_deadline TIMESTAMP,
    contact_email TEXT,
    benefits TEXT DEFAULT '[]',
    responsibilities TEXT DEFAULT '[]',
    qualifications TEXT DEFAULT '[]',
    status TEXT DEFAULT 'Open',
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS applications (
    id TEXT PRIMARY KEY,
    job_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    cover_letter TEXT DEFAULT '',
    resume TEXT DEFAULT '',
    status TEXT DEFAULT 'pending',
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS interviews (
    id TEXT PRIMARY KEY,
    job_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    application_id TEXT NOT NULL,
    date TIMESTAMP NOT NULL,
    room_id TEXT NOT NULL UNIQUE,
    notes TEXT DEFAULT '',
    status TEXT DEFAULT 'scheduled',
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);
"""

# User activity and admin trail
ACTIVITY_SCHEMA = """
CREATE TABLE IF NOT EXISTS notifications (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    job_id TEXT,
    message TEXT NOT NULL,
    is_read INTEGER DEFAULT 0,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS saved_jobs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    job_id TEXT NOT NULL,
    created_at TIMESTAMP,
    UNIQUE (user_id, job_id)
);

CREATE TABLE IF NOT EXISTS searches (
    id TEXT PRIMARY KEY,
    query TEXT NOT NULL,
    user_id TEXT,
    created_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS audit_logs (
    id TEXT PRIMARY KEY,
    action TEXT NOT NULL,
    performed_by TEXT,
    details TEXT DEFAULT '{}',
    timestamp TIMESTAMP
);
"""

SESSION_DOMAINS = ("user", "company", "admin")

SESSIONS_SCHEMA = "\n".join(
    f"""
CREATE TABLE IF NOT EXISTS {domain}_sessions (
    sid TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    expires_at TIMESTAMP NOT NULL,
    created_at TIMESTAMP
);
"""
    for domain in SESSION_DOMAINS
)

ALL_SCHEMAS = [
    USERS_SCHEMA,
    COMPANIES_SCHEMA,
    USER_PROFILES_SCHEMA,
    COMPANY_PROFILES_SCHEMA,
    JOBS_SCHEMA,
    ACTIVITY_SCHEMA,
    SESSIONS_SCHEMA,
]

# Index for faster queries
CREATE_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_jobs_company ON jobs(company_id);
CREATE INDEX IF NOT EXISTS idx_jobs_created ON jobs(created_at DESC);
CREATE INDEX IF NOT EXISTS idx_applications_job ON applications(job_id);
CREATE INDEX IF NOT EXISTS idx_applications_user ON applications(user_id);
CREATE INDEX IF NOT EXISTS idx_interviews_pair ON interviews(job_id, user_id);
CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, created_at DESC);
CREATE INDEX IF NOT EXISTS idx_searches_user ON searches(user_id);
CREATE INDEX IF NOT EXISTS idx_users_created ON users(created_at);
"""
