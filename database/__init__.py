"""Database module for the job board record store."""

from .connection import (
    Database,
    init_database,
    new_id,
    is_valid_id,
    utcnow,
    to_iso,
    parse_iso,
)
from .accounts import (
    create_account,
    get_account,
    get_account_by_email,
    get_accounts,
    update_account,
    find_account_by_token,
    count_accounts,
    list_job_seekers,
    list_accounts,
    set_all_companies_active,
    delete_user,
    delete_company,
    create_user_profile,
    get_user_profile,
    get_user_profiles,
    get_all_user_profiles,
    update_user_profile,
    replace_experiences,
    replace_educations,
    get_experiences,
    get_educations,
    add_certificate,
    get_certificates,
    delete_certificate,
    upsert_skills,
    get_skill_map,
    get_skill_names,
    create_company_profile,
    get_company_profile,
    get_company_profile_by_id,
    get_company_profiles,
    get_oldest_company_profiles,
    update_company_profile,
)
from .jobs import (
    add_job,
    get_job,
    get_jobs_by_ids,
    get_all_jobs,
    update_job,
    delete_job,
    count_jobs,
    count_jobs_by_status,
    count_jobs_by_company,
)
from .applications import (
    add_application,
    get_application,
    get_applications,
    set_application_status,
    count_applications,
    count_applications_per_job,
    find_interview,
    replace_interview,
    get_interview,
    get_interviews,
    set_interview_status,
)
from .activity import (
    add_notifications,
    get_notifications,
    mark_notification_read,
    delete_notifications,
    save_job,
    remove_saved_job,
    get_saved_jobs,
    add_search,
    get_search_queries,
    log_admin_action,
    get_audit_log,
)
from .sessions import (
    create_session,
    get_session,
    destroy_session,
    purge_expired_sessions,
)
from .analytics import (
    growth_series,
    application_trends,
    recent_records,
    count_active_users,
)

__all__ = [
    "Database", "init_database", "new_id", "is_valid_id", "utcnow", "to_iso", "parse_iso",
    "create_account", "get_account", "get_account_by_email", "get_accounts", "update_account",
    "find_account_by_token", "count_accounts", "list_job_seekers", "list_accounts",
    "set_all_companies_active", "delete_user", "delete_company",
    "create_user_profile", "get_user_profile", "get_user_profiles", "get_all_user_profiles",
    "update_user_profile", "replace_experiences", "replace_educations", "get_experiences",
    "get_educations", "add_certificate", "get_certificates", "delete_certificate",
    "upsert_skills", "get_skill_map", "get_skill_names",
    "create_company_profile", "get_company_profile", "get_company_profile_by_id",
    "get_company_profiles", "get_oldest_company_profiles", "update_company_profile",
    "add_job", "get_job", "get_jobs_by_ids", "get_all_jobs", "update_job", "delete_job",
    "count_jobs", "count_jobs_by_status", "count_jobs_by_company",
    "add_application", "get_application", "get_applications", "set_application_status",
    "count_applications", "count_applications_per_job",
    "find_interview", "replace_interview", "get_interview", "get_interviews", "set_interview_status",
    "add_notifications", "get_notifications", "mark_notification_read", "delete_notifications",
    "save_job", "remove_saved_job", "get_saved_jobs", "add_search", "get_search_queries",
    "log_admin_action", "get_audit_log",
    "create_session", "get_session", "destroy_session", "purge_expired_sessions",
    "growth_series", "application_trends", "recent_records", "count_active_users",
]
