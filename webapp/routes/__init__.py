"""Route blueprints, grouped by the session domain they belong to."""

from .activity import ai_bp, notifications_bp, searches_bp
from .admin import admin_auth_bp, admin_bp
from .applications import applications_bp, company_applications_bp
from .auth import company_auth_bp, user_auth_bp
from .interviews import interviews_bp
from .jobs import jobs_bp
from .profiles import companies_bp, company_dashboard_bp, company_profile_bp, user_bp

BLUEPRINTS_BY_DOMAIN = {
    'user': [user_auth_bp, applications_bp, user_bp, notifications_bp, searches_bp, ai_bp],
    'company': [
        company_auth_bp, jobs_bp, company_applications_bp, interviews_bp,
        company_profile_bp, company_dashboard_bp, companies_bp,
    ],
    'admin': [admin_auth_bp, admin_bp],
}

__all__ = ["BLUEPRINTS_BY_DOMAIN"]
