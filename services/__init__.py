"""Domain operations behind the HTTP routes.

Each function takes the application context first and raises
``core.errors`` exceptions instead of returning error payloads.
"""

from . import activity, admin, applications, interviews, jobs, profiles

__all__ = [
    "activity",
    "admin",
    "applications",
    "interviews",
    "jobs",
    "profiles",
]
