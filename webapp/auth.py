"""Per-request access to the application context and the caller's identity."""

import functools
from typing import Any, Dict, Optional

from flask import current_app, g

from core.context import AppContext

EXTENSION_KEY = 'worksphere'


def get_context() -> AppContext:
    return current_app.extensions[EXTENSION_KEY]


def current_account(kind: str) -> Optional[Dict[str, Any]]:
    """The ``kind`` identity behind this request, or None. Never raises."""
    return get_context().sessions[kind].current()


def login_required(kind: str):
    """Reject the request unless the ``kind`` authenticator accepts it.

    The authenticated account is stored on ``g.account``.
    """
    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            g.account = get_context().authenticators[kind].require()
            return view(*args, **kwargs)
        return wrapper
    return decorator
