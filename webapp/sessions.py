"""Named session domains and the authenticators built on them.

A browser can hold one session per domain at the same time (user, company,
admin). Each domain has its own cookie, signing secret and session table, so
logging out of one leaves the others untouched.
"""

import logging
import secrets
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

import jwt
from flask import g, request
from itsdangerous import BadSignature, URLSafeTimedSerializer

from core.errors import Forbidden, Unauthenticated
from database import (
    Database, create_session, destroy_session, get_account, get_session, purge_expired_sessions, utcnow,
)
from identity.tokens import decode_admin_token

logger = logging.getLogger(__name__)

Resolver = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]


def account_resolver(db: Database, kind: str, require_admin: bool = False) -> Resolver:
    """Build a resolver that re-hydrates a session payload into an account."""
    table_kind = 'user' if kind == 'admin' else kind

    def resolve(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not payload or payload.get('kind') != kind or not payload.get('id'):
            return None
        account = get_account(db, table_kind, payload['id'])
        if account is None:
            return None
        if require_admin and not account.get('is_admin'):
            return None
        return account

    return resolve


class SessionDomain:
    """One (cookie, secret, session table) triple plus its identity resolver."""

    def __init__(self, name: str, cookie_name: str, secret: str, db: Database,
                 resolver: Resolver, ttl_hours: int = 24, secure: bool = False):
        self.name = name
        self.cookie_name = cookie_name
        self.db = db
        self.resolver = resolver
        self.ttl = timedelta(hours=ttl_hours)
        self.secure = secure
        self._serializer = URLSafeTimedSerializer(secret, salt=f"{name}-session")

    def __repr__(self) -> str:
        return f"SessionDomain({self.name!r}, cookie={self.cookie_name!r})"

    @property
    def _state_key(self) -> str:
        return f"_session_{self.name}"

    def _state(self) -> Dict[str, Any]:
        state = g.get(self._state_key)
        if state is None:
            state = {'loaded': False, 'sid': None, 'identity': None, 'cookie': None}
            setattr(g, self._state_key, state)
        return state

    def _read_sid(self) -> Optional[str]:
        raw = request.cookies.get(self.cookie_name)
        if not raw:
            return None
        try:
            return self._serializer.loads(raw, max_age=int(self.ttl.total_seconds()))
        except BadSignature:
            logger.debug(f"Rejected tampered or expired {self.name} session cookie")
            return None

    def current(self) -> Optional[Dict[str, Any]]:
        """The account behind this request's cookie, or None when anonymous."""
        state = self._state()
        if not state['loaded']:
            state['loaded'] = True
            sid = self._read_sid()
            if sid:
                payload = get_session(self.db, self.name, sid)
                if payload is not None:
                    state['sid'] = sid
                    state['identity'] = self.resolver(payload)
        return state['identity']

    def login(self, account: Dict[str, Any], kind: str) -> None:
        """Start a fresh session for ``account``, replacing any existing one."""
        state = self._state()
        self.current()
        if state['sid']:
            destroy_session(self.db, self.name, state['sid'])
        purge_expired_sessions(self.db)
        sid = secrets.token_urlsafe(32)
        create_session(self.db, self.name, sid, {'id': account['id'], 'kind': kind}, utcnow() + self.ttl)
        state.update({'sid': sid, 'identity': account, 'cookie': ('set', self._serializer.dumps(sid))})

    def logout(self) -> None:
        state = self._state()
        self.current()
        if state['sid']:
            destroy_session(self.db, self.name, state['sid'])
        state.update({'sid': None, 'identity': None, 'cookie': ('clear', None)})

    def save_cookie(self, response):
        """Write or clear this domain's cookie if the request changed it."""
        state = g.get(self._state_key)
        if not state or not state['cookie']:
            return response
        action, value = state['cookie']
        if action == 'set':
            response.set_cookie(
                self.cookie_name, value,
                max_age=int(self.ttl.total_seconds()),
                httponly=True, samesite='Lax', secure=self.secure,
            )
        else:
            response.delete_cookie(self.cookie_name, httponly=True, samesite='Lax', secure=self.secure)
        return response

    def activate(self) -> None:
        """Make this the request's primary domain and resolve its session."""
        g.session_domain = self
        self.current()


class Authenticator:
    """Maps the current request to an account, or refuses it."""

    kind = ''

    def authenticate(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def require(self) -> Dict[str, Any]:
        account = self.authenticate()
        if account is None:
            raise Unauthenticated()
        return account


class CookieSession(Authenticator):

    def __init__(self, domain: SessionDomain, kind: str):
        self.domain = domain
        self.kind = kind

    def authenticate(self) -> Optional[Dict[str, Any]]:
        return self.domain.current()


class BearerToken(Authenticator):
    """Stateless admin auth: a signed token naming an admin account."""

    kind = 'admin'

    def __init__(self, db: Database, secret: str):
        self.db = db
        self.secret = secret

    def authenticate(self) -> Optional[Dict[str, Any]]:
        header = request.headers.get('Authorization', '')
        if not header.startswith('Bearer '):
            return None
        token = header[len('Bearer '):].strip()
        try:
            payload = decode_admin_token(token, self.secret)
        except jwt.ExpiredSignatureError:
            raise Unauthenticated("Token expired")
        except jwt.InvalidTokenError:
            raise Unauthenticated("Invalid token")
        account = get_account(self.db, 'user', payload.get('sub', ''))
        if account is None:
            return None
        if not account.get('is_admin') or not payload.get('is_admin'):
            raise Forbidden("Access denied. Admins only.")
        if not account.get('is_active'):
            raise Forbidden("Admin account is deactivated.")
        return account

    def require(self) -> Dict[str, Any]:
        account = self.authenticate()
        if account is None:
            raise Unauthenticated("Authentication failed.")
        return account
