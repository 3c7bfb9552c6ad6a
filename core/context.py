"""Process-wide dependencies, built once at startup and handed to the app."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from assistant.llm_client import TextGenerator
from database import Database, init_database, purge_expired_sessions
from identity.oauth import GoogleOAuth
from notifier import Dispatcher, Mailer
from storage import AssetStore
from webapp.sessions import (
    Authenticator, BearerToken, CookieSession, SessionDomain, account_resolver,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Any
    db: Database
    dispatcher: Dispatcher
    assets: AssetStore
    text_generator: TextGenerator
    oauth: GoogleOAuth
    sessions: Dict[str, SessionDomain] = field(default_factory=dict)
    authenticators: Dict[str, Authenticator] = field(default_factory=dict)

    def close(self) -> None:
        self.dispatcher.shutdown(wait=True)


def build_context(settings: Any = None, mailer: Optional[Mailer] = None,
                  text_generator: Optional[TextGenerator] = None) -> AppContext:
    """Wire every collaborator from ``settings`` (defaults to ``config.settings``)."""
    if settings is None:
        from config import settings as default_settings
        settings = default_settings

    db = Database(settings.DATABASE_PATH)
    init_database(db)
    purge_expired_sessions(db)

    if mailer is None:
        mailer = Mailer(
            provider=settings.EMAIL_PROVIDER,
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.EMAIL_USER,
            password=settings.EMAIL_PASS,
            from_email=settings.EMAIL_FROM,
        )
    if text_generator is None:
        text_generator = TextGenerator(
            provider=settings.LLM_PROVIDER,
            deepseek_api_key=settings.DEEPSEEK_API_KEY,
            openai_api_key=settings.OPENAI_API_KEY,
            anthropic_api_key=settings.ANTHROPIC_API_KEY,
            model_name=settings.MODEL_NAME,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            min_call_interval=settings.LLM_MIN_CALL_INTERVAL,
        )

    ttl = settings.SESSION_TTL_HOURS
    secure = settings.COOKIE_SECURE
    sessions = {
        'user': SessionDomain('user', 'user.sid', settings.SESSION_SECRET, db,
                              account_resolver(db, 'user'), ttl, secure),
        'company': SessionDomain('company', 'company.sid', settings.SESSION_SECRET_COMPANY, db,
                                 account_resolver(db, 'company'), ttl, secure),
        'admin': SessionDomain('admin', 'admin.sid', settings.SESSION_SECRET_ADMIN, db,
                               account_resolver(db, 'admin', require_admin=True), ttl, secure),
    }
    authenticators: Dict[str, Authenticator] = {
        'user': CookieSession(sessions['user'], 'user'),
        'company': CookieSession(sessions['company'], 'company'),
        'admin': BearerToken(db, settings.JWT_SECRET),
    }

    context = AppContext(
        settings=settings,
        db=db,
        dispatcher=Dispatcher(mailer, max_workers=settings.EMAIL_MAX_CONCURRENCY),
        assets=AssetStore(settings.UPLOAD_DIR),
        text_generator=text_generator,
        oauth=GoogleOAuth(settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET, settings.SESSION_SECRET),
        sessions=sessions,
        authenticators=authenticators,
    )
    logger.info(f"Application context ready (database: {db.path})")
    return context
