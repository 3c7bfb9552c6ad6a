"""Shared fixtures: an application context over a throwaway database."""

import re
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from assistant import TextGenerator
from config import settings as default_settings
from core.context import build_context
from database import add_job, update_account
from identity import credentials
from notifier import Mailer
from webapp.app import create_app

FRONTEND_URL = "http://frontend.test"
BACKEND_URL = "http://backend.test"


class RecordingMailer(Mailer):
    """Keeps every message instead of delivering it."""

    def __init__(self):
        super().__init__(provider='console')
        self.sent = []

    def send(self, message):
        self.sent.append(message)

    def subjects(self):
        return [m.subject for m in self.sent]

    def last_link(self, to_email):
        for message in reversed(self.sent):
            if message.to_email == to_email:
                match = re.search(r'https?://\S+', message.text_content)
                if match:
                    return match.group(0)
        return None


def make_settings(base_dir, **overrides):
    values = {name: getattr(default_settings, name) for name in dir(default_settings) if name.isupper()}
    values.update({
        'DATABASE_PATH': str(Path(base_dir) / "test.db"),
        'UPLOAD_DIR': str(Path(base_dir) / "uploads"),
        'FRONTEND_URL': FRONTEND_URL,
        'BACKEND_URL': BACKEND_URL,
        'EMAIL_PROVIDER': 'console',
        'COOKIE_SECURE': False,
        'JWT_SECRET': 'test-jwt-secret',
        'SESSION_SECRET': 'test-user-secret',
        'SESSION_SECRET_COMPANY': 'test-company-secret',
        'SESSION_SECRET_ADMIN': 'test-admin-secret',
        'MAX_FAILED_LOGINS': 5,
        'LOCKOUT_MINUTES': 15,
    })
    values.update(overrides)
    return SimpleNamespace(**values)


class ContextTestCase(unittest.TestCase):
    """Fresh database, recording mailer and mocked text generator per test."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.settings = make_settings(self._tmp.name)
        self.mailer = RecordingMailer()
        self.generator = mock.Mock(spec=TextGenerator)
        self.ctx = build_context(self.settings, mailer=self.mailer, text_generator=self.generator)

    def tearDown(self):
        self.ctx.close()
        self._tmp.cleanup()

    def make_user(self, email="seeker@example.com", password="password123", name="Sam Seeker", verified=True):
        user = credentials.register_user(self.ctx, name, email, password)
        if verified:
            user = update_account(self.ctx.db, 'user', user['id'], {'is_verified': True})
        return user

    def make_company(self, email="hr@acme.example", password="password123", name="Acme Corp", verified=True):
        company = credentials.register_company(self.ctx, {
            'company_name': name,
            'email': email,
            'password': password,
            'phone': "+1 (555) 010-0000",
            'company_address': "1 Main St",
            'industry': "Information Technology",
        })
        if verified:
            company = update_account(self.ctx.db, 'company', company['id'], {'is_verified': True})
        return company

    def make_admin(self, email="admin@example.com", password="admin123"):
        return credentials.create_admin(self.ctx, email, password)

    def make_job(self, company_id, **fields):
        job = {
            'job_title': "Office Coordinator",
            'description': "Keeps the team running day to day.",
            'job_type': "Full-time",
            'location': "Lisbon",
        }
        job.update(fields)
        return add_job(self.ctx.db, company_id, job)


class ApiTestCase(ContextTestCase):
    """ContextTestCase plus a Flask app and test client."""

    def setUp(self):
        super().setUp()
        self.app = create_app(self.ctx)
        self.app.config['TESTING'] = True
        self.client = self.app.test_client()

    def login_user(self, client, email="seeker@example.com", password="password123"):
        response = client.post('/api/auth/login', json={'email': email, 'password': password})
        self.assertEqual(response.status_code, 200, response.get_json())
        return response

    def login_company(self, client, email="hr@acme.example", password="password123"):
        response = client.post('/api/company/auth/login', json={'email': email, 'password': password})
        self.assertEqual(response.status_code, 200, response.get_json())
        return response

    def admin_headers(self, email="admin@example.com", password="admin123"):
        response = self.client.post('/admin/auth/login', json={'email': email, 'password': password})
        self.assertEqual(response.status_code, 200, response.get_json())
        return {'Authorization': f"Bearer {response.get_json()['token']}"}
