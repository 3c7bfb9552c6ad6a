import unittest
from datetime import timedelta

import jwt

from core.context import build_context
from database import create_session, delete_user, get_account_by_email, update_account, utcnow
from identity import issue_admin_token
from tests.support import ApiTestCase


class SessionDomainTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.make_user()
        self.make_company()

    def test_one_browser_holds_user_and_company_sessions(self):
        self.login_user(self.client)
        self.login_company(self.client)

        user_status = self.client.get('/api/auth/status').get_json()
        company_status = self.client.get('/api/company/auth/status').get_json()
        self.assertTrue(user_status['logged_in'])
        self.assertEqual(user_status['user']['email'], "seeker@example.com")
        self.assertTrue(company_status['logged_in'])
        self.assertEqual(company_status['company']['company_name'], "Acme Corp")
        self.assertNotIn('password_hash', company_status['company'])

    def test_logout_only_affects_its_own_domain(self):
        self.login_user(self.client)
        self.login_company(self.client)

        self.client.get('/api/auth/logout')

        self.assertFalse(self.client.get('/api/auth/status').get_json()['logged_in'])
        self.assertTrue(self.client.get('/api/company/auth/status').get_json()['logged_in'])
        self.assertEqual(self.client.get('/api/user/profile').status_code, 401)
        self.assertEqual(self.client.get('/api/jobs/posted').status_code, 200)

    def test_user_cookie_does_not_authenticate_company_routes(self):
        self.login_user(self.client)
        response = self.client.get('/api/jobs/posted')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()['message'], "Unauthorized. Please log in.")

    def test_session_for_deleted_account_is_anonymous(self):
        self.login_user(self.client)
        delete_user(self.ctx.db, get_account_by_email(self.ctx.db, 'user', "seeker@example.com")['id'])
        self.assertEqual(self.client.get('/api/user/profile').status_code, 401)

    def test_tampered_cookie_is_ignored(self):
        self.client.set_cookie('user.sid', 'not-a-signed-value')
        self.assertFalse(self.client.get('/api/auth/status').get_json()['logged_in'])

    def test_login_failure_does_not_set_cookie(self):
        response = self.client.post('/api/auth/login', json={'email': "seeker@example.com", 'password': "nope-nope"})
        self.assertEqual(response.status_code, 401)
        self.assertNotIn('user.sid', response.headers.get('Set-Cookie', ''))


class SessionCleanupTests(ApiTestCase):

    def _count(self, table):
        with self.ctx.db.connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def _abandon_sessions(self):
        expired = utcnow() - timedelta(minutes=1)
        create_session(self.ctx.db, 'user', "stale-user", {'id': "x", 'kind': 'user'}, expired)
        create_session(self.ctx.db, 'company', "stale-company", {'id': "y", 'kind': 'company'}, expired)

    def test_login_clears_abandoned_sessions(self):
        self.make_user()
        self._abandon_sessions()

        self.login_user(self.client)

        self.assertEqual(self._count('user_sessions'), 1)
        self.assertEqual(self._count('company_sessions'), 0)

    def test_startup_clears_abandoned_sessions(self):
        self._abandon_sessions()
        live = utcnow() + timedelta(hours=1)
        create_session(self.ctx.db, 'admin', "live-admin", {'id': "z", 'kind': 'admin'}, live)

        restarted = build_context(self.settings, mailer=self.mailer, text_generator=self.generator)
        self.addCleanup(restarted.close)

        self.assertEqual(self._count('user_sessions') + self._count('company_sessions'), 0)
        self.assertEqual(self._count('admin_sessions'), 1)


class AdminBearerTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()

    def test_missing_token(self):
        response = self.client.get('/admin/stats')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()['message'], "Authentication failed.")

    def test_valid_token(self):
        response = self.client.get('/admin/stats', headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload['users'], 1)

    def test_token_without_admin_flag_is_forbidden(self):
        user = self.make_user()
        token = issue_admin_token(user, self.settings.JWT_SECRET)
        response = self.client.get('/admin/stats', headers={'Authorization': f"Bearer {token}"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json()['message'], "Access denied. Admins only.")

    def test_expired_token(self):
        token = jwt.encode(
            {'sub': self.admin['id'], 'email': self.admin['email'], 'is_admin': True,
             'exp': utcnow() - timedelta(minutes=1)},
            self.settings.JWT_SECRET, algorithm="HS256",
        )
        response = self.client.get('/admin/stats', headers={'Authorization': f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_token_signed_with_other_secret(self):
        token = issue_admin_token(self.admin, "some-other-secret")
        response = self.client.get('/admin/stats', headers={'Authorization': f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_deactivated_admin_is_refused(self):
        headers = self.admin_headers()
        update_account(self.ctx.db, 'user', self.admin['id'], {'is_active': False})
        self.assertEqual(self.client.get('/admin/stats', headers=headers).status_code, 403)

    def test_non_admin_cannot_log_in_as_admin(self):
        self.make_user()
        response = self.client.post('/admin/auth/login', json={'email': "seeker@example.com", 'password': "password123"})
        self.assertEqual(response.status_code, 401)

    def test_adding_admin_requires_token(self):
        body = {'email': "second@example.com", 'password': "secret1", 'name': "Second"}
        self.assertEqual(self.client.post('/admin/auth/add', json=body).status_code, 401)
        response = self.client.post('/admin/auth/add', json=body, headers=self.admin_headers())
        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.client.post('/admin/auth/add', json=body, headers=self.admin_headers()).status_code, 400)


if __name__ == '__main__':
    unittest.main()
