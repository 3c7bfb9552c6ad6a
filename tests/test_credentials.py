import unittest
from datetime import timedelta
from urllib.parse import parse_qs, urlparse

from core.errors import (
    Conflict, Deactivated, InvalidCredentials, InvalidOrExpired, Locked, NotFound,
    NotVerified, WrongMethod,
)
from database import create_account, get_account, to_iso, update_account, utcnow
from identity import credentials
from tests.support import ContextTestCase


class RegistrationTests(ContextTestCase):

    def test_register_stores_lowercased_email_and_sends_verification(self):
        user = credentials.register_user(self.ctx, "Sam", "Sam@Example.COM", "password123")

        self.assertEqual(user['email'], "sam@example.com")
        self.assertFalse(user['is_verified'])
        self.assertEqual(self.mailer.subjects(), ["Verify Your Email"])
        link = self.mailer.last_link("sam@example.com")
        self.assertTrue(link.startswith("http://backend.test/api/auth/verify-email?"))

    def test_duplicate_email_rejected_case_insensitively(self):
        credentials.register_user(self.ctx, "Sam", "sam@example.com", "password123")
        with self.assertRaises(Conflict):
            credentials.register_user(self.ctx, "Sam", "SAM@example.com", "password123")

    def test_company_verification_link_points_at_company_route(self):
        self.make_company(verified=False)
        link = self.mailer.last_link("hr@acme.example")
        self.assertIn("/api/company/auth/verify-email?", link)


class VerificationTests(ContextTestCase):

    def _token(self, email):
        query = parse_qs(urlparse(self.mailer.last_link(email)).query)
        return query['token'][0]

    def test_token_is_single_use(self):
        self.make_user(verified=False)
        token = self._token("seeker@example.com")

        verified = credentials.verify_email(self.ctx, 'user', token, "seeker@example.com")
        self.assertTrue(verified['is_verified'])
        self.assertIsNone(verified['verification_token'])

        with self.assertRaises(InvalidOrExpired):
            credentials.verify_email(self.ctx, 'user', token, "seeker@example.com")

    def test_expired_token_leaves_account_unverified(self):
        user = self.make_user(verified=False)
        token = self._token("seeker@example.com")
        update_account(self.ctx.db, 'user', user['id'], {
            'verification_token_expires': to_iso(utcnow() - timedelta(minutes=1)),
        })

        with self.assertRaises(InvalidOrExpired):
            credentials.verify_email(self.ctx, 'user', token, "seeker@example.com")
        self.assertFalse(get_account(self.ctx.db, 'user', user['id'])['is_verified'])

    def test_token_for_other_email_is_rejected(self):
        self.make_user(verified=False)
        token = self._token("seeker@example.com")
        with self.assertRaises(InvalidOrExpired):
            credentials.verify_email(self.ctx, 'user', token, "someone@example.com")


class LoginTests(ContextTestCase):

    def test_login_is_case_insensitive_and_records_last_login(self):
        self.make_user()
        user = credentials.login(self.ctx, 'user', "SEEKER@Example.com", "password123")
        self.assertEqual(user['email'], "seeker@example.com")
        self.assertIsNotNone(user['last_login'])

    def test_unknown_email(self):
        with self.assertRaises(NotFound):
            credentials.login(self.ctx, 'user', "nobody@example.com", "password123")

    def test_oauth_only_account_must_use_google(self):
        create_account(self.ctx.db, 'user', "g@example.com", google_id="123", is_verified=True)
        with self.assertRaises(WrongMethod):
            credentials.login(self.ctx, 'user', "g@example.com", "password123")

    def test_unverified_rejected_even_with_correct_password(self):
        self.make_user(verified=False)
        with self.assertRaises(NotVerified):
            credentials.login(self.ctx, 'user', "seeker@example.com", "password123")

    def test_wrong_password(self):
        self.make_user()
        with self.assertRaises(InvalidCredentials):
            credentials.login(self.ctx, 'user', "seeker@example.com", "wrong-password")

    def test_deactivated_account_rejected_after_password_check_and_notified(self):
        user = self.make_user()
        update_account(self.ctx.db, 'user', user['id'], {'is_active': False})

        with self.assertRaises(InvalidCredentials):
            credentials.login(self.ctx, 'user', "seeker@example.com", "wrong-password")
        with self.assertRaises(Deactivated):
            credentials.login(self.ctx, 'user', "seeker@example.com", "password123")

        self.ctx.dispatcher.shutdown(wait=True)
        self.assertIn("Account Deactivated", " ".join(self.mailer.subjects()))


class CompanyLockoutTests(ContextTestCase):

    def setUp(self):
        super().setUp()
        self.company = self.make_company()

    def _fail(self):
        credentials.login(self.ctx, 'company', "hr@acme.example", "wrong-password")

    def test_fifth_failure_locks_account(self):
        for attempt in range(1, 5):
            with self.assertRaises(InvalidCredentials) as raised:
                self._fail()
            self.assertIn(f"{5 - attempt} attempt(s) left", raised.exception.message)

        with self.assertRaises(Locked) as raised:
            self._fail()
        self.assertEqual(raised.exception.minutes, 15)

        # Correct password is still refused while locked.
        with self.assertRaises(Locked):
            credentials.login(self.ctx, 'company', "hr@acme.example", "password123")

    def test_expired_lock_allows_login_and_resets_counter(self):
        update_account(self.ctx.db, 'company', self.company['id'], {
            'failed_login_attempts': 5,
            'lock_until': to_iso(utcnow() - timedelta(minutes=1)),
        })
        company = credentials.login(self.ctx, 'company', "hr@acme.example", "password123")
        self.assertEqual(company['failed_login_attempts'], 0)
        self.assertIsNone(company['lock_until'])

    def test_success_resets_failure_counter(self):
        for _ in range(3):
            with self.assertRaises(InvalidCredentials):
                self._fail()
        company = credentials.login(self.ctx, 'company', "hr@acme.example", "password123")
        self.assertEqual(company['failed_login_attempts'], 0)


class PasswordResetTests(ContextTestCase):

    def test_unknown_email_is_silent(self):
        credentials.request_password_reset(self.ctx, "nobody@example.com")
        self.assertEqual(self.mailer.sent, [])

    def test_reset_flow_replaces_password_and_consumes_token(self):
        self.make_company()
        credentials.request_password_reset(self.ctx, "hr@acme.example")
        link = self.mailer.last_link("hr@acme.example")
        self.assertTrue(link.startswith("http://frontend.test/company/reset-password?"))
        token = parse_qs(urlparse(link).query)['token'][0]

        credentials.reset_password(self.ctx, "hr@acme.example", token, "new-password-1")
        company = credentials.login(self.ctx, 'company', "hr@acme.example", "new-password-1")
        self.assertEqual(company['email'], "hr@acme.example")

        with self.assertRaises(InvalidOrExpired):
            credentials.reset_password(self.ctx, "hr@acme.example", token, "another-password")


class OAuthLoginTests(ContextTestCase):

    def test_first_login_creates_account_and_profile(self):
        company = credentials.oauth_login(self.ctx, 'company', {'id': 'g-1', 'email': "New@Corp.example", 'name': "New Corp"})
        self.assertEqual(company['email'], "new@corp.example")
        self.assertTrue(company['is_verified'])

        again = credentials.oauth_login(self.ctx, 'company', {'id': 'g-1', 'email': "new@corp.example"})
        self.assertEqual(again['id'], company['id'])

    def test_deactivated_account_cannot_use_oauth(self):
        user = self.make_user()
        update_account(self.ctx.db, 'user', user['id'], {'is_active': False})
        with self.assertRaises(Deactivated):
            credentials.oauth_login(self.ctx, 'user', {'id': 'g-2', 'email': "seeker@example.com"})


if __name__ == '__main__':
    unittest.main()
