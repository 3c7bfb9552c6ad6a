import unittest

from database import add_application, get_account, get_applications, get_job, get_user_profile
from tests.support import ApiTestCase


class AdminDashboardTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.admin = self.make_admin()
        self.user = self.make_user()
        self.company = self.make_company()
        self.job = self.make_job(self.company['id'], job_title="Site Reliability Engineer", location="Dublin", status='Open')
        self.headers = self.admin_headers()
        self.mailer.sent.clear()

    def _actions(self):
        entries = self.client.get('/admin/audit-log', headers=self.headers).get_json()['entries']
        return [entry['action'] for entry in entries]

    def test_stats_and_engagement(self):
        add_application(self.ctx.db, self.user['id'], self.job['id'])
        stats = self.client.get('/admin/stats', headers=self.headers).get_json()
        # The admin is stored as a user account too.
        self.assertEqual((stats['users'], stats['companies'], stats['jobs']), (2, 1, 1))

        engagement = self.client.get('/admin/engagement', headers=self.headers).get_json()
        self.assertEqual(engagement['total_applications'], 1)

        top = self.client.get('/admin/application-stats', headers=self.headers).get_json()
        self.assertEqual(top['applications_per_job'][0]['job_title'], "Site Reliability Engineer")
        self.assertIsNone(top['avg_time_to_fill'])

    def test_user_listing_excludes_admins(self):
        body = self.client.get('/admin/users', headers=self.headers).get_json()
        self.assertEqual(body['total'], 1)
        self.assertEqual(body['users'][0]['email'], "seeker@example.com")
        self.assertNotIn('password_hash', body['users'][0])
        self.assertEqual(body['users'][0]['profile']['name'], "Sam Seeker")

    def test_toggle_user(self):
        response = self.client.patch(f"/admin/users/{self.user['id']}/toggle-active", headers=self.headers)
        self.assertEqual(response.get_json()['message'], "User deactivated successfully")
        self.assertFalse(get_account(self.ctx.db, 'user', self.user['id'])['is_active'])

        self.ctx.dispatcher.shutdown()
        self.assertEqual(self.mailer.subjects(), ["Account Deactivated"])
        self.assertIn("Deactivate User", self._actions())

    def test_toggle_unknown_user(self):
        response = self.client.patch("/admin/users/0123456789abcdef0123456789abcdef/toggle-active",
                                     headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['message'], "User not found")

    def test_bulk_toggle_requires_list_and_bool(self):
        for body in ({'ids': "abc", 'isActive': False}, {'ids': [self.user['id']], 'isActive': "no"}, {}):
            response = self.client.patch('/admin/users/bulk-toggle-active', json=body, headers=self.headers)
            self.assertEqual(response.status_code, 400, body)
            self.assertEqual(response.get_json()['message'], "Invalid request body")

    def test_bulk_toggle_companies(self):
        other = self.make_company(email="other@corp.example", name="Other Corp")
        response = self.client.patch('/admin/companies/bulk-toggle-active', headers=self.headers, json={
            'ids': [self.company['id'], other['id'], "0123456789abcdef0123456789abcdef"],
            'isActive': False,
        })
        body = response.get_json()
        self.assertEqual((body['updated'], body['failed']), (2, 0))
        for company_id in (self.company['id'], other['id']):
            self.assertFalse(get_account(self.ctx.db, 'company', company_id)['is_active'])
        self.assertIn("Bulk Deactivate Companies", self._actions())

    def test_update_user_ignores_unknown_fields(self):
        response = self.client.put(f"/admin/users/{self.user['id']}", headers=self.headers,
                                   json={'isVerified': False, 'passwordHash': "x"})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.get_json()['user']['is_verified'])

    def test_delete_user_removes_owned_records(self):
        add_application(self.ctx.db, self.user['id'], self.job['id'])
        response = self.client.delete(f"/admin/users/{self.user['id']}", headers=self.headers)
        self.assertEqual(response.get_json()['message'], "User deleted successfully")

        self.assertIsNone(get_account(self.ctx.db, 'user', self.user['id']))
        self.assertIsNone(get_user_profile(self.ctx.db, self.user['id']))
        self.assertEqual(get_applications(self.ctx.db, user_id=self.user['id']), [])
        self.assertEqual(self.mailer.subjects(), ["Account Deletion Notification"])
        self.assertIn("Delete User", self._actions())

    def test_delete_company_removes_jobs(self):
        response = self.client.delete(f"/admin/companies/{self.company['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(get_job(self.ctx.db, self.job['id']))
        self.assertEqual(self.mailer.subjects(), ["Company Account Deletion Notification"])

    def test_company_details(self):
        body = self.client.get(f"/admin/companies/{self.company['id']}/details", headers=self.headers).get_json()
        self.assertEqual(body['company_profile']['company_name'], "Acme Corp")
        self.assertEqual(body['hiring_data'], {'active_jobs_count': 1, 'total_interviews': 0})

    def test_update_and_delete_job(self):
        url = f"/admin/jobs/{self.job['id']}"
        updated = self.client.put(url, headers=self.headers, json={'location': "Cork", 'skills': "Go, Rust"})
        self.assertEqual(updated.get_json()['job']['skills'], ["Go", "Rust"])

        deleted = self.client.delete(url, headers=self.headers)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(self.mailer.subjects(), ["Job Deletion Notification"])
        self.assertEqual(self.client.delete(url, headers=self.headers).status_code, 404)
        self.assertTrue({"Update Job", "Delete Job"} <= set(self._actions()))

    def test_admin_job_update_checks_status(self):
        url = f"/admin/jobs/{self.job['id']}"
        rejected = self.client.put(url, headers=self.headers, json={'status': "Archived"})
        self.assertEqual(rejected.status_code, 400)
        self.assertEqual(rejected.get_json()['message'], "Invalid status")
        self.assertEqual(get_job(self.ctx.db, self.job['id'])['status'], 'Open')

        closed = self.client.put(url, headers=self.headers, json={'status': "Closed"})
        self.assertEqual(closed.status_code, 200)
        self.assertEqual(get_job(self.ctx.db, self.job['id'])['status'], 'Closed')

    def test_company_stats_group_industries(self):
        body = self.client.get('/admin/company-stats', headers=self.headers).get_json()
        self.assertEqual(body['unmatched_industries'], [{'industry': "Information Technology", 'count': 1}])
        self.assertEqual(len(body['industry_stats']), 16)
        self.assertEqual(body['top_companies'], [{'name': "Acme Corp", 'job_count': 1}])

    def test_growth_series(self):
        response = self.client.get('/admin/user-growth?interval=yearly', headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertIsInstance(response.get_json()['growth'], list)

        hourly = self.client.get('/admin/user-growth?interval=hourly&date=2024-05-01', headers=self.headers)
        self.assertEqual(len(hourly.get_json()['growth']), 24)
        daily = self.client.get('/admin/job-trends?month=2&year=2024', headers=self.headers)
        self.assertEqual(len(daily.get_json()['trends']), 29)

    def test_growth_rejects_malformed_parameters(self):
        for query, message in [
            ("month=13", "Invalid month"),
            ("month=0", "Invalid month"),
            ("year=soon", "Invalid year"),
            ("interval=hourly&date=notadate", "Invalid date"),
        ]:
            response = self.client.get(f"/admin/user-growth?{query}", headers=self.headers)
            self.assertEqual(response.status_code, 400, query)
            self.assertEqual(response.get_json()['message'], message)


if __name__ == '__main__':
    unittest.main()
