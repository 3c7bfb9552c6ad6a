import unittest
from datetime import timedelta

from database import delete_user, get_interviews, to_iso, update_user_profile, utcnow
from tests.support import ApiTestCase


class ApplicationTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.company = self.make_company()
        self.user = self.make_user()
        self.job = self.make_job(self.company['id'], job_title="Support Engineer", location="Lisbon", job_type="Full-time")
        self.seeker = self.app.test_client()
        self.login_user(self.seeker)
        self.login_company(self.client)
        self.mailer.sent.clear()

    def _apply(self, job_id=None, **extra):
        response = self.seeker.post('/api/applications', json={'jobId': job_id or self.job['id'], **extra})
        self.assertEqual(response.status_code, 201, response.get_json())
        return response.get_json()['application']

    def test_application_snapshots_resume(self):
        update_user_profile(self.ctx.db, self.user['id'], {'resume': "/uploads/resumes/cv.pdf"})
        application = self._apply(coverLetter="Hello")
        self.assertEqual(application['status'], 'pending')
        self.assertEqual(application['resume'], "/uploads/resumes/cv.pdf")
        self.assertEqual(application['cover_letter'], "Hello")

    def test_unknown_job_is_accepted(self):
        application = self._apply(job_id="not-a-real-job")
        self.assertEqual(application['job_id'], "not-a-real-job")

    def test_repeat_applications_are_recorded(self):
        self._apply()
        self._apply()
        mine = self.seeker.get('/api/applications/my').get_json()['applications']
        self.assertEqual(len(mine), 2)
        applied = self.seeker.get('/api/applications/applied').get_json()['jobs']
        self.assertEqual([job['id'] for job in applied], [self.job['id']])

    def test_my_application_for_job(self):
        self._apply()
        found = self.seeker.get(f"/api/applications/my/{self.job['id']}")
        self.assertEqual(found.status_code, 200)
        other = self.make_job(self.company['id'], job_title="Another Role")
        missing = self.seeker.get(f"/api/applications/my/{other['id']}")
        self.assertEqual(missing.status_code, 404)

    def test_company_sees_applicants_with_absolute_resume(self):
        update_user_profile(self.ctx.db, self.user['id'], {'resume': "/uploads/resumes/cv.pdf", 'phone': "+15550100"})
        self._apply()

        response = self.client.get(f"/api/company/applications/{self.job['id']}")
        applicants = response.get_json()['applications']
        self.assertEqual(len(applicants), 1)
        self.assertEqual(applicants[0]['user']['resume'], "http://backend.test/uploads/resumes/cv.pdf")
        self.assertEqual(applicants[0]['user']['name'], "Sam Seeker")

        everything = self.client.get('/api/company/applications/all').get_json()['applications']
        self.assertEqual(everything[0]['job']['job_title'], "Support Engineer")
        self.assertEqual(everything[0]['user']['phone'], "+15550100")

    def test_deleting_user_removes_their_applications(self):
        self._apply()
        delete_user(self.ctx.db, self.user['id'])
        response = self.client.get(f"/api/company/applications/{self.job['id']}")
        self.assertEqual(response.get_json()['applications'], [])

    def test_decision(self):
        application = self._apply()
        url = f"/api/company/applications/{application['id']}/status"

        bad = self.client.put(url, json={'status': 'pending'})
        self.assertEqual(bad.status_code, 400)
        self.assertEqual(bad.get_json()['message'], "Invalid status value")

        ok = self.client.put(url, json={'status': 'hired'})
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.get_json()['message'], "Application hired successfully")
        self.assertEqual(ok.get_json()['application']['status'], 'hired')
        self.assertEqual(self.mailer.sent, [])

    def test_decision_by_other_company_is_forbidden(self):
        application = self._apply()
        self.make_company(email="other@corp.example", name="Other Corp")
        other = self.app.test_client()
        self.login_company(other, email="other@corp.example")
        response = other.put(f"/api/company/applications/{application['id']}/status", json={'status': 'rejected'})
        self.assertEqual(response.status_code, 403)


class InterviewTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.company = self.make_company()
        self.user = self.make_user()
        self.job = self.make_job(self.company['id'], job_title="QA Analyst", location="Remote", job_type="Contract")
        seeker = self.app.test_client()
        self.login_user(seeker)
        self.application = seeker.post('/api/applications', json={'jobId': self.job['id']}).get_json()['application']
        self.login_company(self.client)
        self.mailer.sent.clear()

    def _schedule(self, days=3, notes="Bring a laptop"):
        return self.client.post('/api/company/interviews', json={
            'jobId': self.job['id'],
            'userId': self.user['id'],
            'applicationId': self.application['id'],
            'date': to_iso(utcnow() + timedelta(days=days)),
            'notes': notes,
        })

    def test_schedule_sends_meeting_link(self):
        response = self._schedule()
        self.assertEqual(response.status_code, 201, response.get_json())
        body = response.get_json()
        self.assertFalse(body['is_reschedule'])
        self.assertEqual(body['message'], "Interview scheduled successfully")
        self.assertTrue(body['interview']['meeting_link'].startswith("https://meet.jit.si/WorkSphere_Interview_"))

        self.assertEqual(self.mailer.subjects(), ["Interview Scheduled - WorkSphere"])
        self.assertIn(body['interview']['meeting_link'], self.mailer.sent[0].text_content)

    def test_reschedule_replaces_interview_with_new_room(self):
        first = self._schedule().get_json()['interview']
        second = self._schedule(days=5).get_json()

        self.assertTrue(second['is_reschedule'])
        self.assertNotEqual(second['interview']['room_id'], first['room_id'])
        self.assertEqual(len(get_interviews(self.ctx.db, [self.job['id']])), 1)
        self.assertEqual(self.mailer.subjects()[-1], "Interview Rescheduled - WorkSphere")

    def test_invalid_ids(self):
        response = self.client.post('/api/company/interviews', json={
            'jobId': "bad", 'userId': "bad", 'applicationId': "bad",
            'date': to_iso(utcnow() + timedelta(days=1)),
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], "Invalid ID format")

    def test_other_company_cannot_schedule(self):
        self.make_company(email="other@corp.example", name="Other Corp")
        other = self.app.test_client()
        self.login_company(other, email="other@corp.example")
        response = other.post('/api/company/interviews', json={
            'jobId': self.job['id'], 'userId': self.user['id'],
            'applicationId': self.application['id'],
            'date': to_iso(utcnow() + timedelta(days=1)),
        })
        self.assertEqual(response.status_code, 403)

    def test_list_and_cancel(self):
        interview = self._schedule().get_json()['interview']

        listed = self.client.get(f"/api/company/interviews/job/{self.job['id']}").get_json()['interviews']
        self.assertEqual(listed[0]['user']['email'], "seeker@example.com")

        response = self.client.delete(f"/api/company/interviews/{interview['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['message'], "Interview cancelled and candidate notified.")
        self.assertEqual(self.mailer.subjects()[-1], "Interview Cancelled - WorkSphere")
        remaining = get_interviews(self.ctx.db, [self.job['id']])
        self.assertEqual(remaining[0]['status'], 'cancelled')

    def test_cancel_unknown_interview(self):
        response = self.client.delete("/api/company/interviews/0123456789abcdef0123456789abcdef")
        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
