"""Full request flows through the HTTP API."""

import io
import unittest

from tests.support import BACKEND_URL, FRONTEND_URL, ApiTestCase


class JobSeekerJourneyTests(ApiTestCase):

    def test_register_verify_login_and_edit_profile(self):
        response = self.client.post('/api/auth/register', json={
            'name': "Jamie Doe", 'email': "Jamie@Example.com", 'password': "longenough",
        })
        self.assertEqual(response.status_code, 201, response.get_json())

        blocked = self.client.post('/api/auth/login', json={'email': "jamie@example.com", 'password': "longenough"})
        self.assertEqual(blocked.status_code, 401)

        link = self.mailer.last_link("jamie@example.com")
        self.assertTrue(link.startswith(f"{BACKEND_URL}/api/auth/verify-email?"))
        verified = self.client.get(link[len(BACKEND_URL):])
        self.assertEqual(verified.status_code, 302)
        self.assertEqual(verified.headers['Location'], f"{FRONTEND_URL}/login?verified=true")

        login = self.client.post('/api/auth/login', json={'email': "jamie@example.com", 'password': "longenough"})
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.get_json()['user']['name'], "Jamie Doe")

        status = self.client.get('/api/auth/status').get_json()
        self.assertTrue(status['logged_in'])
        self.assertEqual(status['type'], 'user')

        update = self.client.put('/api/user/profile', json={
            'name': "Jamie Doe",
            'title': "Data Engineer",
            'location': "Toronto",
            'phone': "+14165550100",
            'skills': ["Python", "Airflow"],
            'experience': [{'company': "Acme", 'position': "Analyst", 'start': "2020", 'end': "2023"}],
            'education': [{'institution': "UofT", 'degree': "BSc", 'year': "2019"}],
            'socialLinks': {'github': "https://github.com/jamie"},
        })
        self.assertEqual(update.status_code, 200, update.get_json())

        profile = self.client.get('/api/user/profile').get_json()['profile']
        self.assertEqual(profile['title'], "Data Engineer")
        self.assertEqual(profile['skills'], ["Python", "Airflow"])
        self.assertEqual(profile['experience'][0]['position'], "Analyst")
        self.assertEqual(profile['education'][0]['institution'], "UofT")
        self.assertEqual(profile['social_links']['github'], "https://github.com/jamie")
        self.assertEqual(profile['email'], "jamie@example.com")

        public = self.client.get(f"/api/user/profile/{profile['user_id']}").get_json()['profile']
        self.assertNotIn('phone', public)

    def test_profile_validation(self):
        self.make_user()
        self.login_user(self.client)
        response = self.client.put('/api/user/profile', json={
            'name': "Sam Seeker", 'title': "Dev", 'location': "Oslo", 'phone': "0123",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], "phone: Invalid format")


class CompanyVerificationTests(ApiTestCase):

    def test_resend_verification(self):
        unknown = self.client.post('/api/company/auth/resend-verification', json={'email': "nobody@corp.example"})
        self.assertEqual(unknown.status_code, 404)

        self.make_company(verified=False)
        self.mailer.sent.clear()
        resent = self.client.post('/api/company/auth/resend-verification', json={'email': "hr@acme.example"})
        self.assertEqual(resent.status_code, 200)
        link = self.mailer.last_link("hr@acme.example")

        verified = self.client.get(link[len(BACKEND_URL):])
        self.assertEqual(verified.headers['Location'], f"{FRONTEND_URL}/company/login?verified=true")

        again = self.client.post('/api/company/auth/resend-verification', json={'email': "hr@acme.example"})
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.get_json()['message'], "Email already verified")


class UploadTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.make_user()
        self.login_user(self.client)

    def _upload(self, url, field, content, filename, mimetype, **form):
        data = {field: (io.BytesIO(content), filename, mimetype), **form}
        return self.client.post(url, data=data, content_type='multipart/form-data')

    def test_resume_upload_is_served_and_removable(self):
        response = self._upload('/api/user/profile/upload-resume', 'resume', b"%PDF-1.4", "cv.pdf", "application/pdf")
        self.assertEqual(response.status_code, 200, response.get_json())
        path = response.get_json()['resume']
        self.assertTrue(path.startswith("/uploads/resumes/"))
        self.assertEqual(response.get_json()['resume_name'], "cv.pdf")

        served = self.client.get(path)
        self.assertEqual(served.data, b"%PDF-1.4")
        served.close()

        removed = self.client.delete('/api/user/profile/resume')
        self.assertIsNone(removed.get_json()['resume'])
        self.assertEqual(self.client.get('/api/user/profile').get_json()['profile']['resume'], '')

    def test_photo_must_be_an_image(self):
        response = self._upload('/api/user/profile/upload-photo', 'profilePhoto', b"text", "notes.txt", "text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], "Only image files are allowed")

    def test_oversized_photo(self):
        content = b"x" * (self.settings.MAX_PHOTO_SIZE + 1)
        response = self._upload('/api/user/profile/upload-photo', 'profilePhoto', content, "big.png", "image/png")
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.get_json()['message'].startswith("File size exceeds the maximum limit"))

    def test_missing_file(self):
        response = self.client.post('/api/user/profile/upload-resume', data={}, content_type='multipart/form-data')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], "No file uploaded")

    def test_certificates(self):
        untitled = self._upload('/api/user/profile/upload-certificate', 'certificate', b"cert", "aws.pdf",
                                "application/pdf")
        self.assertEqual(untitled.get_json()['message'], "Certificate title is required")

        created = self._upload('/api/user/profile/upload-certificate', 'certificate', b"cert", "aws.pdf",
                               "application/pdf", title="AWS Associate")
        self.assertEqual(created.status_code, 201)
        certificate = created.get_json()['certificate']

        listed = self.client.get('/api/user/profile').get_json()['profile']['certificates']
        self.assertEqual([c['title'] for c in listed], ["AWS Associate"])

        deleted = self.client.delete(f"/api/user/profile/certificate/{certificate['id']}")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(self.client.delete(f"/api/user/profile/certificate/{certificate['id']}").status_code, 404)

    def test_video_intro(self):
        response = self._upload('/api/user/profile/upload-video-intro', 'videoIntro', b"\x00\x01", "intro.mp4",
                                "video/mp4")
        self.assertEqual(response.status_code, 200, response.get_json())
        self.assertTrue(response.get_json()['video_introduction'].startswith("/uploads/video/"))
        self.client.delete('/api/user/profile/video-intro')
        self.assertEqual(self.client.get('/api/user/profile').get_json()['profile']['video_introduction'], '')


class SavedJobsAndNotificationsTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        company = self.make_company()
        self.make_user()
        self.job = self.make_job(company['id'], job_title="Product Designer", location="Remote")
        self.login_user(self.client)

    def test_save_list_and_remove(self):
        url = f"/api/user/save-job/{self.job['id']}"
        self.assertEqual(self.client.post(url).status_code, 201)
        again = self.client.post(url)
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.get_json()['message'], "Job already saved.")

        saved = self.client.get('/api/user/saved-jobs').get_json()
        self.assertEqual(saved['count'], 1)
        self.assertEqual(saved['jobs'][0]['company_name'], "Acme Corp")

        self.assertEqual(self.client.delete(f"/api/user/remove-job/{self.job['id']}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/user/remove-job/{self.job['id']}").status_code, 404)

    def test_searches_feed_recommendations(self):
        self.make_job(self.job['company_id'], job_title="Line Cook", location="Rome")
        self.assertEqual(self.client.post('/api/searches', json={'query': "designer"}).status_code, 201)
        self.assertEqual(self.client.post('/api/searches', json={'query': "  "}).status_code, 400)

        jobs = self.client.get('/api/jobs/recommended').get_json()['jobs']
        self.assertEqual(jobs[0]['id'], self.job['id'])
        self.assertTrue(jobs[0]['is_recommended'])

    def test_notifications_lifecycle(self):
        company = self.app.test_client()
        self.login_company(company)
        update = self.client.put('/api/user/profile', json={
            'name': "Sam Seeker", 'title': "Designer", 'location': "Remote", 'skills': ["Figma"],
        })
        self.assertEqual(update.status_code, 200, update.get_json())
        company.post('/api/jobs', json={
            'jobTitle': "UI Designer", 'description': "Design delightful interfaces for our users.",
            'jobType': "Part-time", 'location': "Remote", 'skills': "Figma",
        })

        notes = self.client.get('/api/notifications').get_json()['notifications']
        self.assertEqual(len(notes), 1)
        self.assertFalse(notes[0]['is_read'])

        read = self.client.patch(f"/api/notifications/{notes[0]['id']}/read").get_json()['notification']
        self.assertTrue(read['is_read'])

        cleared = self.client.delete('/api/notifications', json={})
        self.assertEqual(cleared.get_json()['message'], "All notifications cleared")
        self.assertEqual(self.client.get('/api/notifications').get_json()['notifications'], [])


class CompanyProfileTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.company = self.make_company()
        self.login_company(self.client)

    def test_profile_read_fills_headquarters_and_contact(self):
        profile = self.client.get('/api/company/profile').get_json()['profile']
        self.assertEqual(profile['company_name'], "Acme Corp")
        self.assertEqual(profile['headquarters'], "1 Main St")
        self.assertEqual(profile['contact_email'], "hr@acme.example")

    def test_update_profile(self):
        response = self.client.put('/api/company/profile', json={
            'companyName': "Acme Corporation",
            'industry': "Technology",
            'companyType': "Private",
            'companySize': "51-200",
            'contactEmail': "ignored@acme.example",
            'specialties': "Cloud, Security",
            'founded': "1999",
            'contactPhone': "+1 555 0100",
        })
        self.assertEqual(response.status_code, 200, response.get_json())
        profile = response.get_json()['profile']
        self.assertEqual(profile['specialties'], ["Cloud", "Security"])
        self.assertEqual(profile['contact_email'], "hr@acme.example")
        self.assertEqual(profile['contact_phone'], "+1 555 0100")

    def test_bad_founded_year(self):
        response = self.client.put('/api/company/profile', json={
            'companyName': "Acme", 'industry': "Technology", 'companyType': "Private",
            'companySize': "1-10", 'contactEmail': "hr@acme.example", 'founded': "nineties",
        })
        self.assertEqual(response.status_code, 400)

    def test_public_company_pages(self):
        self.make_job(self.company['id'], job_title="Account Manager", status='Open')
        companies = self.client.get('/api/companies').get_json()['companies']
        self.assertEqual(len(companies), 1)
        profile_id = companies[0]['id']

        detail = self.client.get(f"/api/companies/{profile_id}").get_json()['company']
        self.assertEqual(detail['company_name'], "Acme Corp")

        jobs = self.client.get(f"/api/jobs/company/jobs/{profile_id}").get_json()['jobs']
        self.assertEqual([j['job_title'] for j in jobs], ["Account Manager"])

        oldest = self.client.get('/api/company-profiles/oldest').get_json()['companies']
        self.assertEqual(oldest[0]['total_active_jobs'], 1)

    def test_dashboard_overview(self):
        response = self.client.get('/api/company/dashboard/overview?interval=years')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['company']['company_name'], "Acme Corp")


if __name__ == '__main__':
    unittest.main()
