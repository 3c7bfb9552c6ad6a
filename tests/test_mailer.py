import smtplib
import unittest
from unittest import mock

from notifier import EmailDeliveryError, EmailMessage, Mailer
from tests.support import ApiTestCase


def smtp_mailer():
    return Mailer(provider='smtp', host='127.0.0.1', port=1, username='mailer', password='secret')


class MailerTests(unittest.TestCase):

    def setUp(self):
        self.message = EmailMessage("alice@example.com", "Hello", "Hi there")

    @mock.patch('notifier.mailer.smtplib.SMTP')
    def test_smtp_failure_raises_generic_error(self, mock_smtp):
        mock_smtp.side_effect = ConnectionRefusedError(111, "Connection refused")

        with self.assertLogs('notifier.mailer', level='ERROR') as logs:
            with self.assertRaises(EmailDeliveryError) as raised:
                smtp_mailer().send(self.message)

        self.assertEqual(raised.exception.message, "Failed to send email")
        self.assertIn("Connection refused", "\n".join(logs.output))

    @mock.patch('notifier.mailer.smtplib.SMTP')
    def test_smtp_rejection_keeps_server_reply_out_of_message(self, mock_smtp):
        server = mock_smtp.return_value.__enter__.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"5.7.8 Bad credentials")

        with self.assertRaises(EmailDeliveryError) as raised:
            smtp_mailer().send(self.message)

        self.assertNotIn("535", raised.exception.message)

    def test_missing_credentials(self):
        with self.assertRaises(EmailDeliveryError) as raised:
            Mailer(provider='smtp').send(self.message)
        self.assertEqual(raised.exception.message, "Failed to send email")

    def test_unknown_provider(self):
        with self.assertRaises(EmailDeliveryError):
            Mailer(provider='pigeon').send(self.message)


class DeliveryFailureApiTests(ApiTestCase):

    @mock.patch('notifier.mailer.smtplib.SMTP')
    def test_registration_hides_transport_error(self, mock_smtp):
        mock_smtp.side_effect = ConnectionRefusedError(111, "Connection refused")
        self.ctx.dispatcher.mailer = smtp_mailer()

        response = self.client.post('/api/auth/register', json={
            'name': "Alice", 'email': "alice@example.com", 'password': "longenough",
        })

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {'success': False, 'message': "Failed to send email"})


if __name__ == '__main__':
    unittest.main()
