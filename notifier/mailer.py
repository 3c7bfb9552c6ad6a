"""Outbound email transport."""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from core.errors import ServerError

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


class EmailDeliveryError(ServerError):
    """The transport refused or failed to deliver a message."""
    default_message = "Failed to send email"


@dataclass
class EmailMessage:
    """Email message data."""
    to_email: str
    subject: str
    text_content: str
    html_content: Optional[str] = None


class Mailer:
    """Sends ``EmailMessage`` objects over SMTP, or logs them in console mode."""

    def __init__(self, provider: str = 'console', host: str = 'smtp.gmail.com', port: int = 587,
                 username: str = '', password: str = '', from_email: str = ''):
        self.provider = provider
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username

    def send(self, message: EmailMessage) -> None:
        """Deliver ``message`` or raise ``EmailDeliveryError``."""
        if self.provider == 'console':
            self._send_console(message)
        elif self.provider == 'smtp':
            self._send_smtp(message)
        else:
            logger.error(f"Unknown email provider: {self.provider}")
            raise EmailDeliveryError()

    def _send_console(self, message: EmailMessage) -> None:
        logger.info(f"EMAIL (console mode) to={message.to_email} subject={message.subject!r}")
        logger.debug(message.text_content)

    def _send_smtp(self, message: EmailMessage) -> None:
        if not all([self.username, self.password]):
            logger.error("SMTP credentials not configured")
            raise EmailDeliveryError()

        msg = MIMEMultipart('alternative')
        msg['Subject'] = message.subject
        msg['From'] = self.from_email
        msg['To'] = message.to_email
        msg.attach(MIMEText(message.text_content, 'plain'))
        if message.html_content:
            msg.attach(MIMEText(message.html_content, 'html'))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.sendmail(self.from_email, [message.to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {message.to_email}: {e}", exc_info=True)
            raise EmailDeliveryError() from e
        logger.info(f"Email sent to {message.to_email}: {message.subject}")
