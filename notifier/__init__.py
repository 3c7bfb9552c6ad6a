"""Email transport, delivery modes and message templates."""

from .mailer import Mailer, EmailMessage, EmailDeliveryError
from .dispatch import Dispatcher

__all__ = ["Mailer", "EmailMessage", "EmailDeliveryError", "Dispatcher"]
