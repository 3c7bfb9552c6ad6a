"""Inline and fire-and-forget delivery on top of a ``Mailer``."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from notifier.mailer import Mailer, EmailMessage

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes messages to the mailer.

    ``send`` blocks and propagates failures, for flows that cannot complete
    without the email. ``send_quietly`` blocks but only logs failures.
    ``send_later`` returns immediately and logs failures from a worker thread.
    """

    def __init__(self, mailer: Mailer, max_workers: int = 4):
        self.mailer = mailer
        self._max_workers = max(1, max_workers)
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="email-worker"
                )
            return self._executor

    def send(self, message: EmailMessage) -> None:
        self.mailer.send(message)

    def send_quietly(self, message: EmailMessage) -> bool:
        try:
            self.mailer.send(message)
            return True
        except Exception as e:
            logger.error(f"Failed to send '{message.subject}' to {message.to_email}: {e}")
            return False

    def send_later(self, message: EmailMessage) -> Future:
        future = self._get_executor().submit(self.mailer.send, message)
        future.add_done_callback(lambda f: self._log_failure(f, message))
        return future

    @staticmethod
    def _log_failure(future: Future, message: EmailMessage) -> None:
        error = future.exception()
        if error is not None:
            logger.error(f"Background email '{message.subject}' to {message.to_email} failed: {error}")

    def shutdown(self, wait: bool = True) -> None:
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None
