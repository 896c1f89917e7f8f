"""
Deadline and cancellation checks shared by the polling loops.
"""

import threading
import time
from typing import Optional

from .errors import PollingCancelledError, PollingTimeoutError


class PollBudget:
    """Tracks how long a polling loop may keep going"""

    def __init__(
        self,
        operation: str,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.operation = operation
        self.timeout = timeout or None
        self.cancel_event = cancel_event
        self.started = time.monotonic()

    def check(self):
        """Raise if the loop was cancelled or ran past its deadline."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise PollingCancelledError(f"{self.operation} cancelled")

        if self.timeout is not None:
            elapsed = time.monotonic() - self.started
            if elapsed > self.timeout:
                raise PollingTimeoutError(
                    f"{self.operation} timed out after {int(elapsed)}s"
                )
