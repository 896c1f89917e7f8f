"""
Polls a stack until it reaches a terminal status, reporting progress and any
resource failures as they happen.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from config import (
    STACK_POLL_LONG_INTERVAL,
    STACK_POLL_RAPID_ATTEMPTS,
    STACK_POLL_SHORT_INTERVAL,
)

from .cloudformation_gateway import CloudFormationGateway
from .errors import StackNotFoundError, UnexpectedStateError
from .polling import PollBudget
from .progress_indicator import ProgressIndicator
from .stack_status import DELETE_COMPLETE, StackStatus, is_failure_event

logger = logging.getLogger(__name__)


def poll_interval(attempts_since_transition: int) -> float:
    """Seconds to wait before the next poll: rapid right after a status change."""
    if attempts_since_transition < STACK_POLL_RAPID_ATTEMPTS:
        return STACK_POLL_SHORT_INTERVAL
    return STACK_POLL_LONG_INTERVAL


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StackMonitor:
    """Follows a stack update (or deletion) to completion"""

    def __init__(
        self,
        gateway: CloudFormationGateway,
        progress: ProgressIndicator,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.gateway = gateway
        self.progress = progress
        self.timeout = timeout
        self.cancel_event = cancel_event

    def _describe(self, stack_id: str, expect_deletion: bool) -> Dict[str, Any]:
        try:
            stack = self.gateway.describe_stack(stack_id)
        except StackNotFoundError:
            # Deleted stacks disappear when described by name
            if expect_deletion:
                return {"StackId": stack_id, "StackStatus": DELETE_COMPLETE}
            raise

        if not stack or not stack.get("StackStatus"):
            raise UnexpectedStateError(f"no status returned for stack {stack_id}")

        return stack

    def _report_failures(self, stack_id: str, since: datetime, until: datetime):
        for event in self.gateway.describe_stack_events(stack_id, since, until):
            if is_failure_event(event.get("ResourceStatus", "")):
                self.progress.stack_event(event)

    def wait(
        self,
        stack_id: str,
        since: datetime,
        expect_deletion: bool = False,
    ) -> Dict[str, Any]:
        """
        Poll until the stack status is terminal and return the final stack.

        Each status change is announced once, after any failure events logged
        since the previous change.
        """
        budget = PollBudget(f"stack {stack_id}", self.timeout, self.cancel_event)
        last_status = StackStatus("UNKNOWN")
        attempts = 0

        while True:
            stack = self._describe(stack_id, expect_deletion)
            status = StackStatus(stack["StackStatus"])
            logger.debug(f"Stack {stack_id} status: {status}")

            if status != last_status:
                self.progress.newline()
                now = utc_now()
                if not (expect_deletion and status == DELETE_COMPLETE):
                    self._report_failures(stack_id, since, now)
                since = now

                last_status, attempts = status, 0
                self.progress.status(status)

            # Right after delete_stack the previous terminal status can still be read
            if status.is_terminal() and (status.is_deletion() or not expect_deletion):
                self.progress.newline()
                return stack

            time.sleep(poll_interval(attempts))
            attempts += 1
            budget.check()
            self.progress.dot()
