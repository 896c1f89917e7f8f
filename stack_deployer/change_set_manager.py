"""
Creates a change set for a deployment and waits until it can be reviewed.
"""

import logging
import threading
import time
import uuid
from typing import Any, Dict, Optional, Sequence

from config import (
    CHANGE_SET_CAPABILITIES,
    CHANGE_SET_NAME_PREFIX,
    CHANGE_SET_POLL_INTERVAL,
)

from .cloudformation_gateway import CloudFormationGateway
from .errors import ChangeSetFailedError, ChangeSetRemovedError
from .models import Deployment
from .polling import PollBudget
from .stack_status import (
    CHANGE_SET_CREATE_COMPLETE,
    CHANGE_SET_DELETE_COMPLETE,
    CHANGE_SET_FAILED,
)

logger = logging.getLogger(__name__)


def generate_change_set_name() -> str:
    """A change set name that will not collide with earlier attempts"""
    return f"{CHANGE_SET_NAME_PREFIX}{uuid.uuid4()}"


class ChangeSetManager:
    """Change set lifecycle: create, then poll until usable or failed"""

    def __init__(
        self,
        gateway: CloudFormationGateway,
        poll_interval: float = CHANGE_SET_POLL_INTERVAL,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        capabilities: Sequence[str] = tuple(CHANGE_SET_CAPABILITIES),
    ):
        self.gateway = gateway
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.cancel_event = cancel_event
        self.capabilities = capabilities
        self.change_set_name: Optional[str] = None

    def create_and_await(
        self, deployment: Deployment, create_new: bool
    ) -> Dict[str, Any]:
        """
        Create a change set and return its description once it is ready.

        Raises NoChangesError when the template and parameters match what is
        deployed, ChangeSetFailedError with the reason reported by
        CloudFormation, and ChangeSetRemovedError if the change set vanishes.
        """
        self.change_set_name = generate_change_set_name()

        self.gateway.create_change_set(
            stack_name=deployment.stack_name,
            change_set_name=self.change_set_name,
            template_body=deployment.template_text(),
            parameters=deployment.parameter_list(),
            change_set_type="CREATE" if create_new else "UPDATE",
            capabilities=self.capabilities,
            tags=deployment.tag_list(),
        )

        budget = PollBudget(
            f"change set {self.change_set_name}", self.timeout, self.cancel_event
        )

        while True:
            # It's probably not going to be ready immediately anyway, so wait
            # at the start of the loop.
            time.sleep(self.poll_interval)
            budget.check()

            description = self.gateway.describe_change_set(
                deployment.stack_name, self.change_set_name
            )
            status = description.get("Status")
            logger.debug(f"Change set {self.change_set_name} status: {status}")

            if status == CHANGE_SET_CREATE_COMPLETE:
                return description

            if status == CHANGE_SET_FAILED:
                raise ChangeSetFailedError(description.get("StatusReason", ""))

            if status == CHANGE_SET_DELETE_COMPLETE:
                raise ChangeSetRemovedError()
