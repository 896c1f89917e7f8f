"""
Main deployment orchestrator.

Drives one deploy of one stack: existence check, optional template diff,
change set creation and review, execution, and monitoring to a terminal
status.
"""

import logging
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_sts.client import STSClient

from .change_set_formatter import render_change_set
from .change_set_manager import ChangeSetManager
from .cloudformation_gateway import CloudFormationGateway
from .errors import DeploymentError, NoChangesError, UnexpectedStateError
from .models import Deployment, DeployResult
from .progress_indicator import ProgressIndicator
from .stack_monitor import StackMonitor, utc_now
from .stack_status import ROLLBACK_COMPLETE, StackStatus
from .template_diff import diff_lines

logger = logging.getLogger(__name__)


class DeploymentOrchestrator:
    """Deploys a resolved Deployment through a CloudFormation change set"""

    def __init__(
        self,
        gateway: CloudFormationGateway,
        deployment: Deployment,
        progress: ProgressIndicator,
        show_diff: bool = False,
        change_sets: Optional[ChangeSetManager] = None,
        monitor: Optional[StackMonitor] = None,
    ):
        self.gateway = gateway
        self.deployment = deployment
        self.progress = progress
        self.show_diff = show_diff
        self.change_sets = change_sets or ChangeSetManager(gateway)
        self.monitor = monitor or StackMonitor(gateway, progress)

    @property
    def stack_name(self) -> str:
        return self.deployment.stack_name

    def deploy(self) -> DeployResult:
        """
        Run the deployment. Returns how it ended; remote failures raise
        DeploymentError with the operation context in the message.
        """
        self.progress.field("StackName", self.stack_name)

        exists = self.gateway.stack_exists(self.stack_name)
        logger.info(f"Stack {self.stack_name} exists: {exists}")

        if not exists:
            self.progress.newline()
            if not self.progress.prompt(
                f"Stack {self.stack_name} does not exist. Create?"
            ):
                return DeployResult.ABORTED

        if exists and self.show_diff:
            try:
                self.template_diff()
            except DeploymentError as e:
                raise DeploymentError.wrap("template diff", e) from e

        try:
            change_set = self.change_sets.create_and_await(
                self.deployment, create_new=not exists
            )
        except NoChangesError:
            self.progress.message("\nNo change.")
            self._print_outputs()
            return DeployResult.NO_CHANGE
        except DeploymentError as e:
            raise DeploymentError.wrap("create change set", e) from e

        if not change_set:
            raise UnexpectedStateError("expected a change set description")

        self.progress.newline()
        self.progress.change_set(render_change_set(change_set))

        if self.deployment.protected:
            self.progress.newline()
            if not self.progress.prompt("Execute change set?"):
                return DeployResult.ABORTED

        stack = self._execute(change_set)
        status = StackStatus(stack["StackStatus"])

        if not exists and status == ROLLBACK_COMPLETE:
            self.progress.newline()
            if self.progress.prompt(
                "Stack failed creation, and must be deleted. Continue?"
            ):
                self._delete_failed_stack(stack.get("StackId") or self.stack_name)
                return DeployResult.CLEANED_UP

        self._print_outputs()

        if status.is_failed() or status.is_rollback():
            return DeployResult.ROLLED_BACK
        return DeployResult.COMPLETED

    def _execute(self, change_set: Dict[str, Any]) -> Dict[str, Any]:
        stack_id = change_set.get("StackId") or self.stack_name
        since = utc_now()

        self.gateway.execute_change_set(
            change_set.get("StackName") or self.stack_name,
            change_set["ChangeSetName"],
        )

        try:
            return self.monitor.wait(stack_id, since)
        except DeploymentError as e:
            raise DeploymentError.wrap("monitor stack update", e) from e

    def _delete_failed_stack(self, stack_id: str):
        try:
            self.gateway.delete_stack(stack_id)
        except DeploymentError as e:
            raise DeploymentError.wrap("delete failed stack", e) from e

        try:
            self.monitor.wait(stack_id, utc_now(), expect_deletion=True)
        except DeploymentError as e:
            raise DeploymentError.wrap("monitor stack delete", e) from e

    def _print_outputs(self):
        try:
            outputs = self.gateway.get_stack_outputs(self.stack_name)
        except DeploymentError as e:
            raise DeploymentError.wrap("get stack outputs", e) from e

        if outputs:
            self.progress.newline()
        for output in outputs:
            self.progress.stack_output(output)

    def template_diff(self):
        """Print a diff between the deployed template and the candidate one."""
        self.progress.newline()

        if not self.gateway.stack_exists(self.stack_name):
            raise DeploymentError(f"stack {self.stack_name} does not exist.")

        deployed = self.gateway.get_template(self.stack_name)
        for line in diff_lines(deployed, self.deployment.template_text()):
            self.progress.diff_line(line.text, line.kind)


def whoami(
    sts_client: STSClient, progress: ProgressIndicator, region: str
) -> Dict[str, Any]:
    """Print the identity a deployment would run as."""
    try:
        identity = sts_client.get_caller_identity()
    except (ClientError, BotoCoreError) as e:
        raise DeploymentError.wrap("get caller identity", e) from e

    progress.whoami(identity, region)
    return identity
