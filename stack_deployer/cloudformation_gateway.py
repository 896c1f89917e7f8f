"""
Adapter over the CloudFormation API.

All botocore errors are translated here. Conditions that the deployment flow
treats as outcomes rather than failures (a missing stack, a change set without
changes) are raised as their own exception types so callers never need to
look at error message text.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_cloudformation.client import CloudFormationClient

from .errors import (
    ChangeSetRemovedError,
    DeploymentError,
    NoChangesError,
    StackNotFoundError,
)
from .stack_status import CHANGE_SET_FAILED
from .template_diff import normalize_template_body

logger = logging.getLogger(__name__)

# The API reports these as plain validation errors or failure reasons
NO_CHANGES_MARKERS = (
    "didn't contain changes",
    "No updates are to be performed",
)
STACK_MISSING_MARKER = "does not exist"


def get_aws_error_message(error: ClientError) -> str:
    """Safely extracts the error message from a ClientError response."""
    return str(error.response.get("Error", {}).get("Message") or error)


def get_aws_error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", "Unknown"))


def is_no_changes_message(message: Optional[str]) -> bool:
    return bool(message) and any(marker in message for marker in NO_CHANGES_MARKERS)


class CloudFormationGateway:
    """The CloudFormation operations used by a deployment"""

    def __init__(self, client: CloudFormationClient):
        self.client = client

    def describe_stack(self, stack_name: str) -> Dict[str, Any]:
        """Describe a stack by name or id. Raises StackNotFoundError."""
        logger.debug(f"Describing stack {stack_name}")
        try:
            response = self.client.describe_stacks(StackName=stack_name)
        except ClientError as e:
            if STACK_MISSING_MARKER in get_aws_error_message(e):
                raise StackNotFoundError(stack_name, get_aws_error_message(e)) from e
            raise DeploymentError.wrap(f"describe stack {stack_name}", e) from e
        except BotoCoreError as e:
            raise DeploymentError.wrap(f"describe stack {stack_name}", e) from e

        stacks = response.get("Stacks", [])
        if len(stacks) != 1:
            raise StackNotFoundError(stack_name, f"stack {stack_name} not found")

        return stacks[0]

    def stack_exists(self, stack_name: str) -> bool:
        try:
            self.describe_stack(stack_name)
        except StackNotFoundError:
            return False
        return True

    def create_change_set(
        self,
        stack_name: str,
        change_set_name: str,
        template_body: str,
        parameters: List[Dict[str, str]],
        change_set_type: str,
        capabilities: Sequence[str],
        tags: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        logger.debug(
            f"Creating {change_set_type} change set {change_set_name} for {stack_name}"
        )
        request: Dict[str, Any] = {
            "StackName": stack_name,
            "ChangeSetName": change_set_name,
            "TemplateBody": template_body,
            "Parameters": parameters,
            "ChangeSetType": change_set_type,
            "Capabilities": list(capabilities),
        }
        if tags:
            request["Tags"] = tags

        try:
            return self.client.create_change_set(**request)
        except ClientError as e:
            if is_no_changes_message(get_aws_error_message(e)):
                raise NoChangesError(get_aws_error_message(e)) from e
            raise DeploymentError.wrap("create change set request", e) from e
        except BotoCoreError as e:
            raise DeploymentError.wrap("create change set request", e) from e

    def describe_change_set(
        self, stack_name: str, change_set_name: str
    ) -> Dict[str, Any]:
        """
        Describe a change set, merging every page of Changes.
        A change set that failed only because nothing changed raises
        NoChangesError.
        """
        request = {"StackName": stack_name, "ChangeSetName": change_set_name}
        try:
            description = self.client.describe_change_set(**request)
            changes = list(description.get("Changes", []))
            next_token = description.get("NextToken")
            while next_token:
                page = self.client.describe_change_set(**request, NextToken=next_token)
                changes.extend(page.get("Changes", []))
                next_token = page.get("NextToken")
        except ClientError as e:
            if get_aws_error_code(e) == "ChangeSetNotFound":
                raise ChangeSetRemovedError() from e
            raise DeploymentError.wrap("describe change set", e) from e
        except BotoCoreError as e:
            raise DeploymentError.wrap("describe change set", e) from e

        description = dict(description)
        description["Changes"] = changes
        description.pop("NextToken", None)

        if description.get("Status") == CHANGE_SET_FAILED and is_no_changes_message(
            description.get("StatusReason")
        ):
            raise NoChangesError(description["StatusReason"])

        return description

    def execute_change_set(self, stack_name: str, change_set_name: str) -> None:
        logger.debug(f"Executing change set {change_set_name} on {stack_name}")
        try:
            self.client.execute_change_set(
                StackName=stack_name, ChangeSetName=change_set_name
            )
        except (ClientError, BotoCoreError) as e:
            raise DeploymentError.wrap("execute change set", e) from e

    def delete_stack(self, stack_name: str) -> None:
        logger.debug(f"Deleting stack {stack_name}")
        try:
            self.client.delete_stack(StackName=stack_name)
        except (ClientError, BotoCoreError) as e:
            raise DeploymentError.wrap("delete stack", e) from e

    def describe_stack_events(
        self, stack_name: str, since: datetime, until: datetime
    ) -> List[Dict[str, Any]]:
        """Stack events with since <= Timestamp < until, oldest first."""
        events = []
        try:
            paginator = self.client.get_paginator("describe_stack_events")
            for page in paginator.paginate(StackName=stack_name):
                older_seen = False
                for event in page.get("StackEvents", []):
                    timestamp = event["Timestamp"]
                    if timestamp < since:
                        older_seen = True
                    elif timestamp < until:
                        events.append(event)

                # Events are returned newest first
                if older_seen:
                    break
        except (ClientError, BotoCoreError) as e:
            raise DeploymentError.wrap("describe stack events", e) from e

        events.reverse()
        return events

    def get_template(self, stack_name: str) -> str:
        """The template the stack was last deployed with, as text."""
        try:
            response = self.client.get_template(
                StackName=stack_name, TemplateStage="Original"
            )
        except (ClientError, BotoCoreError) as e:
            raise DeploymentError.wrap("get template", e) from e

        return normalize_template_body(response.get("TemplateBody", ""))

    def get_stack_outputs(self, stack_name: str) -> List[Dict[str, Any]]:
        return list(self.describe_stack(stack_name).get("Outputs", []))
