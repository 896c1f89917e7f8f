"""
Value types shared by the deployment components.
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Mapping


@dataclass(frozen=True)
class Deployment:
    """A fully resolved intent to deploy one template to one stack."""

    stack_name: str
    template_body: bytes
    parameters: Mapping[str, str] = field(default_factory=dict)
    protected: bool = False
    tenant_label: str = ""
    stack_label: str = ""
    constants: Mapping[str, str] = field(default_factory=dict)
    tags: Mapping[str, str] = field(default_factory=dict)
    account_id: str = ""
    region: str = ""

    def template_text(self) -> str:
        return self.template_body.decode("utf-8")

    def parameter_list(self) -> List[Dict[str, str]]:
        """Parameters in the shape CloudFormation expects."""
        return [
            {"ParameterKey": key, "ParameterValue": value}
            for key, value in self.parameters.items()
        ]

    def tag_list(self) -> List[Dict[str, str]]:
        return [{"Key": key, "Value": value} for key, value in self.tags.items()]


class DeployResult(enum.Enum):
    """How a deploy invocation ended when it did not raise"""

    COMPLETED = "completed"
    NO_CHANGE = "no_change"
    ABORTED = "aborted"  # the user declined a confirmation prompt
    CLEANED_UP = "cleaned_up"  # failed creation, orphaned stack deleted
    ROLLED_BACK = "rolled_back"
