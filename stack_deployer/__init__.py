"""
Deploys CloudFormation stacks through reviewed change sets.
"""

from .deployment_orchestrator import DeploymentOrchestrator
from .errors import DeploymentError
from .models import Deployment, DeployResult

__all__ = [
    "Deployment",
    "DeploymentError",
    "DeploymentOrchestrator",
    "DeployResult",
]
