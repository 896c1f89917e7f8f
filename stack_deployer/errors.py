"""
Exceptions raised while deploying a stack.

Every remote failure surfaces as a DeploymentError whose message is the
accumulated "<operation>: <cause>" chain. User cancellation is not an
exception, see DeployResult.ABORTED.
"""


class DeploymentError(Exception):
    """Base error for a failed deploy attempt"""

    @classmethod
    def wrap(cls, context: str, error: BaseException) -> "DeploymentError":
        """Build an error prefixed with an operation label."""
        return cls(f"{context}: {error}")


class StackNotFoundError(DeploymentError):
    """The named stack does not exist"""

    def __init__(self, stack_name: str, message: str = ""):
        self.stack_name = stack_name
        super().__init__(message or f"stack {stack_name} does not exist")


class NoChangesError(DeploymentError):
    """The submitted template and parameters match the deployed stack"""


class ChangeSetFailedError(DeploymentError):
    """The change set could not be created"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to create change set: {reason}")


class ChangeSetRemovedError(DeploymentError):
    """The change set was deleted while we were waiting for it"""

    def __init__(self):
        super().__init__("change set removed unexpectedly")


class UnexpectedStateError(DeploymentError):
    """The remote API returned something we cannot continue from"""


class PollingTimeoutError(DeploymentError):
    """A polling loop ran past its deadline"""


class PollingCancelledError(DeploymentError):
    """A polling loop was stopped by an external cancellation signal"""
