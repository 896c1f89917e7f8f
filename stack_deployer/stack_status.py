"""
Classification of CloudFormation stack and change set status strings.
"""

COMPLETE_SUFFIX = "_COMPLETE"
FAILED_SUFFIX = "_FAILED"
ROLLBACK_IN_PROGRESS_SUFFIX = "_ROLLBACK_IN_PROGRESS"
DELETE_PREFIX = "DELETE_"

ROLLBACK_COMPLETE = "ROLLBACK_COMPLETE"
DELETE_COMPLETE = "DELETE_COMPLETE"

# Change sets use their own status values
CHANGE_SET_CREATE_COMPLETE = "CREATE_COMPLETE"
CHANGE_SET_FAILED = "FAILED"
CHANGE_SET_DELETE_COMPLETE = "DELETE_COMPLETE"


class StackStatus(str):
    """A stack status value; anything not terminal is still in progress."""

    def is_complete(self) -> bool:
        return self.endswith(COMPLETE_SUFFIX)

    def is_failed(self) -> bool:
        return self.endswith(FAILED_SUFFIX)

    def is_terminal(self) -> bool:
        return self.is_complete() or self.is_failed()

    def is_rollback(self) -> bool:
        return "ROLLBACK" in self

    def is_deletion(self) -> bool:
        return self.startswith(DELETE_PREFIX)


def is_failure_event(resource_status: str) -> bool:
    """Whether a stack event should be surfaced while monitoring"""
    return resource_status.endswith(FAILED_SUFFIX) or resource_status.endswith(
        ROLLBACK_IN_PROGRESS_SUFFIX
    )
