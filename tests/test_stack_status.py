"""
Unit tests for stack status classification.
"""

import pytest

from stack_deployer.stack_status import StackStatus, is_failure_event


@pytest.mark.parametrize(
    "status",
    ["CREATE_COMPLETE", "UPDATE_COMPLETE", "ROLLBACK_COMPLETE", "UPDATE_ROLLBACK_COMPLETE"],
)
def test_complete_statuses_are_terminal(status):
    """Test that _COMPLETE statuses are terminal."""
    status = StackStatus(status)
    assert status.is_complete() is True
    assert status.is_failed() is False
    assert status.is_terminal() is True


@pytest.mark.parametrize(
    "status", ["CREATE_FAILED", "ROLLBACK_FAILED", "DELETE_FAILED", "UPDATE_ROLLBACK_FAILED"]
)
def test_failed_statuses_are_terminal(status):
    """Test that _FAILED statuses are terminal."""
    status = StackStatus(status)
    assert status.is_failed() is True
    assert status.is_complete() is False
    assert status.is_terminal() is True


@pytest.mark.parametrize(
    "status",
    [
        "CREATE_IN_PROGRESS",
        "UPDATE_COMPLETE_CLEANUP_IN_PROGRESS",
        "REVIEW_IN_PROGRESS",
        "UNKNOWN",
        "",
        "COMPLETE",
    ],
)
def test_other_statuses_are_in_progress(status):
    """Test that everything else is in progress."""
    status = StackStatus(status)
    assert status.is_complete() is False
    assert status.is_failed() is False
    assert status.is_terminal() is False


def test_rollback_detection():
    """Test rollback detection."""
    assert StackStatus("UPDATE_ROLLBACK_COMPLETE").is_rollback() is True
    assert StackStatus("UPDATE_COMPLETE").is_rollback() is False


def test_deletion_detection():
    """Only DELETE_ statuses belong to a stack deletion."""
    assert StackStatus("DELETE_IN_PROGRESS").is_deletion() is True
    assert StackStatus("DELETE_FAILED").is_deletion() is True
    assert StackStatus("ROLLBACK_COMPLETE").is_deletion() is False


def test_stack_status_compares_as_string():
    """Test that a status compares equal to its string."""
    assert StackStatus("UPDATE_COMPLETE") == "UPDATE_COMPLETE"


@pytest.mark.parametrize(
    "resource_status, expected",
    [
        ("CREATE_FAILED", True),
        ("UPDATE_FAILED", True),
        ("UPDATE_ROLLBACK_IN_PROGRESS", True),
        ("ROLLBACK_IN_PROGRESS", False),
        ("CREATE_IN_PROGRESS", False),
        ("UPDATE_COMPLETE", False),
    ],
)
def test_is_failure_event(resource_status, expected):
    """Test which resource statuses are surfaced."""
    assert is_failure_event(resource_status) is expected
