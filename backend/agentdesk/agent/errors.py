"""Errors raised before an agent action is executed.

Failures *during* execution are reported as data (see ExecutionResult) and
never surface as these exceptions.
"""

from __future__ import annotations


class ConfirmationError(Exception):
    """Base class for confirmation precondition failures."""


class NotFoundError(ConfirmationError):
    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__(f"Agent event with id {event_id} not found")


class InvalidStateError(ConfirmationError):
    def __init__(self, event_id: int, status: str):
        self.event_id = event_id
        self.status = status
        super().__init__(
            f"Agent event {event_id} is not awaiting confirmation "
            f"(current status: {status})"
        )
