"""Exceptions raised by the preprocessing context."""

from typing import Optional


class InvalidResumeInputError(ValueError):
    """
    Raised when the resume argument itself is missing.

    Malformed or missing optional fields are normalized instead; only an absent
    record is fatal to a preprocessing call.

    Attributes:
        message: Error description
        operation: Name of the operation that received the missing input
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.message = message
        self.operation = operation
        super().__init__(f"{operation}: {message}" if operation else message)
