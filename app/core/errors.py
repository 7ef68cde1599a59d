"""
Error taxonomy for the measurement pipeline.

Validation errors are raised before any computation or write; storage errors
wrap whatever the database layer raised.
"""
from typing import Iterable, Optional


class MeasurementError(Exception):
    """Base class for errors surfaced to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(MeasurementError):
    def __init__(self, fields: Iterable[str]):
        super().__init__("Missing required fields")
        self.fields = list(fields)


class InvalidValueError(MeasurementError):
    def __init__(self, message: str = "Invalid values: must be positive numbers", field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StorageFailure(MeasurementError):
    """
    The persistence layer failed during insert/read/aggregate.

    `retryable` is a hint only: connection-level faults are marked retryable,
    everything else is not. Nothing in the service retries automatically.
    """

    def __init__(self, operation: str, retryable: bool = False):
        super().__init__(f"Storage failure during {operation}")
        self.operation = operation
        self.retryable = retryable
