"""
Domain exceptions for the accounting core.

Services raise these; run_operation() turns them into an
OperationResult so that no exception crosses the core's
boundary. Each exception carries the ErrorKind the caller
sees.
"""

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    VALIDATION_FAILED = "validation_failed"
    CONFLICT = "conflict"


class AccountingError(Exception):
    """Base class for every error raised by the accounting services."""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RecordNotFoundError(AccountingError):
    """A referenced sale, purchase, product or subledger row does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(
            message, details={"resource": resource, "id": resource_id}
        )


class InvalidEntryError(AccountingError):
    """The request is well-formed but violates a bookkeeping rule."""

    kind = ErrorKind.VALIDATION_FAILED


class ConflictError(AccountingError):
    """A concurrent writer already created the same natural key."""

    kind = ErrorKind.CONFLICT


class StoreUnavailableError(AccountingError):
    """The persistent store could not be reached or refused the statement."""

    kind = ErrorKind.STORE_UNAVAILABLE
