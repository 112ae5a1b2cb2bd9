"""
Unit-of-work boundary for the accounting core.

Services raise; run_operation() catches, commits or rolls back,
and hands the caller an OperationResult. Nothing a service
raises escapes past this point.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pos_ledger.exceptions import AccountingError, ErrorKind

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    success: bool
    data: Any = None
    message: str = ""
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "OK") -> "OperationResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, message=message, error_kind=kind)


def classify_error(exc: Exception) -> ErrorKind:
    if isinstance(exc, AccountingError):
        return exc.kind
    if isinstance(exc, (ValidationError, ValueError)):
        return ErrorKind.VALIDATION_FAILED
    if isinstance(exc, IntegrityError):
        return ErrorKind.CONFLICT
    return ErrorKind.STORE_UNAVAILABLE


def run_operation(
    db: Session,
    operation: Callable[..., Any],
    *args: Any,
    commit: bool = True,
    **kwargs: Any,
) -> OperationResult:
    """
    Run one accounting operation as a single transaction.

    On success the session is committed (unless commit=False,
    for read-only calls) and the operation's return value is
    carried in result.data. On any accounting, validation or
    database error the session is rolled back and the failure
    is reported with its ErrorKind.
    """
    name = getattr(operation, "__name__", repr(operation))
    try:
        data = operation(*args, **kwargs)
        if commit:
            db.commit()
        return OperationResult.ok(data)
    except (AccountingError, ValueError, SQLAlchemyError) as e:
        db.rollback()
        kind = classify_error(e)
        if kind == ErrorKind.STORE_UNAVAILABLE:
            logger.error("%s failed: store unavailable: %s", name, e)
        else:
            logger.warning("%s rejected (%s): %s", name, kind.value, e)
        message = e.message if isinstance(e, AccountingError) else str(e)
        return OperationResult.fail(kind, message)
