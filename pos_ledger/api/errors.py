"""
Translate failed OperationResults into HTTP errors.
"""

from fastapi import HTTPException, status

from pos_ledger.exceptions import ErrorKind
from pos_ledger.services.operations import OperationResult

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def unwrap(result: OperationResult):
    """Return result.data, or raise the HTTPException matching its error."""
    if result.success:
        return result.data
    raise HTTPException(
        status_code=STATUS_BY_KIND.get(
            result.error_kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
        detail=result.message,
    )
