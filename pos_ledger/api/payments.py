"""
Payment API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_ledger.api.errors import unwrap
from pos_ledger.models.base import get_db
from pos_ledger.schemas.payment import PaymentCreate, PaymentResult
from pos_ledger.services.accounting_service import AccountingService
from pos_ledger.services.operations import run_operation

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", response_model=PaymentResult, status_code=201)
def record_payment(
    request: PaymentCreate,
    db: Session = Depends(get_db),
):
    """
    Record a payment received against a sale or made against a
    purchase.

    The payment row, its ledger entry and the subledger update
    are committed together. A sale paid in full at the till has
    no receivable, in which case receivable is null.
    """
    service = AccountingService(db)
    outcome = unwrap(run_operation(db, service.record_payment, request))
    return PaymentResult.model_validate(outcome, from_attributes=True)
