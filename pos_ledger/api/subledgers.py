"""
Accounts receivable and payable endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_ledger.api.errors import unwrap
from pos_ledger.models.base import get_db
from pos_ledger.schemas.subledger import (
    ReceivableUpsert,
    ReceivableResponse,
    PayableUpsert,
    PayableResponse,
)
from pos_ledger.services.operations import run_operation
from pos_ledger.services.subledger_service import SubledgerService

router = APIRouter(tags=["Subledgers"])


# --- Receivables ---

@router.put("/receivables", response_model=ReceivableResponse)
def upsert_receivable(
    request: ReceivableUpsert,
    db: Session = Depends(get_db),
):
    """
    Create or update a sale's receivable.

    paid_amount is the cumulative amount received, not a delta.
    """
    service = SubledgerService(db)
    return unwrap(run_operation(db, service.upsert_receivable, request))


@router.get("/receivables", response_model=list[ReceivableResponse])
def list_open_receivables(
    device_id: int,
    db: Session = Depends(get_db),
):
    """Receivables with an outstanding balance, newest first."""
    service = SubledgerService(db)
    return unwrap(run_operation(
        db, service.list_open_receivables, device_id, commit=False
    ))


# --- Payables ---

@router.put("/payables", response_model=PayableResponse)
def upsert_payable(
    request: PayableUpsert,
    db: Session = Depends(get_db),
):
    """Create or update a purchase's payable."""
    service = SubledgerService(db)
    return unwrap(run_operation(db, service.upsert_payable, request))


@router.get("/payables", response_model=list[PayableResponse])
def list_open_payables(
    device_id: int,
    db: Session = Depends(get_db),
):
    service = SubledgerService(db)
    return unwrap(run_operation(
        db, service.list_open_payables, device_id, commit=False
    ))
