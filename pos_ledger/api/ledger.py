"""
Ledger API endpoints.

These endpoints expose the Ledger Recorder and the sale and
purchase booking flows to HTTP clients. The API layer is thin:
it handles HTTP concerns (status codes, response formatting)
and delegates all business logic to the services through
run_operation().
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pos_ledger.api.errors import unwrap
from pos_ledger.models.base import get_db
from pos_ledger.models.enums import ReferenceType, TransactionType
from pos_ledger.models.reference import Reference
from pos_ledger.schemas.documents import (
    SaleRecord,
    PurchaseRecord,
    SaleRecordResult,
    PurchaseRecordResult,
)
from pos_ledger.schemas.ledger import (
    LedgerEntryCreate,
    LedgerEntryResponse,
    ManualTransactionCreate,
    CogsRequest,
    CogsResult,
)
from pos_ledger.services.accounting_service import AccountingService
from pos_ledger.services.ledger_service import LedgerService
from pos_ledger.services.operations import run_operation

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.post("/entries", response_model=LedgerEntryResponse, status_code=201)
def record_entry(
    request: LedgerEntryCreate,
    db: Session = Depends(get_db),
):
    """
    Append one entry to the ledger.

    The debit or credit side is chosen from account_type;
    callers never set it themselves.
    """
    service = LedgerService(db)
    return unwrap(run_operation(db, service.record, request))


@router.get("/entries", response_model=list[LedgerEntryResponse])
def list_entries(
    device_id: int,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    transaction_type: TransactionType | None = None,
    reference_type: ReferenceType | None = None,
    reference_id: int | None = None,
    db: Session = Depends(get_db),
):
    """
    List a device's ledger entries, newest first.

    Pass reference_type (and reference_id for sales and
    purchases) to get every entry a single document produced.
    """
    service = LedgerService(db)
    if reference_type is not None:
        try:
            reference = Reference(reference_type, reference_id)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return unwrap(run_operation(
            db, service.get_entries_by_reference, reference, device_id,
            commit=False,
        ))
    return unwrap(run_operation(
        db, service.get_entries, device_id, date_from, date_to,
        transaction_type, commit=False,
    ))


@router.post("/manual", response_model=LedgerEntryResponse, status_code=201)
def add_manual_transaction(
    request: ManualTransactionCreate,
    db: Session = Depends(get_db),
):
    """Record income or an expense entered by hand."""
    service = AccountingService(db)
    return unwrap(run_operation(db, service.add_manual_transaction, request))


@router.post("/cogs", response_model=CogsResult, status_code=201)
def record_cogs(
    request: CogsRequest,
    db: Session = Depends(get_db),
):
    """
    Expense the cost of a sale's items.

    Returns 404 if any product is unknown; nothing is recorded
    in that case.
    """
    service = AccountingService(db)
    outcome = unwrap(run_operation(db, service.record_cogs, request))
    return CogsResult.model_validate(outcome, from_attributes=True)


@router.post("/sales", response_model=SaleRecordResult, status_code=201)
def record_sale(
    request: SaleRecord,
    db: Session = Depends(get_db),
):
    """Book a finalized sale: revenue, COGS, payment and receivable."""
    service = AccountingService(db)
    outcome = unwrap(run_operation(db, service.record_sale, request))
    return SaleRecordResult.model_validate(outcome, from_attributes=True)


@router.post("/purchases", response_model=PurchaseRecordResult, status_code=201)
def record_purchase(
    request: PurchaseRecord,
    db: Session = Depends(get_db),
):
    """Book a received purchase: expense, payment and payable."""
    service = AccountingService(db)
    outcome = unwrap(run_operation(db, service.record_purchase, request))
    return PurchaseRecordResult.model_validate(outcome, from_attributes=True)
