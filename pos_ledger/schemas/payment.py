"""
Pydantic schemas for payments.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from pos_ledger.models.enums import ReferenceType
from pos_ledger.models.reference import Reference
from pos_ledger.schemas.ledger import LedgerEntryResponse
from pos_ledger.schemas.subledger import ReceivableResponse, PayableResponse
from pos_ledger.schemas.types import UtcDatetime


class PaymentCreate(BaseModel):
    """A payment against a sale (money in) or a purchase (money out)."""
    reference_type: ReferenceType
    reference_id: int | None = None
    amount: Decimal = Field(gt=0, decimal_places=2)
    payment_method: str = Field(default="Cash", max_length=50)
    notes: str | None = None
    device_id: int
    company_id: int
    created_by: int
    payment_date: UtcDatetime | None = None

    @model_validator(mode="after")
    def reference_must_be_consistent(self):
        Reference(self.reference_type, self.reference_id)
        return self

    @property
    def reference(self) -> Reference:
        return Reference(self.reference_type, self.reference_id)


class PaymentResponse(BaseModel):
    id: int
    reference_type: ReferenceType
    reference_id: int | None
    payment_date: datetime
    amount: Decimal
    payment_method: str
    notes: str | None
    device_id: int
    company_id: int
    created_by: int

    model_config = {"from_attributes": True}


class PaymentResult(BaseModel):
    """The payment row, its ledger entry and the subledger row it settled."""
    payment: PaymentResponse
    ledger_entry: LedgerEntryResponse
    receivable: ReceivableResponse | None = None
    payable: PayableResponse | None = None

    model_config = {"from_attributes": True}
