"""
Pydantic schemas for finalized sales and purchases.

When the point-of-sale flow completes a sale or receives a
purchase it hands the document to the accounting core, which
books revenue/expense, cost, payment and subledger rows in one
go.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from pos_ledger.schemas.ledger import (
    CogsItem,
    CogsResult,
    LedgerEntryResponse,
)
from pos_ledger.schemas.subledger import ReceivableResponse, PayableResponse
from pos_ledger.schemas.types import UtcDatetime


class SaleRecord(BaseModel):
    sale_id: int
    total_amount: Decimal = Field(gt=0, decimal_places=2)
    received_amount: Decimal = Field(
        default=Decimal("0"), ge=0, decimal_places=2
    )
    customer_id: int | None = None
    customer_name: str | None = Field(default=None, max_length=255)
    items: list[CogsItem] = Field(default_factory=list)
    payment_method: str = Field(default="Cash", max_length=50)
    device_id: int
    company_id: int
    created_by: int
    sale_date: UtcDatetime | None = None

    @model_validator(mode="after")
    def received_cannot_exceed_total(self):
        if self.received_amount > self.total_amount:
            raise ValueError("received_amount cannot exceed total_amount")
        return self


class PurchaseRecord(BaseModel):
    purchase_id: int
    supplier_name: str = Field(min_length=1, max_length=255)
    total_amount: Decimal = Field(gt=0, decimal_places=2)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    payment_method: str = Field(default="Cash", max_length=50)
    device_id: int
    company_id: int
    created_by: int
    purchase_date: UtcDatetime | None = None

    @model_validator(mode="after")
    def paid_cannot_exceed_total(self):
        if self.paid_amount > self.total_amount:
            raise ValueError("paid_amount cannot exceed total_amount")
        return self


class SaleRecordResult(BaseModel):
    revenue_entry: LedgerEntryResponse
    cogs: CogsResult
    payment_entry: LedgerEntryResponse | None = None
    receivable: ReceivableResponse | None = None

    model_config = {"from_attributes": True}


class PurchaseRecordResult(BaseModel):
    purchase_entry: LedgerEntryResponse
    payment_entry: LedgerEntryResponse | None = None
    payable: PayableResponse | None = None

    model_config = {"from_attributes": True}
