"""
Pydantic schemas for accounts receivable and payable.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from pos_ledger.schemas.types import UtcDatetime


# --- Request Schemas ---

class ReceivableUpsert(BaseModel):
    """
    Absolute state of a sale's receivable.

    paid_amount is the cumulative amount received so far,
    never a delta.
    """
    customer_id: int | None = None
    sale_id: int
    original_amount: Decimal = Field(gt=0, decimal_places=2)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    device_id: int
    company_id: int
    due_date: UtcDatetime | None = None


class PayableUpsert(BaseModel):
    """Absolute state of a purchase's payable; paid_amount is cumulative."""
    supplier_name: str = Field(min_length=1, max_length=255)
    purchase_id: int
    original_amount: Decimal = Field(gt=0, decimal_places=2)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    device_id: int
    company_id: int
    due_date: UtcDatetime | None = None


# --- Response Schemas ---

class ReceivableResponse(BaseModel):
    id: int
    customer_id: int | None
    sale_id: int
    original_amount: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal
    due_date: datetime | None
    device_id: int
    company_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PayableResponse(BaseModel):
    id: int
    supplier_name: str
    purchase_id: int
    original_amount: Decimal
    paid_amount: Decimal
    outstanding_amount: Decimal
    due_date: datetime | None
    device_id: int
    company_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
