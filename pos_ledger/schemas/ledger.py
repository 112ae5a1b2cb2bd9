"""
Pydantic schemas for ledger operations.

These define the contract of the Ledger Recorder: what an event
must carry to be recorded, and what a recorded entry looks like.
They are separate from the database models because the API
shape and the storage shape are often different.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from pos_ledger.models.enums import (
    AccountType,
    TransactionType,
    ReferenceType,
    ManualTransactionKind,
)
from pos_ledger.models.reference import Reference
from pos_ledger.schemas.types import UtcDatetime


# --- Request Schemas ---

class LedgerEntryCreate(BaseModel):
    """One economic event to append to the ledger."""
    transaction_type: TransactionType
    amount: Decimal = Field(gt=0, decimal_places=2)
    account_type: AccountType
    reference_type: ReferenceType | None = None
    reference_id: int | None = None
    description: str = Field(default="", max_length=500)
    category: str | None = Field(default=None, max_length=100)
    device_id: int
    company_id: int
    created_by: int
    transaction_date: UtcDatetime | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be positive")
        return v

    @model_validator(mode="after")
    def reference_must_be_consistent(self):
        # Raises ValueError for a sale/purchase without an id or a
        # manual reference with one.
        Reference.from_columns(self.reference_type, self.reference_id)
        if self.reference_type is None and self.reference_id is not None:
            raise ValueError("reference_id given without reference_type")
        return self

    @property
    def reference(self) -> Reference | None:
        return Reference.from_columns(self.reference_type, self.reference_id)


class ManualTransactionCreate(BaseModel):
    """Income or expense entered by hand, outside any sale or purchase."""
    kind: ManualTransactionKind
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str = Field(default="", max_length=500)
    category: str | None = Field(default=None, max_length=100)
    device_id: int
    company_id: int
    created_by: int
    transaction_date: UtcDatetime | None = None


class CogsItem(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class CogsRequest(BaseModel):
    """Line items of a completed sale whose cost should be expensed."""
    sale_id: int
    items: list[CogsItem]
    device_id: int
    company_id: int
    created_by: int
    transaction_date: UtcDatetime | None = None


# --- Response Schemas ---

class LedgerEntryResponse(BaseModel):
    id: int
    transaction_date: datetime
    transaction_type: TransactionType
    reference_type: ReferenceType | None
    reference_id: int | None
    amount: Decimal
    account_type: AccountType
    debit_amount: Decimal
    credit_amount: Decimal
    category: str | None
    description: str | None
    device_id: int
    company_id: int
    created_by: int
    created_at: datetime

    model_config = {"from_attributes": True}


class CogsLineResponse(BaseModel):
    id: int
    sale_id: int | None
    product_id: int | None
    quantity: int
    cost_price: Decimal
    total_cost: Decimal
    device_id: int

    model_config = {"from_attributes": True}


class CogsResult(BaseModel):
    """Outcome of record_cogs; ledger_entry is None for a zero-cost sale."""
    sale_id: int
    total_cost: Decimal
    lines: list[CogsLineResponse]
    ledger_entry: LedgerEntryResponse | None = None

    model_config = {"from_attributes": True}
