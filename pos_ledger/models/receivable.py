"""
Accounts receivable model.

One row per sale that has ever carried an outstanding balance.
The row is updated in place as payments arrive and is kept
after it is paid off as history.

Invariant: outstanding_amount == original_amount - paid_amount.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime, Integer, Numeric, Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from pos_ledger.models.base import Base


class AccountsReceivable(Base):
    __tablename__ = "accounts_receivable"
    __table_args__ = (
        UniqueConstraint("sale_id", "device_id", name="uq_ar_sale_device"),
        Index("idx_ar_customer", "customer_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sale_id: Mapped[int] = mapped_column(Integer, nullable=False)
    original_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    outstanding_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    device_id: Mapped[int] = mapped_column(Integer, nullable=False)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<AccountsReceivable sale={self.sale_id} "
            f"outstanding={self.outstanding_amount}>"
        )
