"""
Accounts payable model.

Mirror of AccountsReceivable for purchases: one row per
purchase with money still owed (or once owed) to a supplier.

Invariant: outstanding_amount == original_amount - paid_amount.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Integer, Numeric, Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from pos_ledger.models.base import Base


class AccountsPayable(Base):
    __tablename__ = "accounts_payable"
    __table_args__ = (
        UniqueConstraint(
            "purchase_id", "device_id", name="uq_ap_purchase_device"
        ),
        Index("idx_ap_supplier", "supplier_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    supplier_name: Mapped[str] = mapped_column(String(255), nullable=False)
    purchase_id: Mapped[int] = mapped_column(Integer, nullable=False)
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
            f"<AccountsPayable purchase={self.purchase_id} "
            f"{self.supplier_name} outstanding={self.outstanding_amount}>"
        )
