"""
Ledger entry model.

Each entry records one financial event for one device. Exactly
one of debit_amount / credit_amount equals amount and the other
is zero; which side is chosen depends on account_type. Entries
are immutable: once posted they are never modified or deleted,
corrections are posted as new entries.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, DateTime, Integer, Numeric, Index,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from pos_ledger.models.base import Base
from pos_ledger.models.enums import (
    AccountType,
    TransactionType,
    ReferenceType,
    enum_values,
)
from pos_ledger.models.reference import Reference


class LedgerEntry(Base):
    """
    An append-only row of the financial ledger.

    The debit/credit split is computed by LedgerService when
    the entry is recorded; the model only stores it.
    """

    __tablename__ = "financial_ledger"
    __table_args__ = (
        Index("idx_fl_device_date", "device_id", "transaction_date"),
        Index("idx_fl_type", "transaction_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="transaction_type_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
    )
    reference_type: Mapped[ReferenceType | None] = mapped_column(
        SAEnum(
            ReferenceType,
            name="reference_type_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=True,
    )
    reference_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(
            AccountType,
            name="account_type_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
    )
    debit_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    device_id: Mapped[int] = mapped_column(Integer, nullable=False)
    company_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    @property
    def reference(self) -> Reference | None:
        return Reference.from_columns(self.reference_type, self.reference_id)

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.transaction_type.value} "
            f"{self.amount} ({self.account_type.value})>"
        )
