"""
Payment model.

One row per payment received from a customer or made to a
supplier. The matching ledger entry and subledger update are
written in the same transaction by AccountingService.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, DateTime, Integer, Numeric, Index,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from pos_ledger.models.base import Base
from pos_ledger.models.enums import ReferenceType, enum_values
from pos_ledger.models.reference import Reference


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (
        Index("idx_payments_ref", "reference_type", "reference_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    reference_type: Mapped[ReferenceType] = mapped_column(
        SAEnum(
            ReferenceType,
            name="reference_type_enum",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
    )
    reference_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payment_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(50), nullable=False, default="Cash"
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
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
        return f"<Payment {self.amount} for {self.reference}>"
