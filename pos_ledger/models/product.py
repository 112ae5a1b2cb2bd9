"""
Product model.

The accounting core only reads products: wholesale_price (or
price, when no wholesale price is known) is the cost basis for
COGS, and stock feeds the dashboard's low-stock alert.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from pos_ledger.models.base import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    wholesale_price: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    device_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    @property
    def cost_basis(self) -> Decimal:
        """Wholesale price, falling back to retail price, then zero."""
        if self.wholesale_price:
            return Decimal(self.wholesale_price)
        if self.price:
            return Decimal(self.price)
        return Decimal("0")

    def __repr__(self) -> str:
        return f"<Product {self.name}>"
