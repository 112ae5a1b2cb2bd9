"""
Subledger service — accounts receivable and payable.

Keeps one row per sale (receivable) or purchase (payable) and
maintains outstanding_amount == original_amount - paid_amount
on every write.

Payments are applied with a single UPDATE that adds to the
stored paid_amount, so two concurrent payments against the same
sale both land instead of one overwriting the other.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pos_ledger.exceptions import ConflictError
from pos_ledger.models.payable import AccountsPayable
from pos_ledger.models.receivable import AccountsReceivable
from pos_ledger.money import to_money
from pos_ledger.schemas.subledger import ReceivableUpsert, PayableUpsert

logger = logging.getLogger(__name__)


class SubledgerService:

    def __init__(self, db: Session):
        self.db = db

    # --- Receivables ---

    def upsert_receivable(self, request: ReceivableUpsert) -> AccountsReceivable:
        """
        Create or update the receivable for a sale.

        paid_amount is absolute: the row ends up with exactly
        the supplied cumulative value. original_amount is fixed
        when the row is created and ignored on later calls.
        """
        row = self.db.execute(
            select(AccountsReceivable)
            .where(
                AccountsReceivable.sale_id == request.sale_id,
                AccountsReceivable.device_id == request.device_id,
            )
            .with_for_update()
        ).scalar_one_or_none()

        paid = to_money(request.paid_amount)
        if row:
            row.paid_amount = paid
            row.outstanding_amount = to_money(row.original_amount) - paid
            if request.due_date is not None:
                row.due_date = request.due_date
        else:
            original = to_money(request.original_amount)
            row = AccountsReceivable(
                customer_id=request.customer_id,
                sale_id=request.sale_id,
                original_amount=original,
                paid_amount=paid,
                outstanding_amount=original - paid,
                due_date=request.due_date,
                device_id=request.device_id,
                company_id=request.company_id,
            )
            self.db.add(row)

        self._flush(f"receivable for sale {request.sale_id}")
        return row

    def apply_receivable_payment(
        self, sale_id: int, device_id: int, amount: Decimal
    ) -> AccountsReceivable | None:
        """
        Add a payment to a sale's receivable in one statement.

        Returns the refreshed row, or None when the sale has no
        receivable (it was paid in full at the till).
        """
        amount = to_money(amount)
        result = self.db.execute(
            update(AccountsReceivable)
            .where(
                AccountsReceivable.sale_id == sale_id,
                AccountsReceivable.device_id == device_id,
            )
            .values(
                paid_amount=AccountsReceivable.paid_amount + amount,
                outstanding_amount=(
                    AccountsReceivable.original_amount
                    - (AccountsReceivable.paid_amount + amount)
                ),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.info(
                "No receivable for sale %s on device %s; nothing to settle",
                sale_id, device_id,
            )
            return None
        return self.get_receivable(sale_id, device_id)

    def get_receivable(
        self, sale_id: int, device_id: int
    ) -> AccountsReceivable | None:
        return self.db.execute(
            select(AccountsReceivable)
            .where(
                AccountsReceivable.sale_id == sale_id,
                AccountsReceivable.device_id == device_id,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_open_receivables(self, device_id: int) -> list[AccountsReceivable]:
        """Receivables with money still owed to the device, newest first."""
        rows = self.db.execute(
            select(AccountsReceivable)
            .where(
                AccountsReceivable.device_id == device_id,
                AccountsReceivable.outstanding_amount > 0,
            )
            .order_by(AccountsReceivable.created_at.desc())
        ).scalars().all()
        return list(rows)

    def total_receivable(self, device_id: int) -> Decimal:
        total = self.db.execute(
            select(
                func.coalesce(func.sum(AccountsReceivable.outstanding_amount), 0)
            ).where(
                AccountsReceivable.device_id == device_id,
                AccountsReceivable.outstanding_amount > 0,
            )
        ).scalar()
        return to_money(total)

    # --- Payables ---

    def upsert_payable(self, request: PayableUpsert) -> AccountsPayable:
        """Create or update the payable for a purchase; see upsert_receivable."""
        row = self.db.execute(
            select(AccountsPayable)
            .where(
                AccountsPayable.purchase_id == request.purchase_id,
                AccountsPayable.device_id == request.device_id,
            )
            .with_for_update()
        ).scalar_one_or_none()

        paid = to_money(request.paid_amount)
        if row:
            row.paid_amount = paid
            row.outstanding_amount = to_money(row.original_amount) - paid
            if request.due_date is not None:
                row.due_date = request.due_date
        else:
            original = to_money(request.original_amount)
            row = AccountsPayable(
                supplier_name=request.supplier_name,
                purchase_id=request.purchase_id,
                original_amount=original,
                paid_amount=paid,
                outstanding_amount=original - paid,
                due_date=request.due_date,
                device_id=request.device_id,
                company_id=request.company_id,
            )
            self.db.add(row)

        self._flush(f"payable for purchase {request.purchase_id}")
        return row

    def apply_payable_payment(
        self, purchase_id: int, device_id: int, amount: Decimal
    ) -> AccountsPayable | None:
        amount = to_money(amount)
        result = self.db.execute(
            update(AccountsPayable)
            .where(
                AccountsPayable.purchase_id == purchase_id,
                AccountsPayable.device_id == device_id,
            )
            .values(
                paid_amount=AccountsPayable.paid_amount + amount,
                outstanding_amount=(
                    AccountsPayable.original_amount
                    - (AccountsPayable.paid_amount + amount)
                ),
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            logger.info(
                "No payable for purchase %s on device %s; nothing to settle",
                purchase_id, device_id,
            )
            return None
        return self.get_payable(purchase_id, device_id)

    def get_payable(
        self, purchase_id: int, device_id: int
    ) -> AccountsPayable | None:
        return self.db.execute(
            select(AccountsPayable)
            .where(
                AccountsPayable.purchase_id == purchase_id,
                AccountsPayable.device_id == device_id,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_open_payables(self, device_id: int) -> list[AccountsPayable]:
        rows = self.db.execute(
            select(AccountsPayable)
            .where(
                AccountsPayable.device_id == device_id,
                AccountsPayable.outstanding_amount > 0,
            )
            .order_by(AccountsPayable.created_at.desc())
        ).scalars().all()
        return list(rows)

    def total_payable(self, device_id: int) -> Decimal:
        total = self.db.execute(
            select(
                func.coalesce(func.sum(AccountsPayable.outstanding_amount), 0)
            ).where(
                AccountsPayable.device_id == device_id,
                AccountsPayable.outstanding_amount > 0,
            )
        ).scalar()
        return to_money(total)

    def _flush(self, what: str) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"Concurrent write created the {what}; retry the request"
            ) from e
