"""
Accounting service — sales, purchases, COGS, payments and
manual transactions.

Each operation turns one business event into ledger entries
(through LedgerService) and, where money is still owed,
subledger rows (through SubledgerService). Nothing here commits;
run_operation() wraps every call in one transaction so a
failure part-way leaves no partial postings behind.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from pos_ledger.config import get_settings
from pos_ledger.exceptions import RecordNotFoundError
from pos_ledger.models.cogs_entry import CogsLine
from pos_ledger.models.enums import (
    AccountType,
    TransactionType,
    ReferenceType,
    ManualTransactionKind,
)
from pos_ledger.models.ledger_entry import LedgerEntry
from pos_ledger.models.payable import AccountsPayable
from pos_ledger.models.payment import Payment
from pos_ledger.models.product import Product
from pos_ledger.models.receivable import AccountsReceivable
from pos_ledger.models.reference import Reference
from pos_ledger.money import ZERO, to_money
from pos_ledger.schemas.documents import SaleRecord, PurchaseRecord
from pos_ledger.schemas.ledger import (
    LedgerEntryCreate,
    ManualTransactionCreate,
    CogsRequest,
)
from pos_ledger.schemas.payment import PaymentCreate
from pos_ledger.schemas.subledger import ReceivableUpsert, PayableUpsert
from pos_ledger.services.ledger_service import LedgerService
from pos_ledger.services.subledger_service import SubledgerService

logger = logging.getLogger(__name__)


# How a manual transaction is posted: (transaction type, account
# type, default category).
MANUAL_POSTINGS = {
    ManualTransactionKind.INCOME: (
        TransactionType.INCOME, AccountType.REVENUE, "Other Income"
    ),
    ManualTransactionKind.EXPENSE: (
        TransactionType.EXPENSE, AccountType.EXPENSE, "Operating Expense"
    ),
}


@dataclass
class CogsOutcome:
    sale_id: int
    total_cost: Decimal
    lines: list[CogsLine] = field(default_factory=list)
    ledger_entry: LedgerEntry | None = None


@dataclass
class PaymentOutcome:
    payment: Payment
    ledger_entry: LedgerEntry
    receivable: AccountsReceivable | None = None
    payable: AccountsPayable | None = None


@dataclass
class SaleOutcome:
    revenue_entry: LedgerEntry
    cogs: CogsOutcome
    payment_entry: LedgerEntry | None = None
    receivable: AccountsReceivable | None = None


@dataclass
class PurchaseOutcome:
    purchase_entry: LedgerEntry
    payment_entry: LedgerEntry | None = None
    payable: AccountsPayable | None = None


class AccountingService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.subledgers = SubledgerService(db)

    def record_cogs(self, request: CogsRequest) -> CogsOutcome:
        """
        Expense the cost of a sale's line items.

        Each item's cost basis is the product's wholesale price,
        falling back to its retail price and then to zero. One
        cogs_entries row is written per item and a single COGS
        ledger entry for the total. A sale whose items all cost
        zero gets line rows but no ledger entry.

        Raises RecordNotFoundError when any product is unknown;
        nothing is recorded in that case.
        """
        product_ids = {item.product_id for item in request.items}
        products = {}
        if product_ids:
            products = {
                p.id: p
                for p in self.db.execute(
                    select(Product).where(
                        Product.id.in_(product_ids),
                        Product.device_id == request.device_id,
                    )
                ).scalars()
            }
        missing = sorted(product_ids - products.keys())
        if missing:
            raise RecordNotFoundError(
                "Product", ", ".join(str(pid) for pid in missing)
            )

        total_cost = ZERO
        lines = []
        for item in request.items:
            cost_price = to_money(products[item.product_id].cost_basis)
            line_cost = to_money(cost_price * item.quantity)
            line = CogsLine(
                sale_id=request.sale_id,
                product_id=item.product_id,
                quantity=item.quantity,
                cost_price=cost_price,
                total_cost=line_cost,
                device_id=request.device_id,
            )
            self.db.add(line)
            lines.append(line)
            total_cost += line_cost
        self.db.flush()

        outcome = CogsOutcome(
            sale_id=request.sale_id, total_cost=total_cost, lines=lines
        )
        if total_cost <= 0:
            logger.info(
                "Sale %s has no cost basis; skipping COGS entry", request.sale_id
            )
            return outcome

        outcome.ledger_entry = self.ledger.record(LedgerEntryCreate(
            transaction_type=TransactionType.COGS,
            amount=total_cost,
            account_type=AccountType.EXPENSE,
            reference_type=ReferenceType.SALE,
            reference_id=request.sale_id,
            description=f"COGS for Sale #{request.sale_id}",
            category="Cost of Goods Sold",
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            transaction_date=request.transaction_date,
        ))
        return outcome

    def record_payment(self, request: PaymentCreate) -> PaymentOutcome:
        """
        Record a payment, its ledger entry and its subledger effect.

        A payment against a sale is money in (payment_received,
        asset). Anything else is money out (payment_made,
        liability). The sale's receivable or the purchase's
        payable is then settled by the payment amount; a missing
        subledger row is not an error.
        """
        reference = request.reference
        payment = self._insert_payment(
            reference=reference,
            amount=request.amount,
            payment_method=request.payment_method,
            notes=request.notes,
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            payment_date=request.payment_date,
        )
        entry = self._post_payment_entry(
            reference=reference,
            amount=payment.amount,
            payment_method=payment.payment_method,
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            transaction_date=payment.payment_date,
        )

        outcome = PaymentOutcome(payment=payment, ledger_entry=entry)
        if reference.is_sale:
            outcome.receivable = self.subledgers.apply_receivable_payment(
                reference.id, request.device_id, payment.amount
            )
        elif reference.is_purchase:
            outcome.payable = self.subledgers.apply_payable_payment(
                reference.id, request.device_id, payment.amount
            )
        return outcome

    def add_manual_transaction(
        self, request: ManualTransactionCreate
    ) -> LedgerEntry:
        """Post income or an expense that no sale or purchase explains."""
        transaction_type, account_type, default_category = (
            MANUAL_POSTINGS[request.kind]
        )
        return self.ledger.record(LedgerEntryCreate(
            transaction_type=transaction_type,
            amount=request.amount,
            account_type=account_type,
            reference_type=ReferenceType.MANUAL,
            description=request.description,
            category=request.category or default_category,
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            transaction_date=request.transaction_date,
        ))

    def record_sale(
        self, request: SaleRecord, track_balance: bool = True
    ) -> SaleOutcome:
        """
        Book a finalized sale.

        Posts the revenue, the cost of the items sold, the amount
        received at the till, and a receivable for whatever the
        customer still owes. With track_balance=False no
        receivable is opened.
        """
        settings = get_settings()
        sale_date = request.sale_date or datetime.utcnow()
        reference = Reference.sale(request.sale_id)

        description = f"Sale #{request.sale_id}"
        if request.customer_name:
            description += f" to {request.customer_name}"
        revenue_entry = self.ledger.record(LedgerEntryCreate(
            transaction_type=TransactionType.SALE,
            amount=request.total_amount,
            account_type=AccountType.REVENUE,
            reference_type=reference.kind,
            reference_id=reference.id,
            description=description,
            category="Sales Revenue",
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            transaction_date=sale_date,
        ))

        cogs = self.record_cogs(CogsRequest(
            sale_id=request.sale_id,
            items=request.items,
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            transaction_date=sale_date,
        ))

        outcome = SaleOutcome(revenue_entry=revenue_entry, cogs=cogs)
        if request.received_amount > 0:
            self._insert_payment(
                reference=reference,
                amount=request.received_amount,
                payment_method=request.payment_method,
                notes="Received at sale",
                device_id=request.device_id,
                company_id=request.company_id,
                created_by=request.created_by,
                payment_date=sale_date,
            )
            outcome.payment_entry = self._post_payment_entry(
                reference=reference,
                amount=request.received_amount,
                payment_method=request.payment_method,
                device_id=request.device_id,
                company_id=request.company_id,
                created_by=request.created_by,
                transaction_date=sale_date,
            )

        if track_balance and request.received_amount < request.total_amount:
            outcome.receivable = self.subledgers.upsert_receivable(
                ReceivableUpsert(
                    customer_id=request.customer_id,
                    sale_id=request.sale_id,
                    original_amount=request.total_amount,
                    paid_amount=request.received_amount,
                    device_id=request.device_id,
                    company_id=request.company_id,
                    due_date=sale_date + timedelta(
                        days=settings.RECEIVABLE_DUE_DAYS
                    ),
                )
            )

        logger.info(
            "Booked sale %s for device %s: total=%s received=%s cogs=%s",
            request.sale_id, request.device_id,
            request.total_amount, request.received_amount, cogs.total_cost,
        )
        return outcome

    def record_purchase(
        self, request: PurchaseRecord, track_balance: bool = True
    ) -> PurchaseOutcome:
        """Book a received purchase, any amount paid, and the payable."""
        purchase_date = request.purchase_date or datetime.utcnow()
        reference = Reference.purchase(request.purchase_id)

        purchase_entry = self.ledger.record(LedgerEntryCreate(
            transaction_type=TransactionType.PURCHASE,
            amount=request.total_amount,
            account_type=AccountType.EXPENSE,
            reference_type=reference.kind,
            reference_id=reference.id,
            description=(
                f"Purchase #{request.purchase_id} from {request.supplier_name}"
            ),
            category="Inventory Purchase",
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
            transaction_date=purchase_date,
        ))

        outcome = PurchaseOutcome(purchase_entry=purchase_entry)
        if request.paid_amount > 0:
            self._insert_payment(
                reference=reference,
                amount=request.paid_amount,
                payment_method=request.payment_method,
                notes="Paid on receipt",
                device_id=request.device_id,
                company_id=request.company_id,
                created_by=request.created_by,
                payment_date=purchase_date,
            )
            outcome.payment_entry = self._post_payment_entry(
                reference=reference,
                amount=request.paid_amount,
                payment_method=request.payment_method,
                device_id=request.device_id,
                company_id=request.company_id,
                created_by=request.created_by,
                transaction_date=purchase_date,
            )

        if track_balance and request.paid_amount < request.total_amount:
            outcome.payable = self.subledgers.upsert_payable(PayableUpsert(
                supplier_name=request.supplier_name,
                purchase_id=request.purchase_id,
                original_amount=request.total_amount,
                paid_amount=request.paid_amount,
                device_id=request.device_id,
                company_id=request.company_id,
            ))

        logger.info(
            "Booked purchase %s for device %s: total=%s paid=%s",
            request.purchase_id, request.device_id,
            request.total_amount, request.paid_amount,
        )
        return outcome

    def _insert_payment(
        self,
        reference: Reference,
        amount: Decimal,
        payment_method: str,
        notes: str | None,
        device_id: int,
        company_id: int,
        created_by: int,
        payment_date: datetime | None,
    ) -> Payment:
        payment = Payment(
            reference_type=reference.kind,
            reference_id=reference.id,
            payment_date=payment_date or datetime.utcnow(),
            amount=to_money(amount),
            payment_method=payment_method,
            notes=notes,
            device_id=device_id,
            company_id=company_id,
            created_by=created_by,
        )
        self.db.add(payment)
        self.db.flush()
        return payment

    def _post_payment_entry(
        self,
        reference: Reference,
        amount: Decimal,
        payment_method: str,
        device_id: int,
        company_id: int,
        created_by: int,
        transaction_date: datetime | None,
    ) -> LedgerEntry:
        if reference.is_sale:
            transaction_type = TransactionType.PAYMENT_RECEIVED
            account_type = AccountType.ASSET
            description = f"Payment received for Sale #{reference.id}"
        else:
            transaction_type = TransactionType.PAYMENT_MADE
            account_type = AccountType.LIABILITY
            if reference.is_purchase:
                description = f"Payment made for Purchase #{reference.id}"
            else:
                description = "Payment made"

        return self.ledger.record(LedgerEntryCreate(
            transaction_type=transaction_type,
            amount=amount,
            account_type=account_type,
            reference_type=reference.kind,
            reference_id=reference.id,
            description=f"{description} ({payment_method})",
            category="Payments",
            device_id=device_id,
            company_id=company_id,
            created_by=created_by,
            transaction_date=transaction_date,
        ))
