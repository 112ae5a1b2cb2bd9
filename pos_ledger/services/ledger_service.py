"""
Ledger service — the Ledger Recorder.

This service enforces the bookkeeping rules:
1. Every amount is positive and rounded to cents
2. Exactly one of debit/credit carries the amount, chosen by
   the account type
3. Entries are immutable (append-only)

No other service inserts into financial_ledger directly.
All recording flows go through LedgerService.record().
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, exists
from sqlalchemy.orm import Session

from pos_ledger.exceptions import InvalidEntryError
from pos_ledger.models.enums import AccountType, TransactionType
from pos_ledger.models.ledger_entry import LedgerEntry
from pos_ledger.models.reference import Reference
from pos_ledger.money import ZERO, to_money
from pos_ledger.schemas.ledger import LedgerEntryCreate
from pos_ledger.schemas.types import to_naive_utc

logger = logging.getLogger(__name__)


# Revenue and liabilities increase on the credit side; expenses
# and assets (and anything unclassified) on the debit side.
CREDIT_NORMAL_TYPES = frozenset({AccountType.REVENUE, AccountType.LIABILITY})


def split_amount(account_type, amount) -> tuple[Decimal, Decimal]:
    """
    Return (debit_amount, credit_amount) for an entry.

        revenue   -> (0, amount)
        expense   -> (amount, 0)
        asset     -> (amount, 0)
        liability -> (0, amount)
        other     -> (amount, 0)
    """
    amount = to_money(amount)
    try:
        account_type = AccountType(account_type)
    except ValueError:
        return amount, ZERO

    if account_type in CREDIT_NORMAL_TYPES:
        return ZERO, amount
    return amount, ZERO


class LedgerService:
    """
    All ledger writes pass through this service.

    The service takes a database session as a constructor
    argument. This means the caller controls the transaction
    boundary — they decide when to commit or rollback.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(self, request: LedgerEntryCreate) -> LedgerEntry:
        """
        Append one entry to the ledger.

        Negative and zero amounts are rejected; corrections are
        posted as separate offsetting events, never by editing
        or negating an existing entry. The caller is responsible
        for calling db.commit() after this method returns.
        """
        amount = to_money(request.amount)
        if amount <= 0:
            raise InvalidEntryError(
                f"Ledger amount must be positive, got {request.amount}"
            )

        debit, credit = split_amount(request.account_type, amount)

        entry = LedgerEntry(
            transaction_date=request.transaction_date or datetime.utcnow(),
            transaction_type=request.transaction_type,
            reference_type=request.reference_type,
            reference_id=request.reference_id,
            amount=amount,
            account_type=request.account_type,
            debit_amount=debit,
            credit_amount=credit,
            category=request.category,
            description=request.description,
            device_id=request.device_id,
            company_id=request.company_id,
            created_by=request.created_by,
        )
        self.db.add(entry)
        self.db.flush()

        logger.info(
            "Recorded %s entry %s for device %s: debit=%s credit=%s",
            entry.transaction_type.value, entry.id, entry.device_id,
            debit, credit,
        )
        return entry

    def get_entries(
        self,
        device_id: int,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        transaction_type: TransactionType | None = None,
    ) -> list[LedgerEntry]:
        """Return a device's entries in [date_from, date_to), newest first."""
        date_from, date_to = to_naive_utc(date_from), to_naive_utc(date_to)
        query = select(LedgerEntry).where(LedgerEntry.device_id == device_id)
        if date_from is not None:
            query = query.where(LedgerEntry.transaction_date >= date_from)
        if date_to is not None:
            query = query.where(LedgerEntry.transaction_date < date_to)
        if transaction_type is not None:
            query = query.where(LedgerEntry.transaction_type == transaction_type)

        entries = self.db.execute(
            query.order_by(
                LedgerEntry.transaction_date.desc(), LedgerEntry.id.desc()
            )
        ).scalars().all()
        return list(entries)

    def get_entries_by_reference(
        self, reference: Reference, device_id: int
    ) -> list[LedgerEntry]:
        """Return every entry pointing at one sale, purchase or manual event."""
        query = select(LedgerEntry).where(
            LedgerEntry.device_id == device_id,
            LedgerEntry.reference_type == reference.kind,
        )
        if reference.id is not None:
            query = query.where(LedgerEntry.reference_id == reference.id)

        entries = self.db.execute(query.order_by(LedgerEntry.id)).scalars().all()
        return list(entries)

    def has_entries(self, device_id: int) -> bool:
        return bool(self.db.execute(
            select(exists().where(LedgerEntry.device_id == device_id))
        ).scalar())
