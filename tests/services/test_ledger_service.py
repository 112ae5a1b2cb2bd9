"""
Tests for the LedgerService.

Tests cover:
- Debit/credit side chosen by account type
- Positive, cent-rounded amounts only
- Reference consistency
- Querying by device, date range, type and reference
"""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from pos_ledger.exceptions import InvalidEntryError
from pos_ledger.models.enums import AccountType, TransactionType, ReferenceType
from pos_ledger.models.reference import Reference
from pos_ledger.schemas.ledger import LedgerEntryCreate
from pos_ledger.services.ledger_service import LedgerService, split_amount


def make_entry(ids, amount="100.00", account_type=AccountType.REVENUE,
               transaction_type=TransactionType.SALE,
               reference_type=ReferenceType.SALE, reference_id=1, **kw):
    return LedgerEntryCreate(
        transaction_type=transaction_type,
        amount=Decimal(amount),
        account_type=account_type,
        reference_type=reference_type,
        reference_id=reference_id,
        description="test entry",
        **ids,
        **kw,
    )


class TestSplitAmount:

    @pytest.mark.parametrize("account_type, expected", [
        (AccountType.REVENUE, (Decimal("0.00"), Decimal("25.50"))),
        (AccountType.EXPENSE, (Decimal("25.50"), Decimal("0.00"))),
        (AccountType.ASSET, (Decimal("25.50"), Decimal("0.00"))),
        (AccountType.LIABILITY, (Decimal("0.00"), Decimal("25.50"))),
    ])
    def test_side_follows_account_type(self, account_type, expected):
        assert split_amount(account_type, Decimal("25.50")) == expected

    def test_unknown_account_type_debits(self):
        assert split_amount("equity", Decimal("10")) == (
            Decimal("10.00"), Decimal("0.00")
        )

    def test_accepts_string_values(self):
        assert split_amount("liability", "3.2") == (
            Decimal("0.00"), Decimal("3.20")
        )


class TestRecord:

    @pytest.mark.parametrize("account_type", list(AccountType))
    def test_exactly_one_side_carries_amount(self, db_session, ids, account_type):
        """One of debit/credit is zero, the other equals amount."""
        service = LedgerService(db_session)
        entry = service.record(make_entry(ids, "42.10", account_type=account_type))
        db_session.commit()

        assert entry.id is not None
        assert Decimal("0") in (entry.debit_amount, entry.credit_amount)
        assert entry.debit_amount + entry.credit_amount == Decimal("42.10")

    def test_revenue_is_credited(self, db_session, ids):
        service = LedgerService(db_session)
        entry = service.record(make_entry(ids, "100.00"))

        assert entry.credit_amount == Decimal("100.00")
        assert entry.debit_amount == Decimal("0.00")

    def test_transaction_date_defaults_to_now(self, db_session, ids):
        service = LedgerService(db_session)
        before = datetime.utcnow()
        entry = service.record(make_entry(ids))

        assert entry.transaction_date >= before

    def test_explicit_transaction_date_kept(self, db_session, ids):
        service = LedgerService(db_session)
        when = datetime(2024, 3, 5, 14, 30)
        entry = service.record(make_entry(ids, transaction_date=when))

        assert entry.transaction_date == when

    @pytest.mark.parametrize("amount", ["0", "-5.00"])
    def test_non_positive_amount_rejected_by_schema(self, ids, amount):
        with pytest.raises(ValidationError):
            make_entry(ids, amount)

    def test_non_positive_amount_rejected_by_service(self, db_session, ids):
        """Bypassing validation still cannot post a negative amount."""
        service = LedgerService(db_session)
        request = make_entry(ids).model_copy(update={"amount": Decimal("-1")})

        with pytest.raises(InvalidEntryError, match="must be positive"):
            service.record(request)

    def test_sale_reference_requires_id(self, ids):
        with pytest.raises(ValidationError, match="require an id"):
            make_entry(ids, reference_id=None)

    def test_manual_reference_has_no_id(self, ids):
        with pytest.raises(ValidationError, match="do not carry an id"):
            make_entry(
                ids,
                transaction_type=TransactionType.INCOME,
                reference_type=ReferenceType.MANUAL,
                reference_id=3,
            )


class TestQueries:

    def test_get_entries_filters_device_and_window(self, db_session, ids):
        service = LedgerService(db_session)
        service.record(make_entry(ids, transaction_date=datetime(2024, 1, 1)))
        service.record(make_entry(ids, transaction_date=datetime(2024, 1, 2)))
        service.record(make_entry(ids, transaction_date=datetime(2024, 1, 3)))
        service.record(make_entry(
            {**ids, "device_id": 99}, transaction_date=datetime(2024, 1, 2)
        ))
        db_session.commit()

        entries = service.get_entries(
            ids["device_id"], datetime(2024, 1, 2), datetime(2024, 1, 3)
        )

        assert [e.transaction_date for e in entries] == [datetime(2024, 1, 2)]

    def test_get_entries_newest_first(self, db_session, ids):
        service = LedgerService(db_session)
        service.record(make_entry(ids, transaction_date=datetime(2024, 1, 1)))
        service.record(make_entry(ids, transaction_date=datetime(2024, 2, 1)))
        db_session.commit()

        entries = service.get_entries(ids["device_id"])

        assert entries[0].transaction_date == datetime(2024, 2, 1)

    def test_get_entries_by_type(self, db_session, ids):
        service = LedgerService(db_session)
        service.record(make_entry(ids))
        service.record(make_entry(
            ids,
            transaction_type=TransactionType.COGS,
            account_type=AccountType.EXPENSE,
        ))
        db_session.commit()

        entries = service.get_entries(
            ids["device_id"], transaction_type=TransactionType.COGS
        )

        assert len(entries) == 1
        assert entries[0].debit_amount == Decimal("100.00")

    def test_get_entries_by_reference(self, db_session, ids):
        service = LedgerService(db_session)
        service.record(make_entry(ids, reference_id=1))
        service.record(make_entry(ids, reference_id=2))
        db_session.commit()

        entries = service.get_entries_by_reference(
            Reference.sale(2), ids["device_id"]
        )

        assert len(entries) == 1
        assert entries[0].reference == Reference.sale(2)

    def test_has_entries(self, db_session, ids):
        service = LedgerService(db_session)
        assert service.has_entries(ids["device_id"]) is False

        service.record(make_entry(ids))
        db_session.commit()

        assert service.has_entries(ids["device_id"]) is True
