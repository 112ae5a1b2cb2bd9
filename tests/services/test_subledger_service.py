"""
Tests for the SubledgerService.

outstanding_amount == original_amount - paid_amount must hold
after every write, whichever path made it.
"""

from decimal import Decimal

import pytest

from pos_ledger.exceptions import ConflictError
from pos_ledger.models.receivable import AccountsReceivable
from pos_ledger.schemas.subledger import ReceivableUpsert, PayableUpsert
from pos_ledger.services.subledger_service import SubledgerService


def receivable(ids, sale_id=1, original="200.00", paid="0", customer_id=5):
    return ReceivableUpsert(
        customer_id=customer_id,
        sale_id=sale_id,
        original_amount=Decimal(original),
        paid_amount=Decimal(paid),
        device_id=ids["device_id"],
        company_id=ids["company_id"],
    )


def payable(ids, purchase_id=1, original="500.00", paid="0"):
    return PayableUpsert(
        supplier_name="Acme Traders",
        purchase_id=purchase_id,
        original_amount=Decimal(original),
        paid_amount=Decimal(paid),
        device_id=ids["device_id"],
        company_id=ids["company_id"],
    )


def assert_balanced(row):
    assert row.outstanding_amount == row.original_amount - row.paid_amount


class TestUpsertReceivable:

    def test_creates_row(self, db_session, ids):
        service = SubledgerService(db_session)
        row = service.upsert_receivable(receivable(ids, paid="50.00"))
        db_session.commit()

        assert row.id is not None
        assert row.outstanding_amount == Decimal("150.00")
        assert_balanced(row)

    def test_paid_amount_is_absolute(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_receivable(receivable(ids, paid="50.00"))
        db_session.commit()

        row = service.upsert_receivable(receivable(ids, paid="80.00"))
        db_session.commit()

        assert row.paid_amount == Decimal("80.00")
        assert row.outstanding_amount == Decimal("120.00")

    def test_original_amount_fixed_after_creation(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_receivable(receivable(ids, original="200.00"))
        db_session.commit()

        row = service.upsert_receivable(
            receivable(ids, original="999.00", paid="20.00")
        )
        db_session.commit()

        assert row.original_amount == Decimal("200.00")
        assert row.outstanding_amount == Decimal("180.00")

    def test_one_row_per_sale_and_device(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_receivable(receivable(ids))
        service.upsert_receivable(receivable(ids, paid="10.00"))
        service.upsert_receivable(receivable({**ids, "device_id": 8}))
        db_session.commit()

        rows = db_session.query(AccountsReceivable).all()
        assert len(rows) == 2

    def test_duplicate_insert_is_conflict(self, db_session, ids):
        """A row inserted behind the service's back surfaces as a conflict."""
        db_session.add(AccountsReceivable(
            sale_id=1, original_amount=Decimal("1"), paid_amount=Decimal("0"),
            outstanding_amount=Decimal("1"), device_id=ids["device_id"],
            company_id=ids["company_id"],
        ))
        service = SubledgerService(db_session)

        with pytest.raises(ConflictError):
            service.upsert_receivable(receivable(ids))


class TestApplyPayment:

    def test_payments_accumulate(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_receivable(receivable(ids))
        db_session.commit()

        service.apply_receivable_payment(1, ids["device_id"], Decimal("50"))
        row = service.apply_receivable_payment(1, ids["device_id"], Decimal("30"))
        db_session.commit()

        assert row.paid_amount == Decimal("80.00")
        assert row.outstanding_amount == Decimal("120.00")
        assert_balanced(row)

    def test_missing_receivable_returns_none(self, db_session, ids):
        service = SubledgerService(db_session)

        assert service.apply_receivable_payment(
            404, ids["device_id"], Decimal("10")
        ) is None

    def test_overpayment_goes_negative(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_receivable(receivable(ids, original="100.00"))
        db_session.commit()

        row = service.apply_receivable_payment(1, ids["device_id"], Decimal("120"))

        assert row.outstanding_amount == Decimal("-20.00")
        assert_balanced(row)

    def test_payable_payment(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_payable(payable(ids))
        db_session.commit()

        row = service.apply_payable_payment(1, ids["device_id"], Decimal("125.50"))
        db_session.commit()

        assert row.paid_amount == Decimal("125.50")
        assert row.outstanding_amount == Decimal("374.50")


class TestOpenBalances:

    def test_totals_ignore_settled_and_credit_rows(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_receivable(receivable(ids, sale_id=1, paid="50.00"))
        service.upsert_receivable(receivable(ids, sale_id=2, paid="200.00"))
        service.upsert_receivable(
            receivable(ids, sale_id=3, original="10.00", paid="0")
        )
        db_session.commit()
        service.apply_receivable_payment(3, ids["device_id"], Decimal("15"))
        db_session.commit()

        assert service.total_receivable(ids["device_id"]) == Decimal("150.00")
        open_ids = {r.sale_id for r in service.list_open_receivables(ids["device_id"])}
        assert open_ids == {1}

    def test_total_payable_scoped_to_device(self, db_session, ids):
        service = SubledgerService(db_session)
        service.upsert_payable(payable(ids, purchase_id=1))
        service.upsert_payable(payable({**ids, "device_id": 8}, purchase_id=1))
        db_session.commit()

        assert service.total_payable(ids["device_id"]) == Decimal("500.00")
        assert len(service.list_open_payables(ids["device_id"])) == 1

    def test_empty_totals_are_zero(self, db_session, ids):
        service = SubledgerService(db_session)

        assert service.total_receivable(ids["device_id"]) == Decimal("0.00")
        assert service.total_payable(ids["device_id"]) == Decimal("0.00")
