"""
Tests for the MigrationService ledger backfill.
"""

from datetime import datetime
from decimal import Decimal

from pos_ledger.models import (
    AccountsPayable,
    AccountsReceivable,
    LedgerEntry,
    Purchase,
    Sale,
    SaleItem,
)
from pos_ledger.models.enums import TransactionType
from pos_ledger.services.migration_service import MigrationService
from pos_ledger.services.operations import run_operation


def add_sale(db_session, ids, total, received, status="Completed", items=()):
    sale = Sale(
        total_amount=Decimal(total),
        received_amount=Decimal(received),
        status=status,
        sale_date=datetime(2024, 4, 1, 10),
        device_id=ids["device_id"],
        company_id=ids["company_id"],
        created_by=ids["created_by"],
    )
    db_session.add(sale)
    db_session.flush()
    for product_id, quantity in items:
        db_session.add(SaleItem(
            sale_id=sale.id, product_id=product_id,
            quantity=quantity, price=Decimal("1"),
        ))
    db_session.commit()
    return sale


def add_purchase(db_session, ids, total, paid, status="Received"):
    purchase = Purchase(
        supplier="Acme Traders",
        total_amount=Decimal(total),
        received_amount=Decimal(paid),
        status=status,
        purchase_date=datetime(2024, 4, 2),
        device_id=ids["device_id"],
        company_id=ids["company_id"],
        created_by=ids["created_by"],
    )
    db_session.add(purchase)
    db_session.commit()
    return purchase


class TestMigrationStatus:

    def test_device_with_history_needs_migration(self, db_session, ids):
        add_sale(db_session, ids, "100", "100")
        service = MigrationService(db_session)

        status = service.check_migration_status(ids["device_id"])

        assert status.has_sales_data is True
        assert status.has_purchases_data is False
        assert status.has_ledger_data is False
        assert status.needs_migration is True

    def test_empty_device(self, db_session, ids):
        status = MigrationService(db_session).check_migration_status(ids["device_id"])

        assert status.needs_migration is False


class TestMigrateExistingData:

    def test_backfills_sales_and_purchases(self, db_session, ids, make_product):
        product = make_product(wholesale_price="20")
        add_sale(db_session, ids, "100", "100", items=[(product.id, 2)])
        credit = add_sale(db_session, ids, "250", "50", status="Credit")
        add_purchase(db_session, ids, "400", "100", status="Credit")
        service = MigrationService(db_session)

        result = run_operation(
            db_session, service.migrate_existing_data, ids["device_id"]
        )

        assert result.success
        report = result.data
        assert report.sales_migrated == 2
        assert report.purchases_migrated == 1
        assert report.failed_sales == []

        types = [e.transaction_type for e in db_session.query(LedgerEntry).all()]
        assert types.count(TransactionType.SALE) == 2
        assert types.count(TransactionType.COGS) == 1
        assert types.count(TransactionType.PURCHASE) == 1
        assert types.count(TransactionType.PAYMENT_RECEIVED) == 2
        assert types.count(TransactionType.PAYMENT_MADE) == 1

        receivable = db_session.query(AccountsReceivable).one()
        assert receivable.sale_id == credit.id
        assert receivable.outstanding_amount == Decimal("200.00")
        assert db_session.query(AccountsPayable).one().outstanding_amount == Decimal("300.00")

    def test_non_credit_sale_opens_no_receivable(self, db_session, ids):
        add_sale(db_session, ids, "100", "40")
        service = MigrationService(db_session)

        service.migrate_existing_data(ids["device_id"])
        db_session.commit()

        assert db_session.query(AccountsReceivable).count() == 0

    def test_failing_document_skipped(self, db_session, ids):
        """A sale with an unknown product is rolled back on its own."""
        good = add_sale(db_session, ids, "100", "100")
        bad = add_sale(db_session, ids, "50", "50", items=[(999, 1)])
        service = MigrationService(db_session)

        report = service.migrate_existing_data(ids["device_id"])
        db_session.commit()

        assert report.sales_migrated == 1
        assert report.failed_sales == [bad.id]
        references = {e.reference_id for e in db_session.query(LedgerEntry).all()}
        assert references == {good.id}
        assert "1 documents skipped" in report.message

    def test_second_run_skipped(self, db_session, ids):
        add_sale(db_session, ids, "100", "100")
        service = MigrationService(db_session)
        service.migrate_existing_data(ids["device_id"])
        db_session.commit()

        report = service.migrate_existing_data(ids["device_id"])

        assert report.skipped is True
        assert db_session.query(LedgerEntry).filter(
            LedgerEntry.transaction_type == TransactionType.SALE
        ).count() == 1
