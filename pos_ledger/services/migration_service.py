"""
Migration service — backfills the ledger for a device.

Devices that used the point-of-sale app before the accounting
core existed have sales and purchases but no ledger. This
service replays each historic document through
AccountingService so the ledger, COGS lines, payments and
subledgers look as if they had been booked live.

Backfill is best effort: every document runs in its own
SAVEPOINT, and one that fails is rolled back, logged and
reported instead of aborting the rest.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from pos_ledger.exceptions import AccountingError
from pos_ledger.models.purchase import Purchase
from pos_ledger.models.sale import Sale
from pos_ledger.schemas.documents import SaleRecord, PurchaseRecord
from pos_ledger.schemas.ledger import CogsItem
from pos_ledger.schemas.report import MigrationStatus, MigrationReport
from pos_ledger.services.accounting_service import AccountingService
from pos_ledger.services.schema_service import (
    accounting_tables_exist,
    init_accounting_schema,
)

logger = logging.getLogger(__name__)


class MigrationService:

    def __init__(self, db: Session):
        self.db = db
        self.accounting = AccountingService(db)

    def _ensure_schema(self) -> None:
        bind = self.db.get_bind()
        if not accounting_tables_exist(bind):
            init_accounting_schema(bind)

    def _has(self, model, device_id: int) -> bool:
        return bool(self.db.execute(
            select(exists().where(model.device_id == device_id))
        ).scalar())

    def check_migration_status(self, device_id: int) -> MigrationStatus:
        self._ensure_schema()
        has_ledger = self.accounting.ledger.has_entries(device_id)
        has_sales = self._has(Sale, device_id)
        has_purchases = self._has(Purchase, device_id)
        return MigrationStatus(
            device_id=device_id,
            has_ledger_data=has_ledger,
            has_sales_data=has_sales,
            has_purchases_data=has_purchases,
            needs_migration=not has_ledger and (has_sales or has_purchases),
        )

    def migrate_existing_data(self, device_id: int) -> MigrationReport:
        """
        Book every historic sale and purchase of a device.

        Skipped entirely when the device already has ledger
        entries, so running it twice never double-counts.
        """
        self._ensure_schema()
        if self.accounting.ledger.has_entries(device_id):
            logger.info("Ledger for device %s already populated; skipping", device_id)
            return MigrationReport(
                device_id=device_id,
                skipped=True,
                message="Migration already completed - ledger contains data",
            )

        report = MigrationReport(device_id=device_id, message="")

        sales = self.db.execute(
            select(Sale)
            .where(Sale.device_id == device_id)
            .options(selectinload(Sale.items), selectinload(Sale.customer))
            .order_by(Sale.id)
        ).scalars().all()
        for sale in sales:
            if self._replay(self._migrate_sale, sale):
                report.sales_migrated += 1
            else:
                report.failed_sales.append(sale.id)

        purchases = self.db.execute(
            select(Purchase)
            .where(Purchase.device_id == device_id)
            .order_by(Purchase.id)
        ).scalars().all()
        for purchase in purchases:
            if self._replay(self._migrate_purchase, purchase):
                report.purchases_migrated += 1
            else:
                report.failed_purchases.append(purchase.id)

        report.message = (
            f"Migrated {report.sales_migrated} sales and "
            f"{report.purchases_migrated} purchases"
        )
        failed = len(report.failed_sales) + len(report.failed_purchases)
        if failed:
            report.message += f"; {failed} documents skipped"
        logger.info("Device %s backfill: %s", device_id, report.message)
        return report

    def _replay(self, migrate, document) -> bool:
        try:
            with self.db.begin_nested():
                migrate(document)
        except (AccountingError, ValueError, SQLAlchemyError) as e:
            logger.warning(
                "Skipping %s during backfill: %s", document, e
            )
            return False
        return True

    def _migrate_sale(self, sale: Sale) -> None:
        customer_name = sale.customer.name if sale.customer else None
        record = SaleRecord(
            sale_id=sale.id,
            total_amount=sale.total_amount,
            received_amount=min(
                Decimal(sale.received_amount or 0), Decimal(sale.total_amount)
            ),
            customer_id=sale.customer_id,
            customer_name=customer_name,
            items=[
                CogsItem(product_id=item.product_id, quantity=item.quantity)
                for item in sale.items
            ],
            device_id=sale.device_id,
            company_id=sale.company_id,
            created_by=sale.created_by,
            sale_date=sale.sale_date or sale.created_at,
        )
        self.accounting.record_sale(record, track_balance=sale.is_credit)

    def _migrate_purchase(self, purchase: Purchase) -> None:
        record = PurchaseRecord(
            purchase_id=purchase.id,
            supplier_name=purchase.supplier,
            total_amount=purchase.total_amount,
            paid_amount=min(
                Decimal(purchase.received_amount or 0),
                Decimal(purchase.total_amount),
            ),
            device_id=purchase.device_id,
            company_id=purchase.company_id,
            created_by=purchase.created_by,
            purchase_date=purchase.purchase_date or purchase.created_at,
        )
        self.accounting.record_purchase(record, track_balance=purchase.is_credit)
