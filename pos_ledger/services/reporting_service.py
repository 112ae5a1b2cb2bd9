"""
Reporting service — the Period Aggregator.

Reads the ledger and subledgers and derives financial
statements on demand. Nothing here writes.

summarize() is the plain statement for a date range.
summarize_dashboard() is the home screen: the chosen period
against the one before it, a zero-filled cash flow chart,
recent entries, balances, operational counts and alerts.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import select, func, or_, and_
from sqlalchemy.orm import Session

from pos_ledger.config import get_settings
from pos_ledger.exceptions import InvalidEntryError
from pos_ledger.models.customer import Customer
from pos_ledger.models.enums import ChangeType, Period, TransactionType
from pos_ledger.models.ledger_entry import LedgerEntry
from pos_ledger.models.payable import AccountsPayable
from pos_ledger.models.product import Product
from pos_ledger.models.receivable import AccountsReceivable
from pos_ledger.models.supplier import Supplier
from pos_ledger.money import (
    ZERO,
    to_money,
    percent_change,
    percent_reduction,
    percent_of,
)
from pos_ledger.schemas.ledger import LedgerEntryResponse
from pos_ledger.schemas.report import (
    PeriodSummary,
    QuickStat,
    CashFlowPoint,
    PeriodTotals,
    AccountBalance,
    DashboardAlert,
    DashboardSnapshot,
)
from pos_ledger.schemas.subledger import ReceivableResponse, PayableResponse
from pos_ledger.schemas.types import to_naive_utc
from pos_ledger.services.ledger_service import LedgerService
from pos_ledger.services.periods import (
    PeriodWindow,
    resolve_period,
    build_buckets,
    bucket_start,
)
from pos_ledger.services.subledger_service import SubledgerService

logger = logging.getLogger(__name__)


INCOME_TYPES = frozenset({TransactionType.SALE, TransactionType.INCOME})
EXPENSE_TYPES = frozenset({TransactionType.PURCHASE, TransactionType.EXPENSE})


@dataclass
class LedgerTotals:
    """Running totals over a set of ledger entries."""
    sales: Decimal = ZERO
    other_income: Decimal = ZERO
    expenses: Decimal = ZERO
    cogs: Decimal = ZERO
    cash_in: Decimal = ZERO
    cash_out: Decimal = ZERO
    count: int = 0

    def add(self, entry: LedgerEntry) -> None:
        amount = to_money(entry.amount)
        kind = entry.transaction_type
        if kind == TransactionType.SALE:
            self.sales += amount
        elif kind == TransactionType.INCOME:
            self.other_income += amount
        elif kind in EXPENSE_TYPES:
            self.expenses += amount
        elif kind == TransactionType.COGS:
            self.cogs += amount
        elif kind == TransactionType.PAYMENT_RECEIVED:
            self.cash_in += amount
        elif kind == TransactionType.PAYMENT_MADE:
            self.cash_out += amount
        self.count += 1

    @property
    def cash_flow(self) -> Decimal:
        return self.cash_in - self.cash_out

    @property
    def revenue(self) -> Decimal:
        """Sales plus manual income, as the dashboard reports it."""
        return self.sales + self.other_income

    @property
    def gross_profit(self) -> Decimal:
        return self.revenue - self.cogs

    @property
    def net_profit(self) -> Decimal:
        return self.gross_profit - self.expenses

    @property
    def margin(self) -> Decimal:
        return percent_of(self.net_profit, self.revenue)


def classify_change(change: Decimal) -> ChangeType:
    if change > 0:
        return ChangeType.INCREASE
    if change < 0:
        return ChangeType.DECREASE
    return ChangeType.NEUTRAL


def compare_periods(current: LedgerTotals, previous: LedgerTotals) -> list[QuickStat]:
    """
    Headline figures with their change against the previous period.

    Expense change is inverted so that spending less than last
    period reads as an improvement.
    """
    stats = [
        ("Total Revenue", current.revenue,
         percent_change(current.revenue, previous.revenue)),
        ("Total Expenses", current.expenses,
         percent_reduction(current.expenses, previous.expenses)),
        ("Net Profit", current.net_profit,
         percent_change(current.net_profit, previous.net_profit)),
        ("Profit Margin", current.margin,
         percent_change(current.margin, previous.margin)),
    ]
    return [
        QuickStat(
            label=label,
            value=to_money(value),
            change=change,
            change_type=classify_change(change),
        )
        for label, value, change in stats
    ]


def cash_flow_series(
    window: PeriodWindow, entries: list[LedgerEntry]
) -> list[CashFlowPoint]:
    """Income and expenses per bucket, with empty buckets kept as zeros."""
    buckets = build_buckets(window)
    points = {
        bucket.start: CashFlowPoint(period=bucket.label, period_start=bucket.start)
        for bucket in buckets
    }
    granularity = window.granularity

    for entry in entries:
        if not window.contains(entry.transaction_date):
            continue
        point = points.get(
            bucket_start(entry.transaction_date, granularity, window.start)
        )
        if point is None:
            continue
        amount = to_money(entry.amount)
        if entry.transaction_type in INCOME_TYPES:
            point.income += amount
        elif entry.transaction_type in EXPENSE_TYPES:
            point.expenses += amount

    for point in points.values():
        point.net_flow = point.income - point.expenses
    return [points[bucket.start] for bucket in buckets]


class ReportingService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.subledgers = SubledgerService(db)

    def summarize(
        self,
        device_id: int,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> PeriodSummary:
        """
        Financial statement for a device over [date_from, date_to).

        Revenue counts sale entries only; manual income is kept
        apart in total_other_income. Expenses are purchases plus
        manual expenses. Either bound may be omitted.
        """
        date_from, date_to = to_naive_utc(date_from), to_naive_utc(date_to)
        if date_from and date_to and date_from > date_to:
            raise InvalidEntryError("date_from must not be after date_to")

        totals = LedgerTotals()
        for entry in self.ledger.get_entries(device_id, date_from, date_to):
            totals.add(entry)

        gross_profit = totals.sales - totals.cogs
        receivables = self.subledgers.list_open_receivables(device_id)
        payables = self.subledgers.list_open_payables(device_id)

        return PeriodSummary(
            device_id=device_id,
            currency=get_settings().DEFAULT_CURRENCY,
            date_from=date_from,
            date_to=date_to,
            total_revenue=totals.sales,
            total_other_income=totals.other_income,
            total_expenses=totals.expenses,
            total_cogs=totals.cogs,
            gross_profit=gross_profit,
            net_profit=gross_profit - totals.expenses,
            total_receivable=self.subledgers.total_receivable(device_id),
            total_payable=self.subledgers.total_payable(device_id),
            cash_flow=totals.cash_flow,
            entry_count=totals.count,
            receivables=[ReceivableResponse.model_validate(r) for r in receivables],
            payables=[PayableResponse.model_validate(p) for p in payables],
        )

    def summarize_dashboard(
        self,
        user_id: int,
        device_id: int,
        period: Period | str = Period.WEEK,
        now: datetime | None = None,
    ) -> DashboardSnapshot:
        if not user_id or not device_id:
            raise InvalidEntryError("User ID and Device ID are required")

        settings = get_settings()
        now = to_naive_utc(now) or datetime.utcnow()
        window = resolve_period(period, now)

        entries = self.ledger.get_entries(
            device_id, window.previous_start, window.end
        )
        current, previous = LedgerTotals(), LedgerTotals()
        for entry in entries:
            if window.contains(entry.transaction_date):
                current.add(entry)
            elif window.contains_previous(entry.transaction_date):
                previous.add(entry)

        receivable = self.subledgers.total_receivable(device_id)
        payable = self.subledgers.total_payable(device_id)
        overdue = self._count_overdue_receivables(
            device_id, now, settings.OVERDUE_AFTER_DAYS
        )
        pending = self._count_open_payables(device_id)
        low_stock = self._count_low_stock(user_id, settings.LOW_STOCK_THRESHOLD)

        logger.debug(
            "Dashboard for user %s device %s (%s): %d current, %d previous entries",
            user_id, device_id, window.period.value,
            current.count, previous.count,
        )

        return DashboardSnapshot(
            period=window.period,
            currency=settings.DEFAULT_CURRENCY,
            start_date=window.start,
            end_date=window.end,
            previous_start_date=window.previous_start,
            previous_end_date=window.previous_end,
            total_revenue=current.revenue,
            total_expenses=current.expenses,
            total_cogs=current.cogs,
            gross_profit=current.gross_profit,
            net_profit=current.net_profit,
            profit_margin=current.margin,
            cash_flow=current.cash_flow,
            accounts_receivable=receivable,
            accounts_payable=payable,
            current_period=self._period_totals(current),
            previous_period=self._period_totals(previous),
            quick_stats=compare_periods(current, previous),
            cash_flow_data=cash_flow_series(window, entries),
            recent_transactions=self._recent_transactions(
                device_id, settings.RECENT_TRANSACTIONS_LIMIT
            ),
            account_balances=[
                AccountBalance(account="Cash", balance=current.cash_flow, type="asset"),
                AccountBalance(
                    account="Accounts Receivable", balance=receivable, type="asset"
                ),
                AccountBalance(
                    account="Accounts Payable", balance=payable, type="liability"
                ),
            ],
            alerts=self._alerts(low_stock, overdue, pending),
            total_customers=self._count_owned(Customer, user_id),
            total_suppliers=self._count_owned(Supplier, user_id),
            total_products=self._count_owned(Product, user_id),
            low_stock_count=low_stock,
            overdue_invoices=overdue,
            pending_payments=pending,
        )

    @staticmethod
    def _period_totals(totals: LedgerTotals) -> PeriodTotals:
        return PeriodTotals(
            revenue=totals.revenue,
            expenses=totals.expenses,
            profit=totals.net_profit,
        )

    @staticmethod
    def _alerts(low_stock: int, overdue: int, pending: int) -> list[DashboardAlert]:
        alerts = []
        if low_stock > 0:
            alerts.append(DashboardAlert(
                id="low-stock",
                type="warning",
                title="Low Stock Alert",
                message=f"{low_stock} products are running low on stock",
                count=low_stock,
            ))
        if overdue > 0:
            alerts.append(DashboardAlert(
                id="overdue-invoices",
                type="error",
                title="Overdue Invoices",
                message=f"{overdue} invoices are overdue",
                count=overdue,
            ))
        if pending > 0:
            alerts.append(DashboardAlert(
                id="pending-payments",
                type="info",
                title="Pending Payments",
                message=f"{pending} supplier payments are pending",
                count=pending,
            ))
        return alerts

    def _recent_transactions(
        self, device_id: int, limit: int
    ) -> list[LedgerEntryResponse]:
        entries = self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.device_id == device_id)
            .order_by(LedgerEntry.transaction_date.desc(), LedgerEntry.id.desc())
            .limit(limit)
        ).scalars().all()
        return [LedgerEntryResponse.model_validate(e) for e in entries]

    def _count_owned(self, model, user_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(model).where(model.created_by == user_id)
        ).scalar_one()

    def _count_low_stock(self, user_id: int, threshold: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(Product).where(
                Product.created_by == user_id,
                Product.stock <= threshold,
            )
        ).scalar_one()

    def _count_overdue_receivables(
        self, device_id: int, now: datetime, overdue_after_days: int
    ) -> int:
        """Open receivables past their due date (or, without one, too old)."""
        cutoff = now - timedelta(days=overdue_after_days)
        return self.db.execute(
            select(func.count()).select_from(AccountsReceivable).where(
                AccountsReceivable.device_id == device_id,
                AccountsReceivable.outstanding_amount > 0,
                or_(
                    AccountsReceivable.due_date < now,
                    and_(
                        AccountsReceivable.due_date.is_(None),
                        AccountsReceivable.created_at < cutoff,
                    ),
                ),
            )
        ).scalar_one()

    def _count_open_payables(self, device_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(AccountsPayable).where(
                AccountsPayable.device_id == device_id,
                AccountsPayable.outstanding_amount > 0,
            )
        ).scalar_one()
