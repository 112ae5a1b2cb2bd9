"""
Pydantic schemas for period summaries, the home dashboard and
the admin endpoints.

Everything here is derived on demand and never persisted.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from pos_ledger.models.enums import ChangeType, Period
from pos_ledger.money import ZERO
from pos_ledger.schemas.ledger import LedgerEntryResponse
from pos_ledger.schemas.subledger import ReceivableResponse, PayableResponse


class PeriodSummary(BaseModel):
    """
    Financial statement for one device over [date_from, date_to).

    gross_profit == total_revenue - total_cogs and
    net_profit == gross_profit - total_expenses always hold.
    Manual income is reported separately in total_other_income
    and does not enter either profit figure.
    """
    device_id: int
    currency: str
    date_from: datetime | None = None
    date_to: datetime | None = None
    total_revenue: Decimal = ZERO
    total_other_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_cogs: Decimal = ZERO
    gross_profit: Decimal = ZERO
    net_profit: Decimal = ZERO
    total_receivable: Decimal = ZERO
    total_payable: Decimal = ZERO
    cash_flow: Decimal = ZERO
    entry_count: int = 0
    receivables: list[ReceivableResponse] = Field(default_factory=list)
    payables: list[PayableResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class QuickStat(BaseModel):
    label: str
    value: Decimal
    change: Decimal
    change_type: ChangeType


class CashFlowPoint(BaseModel):
    """One chart bucket; zero-filled when nothing was booked in it."""
    period: str
    period_start: datetime
    income: Decimal = ZERO
    expenses: Decimal = ZERO
    net_flow: Decimal = ZERO


class PeriodTotals(BaseModel):
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO
    profit: Decimal = ZERO


class AccountBalance(BaseModel):
    account: str
    balance: Decimal
    type: str


class DashboardAlert(BaseModel):
    id: str
    type: str
    title: str
    message: str
    count: int


class DashboardSnapshot(BaseModel):
    period: Period
    currency: str
    start_date: datetime
    end_date: datetime
    previous_start_date: datetime
    previous_end_date: datetime

    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    total_cogs: Decimal = ZERO
    gross_profit: Decimal = ZERO
    net_profit: Decimal = ZERO
    profit_margin: Decimal = ZERO
    cash_flow: Decimal = ZERO
    accounts_receivable: Decimal = ZERO
    accounts_payable: Decimal = ZERO

    current_period: PeriodTotals
    previous_period: PeriodTotals
    quick_stats: list[QuickStat]
    cash_flow_data: list[CashFlowPoint]
    recent_transactions: list[LedgerEntryResponse]
    account_balances: list[AccountBalance]
    alerts: list[DashboardAlert]

    total_customers: int = 0
    total_suppliers: int = 0
    total_products: int = 0
    low_stock_count: int = 0
    overdue_invoices: int = 0
    pending_payments: int = 0

    model_config = {"from_attributes": True}


# --- Admin ---

class SchemaInitResponse(BaseModel):
    created_tables: list[str]
    message: str


class MigrationStatus(BaseModel):
    device_id: int
    has_ledger_data: bool
    has_sales_data: bool
    has_purchases_data: bool
    needs_migration: bool


class MigrationReport(BaseModel):
    device_id: int
    skipped: bool = False
    sales_migrated: int = 0
    purchases_migrated: int = 0
    failed_sales: list[int] = Field(default_factory=list)
    failed_purchases: list[int] = Field(default_factory=list)
    message: str
