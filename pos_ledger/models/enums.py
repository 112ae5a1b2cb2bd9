"""
Shared enumerations for database models.

Python enums mapped to database enums mean only valid values
can be stored. An unknown transaction_type is caught at the
database level, not just in Python validation.
"""

import enum


class AccountType(str, enum.Enum):
    """Account classification that decides the debit/credit side."""
    REVENUE = "revenue"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"


class TransactionType(str, enum.Enum):
    """The economic event a ledger entry records."""
    SALE = "sale"
    COGS = "cogs"
    PURCHASE = "purchase"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_MADE = "payment_made"
    INCOME = "income"
    EXPENSE = "expense"


class ReferenceType(str, enum.Enum):
    """Kind of domain object a ledger entry or payment points at."""
    SALE = "sale"
    PURCHASE = "purchase"
    MANUAL = "manual"


class ManualTransactionKind(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Period(str, enum.Enum):
    """Named reporting windows used by the dashboard."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class ChangeType(str, enum.Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    NEUTRAL = "neutral"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values (e.g. "payment_received") rather than member names."""
    return [member.value for member in enum_cls]
