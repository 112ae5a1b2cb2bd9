"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from pos_ledger.models.base import Base
from pos_ledger.models.enums import (
    AccountType,
    TransactionType,
    ReferenceType,
    ManualTransactionKind,
    Period,
    ChangeType,
)
from pos_ledger.models.reference import Reference
from pos_ledger.models.ledger_entry import LedgerEntry
from pos_ledger.models.payment import Payment
from pos_ledger.models.cogs_entry import CogsLine
from pos_ledger.models.receivable import AccountsReceivable
from pos_ledger.models.payable import AccountsPayable
from pos_ledger.models.customer import Customer
from pos_ledger.models.supplier import Supplier
from pos_ledger.models.product import Product
from pos_ledger.models.sale import Sale, SaleItem
from pos_ledger.models.purchase import Purchase

# Tables owned by the accounting core. Everything else in
# Base.metadata belongs to the point-of-sale application and is
# only read here.
ACCOUNTING_TABLES = [
    LedgerEntry.__table__,
    Payment.__table__,
    CogsLine.__table__,
    AccountsReceivable.__table__,
    AccountsPayable.__table__,
]

__all__ = [
    "Base",
    "AccountType",
    "TransactionType",
    "ReferenceType",
    "ManualTransactionKind",
    "Period",
    "ChangeType",
    "Reference",
    "LedgerEntry",
    "Payment",
    "CogsLine",
    "AccountsReceivable",
    "AccountsPayable",
    "Customer",
    "Supplier",
    "Product",
    "Sale",
    "SaleItem",
    "Purchase",
    "ACCOUNTING_TABLES",
]
