"""Business logic services."""

from pos_ledger.services.ledger_service import LedgerService, split_amount
from pos_ledger.services.subledger_service import SubledgerService
from pos_ledger.services.accounting_service import AccountingService
from pos_ledger.services.reporting_service import ReportingService
from pos_ledger.services.migration_service import MigrationService
from pos_ledger.services.operations import OperationResult, run_operation
from pos_ledger.services.schema_service import (
    init_accounting_schema,
    accounting_tables_exist,
)

__all__ = [
    "LedgerService",
    "split_amount",
    "SubledgerService",
    "AccountingService",
    "ReportingService",
    "MigrationService",
    "OperationResult",
    "run_operation",
    "init_accounting_schema",
    "accounting_tables_exist",
]
