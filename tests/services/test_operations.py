"""
Tests for run_operation, the accounting core's error boundary.
"""

from decimal import Decimal

from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError, OperationalError

from pos_ledger.exceptions import (
    ConflictError,
    ErrorKind,
    InvalidEntryError,
    RecordNotFoundError,
)
from pos_ledger.models import LedgerEntry
from pos_ledger.models.enums import AccountType, TransactionType
from pos_ledger.schemas.ledger import LedgerEntryCreate
from pos_ledger.services.ledger_service import LedgerService
from pos_ledger.services.operations import run_operation


class _Amount(BaseModel):
    value: Decimal = Field(gt=0)


def raising(exc):
    def operation():
        raise exc
    return operation


class TestRunOperation:

    def test_success_commits(self, db_session, ids):
        service = LedgerService(db_session)
        request = LedgerEntryCreate(
            transaction_type=TransactionType.EXPENSE,
            amount=Decimal("9.99"),
            account_type=AccountType.EXPENSE,
            **ids,
        )

        result = run_operation(db_session, service.record, request)
        db_session.rollback()

        assert result.success is True
        assert result.error_kind is None
        assert db_session.query(LedgerEntry).count() == 1

    def test_failure_rolls_back(self, db_session, ids):
        service = LedgerService(db_session)

        def record_then_fail():
            service.record(LedgerEntryCreate(
                transaction_type=TransactionType.EXPENSE,
                amount=Decimal("1"),
                account_type=AccountType.EXPENSE,
                **ids,
            ))
            raise InvalidEntryError("nope")

        result = run_operation(db_session, record_then_fail)

        assert result.success is False
        assert result.message == "nope"
        assert db_session.query(LedgerEntry).count() == 0

    def test_error_kinds(self, db_session):
        cases = [
            (RecordNotFoundError("Sale", 3), ErrorKind.NOT_FOUND),
            (InvalidEntryError("bad"), ErrorKind.VALIDATION_FAILED),
            (ConflictError("dup"), ErrorKind.CONFLICT),
            (IntegrityError("INSERT", {}, Exception("unique")), ErrorKind.CONFLICT),
            (OperationalError("SELECT", {}, Exception("down")),
             ErrorKind.STORE_UNAVAILABLE),
        ]
        for exc, kind in cases:
            result = run_operation(db_session, raising(exc))
            assert result.error_kind == kind, exc

    def test_pydantic_validation_error(self, db_session):
        result = run_operation(db_session, _Amount, value=Decimal("-1"))

        assert result.success is False
        assert result.error_kind == ErrorKind.VALIDATION_FAILED

    def test_not_found_message(self, db_session):
        result = run_operation(db_session, raising(RecordNotFoundError("Sale", 3)))

        assert result.message == "Sale 3 not found"
