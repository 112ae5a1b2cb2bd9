"""
Reporting endpoints.

Reports are computed from the ledger on every request; nothing
here is cached or stored.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_ledger.api.errors import unwrap
from pos_ledger.models.base import get_db
from pos_ledger.models.enums import Period
from pos_ledger.schemas.report import PeriodSummary, DashboardSnapshot
from pos_ledger.services.operations import run_operation
from pos_ledger.services.reporting_service import ReportingService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/summary", response_model=PeriodSummary)
def get_summary(
    device_id: int,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    db: Session = Depends(get_db),
):
    """
    Financial statement for a device over [date_from, date_to).

    Omit either bound to leave that side of the range open.
    """
    service = ReportingService(db)
    return unwrap(run_operation(
        db, service.summarize, device_id, date_from, date_to, commit=False
    ))


@router.get("/dashboard", response_model=DashboardSnapshot)
def get_dashboard(
    user_id: int,
    device_id: int,
    period: Period = Period.WEEK,
    db: Session = Depends(get_db),
):
    """
    Home dashboard for the chosen period, compared with the
    period before it.
    """
    service = ReportingService(db)
    return unwrap(run_operation(
        db, service.summarize_dashboard, user_id, device_id, period,
        commit=False,
    ))
