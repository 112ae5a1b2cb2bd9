"""
Administrative endpoints: schema bootstrap and ledger backfill.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_ledger.api.errors import unwrap
from pos_ledger.models.base import get_db
from pos_ledger.schemas.report import (
    SchemaInitResponse,
    MigrationStatus,
    MigrationReport,
)
from pos_ledger.services.migration_service import MigrationService
from pos_ledger.services.operations import run_operation
from pos_ledger.services.schema_service import init_accounting_schema

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/schema", response_model=SchemaInitResponse)
def init_schema(db: Session = Depends(get_db)):
    """Create any missing accounting tables. Safe to call repeatedly."""
    created = unwrap(run_operation(
        db, init_accounting_schema, db.get_bind(), commit=False
    ))
    if created:
        message = f"Created {len(created)} accounting tables"
    else:
        message = "Accounting schema already initialized"
    return SchemaInitResponse(created_tables=created, message=message)


@router.get("/migration/{device_id}", response_model=MigrationStatus)
def migration_status(device_id: int, db: Session = Depends(get_db)):
    """Report whether a device has history that is not yet in the ledger."""
    service = MigrationService(db)
    return unwrap(run_operation(
        db, service.check_migration_status, device_id, commit=False
    ))


@router.post("/migration/{device_id}", response_model=MigrationReport)
def migrate_device(device_id: int, db: Session = Depends(get_db)):
    """
    Backfill the ledger from a device's historic sales and purchases.

    Does nothing if the device already has ledger entries.
    Documents that cannot be booked are skipped and listed in
    the report.
    """
    service = MigrationService(db)
    return unwrap(run_operation(db, service.migrate_existing_data, device_id))
