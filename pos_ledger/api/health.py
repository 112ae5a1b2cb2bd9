"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_ledger.config import get_settings
from pos_ledger.models.base import get_db
from pos_ledger.services.schema_service import accounting_tables_exist

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Return application health status including database connectivity.

    The database check executes a simple query to verify
    the connection is alive. If it fails, the endpoint
    returns "degraded" so the load balancer can take this
    instance out of rotation.
    """
    schema_status = "unknown"
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
        schema_status = (
            "ready" if accounting_tables_exist(db.get_bind()) else "missing"
        )
    except SQLAlchemyError as e:
        logger.error("Health check database probe failed: %s", e)
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "pos-ledger",
        "environment": get_settings().ENVIRONMENT,
        "database": db_status,
        "schema": schema_status,
    }
