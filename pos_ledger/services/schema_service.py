"""
Accounting schema bootstrap.

Creates the five accounting tables (and their indexes) when
they are missing. Safe to call any number of times, from any
number of threads or processes: calls in one process are
serialized by a lock, and a table created by another process
between the existence check and the CREATE is treated as
success.

Alembic (migrations/) remains the way to evolve the schema;
this only guarantees the tables exist.
"""

import logging
import threading

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError, ProgrammingError

from pos_ledger.exceptions import StoreUnavailableError
from pos_ledger.models import ACCOUNTING_TABLES, Base

logger = logging.getLogger(__name__)

_schema_lock = threading.Lock()


def _existing_tables(bind: Engine | Connection) -> set[str]:
    return set(inspect(bind).get_table_names())


def accounting_tables_exist(bind: Engine | Connection) -> bool:
    existing = _existing_tables(bind)
    return all(table.name in existing for table in ACCOUNTING_TABLES)


def init_accounting_schema(bind: Engine | Connection) -> list[str]:
    """
    Create any missing accounting tables.

    Returns the names of the tables this call created; an empty
    list means the schema was already in place.
    """
    with _schema_lock:
        existing = _existing_tables(bind)
        missing = [t for t in ACCOUNTING_TABLES if t.name not in existing]
        if not missing:
            logger.debug("Accounting schema already initialized")
            return []

        try:
            Base.metadata.create_all(bind=bind, tables=missing, checkfirst=True)
        except (OperationalError, ProgrammingError) as e:
            if "already exists" not in str(e).lower():
                raise StoreUnavailableError(
                    f"Could not create accounting tables: {e}"
                ) from e
            logger.info(
                "Accounting tables created concurrently by another process: %s",
                e.orig,
            )
            return []

        names = [t.name for t in missing]
        logger.info("Created accounting tables: %s", ", ".join(names))
        return names
