"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Every table is created before each test
and dropped after it, so no test data persists.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from pos_ledger.main import app
from pos_ledger.models import Base, Product, Customer, Supplier
from pos_ledger.models.base import get_db


# Use SQLite for tests — no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)


# pysqlite opens transactions lazily, which breaks SAVEPOINT.
# Let SQLAlchemy emit BEGIN itself so nested transactions used
# by the ledger backfill behave as they do on PostgreSQL.
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

DEVICE_ID = 7
COMPANY_ID = 1
USER_ID = 42


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def ids():
    """Device, company and user ids shared by a test's requests."""
    return {
        "device_id": DEVICE_ID,
        "company_id": COMPANY_ID,
        "created_by": USER_ID,
    }


@pytest.fixture
def make_product(db_session):
    def _make(name="Widget", price=None, wholesale_price=None, stock=10,
              created_by=USER_ID, device_id=DEVICE_ID):
        product = Product(
            name=name,
            price=Decimal(price) if price is not None else None,
            wholesale_price=(
                Decimal(wholesale_price) if wholesale_price is not None else None
            ),
            stock=stock,
            device_id=device_id,
            created_by=created_by,
            created_at=datetime(2024, 1, 1),
        )
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture
def make_customer(db_session):
    def _make(name="Asha", created_by=USER_ID):
        customer = Customer(name=name, device_id=DEVICE_ID, created_by=created_by)
        db_session.add(customer)
        db_session.commit()
        return customer
    return _make


@pytest.fixture
def make_supplier(db_session):
    def _make(name="Acme Traders", created_by=USER_ID):
        supplier = Supplier(name=name, device_id=DEVICE_ID, created_by=created_by)
        db_session.add(supplier)
        db_session.commit()
        return supplier
    return _make
