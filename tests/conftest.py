"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Each test gets fresh tables and a fresh
session cache file.
"""

import os

# Must be set before gold_savings.models.base builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gold_savings.api.deps import get_price_oracle, get_session_manager
from gold_savings.main import app
from gold_savings.models.base import Base, get_db
from gold_savings.models.price import PriceRecord
from gold_savings.schemas.account import AccountCreate
from gold_savings.services.price_oracle import StoredPriceOracle
from gold_savings.services.session_manager import SessionCache, SessionManager


# Use SQLite for tests; no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestSessionLocal


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
def session_cache(tmp_path):
    return SessionCache(tmp_path / "session.json")


@pytest.fixture
def session_manager(session_cache):
    return SessionManager(TestSessionLocal, session_cache)


@pytest.fixture
def client(db_session, session_manager):
    """
    Provide a test client with the test database.

    get_db, the session manager and the price oracle are all
    overridden so the app runs against the test database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_price_oracle] = (
        lambda: StoredPriceOracle(db_session)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_member_request(
    bookid="BK001", name="Asha Rao", phone="9876543210", **kwargs
) -> AccountCreate:
    return AccountCreate(name=name, bookid=bookid, phone=phone, **kwargs)


def publish_prices(db_session, gold="6000", silver="75", updated_at=None):
    """Stand-in for the external feed writing a price record."""
    record = PriceRecord(
        gold_price=Decimal(gold),
        silver_price=Decimal(silver),
        updated_at=updated_at or datetime.utcnow(),
    )
    db_session.add(record)
    db_session.commit()
    return record
