import os

# Keep the app's own engine off the on-disk database during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from models import Allocation, Transaction
from app.deps import get_db
from main import app

USER = "alice"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, headers={"X-User-Id": USER}) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_tx(type, amount, on, category="Salary", description=None, id=None):
    """Unsaved Transaction row, for aggregation tests."""
    return Transaction(
        id=id,
        type=type,
        category=category,
        amount=Decimal(str(amount)),
        description=description,
        transaction_date=on if isinstance(on, date) else date.fromisoformat(on),
        user_id=USER,
    )


def make_allocation(category, percentage, id=None):
    return Allocation(id=id, category=category, percentage=Decimal(str(percentage)), user_id=USER)
