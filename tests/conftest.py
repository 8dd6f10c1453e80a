import os

# Route the module-level engine to SQLite before anything imports database
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from main import app
from models import Base, Lease, LeaseStatus, Payment, PaymentStatus, Property, PropertyUnit, Tenant
from routers.common import get_reconciliation_cache
from services.reconciliation_cache import ReconciliationCache


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def seeded(db_session):
    """
    One landlord (id 7) with two properties; only the first has a lease.

    Lease 1: tenant 1, 500,000 per month from 2024-01-05, due on the 5th.
    Payments: January rent completed, one pending, one failed.
    """
    created = datetime(2024, 1, 1, 8, 0)
    db_session.add_all([
        Property(id=1, name="Sunset Court", landlord_id=7, created_at=created),
        Property(id=2, name="Lakeview", landlord_id=7, created_at=created),
    ])
    db_session.add(PropertyUnit(id=1, property_id=1, unit_number="A1", monthly_rent=Decimal("500000"), created_at=created))
    db_session.add(Tenant(tenant_id=1, first_name="Amina", last_name="Otieno", email="amina@example.com", created_at=created))
    db_session.flush()
    db_session.add(Lease(
        id=1,
        unit_id=1,
        tenant_id=1,
        monthly_rent=Decimal("500000.00"),
        deposit=Decimal("0"),
        start_date=date(2024, 1, 5),
        end_date=None,
        payment_day=5,
        status=LeaseStatus.ACTIVE,
        created_at=created,
    ))
    db_session.flush()
    db_session.add_all([
        Payment(id=1, lease_id=1, amount=Decimal("500000.00"), status=PaymentStatus.COMPLETED, payment_method="mpesa",
                paid_date=datetime(2024, 1, 4, 10, 0), created_at=datetime(2024, 1, 4, 10, 0)),
        Payment(id=2, lease_id=1, amount=Decimal("200000.00"), status=PaymentStatus.PENDING, payment_method="mpesa",
                created_at=datetime(2024, 2, 10, 10, 0)),
        Payment(id=3, lease_id=1, amount=Decimal("100000.00"), status=PaymentStatus.FAILED, payment_method="card",
                created_at=datetime(2024, 2, 12, 10, 0)),
    ])
    db_session.commit()
    return db_session


@pytest.fixture
def cache():
    return ReconciliationCache(max_size=32)


@pytest.fixture
def client(seeded, cache):
    def override_session():
        yield seeded

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_reconciliation_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
