"""
Pytest fixtures for the RentMate test suite.

Provides:
- A fixed clock and an in-memory Store for service-level tests
- Seeded users, a property and an approved application
- Services wired the way the API wires them
- A TestClient over an in-memory SQLite database for API tests
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rentmate.clock import FixedClock
from rentmate.database import get_session
from rentmate.main import create_app
from rentmate.models import (
    ApplicationStatus,
    Base,
    LeaseApplication,
    Property,
    User,
    UserRole,
)
from rentmate.realtime import RealtimeHub
from rentmate.repositories import Store
from rentmate.services import (
    ConversationService,
    LeaseService,
    NotificationService,
    PaymentService,
    RentScheduleService,
)

T0 = datetime(2026, 1, 1, 12, 0, 0)


# ---------------------------------------------------------------------------
# Service-level fixtures (in-memory store)
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def store() -> Store:
    return Store.in_memory()


def _user(store, email, role, first="Test", last="User"):
    return store.users.add(
        User(email=email, password="not-a-hash", first_name=first, last_name=last, role=role)
    )


@pytest.fixture
def landlord(store):
    return _user(store, "landlord@test.com", UserRole.LANDLORD, "Lana", "Lord")


@pytest.fixture
def tenant(store):
    return _user(store, "tenant@test.com", UserRole.TENANT, "John", "Tenant")


@pytest.fixture
def other_tenant(store):
    return _user(store, "other@test.com", UserRole.TENANT, "Olive", "Other")


@pytest.fixture
def rental(store, landlord):
    return store.properties.add(
        Property(landlord_id=landlord.id, title="Sunset Condos 4B", address="12 Sunset Ave",
                 monthly_rent=Decimal("1800.00"))
    )


@pytest.fixture
def approved_application(store, rental, tenant, clock):
    return store.applications.add(
        LeaseApplication(
            property_id=rental.id,
            tenant_id=tenant.id,
            status=ApplicationStatus.APPROVED,
            created_at=clock.now(),
        )
    )


@pytest.fixture
def notifier(store, clock) -> NotificationService:
    return NotificationService(store, None, clock)


@pytest.fixture
def lease_service(store, clock, notifier) -> LeaseService:
    return LeaseService(store, clock, notifier)


@pytest.fixture
def schedule_service(store, clock, notifier) -> RentScheduleService:
    return RentScheduleService(store, clock, notifier)


@pytest.fixture
def payment_service(store, clock, notifier, lease_service, schedule_service) -> PaymentService:
    return PaymentService(store, clock, notifier, leases=lease_service, schedule=schedule_service)


@pytest.fixture
def conversation_service(store, clock, notifier) -> ConversationService:
    return ConversationService(store, clock, None, notifier)


@pytest.fixture
def draft_lease(lease_service, landlord, approved_application):
    return lease_service.create_lease(
        landlord.id,
        approved_application.id,
        date(2026, 3, 1),
        date(2027, 2, 28),
        Decimal("1800.00"),
        Decimal("3600.00"),
        "No pets.",
    )


@pytest.fixture
def sent_lease(lease_service, landlord, draft_lease):
    return lease_service.send_to_tenant(landlord.id, draft_lease.id)


@pytest.fixture
def accepted_lease(lease_service, tenant, sent_lease):
    """Lease the tenant accepted at T0; payment is due by T0 + 48h."""
    return lease_service.accept(tenant.id, sent_lease.id)


@pytest.fixture
def active_lease(payment_service, tenant, accepted_lease):
    payment_service.submit_payment(tenant.id, accepted_lease.id, Decimal("5400.00"))
    return accepted_lease


# ---------------------------------------------------------------------------
# Async helpers
# ---------------------------------------------------------------------------


async def wait_until(predicate, timeout: float = 2.0, interval: float = 0.005) -> None:
    """Poll ``predicate`` on the running loop until it holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(interval)


# ---------------------------------------------------------------------------
# API fixtures (SQLite)
# ---------------------------------------------------------------------------


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def api_clock() -> FixedClock:
    return FixedClock(T0)


@pytest.fixture
def hub() -> RealtimeHub:
    return RealtimeHub()


@pytest.fixture
def client(db_session_factory, api_clock, hub):
    app = create_app(clock=api_clock, hub=hub, session_factory=db_session_factory)

    def override_get_session():
        session = db_session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
