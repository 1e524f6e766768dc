"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from invoice_financing.api.dependencies import get_today
from invoice_financing.api.main import create_app
from invoice_financing.infrastructure.database.models import Base
from invoice_financing.infrastructure.database.session import get_db
from invoice_financing.domain.models import Financier, Invoice, Issuer, Obligor, RateConfiguration


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed financing date so expectations do not depend on the calendar
TODAY = date(2024, 3, 1)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed date"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def issuer() -> Issuer:
    """Issuer with a 3 bps financing rate ceiling"""
    return Issuer(id=1, name="Toyota", max_rate_bps=3)


@pytest.fixture
def obligor() -> Obligor:
    return Obligor(id=1, name="Joe")


@pytest.fixture
def rich_bank(issuer: Issuer) -> Financier:
    """10 day minimum term, 50 bps annual for the issuer"""
    return Financier(
        id=1,
        name="RichBank",
        minimum_term_days=10,
        rate_configurations=(RateConfiguration(issuer_id=issuer.id, annual_rate_bps=50),),
    )


@pytest.fixture
def fat_bank(issuer: Issuer) -> Financier:
    """12 day minimum term, 40 bps annual for the issuer"""
    return Financier(
        id=2,
        name="FatBank",
        minimum_term_days=12,
        rate_configurations=(RateConfiguration(issuer_id=issuer.id, annual_rate_bps=40),),
    )


@pytest.fixture
def invoice(issuer: Issuer, obligor: Obligor) -> Invoice:
    """$10,000 invoice maturing in 30 days"""
    return Invoice(
        id=1,
        issuer=issuer,
        obligor=obligor,
        value_cents=1_000_000,
        maturity_date=TODAY + timedelta(days=30),
    )
