"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from gym_billing.api.main import create_app
from gym_billing.infrastructure.database.models import Base, Member, MembershipPlan
from gym_billing.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def membership_plan(db: Session) -> MembershipPlan:
    """Quarterly plan priced at 3000"""
    plan = MembershipPlan(name="Quarterly", price=Decimal("3000"), duration_days=90)
    db.add(plan)
    db.commit()
    return plan


@pytest.fixture
def member(db: Session, membership_plan: MembershipPlan) -> Member:
    """Active member whose current membership ends in 10 days"""
    today = date.today()
    member = Member(
        full_name="Asha Verma",
        phone="+919800000000",
        membership_plan_id=membership_plan.id,
        start_date=today - timedelta(days=80),
        end_date=today + timedelta(days=10),
        status="active",
    )
    db.add(member)
    db.commit()
    return member
