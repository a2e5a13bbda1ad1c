"""
Pytest configuration file for backend testing.

Shared fixtures: an in-memory SQLite database, a per-test session that is
rolled back afterwards, a TestClient wired to that session, and users with
bearer tokens for each role.
"""
import os
import sys
from pathlib import Path
from typing import Dict, Generator

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are read once at import time, so the test environment goes first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["IDENTITY_PROVIDER_SECRET"] = "test-gateway-secret"
os.environ["SMTP_HOST"] = ""
os.environ["ADMIN_SEED_EMAILS"] = "founder@example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

from core.auth import create_access_token
from core.database import Base, create_db_engine, get_db

# Import all models to register them with SQLAlchemy
from modules.auth.models.user_models import AuthProvider, User, UserRole
from modules.businesses.models.business_models import BusinessProfile
from modules.feedback.models.feedback_models import Feedback, Review


engine = create_db_engine("sqlite://")


@event.listens_for(engine, "connect")
def _sqlite_connect(dbapi_connection, connection_record):
    # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs behave
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False)


@pytest.fixture(scope="session", autouse=True)
def create_test_database():
    """Create test database tables."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Session whose commits become savepoints inside a rolled-back transaction."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(
        bind=connection, join_transaction_mode="create_savepoint"
    )

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def override_get_db(db_session: Session):
    """Override the get_db dependency for testing."""
    def _override_get_db():
        yield db_session

    return _override_get_db


@pytest.fixture
def client(override_get_db):
    """Create a test client."""
    from app.main import app

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# User fixtures

def make_user(
    db: Session,
    email: str,
    name: str,
    role: UserRole = UserRole.CUSTOMER,
    provider_id: str = None,
) -> User:
    user = User(
        email=email,
        name=name,
        provider=AuthProvider.GOOGLE,
        provider_id=provider_id or f"google-{email}",
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers_for(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.id, "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(db_session: Session) -> User:
    return make_user(db_session, "jane.doe@example.com", "Jane Doe")


@pytest.fixture
def other_customer(db_session: Session) -> User:
    return make_user(db_session, "sam.smith@example.com", "Sam Smith")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return make_user(db_session, "owner@example.com", "Olivia Owner", UserRole.ADMIN)


@pytest.fixture
def other_admin(db_session: Session) -> User:
    return make_user(db_session, "rival@example.com", "Rita Rival", UserRole.ADMIN)


@pytest.fixture
def customer_headers(customer: User) -> Dict[str, str]:
    return auth_headers_for(customer)


@pytest.fixture
def other_customer_headers(other_customer: User) -> Dict[str, str]:
    return auth_headers_for(other_customer)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture
def other_admin_headers(other_admin: User) -> Dict[str, str]:
    return auth_headers_for(other_admin)


# Business fixtures

@pytest.fixture
def business(db_session: Session, admin_user: User) -> BusinessProfile:
    """Business X, owned by admin_user"""
    profile = BusinessProfile(
        business_name="Corner Bakery",
        phone_number="+15551234567",
        address="12 Main Street",
        description="Fresh bread every morning",
        google_review_url="https://g.page/r/corner-bakery/review",
        created_by_id=admin_user.id,
        average_rating=0.0,
        total_reviews=0,
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def second_business(db_session: Session, other_admin: User) -> BusinessProfile:
    profile = BusinessProfile(
        business_name="Harbor Cafe",
        google_review_url="https://g.page/r/harbor-cafe/review",
        created_by_id=other_admin.id,
        average_rating=0.0,
        total_reviews=0,
    )
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile
