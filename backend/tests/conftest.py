"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Settings are read once at import time; configure them before any app import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-0123456789-abcdefghijklmnop"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from order_api.main import app
from order_api.models import Base, MenuItem, Restaurant
from order_api.seed import seed
from shared.config.constants import Regions, Roles
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt
from shared.security.identity import Identity


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Catalog
# =============================================================================


@pytest.fixture
def catalog(db_session) -> dict[str, MenuItem]:
    """Seeded restaurants; returns menu items by name."""
    seed(db_session)
    items = db_session.scalars(select(MenuItem)).all()
    return {item.name: item for item in items}


@pytest.fixture
def india_restaurant(db_session, catalog) -> Restaurant:
    return db_session.scalar(select(Restaurant).where(Restaurant.region == Regions.INDIA))


@pytest.fixture
def america_restaurant(db_session, catalog) -> Restaurant:
    return db_session.scalar(select(Restaurant).where(Restaurant.region == Regions.AMERICA))


# =============================================================================
# Identities
# =============================================================================


@pytest.fixture
def admin() -> Identity:
    return Identity(id="nick-fury", role=Roles.ADMIN, region=Regions.INDIA)


@pytest.fixture
def manager_india() -> Identity:
    return Identity(id="captain-marvel", role=Roles.MANAGER, region=Regions.INDIA)


@pytest.fixture
def manager_america() -> Identity:
    return Identity(id="captain-america", role=Roles.MANAGER, region=Regions.AMERICA)


@pytest.fixture
def member_india() -> Identity:
    return Identity(id="thanos", role=Roles.MEMBER, region=Regions.INDIA)


@pytest.fixture
def other_member_india() -> Identity:
    return Identity(id="thor", role=Roles.MEMBER, region=Regions.INDIA)


@pytest.fixture
def member_america() -> Identity:
    return Identity(id="travis", role=Roles.MEMBER, region=Regions.AMERICA)


def auth_headers_for(identity: Identity) -> dict[str, str]:
    """Bearer header carrying the identity's claims."""
    token = sign_jwt({"sub": identity.id, "role": identity.role, "region": identity.region})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Build auth headers for an Identity."""
    return auth_headers_for
