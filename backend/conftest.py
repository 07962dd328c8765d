"""
Pytest configuration file for backend testing.
"""
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

# Settings are read at import time, so the test environment must be in
# place before anything from core is imported
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DEMO_LOGIN_ENABLED", "true")

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from core.auth import PrincipalKind, create_access_token
from core.database import Base, build_engine, get_db
from core.deps import get_clock

# Import all models to register them with SQLAlchemy
from modules.auth.models import user_models  # noqa: F401
from modules.brands.models import brand_models  # noqa: F401
from modules.loyalty.models import loyalty_models  # noqa: F401

from tests.factories.base import bind_factory_session


class FrozenClock:
    """Controllable replacement for ``datetime.utcnow``"""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        self.now = self.now + timedelta(seconds=seconds, **kwargs)
        return self.now


@pytest.fixture(scope="function")
def engine():
    test_engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=test_engine)
    try:
        yield test_engine
    finally:
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Create a fresh database session for each test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    bind_factory_session(db)
    try:
        yield db
    finally:
        bind_factory_session(None)
        db.close()


@pytest.fixture
def clock():
    # Midday keeps one-off scans well away from the UTC day boundary
    return FrozenClock(datetime(2024, 5, 6, 12, 0, 0))


@pytest.fixture(scope="function")
def client(db_session, clock):
    """Create a test client with database and clock overrides."""
    from app.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers():
    """Build customer auth headers: ``customer_headers(customer)``"""

    def _headers(customer):
        return bearer(create_access_token(customer.id, PrincipalKind.CUSTOMER))

    return _headers


@pytest.fixture
def business_headers():
    """Build business auth headers: ``business_headers(business_user)``"""

    def _headers(business_user):
        return bearer(create_access_token(business_user.id, PrincipalKind.BUSINESS))

    return _headers
