"""Pytest fixtures for testing"""

import uuid
import pytest
import jwt
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from transfer_gateway.api.main import create_app
from transfer_gateway.config import Settings
from transfer_gateway.infrastructure.database.models import Base, Account
from transfer_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
TEST_JWT_SECRET = "test-signing-secret-with-at-least-32-bytes"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        auth_jwt_secret=TEST_JWT_SECRET,
        log_level="WARNING",
    )


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
def session_factory(db: Session) -> sessionmaker:
    """Hand out extra sessions on the test database, one per concurrent worker"""
    return TestingSessionLocal


@pytest.fixture
def client(db: Session, settings: Settings) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app(settings)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint access tokens the way the identity provider signs them"""

    def _make_token(user_id: str, expires_in: int = 3600, secret: str = TEST_JWT_SECRET) -> str:
        claims = {
            "sub": user_id,
            "aud": "authenticated",
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        }
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make_token


@pytest.fixture
def auth_headers(make_token) -> Callable[[str], dict]:
    def _auth_headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _auth_headers


@pytest.fixture
def create_account(db: Session) -> Callable[..., Account]:
    """Provision an account directly in the ledger store"""

    def _create_account(
        user_id: str,
        balance: str = "500.00",
        account_number: str | None = None,
        account_name: str = "Everyday Checking",
    ) -> Account:
        account = Account(
            user_id=user_id,
            account_number=account_number or uuid.uuid4().hex[:12],
            account_name=account_name,
            balance=Decimal(balance),
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _create_account
