"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintrack_gateway.api.main import create_app
from fintrack_gateway.api.dependencies import get_storage_client
from fintrack_gateway.infrastructure.database.models import Base, Account, Category
from fintrack_gateway.infrastructure.database.session import get_db
from fintrack_gateway.domain.exceptions import PersistenceError, StorageError


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Message templates per source app; {amount} is a formatted rupee amount
SMS_TEMPLATES = {
    "phonepe": "PhonePe: You paid ₹{amount} to Swiggy on 12-03-2024. UPI Ref 40213",
    "googlepay": "Google Pay: You sent ₹{amount} to Ravi Kumar on 05-03-2024",
    "paytm": "Paytm: Payment of ₹{amount} to Zomato on 10-03-2024 successful",
    "bank": "Your account XX1234 debited with ₹{amount} at Amazon on 12-Mar-24",
}


class FakeStorage:
    """In-memory stand-in for the object storage client"""

    def __init__(self, fail_on: tuple[str, ...] = ()):
        self.fail_on = fail_on
        self.uploads: dict[str, bytes] = {}

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        if any(path.endswith(name) for name in self.fail_on):
            raise StorageError("upload rejected")
        self.uploads[path] = content
        return f"https://storage.test/public/{path}"


class FakeStore:
    """Transaction store that records calls and can fail chosen items"""

    def __init__(self, fail_calls: tuple[int, ...] = ()):
        self.fail_calls = fail_calls
        self.recorded = []
        self.receipts = []
        self.calls = 0

    def _maybe_fail(self):
        self.calls += 1
        if self.calls in self.fail_calls:
            raise PersistenceError("write failed")

    def record_transaction(self, account_id, transaction):
        self._maybe_fail()
        self.recorded.append((account_id, transaction))
        return f"txn-{len(self.recorded)}"

    def save_receipt(self, image_url, file_name, receipt):
        self._maybe_fail()
        self.receipts.append((image_url, file_name, receipt))
        return f"rcpt-{len(self.receipts)}"

    def record_receipt_expense(self, account_id, receipt_id, receipt):
        self._maybe_fail()
        self.recorded.append((account_id, receipt))
        return f"txn-{len(self.recorded)}"


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
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def client(db: Session, storage: FakeStorage) -> TestClient:
    """Create FastAPI test client with test database and fake storage"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage
    return TestClient(app)


@pytest.fixture
def account(db: Session) -> Account:
    """Active account with a starting balance of 10,000"""
    db_account = Account(user_id="user_1", name="Savings", balance=10000.0)
    db.add(db_account)
    db.commit()
    return db_account


@pytest.fixture
def system_categories(db: Session) -> dict[str, Category]:
    categories = {
        "expense": Category(name="Shopping", type="expense", is_system=True),
        "income": Category(name="Salary", type="income", is_system=True),
        "food": Category(name="Food & Dining", type="expense", is_system=True),
    }
    db.add_all(categories.values())
    db.commit()
    return categories


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 12, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_store():
    """Factory for FakeStore; pass 1-based call numbers that should fail"""
    return FakeStore


@pytest.fixture
def make_storage():
    return FakeStorage


@pytest.fixture
def sms_templates() -> dict[str, str]:
    return SMS_TEMPLATES
