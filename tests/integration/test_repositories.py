"""Integration tests for the SQLAlchemy persistence layer"""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from fintrack_gateway.domain.exceptions import PersistenceError
from fintrack_gateway.domain.importer import import_sms_messages
from fintrack_gateway.domain.receipts import simulate_ocr
from fintrack_gateway.domain.sms_parser import parse_sms_transaction
from fintrack_gateway.infrastructure.database.models import Account, Transaction
from fintrack_gateway.infrastructure.database.repositories import (
    CategoryRepository,
    SqlTransactionStore,
    TransactionRepository,
)

pytestmark = pytest.mark.integration


def test_record_transaction_applies_balance_delta(db: Session, account: Account, sms_templates):
    store = SqlTransactionStore(db, "user_1")

    txn_id = store.record_transaction(str(account.id), parse_sms_transaction(sms_templates["paytm"].format(amount="120")))

    db.refresh(account)
    assert account.balance == pytest.approx(9880)
    row = db.query(Transaction).one()
    assert str(row.id) == txn_id
    assert row.raw_data["source_app"] == "paytm"
    assert row.category_id is None


def test_duplicate_window_reads_sms_rows_newest_first(db: Session, account: Account, sms_templates):
    store = SqlTransactionStore(db, "user_1")
    for amount in ("10", "20"):
        store.record_transaction(str(account.id), parse_sms_transaction(sms_templates["bank"].format(amount=amount)))

    window = TransactionRepository(db).get_duplicate_window("user_1", limit=1)

    assert len(window) == 1
    assert window[0].merchant == "Amazon"
    assert TransactionRepository(db).get_duplicate_window("someone_else") == []


def test_failed_commit_rolls_back(db: Session, account: Account, sms_templates, monkeypatch):
    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk full"))

    monkeypatch.setattr(db, "commit", failing_commit)
    store = SqlTransactionStore(db, "user_1")

    with pytest.raises(PersistenceError):
        store.record_transaction(str(account.id), parse_sms_transaction(sms_templates["bank"].format(amount="50")))

    monkeypatch.undo()
    db.refresh(account)
    assert account.balance == pytest.approx(10000)
    assert db.query(Transaction).count() == 0


def test_category_lookup_failure_is_item_level(db: Session, account: Account, sms_templates, monkeypatch):
    """A database error before the insert marks only that message as an error"""
    original_lookup = CategoryRepository.find_system_category
    calls = {"count": 0}

    def flaky_lookup(self, type=None, name=None):
        calls["count"] += 1
        if calls["count"] == 1:
            raise OperationalError("SELECT", {}, Exception("db hiccup"))
        return original_lookup(self, type=type, name=name)

    monkeypatch.setattr(CategoryRepository, "find_system_category", flaky_lookup)
    messages = [sms_templates["bank"].format(amount="100"), sms_templates["paytm"].format(amount="50")]

    summary = import_sms_messages(messages, [], SqlTransactionStore(db, "user_1"), str(account.id))

    assert [outcome.status for outcome in summary.outcomes] == ["error", "success"]
    db.refresh(account)
    assert account.balance == pytest.approx(9950)
    assert db.query(Transaction).count() == 1


def test_receipt_expense_lookup_failure_raises_persistence_error(db: Session, account: Account, monkeypatch):
    def failing_lookup(self, type=None, name=None):
        raise OperationalError("SELECT", {}, Exception("db hiccup"))

    monkeypatch.setattr(CategoryRepository, "find_system_category", failing_lookup)
    store = SqlTransactionStore(db, "user_1")
    receipt_id = store.save_receipt("https://storage.test/r.jpg", "r.jpg", simulate_ocr("r.jpg"))

    with pytest.raises(PersistenceError, match="Failed to create transaction"):
        store.record_receipt_expense(str(account.id), receipt_id, simulate_ocr("r.jpg"))

    db.refresh(account)
    assert account.balance == pytest.approx(10000)
