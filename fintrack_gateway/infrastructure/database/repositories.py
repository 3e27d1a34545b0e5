"""Data access layer for finance entities"""

import uuid
from datetime import date
from typing import Callable, List, Optional
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fintrack_gateway.infrastructure.database.models import Account, Category, Receipt, Subscription, Transaction
from fintrack_gateway.domain.exceptions import PersistenceError
from fintrack_gateway.domain.models import ExistingTransaction, ParsedReceipt, ParsedTransaction


class AccountRepository:
    """Repository for user accounts"""

    def __init__(self, db: Session):
        self.db = db

    def create_account(self, user_id: str, name: str, balance: float = 0.0) -> Account:
        db_account = Account(user_id=user_id, name=name, balance=balance)
        self.db.add(db_account)
        self.db.flush()
        return db_account

    def get_active_accounts(self, user_id: str) -> List[Account]:
        """Active accounts, oldest first; the first one receives imports"""
        return (
            self.db.query(Account)
            .filter(Account.user_id == user_id, Account.is_active.is_(True))
            .order_by(Account.created_at.asc())
            .all()
        )

    def adjust_balance(self, account_id: uuid.UUID, delta: float) -> None:
        """Single UPDATE so concurrent writers cannot lose an increment"""
        self.db.execute(
            update(Account).where(Account.id == account_id).values(balance=Account.balance + delta)
        )


class TransactionRepository:
    """Repository for ledger transactions"""

    def __init__(self, db: Session):
        self.db = db

    def get_recent_by_source(self, user_id: str, source: str, limit: int = 100) -> List[Transaction]:
        """Most recent transactions from one source, newest first"""
        return (
            self.db.query(Transaction)
            .filter(Transaction.user_id == user_id, Transaction.source == source)
            .order_by(Transaction.created_at.desc())
            .limit(limit)
            .all()
        )

    def get_duplicate_window(self, user_id: str, limit: int = 100) -> List[ExistingTransaction]:
        """Recent sms transactions in the shape the duplicate detector reads"""
        return [
            ExistingTransaction(
                amount=txn.amount,
                type=txn.type,
                merchant=txn.merchant,
                created_at=txn.created_at,
            )
            for txn in self.get_recent_by_source(user_id, "sms", limit=limit)
        ]


class CategoryRepository:
    """Lookup of shared system categories"""

    def __init__(self, db: Session):
        self.db = db

    def find_system_category(self, type: Optional[str] = None, name: Optional[str] = None) -> Optional[Category]:
        query = self.db.query(Category).filter(Category.is_system.is_(True))
        if type is not None:
            query = query.filter(Category.type == type)
        if name is not None:
            query = query.filter(Category.name == name)
        return query.first()


class SubscriptionRepository:
    """Repository for recurring payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_subscription(
        self,
        user_id: str,
        name: str,
        amount: float,
        billing_cycle: str,
        next_billing_date: date,
        merchant: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Subscription:
        db_subscription = Subscription(
            user_id=user_id,
            name=name,
            amount=amount,
            billing_cycle=billing_cycle,
            next_billing_date=next_billing_date,
            merchant=merchant,
            description=description,
        )
        self.db.add(db_subscription)
        self.db.flush()
        return db_subscription

    def get_active_subscriptions(self, user_id: str) -> List[Subscription]:
        """Active subscriptions, soonest billing first"""
        return (
            self.db.query(Subscription)
            .filter(Subscription.user_id == user_id, Subscription.is_active.is_(True))
            .order_by(Subscription.next_billing_date.asc())
            .all()
        )

    def deactivate_subscription(self, subscription_id: uuid.UUID, user_id: str) -> bool:
        """Soft delete. Returns False if nothing matched."""
        result = self.db.execute(
            update(Subscription)
            .where(Subscription.id == subscription_id, Subscription.user_id == user_id)
            .values(is_active=False)
        )
        return result.rowcount > 0


class SqlTransactionStore:
    """
    Transaction store backed by the database.

    Each record_* call commits on success. Any failure while writing an
    item, including the category lookup, rolls back and surfaces as
    PersistenceError, so one bad item never aborts a batch or leaves a
    half-applied balance change behind.
    """

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id
        self.accounts = AccountRepository(db)
        self.categories = CategoryRepository(db)

    def record_transaction(self, account_id: str, transaction: ParsedTransaction) -> str:
        def write() -> str:
            category = self.categories.find_system_category(type=transaction.type)
            account_uuid = uuid.UUID(str(account_id))
            db_txn = Transaction(
                user_id=self.user_id,
                account_id=account_uuid,
                category_id=category.id if category else None,
                amount=transaction.amount,
                type=transaction.type,
                merchant=transaction.merchant,
                description=transaction.description,
                transaction_date=date.today(),
                source=transaction.source,
                raw_data=transaction.raw_data.to_dict(),
            )
            delta = transaction.amount if transaction.type == "income" else -transaction.amount
            return self._insert_with_balance(db_txn, account_uuid, delta)

        return self._guarded(write, "Failed to store transaction")

    def save_receipt(self, image_url: str, file_name: str, receipt: ParsedReceipt) -> str:
        def write() -> str:
            db_receipt = Receipt(
                user_id=self.user_id,
                image_url=image_url,
                parsed_merchant=receipt.merchant,
                parsed_amount=float(receipt.amount),
                parsed_date=receipt.date,
                parsed_items=receipt.items,
                ocr_raw={"confidence": receipt.confidence, "file_name": file_name},
                processed=True,
            )
            self.db.add(db_receipt)
            self.db.flush()
            return str(db_receipt.id)

        return self._guarded(write, "Failed to save receipt")

    def record_receipt_expense(self, account_id: str, receipt_id: str, receipt: ParsedReceipt) -> str:
        def write() -> str:
            category = self.categories.find_system_category(name="Food & Dining")
            account_uuid = uuid.UUID(str(account_id))
            amount = float(receipt.amount)
            db_txn = Transaction(
                user_id=self.user_id,
                account_id=account_uuid,
                receipt_id=uuid.UUID(str(receipt_id)),
                category_id=category.id if category else None,
                amount=amount,
                type="expense",
                merchant=receipt.merchant,
                description=f"Receipt: {', '.join(receipt.items)}",
                transaction_date=receipt.date,
                source="ocr",
                raw_data={"ocr_confidence": receipt.confidence},
            )
            return self._insert_with_balance(db_txn, account_uuid, -amount)

        return self._guarded(write, "Failed to create transaction")

    def _insert_with_balance(self, db_txn: Transaction, account_id: uuid.UUID, delta: float) -> str:
        self.db.add(db_txn)
        self.db.flush()
        self.accounts.adjust_balance(account_id, delta)
        return str(db_txn.id)

    def _guarded(self, write: Callable[[], str], message: str) -> str:
        """Run one item's writes and commit; roll back on any failure"""
        try:
            row_id = write()
            self.db.commit()
        except (SQLAlchemyError, ValueError) as e:
            self.db.rollback()
            raise PersistenceError(f"{message}: {e}") from e
        return row_id
