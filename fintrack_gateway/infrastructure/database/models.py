"""SQLAlchemy ORM models for accounts, transactions, receipts and subscriptions"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, ForeignKey, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Account(Base):
    """User money account (bank, wallet, card)"""

    __tablename__ = "accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    balance = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship("Transaction", back_populates="account")


class Category(Base):
    """Spending/income category; system categories are shared by all users"""

    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)  # income | expense
    is_system = Column(Boolean, nullable=False, default=False)


class Receipt(Base):
    """Uploaded receipt image with recognised fields"""

    __tablename__ = "receipts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    image_url = Column(Text, nullable=False)
    parsed_merchant = Column(Text, nullable=True)
    parsed_amount = Column(Float, nullable=True)
    parsed_date = Column(Date, nullable=True)
    parsed_items = Column(JSON, nullable=True)
    ocr_raw = Column(JSON, nullable=True)
    processed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Transaction(Base):
    """Ledger entry; source is manual | sms | ocr"""

    __tablename__ = "transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(Uuid(as_uuid=True), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=True)
    receipt_id = Column(Uuid(as_uuid=True), ForeignKey("receipts.id"), nullable=True)
    amount = Column(Float, nullable=False)
    type = Column(String(16), nullable=False)
    merchant = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    transaction_date = Column(Date, nullable=False)
    source = Column(String(16), nullable=False, default="manual", index=True)
    raw_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("Account", back_populates="transactions")


class Subscription(Base):
    """Recurring payment"""

    __tablename__ = "subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    billing_cycle = Column(String(16), nullable=False, default="monthly")
    next_billing_date = Column(Date, nullable=False)
    merchant = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
