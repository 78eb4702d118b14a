"""SQLAlchemy ORM models for the ledger store"""

import uuid
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from transfer_gateway.domain.models import TransactionStatus

Base = declarative_base()


class Account(Base):
    """Customer account holding a balance"""

    __tablename__ = "accounts"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    account_number = Column(String(20), nullable=False, unique=True)
    account_name = Column(Text, nullable=False)
    account_type = Column(Text, nullable=False, default="checking")
    balance = Column(Numeric(15, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    transactions = relationship("Transaction", back_populates="from_account")


class Transaction(Base):
    """Audit record of one transfer attempt"""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in TransactionStatus.ALL) + ")",
            name="ck_transactions_status",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    from_account_id = Column(UUID(as_uuid=True), ForeignKey("accounts.id"), nullable=False, index=True)
    to_account_number = Column(String(20), nullable=False)
    to_account_name = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default=TransactionStatus.PENDING)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    from_account = relationship("Account", back_populates="transactions")


class TransferRateLimit(Base):
    """Per-user transfer attempt counter; one row per user, reset in place when its window expires"""

    __tablename__ = "transfer_rate_limits"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True)
    window_start = Column(DateTime(timezone=True), nullable=False)
    attempt_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
