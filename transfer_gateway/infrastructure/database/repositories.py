"""Data access layer for ledger entities"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import case, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session
from transfer_gateway.infrastructure.database.models import Account, Transaction, TransferRateLimit
from transfer_gateway.domain.models import RequestMetadata, TransactionStatus, TransferRequest


def _parse_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class AccountRepository:
    """Repository for customer accounts"""

    def __init__(self, db: Session):
        self.db = db

    def get_owned_account(self, account_id: str, user_id: str) -> Optional[Account]:
        """Fetch an account only if it belongs to the given user"""
        account_uuid = _parse_uuid(account_id)
        if account_uuid is None:
            return None
        return (
            self.db.query(Account)
            .filter(Account.id == account_uuid, Account.user_id == user_id)
            .first()
        )

    def get_accounts_by_user(self, user_id: str) -> List[Account]:
        """Fetch all accounts owned by a user"""
        return (
            self.db.query(Account)
            .filter(Account.user_id == user_id)
            .order_by(Account.created_at.asc())
            .all()
        )

    def debit_if_sufficient(self, account_id: uuid.UUID, user_id: str, amount: Decimal) -> Optional[Decimal]:
        """
        Atomically subtract `amount` from the balance if it still covers it.

        The balance check and the write are one statement, so two concurrent
        debits can never both pass against the same funds.

        Returns:
            The persisted balance after the debit, or None if no row matched
        """
        result = self.db.execute(
            update(Account)
            .where(
                Account.id == account_id,
                Account.user_id == user_id,
                Account.balance >= amount,
            )
            .values(balance=Account.balance - amount, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None

        return self.db.execute(select(Account.balance).where(Account.id == account_id)).scalar_one()


class TransactionRepository:
    """Repository for transfer transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_pending(
        self,
        user_id: str,
        account_id: uuid.UUID,
        transfer: TransferRequest,
        metadata: RequestMetadata,
        created_at: datetime,
    ) -> Transaction:
        """Record the intent to transfer before any money moves"""
        db_transaction = Transaction(
            user_id=user_id,
            from_account_id=account_id,
            to_account_number=transfer.to_account_number,
            to_account_name=transfer.to_account_name,
            amount=transfer.amount,
            description=transfer.description,
            status=TransactionStatus.PENDING,
            ip_address=metadata.ip_address,
            user_agent=metadata.user_agent,
            created_at=created_at,
        )
        self.db.add(db_transaction)
        self.db.flush()  # Get ID without committing
        return db_transaction

    def mark_completed(self, transaction_id: uuid.UUID, completed_at: datetime) -> bool:
        """Move a pending transaction to completed; terminal rows are left untouched"""
        return self._resolve(
            transaction_id,
            status=TransactionStatus.COMPLETED,
            completed_at=completed_at,
        )

    def mark_failed(self, transaction_id: uuid.UUID) -> bool:
        """Move a pending transaction to failed; terminal rows are left untouched"""
        return self._resolve(transaction_id, status=TransactionStatus.FAILED)

    def _resolve(self, transaction_id: uuid.UUID, **values) -> bool:
        result = self.db.execute(
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.status == TransactionStatus.PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def get_user_transaction(self, transaction_id: str, user_id: str) -> Optional[Transaction]:
        """Fetch a single transaction owned by the user"""
        transaction_uuid = _parse_uuid(transaction_id)
        if transaction_uuid is None:
            return None
        return (
            self.db.query(Transaction)
            .filter(Transaction.id == transaction_uuid, Transaction.user_id == user_id)
            .first()
        )

    def get_transactions_by_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[Transaction]:
        """Fetch a page of the user's transactions, newest first"""
        query = self.db.query(Transaction).filter(Transaction.user_id == user_id)
        if status:
            query = query.filter(Transaction.status == status)
        return (
            query.order_by(Transaction.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_transactions_by_user(self, user_id: str, status: Optional[str] = None) -> int:
        """Count the user's transactions, optionally by status"""
        query = self.db.query(func.count(Transaction.id)).filter(Transaction.user_id == user_id)
        if status:
            query = query.filter(Transaction.status == status)
        return query.scalar()


# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class RateLimitRepository:
    """Repository for transfer rate limit windows"""

    def __init__(self, db: Session):
        self.db = db

    def record_attempt(self, user_id: str, now: datetime, since: datetime) -> int:
        """
        Count one attempt for the user in a single upsert and return the new count.

        The user's row is created on the first attempt, incremented while its
        window started at or after `since`, and reset to a fresh window at
        `now` otherwise. Concurrent attempts serialize on the unique user_id,
        so none of them can be lost.
        """
        dialect = self.db.get_bind().dialect.name
        if dialect not in UPSERT_INSERTS:
            raise NotImplementedError(f"Rate limiting is not supported on {dialect}")

        table = TransferRateLimit.__table__
        stmt = UPSERT_INSERTS[dialect](table).values(
            user_id=user_id,
            window_start=now,
            attempt_count=1,
        )
        in_window = table.c.window_start >= since
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id],
            set_={
                "attempt_count": case((in_window, table.c.attempt_count + 1), else_=1),
                "window_start": case((in_window, table.c.window_start), else_=stmt.excluded.window_start),
            },
        ).returning(table.c.attempt_count)

        return self.db.execute(stmt).scalar_one()
