"""Transfer execution - pending record, atomic debit, terminal status"""

import logging
import uuid
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transfer_gateway.domain.models import RequestMetadata, TransferRequest, TransferResult
from transfer_gateway.domain.exceptions import InsufficientFunds, PersistenceFailure, TransferExecutionFailure
from transfer_gateway.infrastructure.database.models import Account
from transfer_gateway.infrastructure.database.repositories import AccountRepository, TransactionRepository
from transfer_gateway.infrastructure.observability.metrics import status_stamp_failure_counter
from transfer_gateway.utils.date_utils import utcnow


class TransferExecutor:
    """Moves money for an authorized transfer and keeps the audit trail truthful"""

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository(db)
        self.transactions = TransactionRepository(db)

    def execute(
        self,
        user_id: str,
        account: Account,
        transfer: TransferRequest,
        metadata: RequestMetadata,
        now: datetime | None = None,
    ) -> TransferResult:
        """
        Debit the source account and resolve the transaction.

        States:
        - pending: committed before the debit so intent survives any later failure
        - failed: the debit did not apply; balance is unchanged
        - completed: the debit applied; stamping is best-effort and never
          reverses money that already moved

        Raises:
            PersistenceFailure: The pending transaction could not be recorded
            TransferExecutionFailure: The debit write failed
            InsufficientFunds: The balance no longer covers the amount
        """
        now = now or utcnow()
        account_id = account.id

        # 1. Record intent
        try:
            transaction = self.transactions.create_pending(user_id, account_id, transfer, metadata, now)
            transaction_id = transaction.id
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.error(f"Failed to create transaction: {e}", extra={"user_id": user_id})
            raise PersistenceFailure("Failed to create transaction") from e

        # 2. Debit
        try:
            new_balance = self.accounts.debit_if_sufficient(account_id, user_id, transfer.amount)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.error(
                f"Debit failed: {e}",
                extra={"user_id": user_id, "transaction_id": str(transaction_id)},
            )
            self._mark_failed(transaction_id)
            raise TransferExecutionFailure("Failed to process transfer") from e

        if new_balance is None:
            logging.warning(
                "Balance no longer covers transfer at debit time",
                extra={"user_id": user_id, "transaction_id": str(transaction_id)},
            )
            self._mark_failed(transaction_id)
            raise InsufficientFunds()

        # 3. Stamp completion
        try:
            if not self.transactions.mark_completed(transaction_id, now):
                logging.warning(
                    "Transaction was not pending when marking completed",
                    extra={"transaction_id": str(transaction_id)},
                )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            status_stamp_failure_counter.inc()
            logging.error(
                f"Failed to mark transaction completed: {e}",
                extra={"user_id": user_id, "transaction_id": str(transaction_id)},
            )

        return TransferResult(transaction_id=str(transaction_id), new_balance=new_balance)

    def _mark_failed(self, transaction_id: uuid.UUID) -> None:
        try:
            self.transactions.mark_failed(transaction_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.error(
                f"Failed to mark transaction failed: {e}",
                extra={"transaction_id": str(transaction_id)},
            )
