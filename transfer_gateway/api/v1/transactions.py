"""GET /v1/transactions - Caller's transfer history"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from transfer_gateway.api.v1.schemas import (
    TransactionDetailResponse,
    TransactionHistoryResponse,
    TransactionItem,
    TransactionPage,
)
from transfer_gateway.api.dependencies import get_current_user
from transfer_gateway.domain.exceptions import InvalidInput, ResourceNotFound
from transfer_gateway.domain.models import TransactionStatus
from transfer_gateway.infrastructure.database.models import Transaction
from transfer_gateway.infrastructure.database.session import get_db
from transfer_gateway.infrastructure.database.repositories import TransactionRepository

router = APIRouter()


def _to_item(transaction: Transaction) -> TransactionItem:
    return TransactionItem(
        id=str(transaction.id),
        from_account_id=str(transaction.from_account_id),
        to_account_number=transaction.to_account_number,
        to_account_name=transaction.to_account_name,
        amount=float(transaction.amount),
        description=transaction.description,
        status=transaction.status,
        created_at=transaction.created_at.isoformat(),
        completed_at=transaction.completed_at.isoformat() if transaction.completed_at else None,
    )


@router.get("/transactions", response_model=TransactionHistoryResponse)
def get_transaction_history(
    status: Optional[str] = Query(None, description="Filter by status"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Retrieve the caller's transactions, newest first.

    Returns:
        One page of transactions and the total matching the filter
    """
    if status is not None and status not in TransactionStatus.ALL:
        raise InvalidInput("Invalid status filter")

    transaction_repo = TransactionRepository(db)
    transactions = transaction_repo.get_transactions_by_user(user_id, status=status, limit=limit, offset=offset)
    total = transaction_repo.count_transactions_by_user(user_id, status=status)

    return TransactionHistoryResponse(
        data=TransactionPage(
            transactions=[_to_item(t) for t in transactions],
            total=total,
        )
    )


@router.get("/transactions/{transaction_id}", response_model=TransactionDetailResponse)
def get_transaction(
    transaction_id: str,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Retrieve one of the caller's transactions"""
    transaction = TransactionRepository(db).get_user_transaction(transaction_id, user_id)

    if not transaction:
        raise ResourceNotFound("Transaction not found")

    return TransactionDetailResponse(data=_to_item(transaction))
