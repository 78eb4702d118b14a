"""GET /v1/accounts - Caller's accounts and balances"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from transfer_gateway.api.v1.schemas import AccountItem, AccountList, AccountsResponse
from transfer_gateway.api.dependencies import get_current_user
from transfer_gateway.infrastructure.database.session import get_db
from transfer_gateway.infrastructure.database.repositories import AccountRepository

router = APIRouter()


@router.get("/accounts", response_model=AccountsResponse)
def get_accounts(
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    accounts = AccountRepository(db).get_accounts_by_user(user_id)

    return AccountsResponse(
        data=AccountList(
            accounts=[
                AccountItem(
                    id=str(a.id),
                    account_number=a.account_number,
                    account_name=a.account_name,
                    account_type=a.account_type,
                    balance=float(a.balance),
                    currency=a.currency,
                )
                for a in accounts
            ]
        )
    )
