"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from transfer_gateway.domain.models import TransferRequest


class CamelModel(BaseModel):
    """Accepts and emits the camelCase keys used by the web client"""

    model_config = ConfigDict(populate_by_name=True)


class TransferRequestBody(CamelModel):
    """Request body for POST /v1/transfer; required fields are enforced by the authorizer"""

    from_account_id: Optional[str] = Field(None, alias="fromAccountId")
    to_account_number: Optional[str] = Field(None, alias="toAccountNumber")
    to_account_name: Optional[str] = Field(None, alias="toAccountName")
    amount: Optional[Decimal] = None
    description: Optional[str] = None

    def to_domain(self) -> TransferRequest:
        return TransferRequest(
            from_account_id=self.from_account_id,
            to_account_number=self.to_account_number,
            to_account_name=self.to_account_name,
            amount=self.amount,
            description=self.description,
        )


class TransferResponse(CamelModel):
    """Response for a successful POST /v1/transfer"""

    success: bool = True
    transaction_id: str = Field(..., alias="transactionId")
    new_balance: float = Field(..., alias="newBalance")
    message: str = "Transfer completed successfully"


class ErrorResponse(BaseModel):
    """Failure body shared by every endpoint"""

    success: bool = False
    error: str


class AccountItem(CamelModel):
    """Single account owned by the caller"""

    id: str
    account_number: str = Field(..., alias="accountNumber")
    account_name: str = Field(..., alias="accountName")
    account_type: str = Field(..., alias="accountType")
    balance: float
    currency: str


class AccountList(BaseModel):
    accounts: List[AccountItem]


class AccountsResponse(BaseModel):
    """Response for GET /v1/accounts"""

    success: bool = True
    data: AccountList


class TransactionItem(CamelModel):
    """Single transaction in history"""

    id: str
    from_account_id: str = Field(..., alias="fromAccountId")
    to_account_number: str = Field(..., alias="toAccountNumber")
    to_account_name: str = Field(..., alias="toAccountName")
    amount: float
    description: Optional[str] = None
    status: str
    created_at: str = Field(..., alias="createdAt")
    completed_at: Optional[str] = Field(None, alias="completedAt")


class TransactionPage(BaseModel):
    transactions: List[TransactionItem]
    total: int


class TransactionHistoryResponse(BaseModel):
    """Response for GET /v1/transactions"""

    success: bool = True
    data: TransactionPage


class TransactionDetailResponse(BaseModel):
    """Response for GET /v1/transactions/{transaction_id}"""

    success: bool = True
    data: TransactionItem
