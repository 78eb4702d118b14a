"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional


class TransactionStatus:
    """Lifecycle states of a transfer transaction"""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    ALL = (PENDING, COMPLETED, FAILED)


@dataclass
class TransferRequest:
    """Transfer request as submitted by the caller (fields may be missing before validation)"""

    from_account_id: Optional[str]
    to_account_number: Optional[str]
    to_account_name: Optional[str]
    amount: Optional[Decimal]
    description: Optional[str] = None


@dataclass
class TransferLimits:
    """Business limits applied to incoming transfer requests"""

    max_amount: Decimal = Decimal("1000000")
    account_number_min_length: int = 5
    account_number_max_length: int = 20


@dataclass
class RequestMetadata:
    """Caller details recorded on the transaction for audit"""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass
class RateLimitDecision:
    """Outcome of a rate limit check"""

    allowed: bool
    attempt_count: int


@dataclass
class AuthorizedTransfer:
    """Validated request together with the caller and the source account it may debit"""

    user_id: str
    account: Any  # infrastructure.database.models.Account
    transfer: TransferRequest


@dataclass
class TransferResult:
    """Outcome of a successful transfer"""

    transaction_id: str
    new_balance: Decimal
