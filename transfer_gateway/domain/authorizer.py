"""Transfer authorization - identity, input, rate limit, ownership and funds checks"""

import logging
from datetime import datetime
from typing import Optional, Protocol
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transfer_gateway.domain.models import AuthorizedTransfer, TransferLimits, TransferRequest
from transfer_gateway.domain.exceptions import (
    AccountNotFoundOrUnauthorized,
    InsufficientFunds,
    PersistenceFailure,
    RateLimited,
    Unauthorized,
)
from transfer_gateway.domain.rate_limiter import RateLimiter
from transfer_gateway.domain.validation import validate_transfer_request
from transfer_gateway.infrastructure.database.repositories import AccountRepository


class IdentityResolver(Protocol):
    async def resolve_user(self, token: str) -> str: ...


class TransferAuthorizer:
    """Decides whether a caller may debit the requested source account"""

    def __init__(
        self,
        db: Session,
        identity_resolver: IdentityResolver,
        rate_limiter: RateLimiter,
        limits: TransferLimits | None = None,
    ):
        self.identity_resolver = identity_resolver
        self.rate_limiter = rate_limiter
        self.accounts = AccountRepository(db)
        self.limits = limits or TransferLimits()

    async def authorize(
        self,
        token: Optional[str],
        transfer: Optional[TransferRequest],
        now: datetime | None = None,
    ) -> AuthorizedTransfer:
        """
        Run every pre-debit check in order, stopping at the first failure.

        Flow:
        1. Resolve the bearer token to a user
        2. Validate required fields, amount range and destination number
        3. Count the attempt against the user's rate limit
        4. Load the source account scoped to the caller
        5. Check the balance covers the amount

        Raises:
            Unauthorized, InvalidInput, RateLimited, PersistenceFailure,
            AccountNotFoundOrUnauthorized, InsufficientFunds
        """
        if not token:
            raise Unauthorized("Missing Authorization token")
        user_id = await self.identity_resolver.resolve_user(token)

        transfer = validate_transfer_request(transfer, self.limits)

        decision = self.rate_limiter.check_and_record_attempt(user_id, now)
        if not decision.allowed:
            logging.warning(
                "Transfer rate limit exceeded",
                extra={"user_id": user_id, "attempt_count": decision.attempt_count},
            )
            raise RateLimited()

        try:
            account = self.accounts.get_owned_account(transfer.from_account_id, user_id)
        except SQLAlchemyError as e:
            logging.error(f"Account lookup failed: {e}", extra={"user_id": user_id})
            raise PersistenceFailure("Failed to load account") from e

        if account is None:
            raise AccountNotFoundOrUnauthorized()

        if account.balance < transfer.amount:
            raise InsufficientFunds()

        return AuthorizedTransfer(user_id=user_id, account=account, transfer=transfer)
