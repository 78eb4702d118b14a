"""POST /v1/transfer - money transfer endpoint"""

import time
import logging
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from transfer_gateway.api.v1.schemas import ErrorResponse, TransferRequestBody, TransferResponse
from transfer_gateway.api.dependencies import (
    get_app_settings,
    get_bearer_token,
    get_identity_resolver,
    get_request_id,
    get_request_metadata,
)
from transfer_gateway.api.errors import failure_response, status_code_for
from transfer_gateway.config import Settings
from transfer_gateway.infrastructure.database.session import get_db
from transfer_gateway.domain.authorizer import IdentityResolver, TransferAuthorizer
from transfer_gateway.domain.executor import TransferExecutor
from transfer_gateway.domain.rate_limiter import RateLimiter
from transfer_gateway.domain.models import TransferLimits, TransferRequest
from transfer_gateway.domain.exceptions import (
    InvalidInput,
    PersistenceFailure,
    RateLimited,
    TransferError,
    TransferExecutionFailure,
    Unauthorized,
)
from transfer_gateway.infrastructure.observability.metrics import record_transfer, rate_limited_counter
from transfer_gateway.infrastructure.observability.logging import log_transfer

router = APIRouter()


async def _read_transfer_body(request: Request) -> Optional[TransferRequest]:
    """Parse the JSON body; anything unusable becomes None and is rejected after authentication"""
    try:
        payload = await request.json()
        return TransferRequestBody.model_validate(payload).to_domain()
    except (ValueError, ValidationError):
        return None


def _outcome_for(exc: TransferError) -> str:
    if isinstance(exc, (TransferExecutionFailure, PersistenceFailure)):
        return "failed"
    return "rejected"


@router.post(
    "/transfer",
    response_model=TransferResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_transfer(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
    identity_resolver: IdentityResolver = Depends(get_identity_resolver),
):
    """
    Transfer money from one of the caller's accounts to an external account.

    Flow:
    1. Resolve the caller from the bearer token
    2. Validate the request and count the attempt against the rate limit
    3. Load the source account scoped to the caller and check funds
    4. Record a pending transaction, debit atomically, mark it completed
    5. Return the transaction id and new balance
    """
    start_time = time.time()
    request_id = get_request_id(request)
    token = get_bearer_token(request)
    transfer = await _read_transfer_body(request)
    metadata = get_request_metadata(request)

    user_id = None
    amount: Optional[Decimal] = transfer.amount if transfer else None

    try:
        # 1-3. Authorize
        rate_limiter = RateLimiter(
            db,
            max_attempts=settings.rate_limit_max_attempts,
            window_seconds=settings.rate_limit_window_seconds,
        )
        authorizer = TransferAuthorizer(
            db,
            identity_resolver,
            rate_limiter,
            TransferLimits(
                max_amount=Decimal(settings.max_transfer_amount),
                account_number_min_length=settings.account_number_min_length,
                account_number_max_length=settings.account_number_max_length,
            ),
        )
        authorized = await authorizer.authorize(token, transfer)
        user_id = authorized.user_id
        amount = authorized.transfer.amount

        # 4. Execute
        executor = TransferExecutor(db)
        result = executor.execute(user_id, authorized.account, authorized.transfer, metadata)

        # Record metrics and logs
        duration_ms = (time.time() - start_time) * 1000
        record_transfer("completed", amount)
        log_transfer(request_id, user_id, "completed", amount, duration_ms, result.transaction_id)

        return TransferResponse(
            transaction_id=result.transaction_id,
            new_balance=float(result.new_balance),
        )

    except TransferError as e:
        db.rollback()
        duration_ms = (time.time() - start_time) * 1000
        outcome = _outcome_for(e)
        if isinstance(e, RateLimited):
            rate_limited_counter.inc()
        record_transfer(outcome, amount)
        log_transfer(request_id, user_id, outcome, amount, duration_ms)

        if isinstance(e, (Unauthorized, InvalidInput, RateLimited)):
            logging.warning(f"Transfer rejected: {e.message}", extra={"request_id": request_id})
        elif outcome == "failed":
            logging.error(f"Transfer failed: {e.message}", extra={"request_id": request_id})
        else:
            logging.info(f"Transfer declined: {e.message}", extra={"request_id": request_id})

        return failure_response(status_code_for(e), e.message)

    except Exception as e:
        db.rollback()
        record_transfer("error", amount)
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        return failure_response(500, "Internal server error")
