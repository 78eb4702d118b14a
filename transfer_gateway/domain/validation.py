"""Transfer request validation - pure field and range checks"""

from decimal import Decimal
from typing import Optional

from transfer_gateway.domain.models import TransferRequest, TransferLimits
from transfer_gateway.domain.exceptions import InvalidInput

CENT = Decimal("0.01")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_transfer_request(
    transfer: Optional[TransferRequest],
    limits: TransferLimits,
) -> TransferRequest:
    """
    Check a caller-submitted transfer request and return a normalized copy.

    Requirements (checked in this order, first failure wins):
    - fromAccountId, toAccountNumber, toAccountName and amount are present
    - amount is a finite number greater than zero
    - amount does not exceed the absolute transfer ceiling
    - amount has at most two decimal places
    - toAccountNumber length is within the allowed range

    Raises:
        InvalidInput: On the first failing check
    """
    if transfer is None:
        raise InvalidInput("Invalid request body")

    from_account_id = _clean(transfer.from_account_id)
    to_account_number = _clean(transfer.to_account_number)
    to_account_name = _clean(transfer.to_account_name)
    amount = transfer.amount

    missing = [
        name
        for name, value in (
            ("fromAccountId", from_account_id),
            ("toAccountNumber", to_account_number),
            ("toAccountName", to_account_name),
            ("amount", amount),
        )
        if value is None
    ]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

    if not amount.is_finite() or amount <= 0:
        raise InvalidInput("Amount must be greater than zero")

    if amount > limits.max_amount:
        raise InvalidInput(f"Amount exceeds maximum transfer limit of {limits.max_amount}")

    if amount != amount.quantize(CENT):
        raise InvalidInput("Amount must have at most 2 decimal places")

    if not limits.account_number_min_length <= len(to_account_number) <= limits.account_number_max_length:
        raise InvalidInput(
            f"Destination account number must be between {limits.account_number_min_length} "
            f"and {limits.account_number_max_length} characters"
        )

    return TransferRequest(
        from_account_id=from_account_id,
        to_account_number=to_account_number,
        to_account_name=to_account_name,
        amount=amount.quantize(CENT),
        description=_clean(transfer.description),
    )
