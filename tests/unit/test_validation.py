"""Unit tests for transfer request validation"""

import pytest
from decimal import Decimal
from transfer_gateway.domain.models import TransferRequest, TransferLimits
from transfer_gateway.domain.exceptions import InvalidInput
from transfer_gateway.domain.validation import validate_transfer_request


def make_request(**overrides) -> TransferRequest:
    fields = {
        "from_account_id": "acc-1",
        "to_account_number": "12345",
        "to_account_name": "Jane Doe",
        "amount": Decimal("50"),
        "description": "Rent",
    }
    fields.update(overrides)
    return TransferRequest(**fields)


def test_valid_request_is_normalized():
    """Test strings are stripped and amount carries two decimal places"""
    validated = validate_transfer_request(
        make_request(to_account_name="  Jane Doe ", amount=Decimal("50.5"), description="   "),
        TransferLimits(),
    )

    assert validated.to_account_name == "Jane Doe"
    assert validated.amount == Decimal("50.50")
    assert str(validated.amount) == "50.50"
    assert validated.description is None


def test_missing_body_rejected():
    with pytest.raises(InvalidInput, match="Invalid request body"):
        validate_transfer_request(None, TransferLimits())


@pytest.mark.parametrize(
    "field,alias",
    [
        ("from_account_id", "fromAccountId"),
        ("to_account_number", "toAccountNumber"),
        ("to_account_name", "toAccountName"),
        ("amount", "amount"),
    ],
)
def test_missing_required_field_rejected(field, alias):
    """Test each required field is reported by its API name"""
    with pytest.raises(InvalidInput) as exc_info:
        validate_transfer_request(make_request(**{field: None}), TransferLimits())

    assert alias in exc_info.value.message


def test_blank_string_counts_as_missing():
    with pytest.raises(InvalidInput, match="toAccountName"):
        validate_transfer_request(make_request(to_account_name="   "), TransferLimits())


@pytest.mark.parametrize("amount", ["0", "-0.01", "-100", "NaN", "Infinity"])
def test_non_positive_or_non_finite_amount_rejected(amount):
    with pytest.raises(InvalidInput, match="greater than zero"):
        validate_transfer_request(make_request(amount=Decimal(amount)), TransferLimits())


def test_amount_ceiling():
    """Test the ceiling itself is allowed and anything above it is not"""
    limits = TransferLimits()

    assert validate_transfer_request(make_request(amount=Decimal("1000000")), limits).amount == Decimal("1000000.00")

    with pytest.raises(InvalidInput, match="maximum transfer limit"):
        validate_transfer_request(make_request(amount=Decimal("1000000.01")), limits)


def test_sub_cent_amount_rejected():
    with pytest.raises(InvalidInput, match="2 decimal places"):
        validate_transfer_request(make_request(amount=Decimal("10.001")), TransferLimits())


@pytest.mark.parametrize(
    "account_number,valid",
    [
        ("1234", False),
        ("12345", True),
        ("1" * 20, True),
        ("1" * 21, False),
    ],
)
def test_destination_account_number_length(account_number, valid):
    """Test destination number length boundaries (5-20 characters)"""
    request = make_request(to_account_number=account_number)

    if valid:
        assert validate_transfer_request(request, TransferLimits()).to_account_number == account_number
    else:
        with pytest.raises(InvalidInput, match="between 5 and 20 characters"):
            validate_transfer_request(request, TransferLimits())


def test_custom_limits_apply():
    limits = TransferLimits(max_amount=Decimal("100"), account_number_min_length=3, account_number_max_length=4)

    with pytest.raises(InvalidInput, match="maximum transfer limit"):
        validate_transfer_request(make_request(amount=Decimal("100.01"), to_account_number="123"), limits)

    assert validate_transfer_request(make_request(amount=Decimal("100"), to_account_number="123"), limits)
