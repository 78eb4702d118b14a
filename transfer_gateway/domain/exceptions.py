"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransferError(DomainException):
    """Failure whose message is safe to show to the caller"""

    default_message = "Transfer failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(TransferError):
    """Caller credential missing or not resolvable to a user"""

    default_message = "Unauthorized"


class InvalidInput(TransferError):
    """Request fields are missing, malformed or out of range"""

    default_message = "Invalid input"


class RateLimited(TransferError):
    """Too many transfer attempts inside the current window"""

    default_message = "Too many transfer attempts. Please try again later."


class AccountNotFoundOrUnauthorized(TransferError):
    """Source account does not exist or belongs to another user"""

    default_message = "Account not found or unauthorized"


class InsufficientFunds(TransferError):
    """Source account balance is below the requested amount"""

    default_message = "Insufficient funds"


class PersistenceFailure(TransferError):
    """Ledger store read or write failed"""

    default_message = "Database error"


class TransferExecutionFailure(TransferError):
    """Debit write failed after the pending transaction was recorded"""

    default_message = "Failed to process transfer"


class ResourceNotFound(TransferError):
    """Requested record does not exist for this caller"""

    default_message = "Not found"
