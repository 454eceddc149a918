"""
Ledger Errors
=============
Categorical rejections for ledger operations. Every expected business failure
has a stable ``code`` the caller can branch on; ``status_code`` is the HTTP
status the router answers with.

InvariantViolation is the only fatal condition and is not a LedgerError.
"""
from typing import Optional


class LedgerError(ValueError):
    """Base class for rejected ledger operations."""
    code = "LEDGER_ERROR"
    status_code = 400
    default_message = "Ledger operation rejected"

    def __init__(self, message: Optional[str] = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, **self.context}


class InvalidAmount(LedgerError):
    code = "INVALID_AMOUNT"
    default_message = "Amount must be greater than 0"


class InsufficientBalance(LedgerError):
    code = "INSUFFICIENT_BALANCE"
    default_message = "Insufficient balance"


class PoolExhausted(LedgerError):
    code = "POOL_EXHAUSTED"
    status_code = 409
    default_message = "Insufficient tokens available for distribution"


class InsufficientPoolBalance(LedgerError):
    code = "INSUFFICIENT_POOL_BALANCE"
    status_code = 409
    default_message = "Insufficient balance in contract"


class InvalidRecipient(LedgerError):
    code = "INVALID_RECIPIENT"
    default_message = "Invalid recipient"


class InvalidSender(LedgerError):
    code = "INVALID_SENDER"
    default_message = "Invalid sender"


class CooldownActive(LedgerError):
    code = "COOLDOWN_ACTIVE"
    status_code = 429
    default_message = "Must wait 10 minutes between claims"

    def __init__(self, message: Optional[str] = None, retry_after: int = 0, **context):
        self.retry_after = retry_after
        super().__init__(message, retry_after=retry_after, **context)


class InvalidRiskLevel(LedgerError):
    code = "INVALID_RISK_LEVEL"
    default_message = "Number of bullets must be between 1 and 5"


class NotOwner(LedgerError):
    code = "NOT_OWNER"
    status_code = 403
    default_message = "Caller is not the owner"


class InvariantViolation(RuntimeError):
    """Ledger counters disagree. Never expected; indicates a defect."""
    pass
