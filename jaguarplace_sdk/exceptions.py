"""
Exceptions for the JaguarPlace SDK.
"""
from typing import Any, Optional


class JaguarPlaceError(Exception):
    """Base exception for all JaguarPlace SDK errors."""
    pass


class ConfigurationError(JaguarPlaceError):
    """Raised when the endpoint, credential, address, schema or call arguments are invalid.

    Always raised before any network activity.
    """
    pass


class SubmissionError(JaguarPlaceError):
    """Raised when a call cannot be signed or broadcast."""

    def __init__(self, message: str, operation: Optional[str] = None, tx_hash: Optional[str] = None):
        self.operation = operation
        self.tx_hash = tx_hash
        super().__init__(message)


class ConfirmationTimeout(SubmissionError):
    """Raised when a broadcast call has no receipt within the configured timeout."""
    pass


class ExecutionReverted(JaguarPlaceError):
    """
    Raised when the contract's own logic rejects a call.

    Attributes:
        operation: Name of the contract function that was called
        reason: Raw reason reported by the remote side, or None
        tx_hash: Hash of the mined transaction, or None if the revert
            was detected before anything was broadcast
        receipt: Receipt of the mined transaction, if any
    """

    def __init__(
        self,
        operation: str,
        reason: Optional[str] = None,
        tx_hash: Optional[str] = None,
        receipt: Optional[Any] = None
    ):
        self.operation = operation
        self.reason = reason
        self.tx_hash = tx_hash
        self.receipt = receipt
        message = f"{operation} reverted"
        if reason:
            message += f": {reason}"
        if tx_hash:
            message += f" (tx {tx_hash})"
        super().__init__(message)
