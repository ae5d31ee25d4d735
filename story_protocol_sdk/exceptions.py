"""
Exceptions for the Story Protocol SDK.
"""
from typing import Optional


class StoryProtocolError(Exception):
    """Base exception for all Story Protocol SDK errors."""
    pass


class SimulationError(StoryProtocolError):
    """Raised when a contract call would revert or is malformed."""

    def __init__(self, message: str, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(message)


class SubmissionError(StoryProtocolError):
    """Raised when signing or broadcasting a transaction fails."""
    pass


class TransactionRevertedError(SubmissionError):
    """Raised when a mined transaction has a failed status."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class ConfirmationTimeoutError(StoryProtocolError):
    """Raised when no receipt is observed within the wait policy."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class WaitCancelledError(ConfirmationTimeoutError):
    """Raised when the caller cancels a pending confirmation wait."""
    pass


class DecodingError(StoryProtocolError):
    """Raised when receipt logs don't match the expected event shape."""
    pass


class NetworkError(StoryProtocolError, ValueError):
    """Raised for unknown networks or chain ID mismatches."""
    pass
