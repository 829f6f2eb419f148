"""
Exception hierarchy for the flash-loan arbitrage bot.

Only unexpected faults are raised. Economic rejections, simulation failures
and guard blocks travel as data (reason strings and result objects).
"""

from typing import Any, Dict, Optional


class FlashArbitrageError(Exception):
    """Base exception for all flash-loan arbitrage errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(FlashArbitrageError):
    """Raised when there are configuration-related issues."""

    pass


class ValidationError(FlashArbitrageError):
    """Raised when validation of data or configuration fails."""

    pass


class SimulationError(FlashArbitrageError):
    """Raised inside a simulation attempt; always converted to a failed result."""

    pass


class ExecutionError(FlashArbitrageError):
    """Raised when transaction building, signing or submission fails."""

    def __init__(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.tx_hash = tx_hash


class NetworkError(FlashArbitrageError):
    """Raised when network or connectivity issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class RpcTimeoutError(NetworkError):
    """Raised when an RPC call does not answer within its deadline."""

    pass


class RelayError(NetworkError):
    """Raised when the private relay rejects or fails to accept a transaction."""

    def __init__(
        self,
        message: str,
        relay_url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, endpoint=relay_url, status_code=status_code, details=details)
        self.relay_url = relay_url


class SafetyError(FlashArbitrageError):
    """Raised when the safety state is used inconsistently."""

    pass
