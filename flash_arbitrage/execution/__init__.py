"""
Guarded execution: pricing, signing, submission and confirmation.
"""

from .executor import FlashArbExecutor
from .fees import FeeQuote, calculate_eip1559_pricing
from .submission import (
    DirectSubmitter,
    RelaySubmitter,
    RelayThenDirectStrategy,
    SubmissionOutcome,
)
from .types import (
    ExecutionBlocked,
    ExecutionDryRun,
    ExecutionResult,
    ExecutionReverted,
    ExecutionSuccess,
    TxData,
)

__all__ = [
    "FlashArbExecutor",
    "FeeQuote",
    "calculate_eip1559_pricing",
    "RelaySubmitter",
    "DirectSubmitter",
    "RelayThenDirectStrategy",
    "SubmissionOutcome",
    "TxData",
    "ExecutionResult",
    "ExecutionSuccess",
    "ExecutionReverted",
    "ExecutionBlocked",
    "ExecutionDryRun",
]
