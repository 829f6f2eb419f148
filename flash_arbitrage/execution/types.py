"""
Execution result types.

ExecutionResult is a closed union with one dataclass per status; each variant
carries only the fields that status can have.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..constants import (
    STATUS_BLOCKED,
    STATUS_DRY_RUN,
    STATUS_REVERTED,
    STATUS_SUCCESS,
)

# Guard and terminal reasons
REASON_NETWORK_NOT_ALLOWED = "network-not-sepolia"
REASON_PROFIT_BELOW_MINIMUM = "profit-below-minimum"
REASON_SIMULATION_FAILED = "simulation-failed"
REASON_MISSING_EXECUTOR = "missing-executor-address"
REASON_GAS_COST_TOO_HIGH = "gas-cost-too-high"
REASON_MISSING_PRIVATE_KEY = "missing-private-key"
REASON_TRANSACTION_TIMEOUT = "transaction-timeout"
REASON_TRANSACTION_REVERTED = "transaction-reverted"
REASON_EXECUTION_ERROR = "execution-error"
REASON_PAUSED = "paused"


@dataclass(frozen=True)
class TxData:
    """Built (unsigned) executeOperation transaction fields."""

    to: str
    data: str
    value: int
    gas_limit: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "to": self.to,
            "data": self.data,
            "value": str(self.value),
            "gas_limit": str(self.gas_limit),
            "max_fee_per_gas": str(self.max_fee_per_gas),
            "max_priority_fee_per_gas": str(self.max_priority_fee_per_gas),
        }


@dataclass(frozen=True)
class ExecutionSuccess:
    tx_hash: str
    gas_used: int
    profit_expected: int
    relay_used: bool
    tx_data: TxData
    status: str = STATUS_SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "tx_hash": self.tx_hash,
            "gas_used": self.gas_used,
            "profit_expected": str(self.profit_expected),
            "relay_used": self.relay_used,
            "tx_data": self.tx_data.to_dict(),
        }


@dataclass(frozen=True)
class ExecutionReverted:
    """
    Terminal failure after guards passed.

    Covers an on-chain revert, a confirmation timeout and any exception caught
    at the executor boundary; tx_hash and gas_used are present only when the
    transaction got that far.
    """

    revert_reason: str
    profit_expected: int
    relay_used: bool = False
    tx_hash: Optional[str] = None
    gas_used: Optional[int] = None
    tx_data: Optional[TxData] = None
    status: str = STATUS_REVERTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "revert_reason": self.revert_reason,
            "profit_expected": str(self.profit_expected),
            "relay_used": self.relay_used,
            "tx_hash": self.tx_hash,
            "gas_used": self.gas_used,
            "tx_data": self.tx_data.to_dict() if self.tx_data else None,
        }


@dataclass(frozen=True)
class ExecutionBlocked:
    """Policy refusal; terminal and not retriable for this attempt."""

    revert_reason: str
    profit_expected: int
    relay_used: bool = False
    status: str = STATUS_BLOCKED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "revert_reason": self.revert_reason,
            "profit_expected": str(self.profit_expected),
            "relay_used": self.relay_used,
        }


@dataclass(frozen=True)
class ExecutionDryRun:
    tx_data: TxData
    profit_expected: int
    relay_used: bool = False
    status: str = STATUS_DRY_RUN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "profit_expected": str(self.profit_expected),
            "relay_used": self.relay_used,
            "tx_data": self.tx_data.to_dict(),
        }


ExecutionResult = Union[
    ExecutionSuccess, ExecutionReverted, ExecutionBlocked, ExecutionDryRun
]
