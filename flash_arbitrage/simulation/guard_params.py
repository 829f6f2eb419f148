"""
Guard parameters and executor-contract calldata.

GuardParams are rebuilt for every simulation and every execution attempt so a
deadline is never reused across calls.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from eth_abi import encode
from web3 import Web3

from ..constants import (
    DEFAULT_INITIATOR,
    EXECUTE_OPERATION_ARG_TYPES,
    EXECUTE_OPERATION_SIGNATURE,
    GUARD_PAYLOAD_TYPES,
    MIN_NOTIONAL_USD,
    ZERO_ADDRESS,
)
from ..utils import bps_of, unix_seconds, usd_to_wei


@dataclass(frozen=True)
class GuardParams:
    """Deadline / min-out / slippage bundle checked on-chain by the executor."""

    deadline: int
    min_amount_out: int
    slippage_bps_max: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "deadline": self.deadline,
            "min_amount_out": str(self.min_amount_out),
            "slippage_bps_max": self.slippage_bps_max,
        }


@dataclass(frozen=True)
class FlashLoanLeg:
    """Single-asset flash-loan arguments for executeOperation."""

    asset: str
    amount_wei: int
    premium_wei: int
    initiator: str = DEFAULT_INITIATOR


def simulation_notional_usd(notional_usd_default: Optional[float] = None) -> float:
    """Trade size used for pre-flight and execution: the configured default, never below 1000."""
    return float(max(notional_usd_default or MIN_NOTIONAL_USD, MIN_NOTIONAL_USD))


def expected_out_wei(notional_usd: float, spread_bps: int, eth_usd_price: float) -> int:
    """notional x (1 + spread) converted to wei."""
    out_usd = Decimal(str(notional_usd)) * (1 + Decimal(spread_bps) / Decimal(10000))
    return usd_to_wei(out_usd, eth_usd_price)


def build_guard_params(
    expected_out: int,
    max_slippage_bps: int,
    deadline_seconds: int,
    now: Optional[int] = None,
) -> GuardParams:
    """
    Build fresh guard parameters.

    Args:
        expected_out: Expected output in wei
        max_slippage_bps: Tolerated slippage below expected_out
        deadline_seconds: Validity window from now
        now: Unix seconds override, defaults to the wall clock

    Returns:
        GuardParams with an absolute deadline
    """
    if now is None:
        now = unix_seconds()
    return GuardParams(
        deadline=now + deadline_seconds,
        min_amount_out=expected_out - bps_of(expected_out, max_slippage_bps),
        slippage_bps_max=max_slippage_bps,
    )


def encode_guard_payload(guard: GuardParams, expected_out: int) -> bytes:
    """ABI-encode (GuardParams, expectedOut) for the executor's params argument."""
    # deadline in the past encodes as 0 rather than failing uint256
    deadline = max(guard.deadline, 0)
    return encode(
        GUARD_PAYLOAD_TYPES,
        [(deadline, max(guard.min_amount_out, 0), guard.slippage_bps_max), max(expected_out, 0)],
    )


def execute_operation_selector() -> bytes:
    return Web3.keccak(text=EXECUTE_OPERATION_SIGNATURE)[:4]


def encode_execute_operation(leg: FlashLoanLeg, params: bytes) -> str:
    """Full executeOperation calldata as a 0x-prefixed hex string."""
    args = encode(
        EXECUTE_OPERATION_ARG_TYPES,
        [
            [Web3.to_checksum_address(leg.asset)],
            [leg.amount_wei],
            [leg.premium_wei],
            Web3.to_checksum_address(leg.initiator),
            params,
        ],
    )
    return Web3.to_hex(execute_operation_selector() + args)


def build_flash_loan_leg(input_wei: int, flash_fee_bps: int) -> FlashLoanLeg:
    return FlashLoanLeg(
        asset=ZERO_ADDRESS,
        amount_wei=input_wei,
        premium_wei=bps_of(input_wei, flash_fee_bps),
    )
