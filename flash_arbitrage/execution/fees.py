"""
EIP-1559 fee computation with an explicit fallback chain.

1. eip1559: (2 x baseFee + priority) and priority, each x1.10
2. legacy: provider gas price as max fee, fixed 2 gwei priority
3. static-fallback: 30 gwei / 2 gwei when the fee query itself fails
"""

from dataclasses import dataclass
from typing import Optional

from ..constants import (
    FALLBACK_MAX_FEE_WEI,
    FALLBACK_PRIORITY_FEE_WEI,
    FEE_BUFFER_PCT,
    LEGACY_PRIORITY_FEE_WEI,
)
from ..rpc_helpers import run_blocking
from ..utils import get_logger

logger = get_logger(__name__)

SOURCE_EIP1559 = "eip1559"
SOURCE_LEGACY = "legacy"
SOURCE_STATIC_FALLBACK = "static-fallback"


@dataclass(frozen=True)
class FeeQuote:
    """
    Fee fields for a type-2 transaction.

    Attributes:
        max_fee_per_gas: maxFeePerGas in wei
        max_priority_fee_per_gas: maxPriorityFeePerGas in wei
        source: Which step of the fallback chain produced the quote
        diagnostic: Error text when the provider query failed
    """

    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    source: str
    diagnostic: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.source != SOURCE_EIP1559


def _with_buffer(value_wei: int) -> int:
    return (int(value_wei) * FEE_BUFFER_PCT) // 100


def _query_fee_data(web3) -> FeeQuote:
    block = web3.eth.get_block("latest")
    base_fee = block.get("baseFeePerGas") if hasattr(block, "get") else None

    if base_fee:
        priority = int(web3.eth.max_priority_fee)
        suggested_max = 2 * int(base_fee) + priority
        return FeeQuote(
            max_fee_per_gas=_with_buffer(suggested_max),
            max_priority_fee_per_gas=_with_buffer(priority),
            source=SOURCE_EIP1559,
        )

    return FeeQuote(
        max_fee_per_gas=int(web3.eth.gas_price),
        max_priority_fee_per_gas=LEGACY_PRIORITY_FEE_WEI,
        source=SOURCE_LEGACY,
    )


async def calculate_eip1559_pricing(web3, timeout: Optional[float] = None) -> FeeQuote:
    """
    Price a transaction from current network conditions.

    Never raises: a failed or timed-out query yields the static fallback quote
    with the error text in FeeQuote.diagnostic.
    """
    try:
        quote = await run_blocking(_query_fee_data, web3, timeout=timeout, label="fee_data")
    except Exception as e:
        logger.warning(f"Failed to get EIP-1559 pricing, using fallback: {e}")
        return FeeQuote(
            max_fee_per_gas=FALLBACK_MAX_FEE_WEI,
            max_priority_fee_per_gas=FALLBACK_PRIORITY_FEE_WEI,
            source=SOURCE_STATIC_FALLBACK,
            diagnostic=str(e) or type(e).__name__,
        )

    logger.debug(
        f"Fee quote ({quote.source}): max={quote.max_fee_per_gas} "
        f"priority={quote.max_priority_fee_per_gas}"
    )
    return quote
