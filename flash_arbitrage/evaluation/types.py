"""Types produced by the evaluation stage."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..constants import REFERENCE_PRICE
from ..discovery.types import Opportunity

# Rejection reasons, listed in precedence order
REASON_LOW_LIQUIDITY = "low-liquidity"
REASON_SLIPPAGE_TOO_HIGH = "slippage-too-high"
REASON_NEGATIVE_PROFIT = "negative-profit"
REASON_BELOW_MIN_PROFIT = "below-min-profit"
REASON_GAS_TOO_EXPENSIVE = "gas-too-expensive"

REJECTION_REASONS = (
    REASON_LOW_LIQUIDITY,
    REASON_SLIPPAGE_TOO_HIGH,
    REASON_NEGATIVE_PROFIT,
    REASON_BELOW_MIN_PROFIT,
    REASON_GAS_TOO_EXPENSIVE,
)


@dataclass(frozen=True)
class EvaluationContext:
    """Thresholds and pricing inputs shared by evaluation and simulation."""

    min_net_profit_wei: int
    max_slippage_bps: int
    max_gas_wei: int
    min_liquidity_usd: float
    flash_fee_bps: int
    mev_buffer_bps: int = 5
    eth_usd_price: float = REFERENCE_PRICE
    notional_usd_default: Optional[float] = None
    deadline_seconds: int = 60

    @classmethod
    def from_config(cls, config) -> "EvaluationContext":
        return cls(
            min_net_profit_wei=config.min_net_profit_wei,
            max_slippage_bps=config.max_slippage_bps,
            max_gas_wei=config.max_gas_wei,
            min_liquidity_usd=config.min_liquidity_usd,
            flash_fee_bps=config.flash_loan.fee_bps,
            mev_buffer_bps=config.mev_buffer_bps,
            eth_usd_price=config.eth_usd_price,
            notional_usd_default=config.notional_usd_default,
            deadline_seconds=config.deadline_seconds,
        )


@dataclass(frozen=True)
class EvaluatedOpportunity:
    """An Opportunity with its sizing, cost and verdict attached."""

    opportunity: Opportunity
    notional_usd: float
    input_wei: int
    gross_profit_wei: int
    flash_fee_wei: int
    gas_estimated_wei: int
    mev_buffer_wei: int
    net_profit_wei: int
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.reason is None

    def to_dict(self) -> Dict[str, Any]:
        data = self.opportunity.to_dict()
        data.update(
            {
                "notional_usd": self.notional_usd,
                "input_wei": str(self.input_wei),
                "gross_profit_wei": str(self.gross_profit_wei),
                "flash_fee_wei": str(self.flash_fee_wei),
                "gas_estimated_wei": str(self.gas_estimated_wei),
                "mev_buffer_wei": str(self.mev_buffer_wei),
                "net_profit_wei": str(self.net_profit_wei),
                "reason": self.reason,
            }
        )
        return data
