"""
Economic scoring of candidate paths.

Every number here is a heuristic: gas is priced from the configured budget
rather than measured, and the notional size is derived from pool liquidity.
Amounts are integer wei; USD conversions go through Decimal.
"""

import logging
import math
from decimal import Decimal
from typing import Iterable, List, Optional

from ..constants import (
    GAS_BASE_UNITS,
    GAS_BUDGET_UNITS,
    GAS_UNITS_PER_HOP,
    MAX_NOTIONAL_USD,
    MIN_NOTIONAL_USD,
    NOTIONAL_LIQUIDITY_FRACTION,
)
from ..discovery.types import Opportunity
from ..utils import bps_of, clamp, usd_to_wei
from .types import (
    REASON_BELOW_MIN_PROFIT,
    REASON_GAS_TOO_EXPENSIVE,
    REASON_LOW_LIQUIDITY,
    REASON_NEGATIVE_PROFIT,
    REASON_SLIPPAGE_TOO_HIGH,
    EvaluatedOpportunity,
    EvaluationContext,
)

logger = logging.getLogger(__name__)


def choose_notional_usd(
    min_liquidity_usd: float, notional_usd_default: Optional[float] = None
) -> float:
    """Configured size if set, else 5% of the thinnest pool clamped to [1000, 50000]."""
    if notional_usd_default:
        return float(notional_usd_default)
    heuristic = math.floor(NOTIONAL_LIQUIDITY_FRACTION * min_liquidity_usd)
    return float(clamp(heuristic, MIN_NOTIONAL_USD, MAX_NOTIONAL_USD))


def estimate_gas_units(hops: int) -> int:
    return GAS_BASE_UNITS + hops * GAS_UNITS_PER_HOP


def gas_unit_price(max_gas_wei: int) -> int:
    """Per-unit gas price implied by the configured budget."""
    return max_gas_wei // GAS_BUDGET_UNITS


def gross_profit_wei(notional_usd: float, spread_bps: int, eth_usd_price: float) -> int:
    """notional x spread converted to wei; negative for negative spreads."""
    profit_usd = Decimal(str(notional_usd)) * Decimal(spread_bps) / Decimal(10000)
    return usd_to_wei(profit_usd, eth_usd_price)


def rejection_reason(
    opportunity: Opportunity,
    net_profit_wei: int,
    gas_estimated_wei: int,
    ctx: EvaluationContext,
) -> Optional[str]:
    """First violated threshold, in fixed precedence order, or None."""
    if opportunity.min_liquidity_usd < ctx.min_liquidity_usd:
        return REASON_LOW_LIQUIDITY
    if abs(opportunity.spread_bps) > ctx.max_slippage_bps:
        return REASON_SLIPPAGE_TOO_HIGH
    if net_profit_wei <= 0:
        return REASON_NEGATIVE_PROFIT
    if net_profit_wei < ctx.min_net_profit_wei:
        return REASON_BELOW_MIN_PROFIT
    if gas_estimated_wei > ctx.max_gas_wei:
        return REASON_GAS_TOO_EXPENSIVE
    return None


def evaluate_opportunity(
    opportunity: Opportunity, ctx: EvaluationContext
) -> EvaluatedOpportunity:
    """
    Size, cost and judge a single opportunity.

    Args:
        opportunity: Candidate produced by the path finder
        ctx: Thresholds and pricing inputs

    Returns:
        EvaluatedOpportunity with at most one rejection reason
    """
    notional_usd = choose_notional_usd(
        opportunity.min_liquidity_usd, ctx.notional_usd_default
    )
    input_wei = usd_to_wei(notional_usd, ctx.eth_usd_price)

    gas_estimated_wei = estimate_gas_units(opportunity.hops) * gas_unit_price(
        ctx.max_gas_wei
    )
    gross_wei = gross_profit_wei(notional_usd, opportunity.spread_bps, ctx.eth_usd_price)
    flash_fee_wei = bps_of(input_wei, ctx.flash_fee_bps)
    mev_buffer_wei = bps_of(input_wei, ctx.mev_buffer_bps)
    net_profit_wei = gross_wei - flash_fee_wei - gas_estimated_wei - mev_buffer_wei

    return EvaluatedOpportunity(
        opportunity=opportunity,
        notional_usd=notional_usd,
        input_wei=input_wei,
        gross_profit_wei=gross_wei,
        flash_fee_wei=flash_fee_wei,
        gas_estimated_wei=gas_estimated_wei,
        mev_buffer_wei=mev_buffer_wei,
        net_profit_wei=net_profit_wei,
        reason=rejection_reason(opportunity, net_profit_wei, gas_estimated_wei, ctx),
    )


def evaluate_all(
    opportunities: Iterable[Opportunity], ctx: EvaluationContext
) -> List[EvaluatedOpportunity]:
    """Evaluate every candidate, preserving input order."""
    evaluated = [evaluate_opportunity(opp, ctx) for opp in opportunities]
    accepted = sum(1 for ev in evaluated if ev.accepted)
    logger.info(f"Evaluated {len(evaluated)} candidates, {accepted} accepted")
    return evaluated
