"""
Path enumeration over a pool graph.

Chains pools whose output token feeds the next pool's input token and scores
each 2-hop and 3-hop path by the spread of its implied price against a single
fixed reference price. Quadratic and cubic in pool count respectively, which
is only acceptable for the small pool sets this bot scans.
"""

import logging
import math
from typing import List, Sequence

from ..constants import LIQUIDITY_DECIMALS, REFERENCE_PRICE
from .types import Opportunity, Pool

logger = logging.getLogger(__name__)


def spread_bps_for(implied_price: float, reference_price: float = REFERENCE_PRICE) -> int:
    """Floor of the relative deviation from the reference, in basis points."""
    return math.floor(10000 * (implied_price - reference_price) / reference_price)


def _sorted_by_spread(opportunities: List[Opportunity]) -> List[Opportunity]:
    return sorted(opportunities, key=lambda o: o.spread_bps, reverse=True)


def generate_two_hop(
    pools: Sequence[Pool], reference_price: float = REFERENCE_PRICE
) -> List[Opportunity]:
    """
    Emit a 2-hop path for every ordered pool pair (a, b) with a.token1 == b.token0.

    Args:
        pools: Pool snapshot
        reference_price: Fair price the implied price is compared against

    Returns:
        Opportunities sorted by spread, highest first
    """
    opportunities = []
    for i, a in enumerate(pools):
        for j, b in enumerate(pools):
            if i == j:
                continue
            if a.token1.symbol != b.token0.symbol:
                continue

            implied = a.price0to1 * b.price0to1
            opportunities.append(
                Opportunity(
                    path=(a.token0.symbol, a.token1.symbol, b.token1.symbol),
                    hops=2,
                    spread_bps=spread_bps_for(implied, reference_price),
                    min_liquidity_usd=round(
                        min(a.liquidity_usd, b.liquidity_usd), LIQUIDITY_DECIMALS
                    ),
                    dexes=(a.dex, b.dex),
                )
            )
    return _sorted_by_spread(opportunities)


def generate_three_hop(
    pools: Sequence[Pool], reference_price: float = REFERENCE_PRICE
) -> List[Opportunity]:
    """
    Emit a 3-hop path for every ordered triple (a, b, c) of distinct pools
    chained a.token1 == b.token0 and b.token1 == c.token0.
    """
    opportunities = []
    for i, a in enumerate(pools):
        for j, b in enumerate(pools):
            if i == j or a.token1.symbol != b.token0.symbol:
                continue
            for k, c in enumerate(pools):
                if k == i or k == j:
                    continue
                if b.token1.symbol != c.token0.symbol:
                    continue

                implied = a.price0to1 * b.price0to1 * c.price0to1
                opportunities.append(
                    Opportunity(
                        path=(
                            a.token0.symbol,
                            a.token1.symbol,
                            b.token1.symbol,
                            c.token1.symbol,
                        ),
                        hops=3,
                        spread_bps=spread_bps_for(implied, reference_price),
                        min_liquidity_usd=round(
                            min(a.liquidity_usd, b.liquidity_usd, c.liquidity_usd),
                            LIQUIDITY_DECIMALS,
                        ),
                        dexes=(a.dex, b.dex, c.dex),
                    )
                )
    return _sorted_by_spread(opportunities)


def find_opportunities(
    pools: Sequence[Pool], reference_price: float = REFERENCE_PRICE
) -> List[Opportunity]:
    """All 2-hop and 3-hop paths, merged and sorted by spread descending."""
    two_hop = generate_two_hop(pools, reference_price)
    three_hop = generate_three_hop(pools, reference_price)
    logger.debug(
        f"Path discovery: {len(pools)} pools -> "
        f"{len(two_hop)} two-hop, {len(three_hop)} three-hop candidates"
    )
    return _sorted_by_spread(two_hop + three_hop)
