"""
Core data types for pool snapshots and discovered trading paths.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Token:
    """
    ERC-20 token as referenced by a pool.

    Attributes:
        symbol: Ticker symbol (e.g., "WETH")
        address: Token contract address
        decimals: Token decimal count
    """

    symbol: str
    address: str
    decimals: int


@dataclass(frozen=True)
class Pool:
    """
    Immutable liquidity pool snapshot supplied once per evaluation cycle.

    Attributes:
        dex: DEX identifier (e.g., "uniswapv2", "sushi")
        token0: First token of the pair
        token1: Second token of the pair
        liquidity_usd: Pool liquidity in USD
        price0to1: Units of token1 received per unit of token0
        price1to0: Units of token0 received per unit of token1
    """

    dex: str
    token0: Token
    token1: Token
    liquidity_usd: float
    price0to1: float
    price1to0: float


@dataclass(frozen=True)
class Opportunity:
    """
    A candidate trading path scored against the reference price.

    Attributes:
        path: Token symbols in trade order
        hops: Number of swaps (2 or 3)
        spread_bps: Signed deviation of the implied price from the reference, in bps
        min_liquidity_usd: Smallest pool liquidity along the path, rounded to 4 decimals
        dexes: DEX of each hop, for logging
    """

    path: Tuple[str, ...]
    hops: int
    spread_bps: int
    min_liquidity_usd: float
    dexes: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def path_label(self) -> str:
        return " -> ".join(self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": list(self.path),
            "hops": self.hops,
            "spread_bps": self.spread_bps,
            "min_liquidity_usd": self.min_liquidity_usd,
            "dexes": list(self.dexes),
        }
