"""
Pool snapshots and trading-path discovery.
"""

from .mock_pools import fetch_mock_pools
from .pathfinder import find_opportunities, generate_three_hop, generate_two_hop
from .types import Opportunity, Pool, Token

__all__ = [
    "Token",
    "Pool",
    "Opportunity",
    "generate_two_hop",
    "generate_three_hop",
    "find_opportunities",
    "fetch_mock_pools",
]
