"""
Fixed pool snapshot for offline runs and tests.

Prices are WETH-denominated in USD stables around the 3500 reference, with a
slightly richer uniswapv3 quote to leave a small positive spread.
"""

from typing import List

from .types import Pool, Token

WETH = Token(symbol="WETH", address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", decimals=18)
DAI = Token(symbol="DAI", address="0x6B175474E89094C44Da98b954EedeAC495271d0F", decimals=18)
USDC = Token(symbol="USDC", address="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", decimals=6)


def fetch_mock_pools() -> List[Pool]:
    """Return the static pool set used when no live pool source is configured."""
    return [
        Pool("uniswapv2", WETH, DAI, 500_000, 3500.0, 1 / 3500),
        Pool("uniswapv2", WETH, USDC, 400_000, 3500.0, 1 / 3500),
        Pool("sushi", DAI, USDC, 300_000, 1.0, 1.0),
        Pool("sushi", USDC, DAI, 300_000, 1.0, 1.0),
        Pool("uniswapv3", WETH, USDC, 800_000, 3510.0, 1 / 3510),
        Pool("uniswapv3", WETH, DAI, 700_000, 3510.0, 1 / 3510),
    ]
