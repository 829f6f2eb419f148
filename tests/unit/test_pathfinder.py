"""
Unit tests for flash_arbitrage.discovery.pathfinder

Covers chaining rules, spread scoring against the reference price,
liquidity rounding and ordering.
"""

import unittest

from flash_arbitrage.discovery.mock_pools import DAI, USDC, WETH, fetch_mock_pools
from flash_arbitrage.discovery.pathfinder import (
    find_opportunities,
    generate_three_hop,
    generate_two_hop,
    spread_bps_for,
)
from flash_arbitrage.discovery.types import Pool


class TestSpread(unittest.TestCase):
    """Spread in bps is floored against a fixed reference."""

    def test_positive_spread_is_floored(self):
        # 10000 * 10 / 3500 = 28.57...
        self.assertEqual(spread_bps_for(3510.0), 28)

    def test_zero_spread(self):
        self.assertEqual(spread_bps_for(3500.0), 0)

    def test_negative_spread_floors_toward_minus_infinity(self):
        # 10000 * (1 - 3500) / 3500 = -9997.14...
        self.assertEqual(spread_bps_for(1.0), -9998)

    def test_custom_reference(self):
        self.assertEqual(spread_bps_for(101.0, reference_price=100.0), 100)


class TestTwoHop(unittest.TestCase):
    """2-hop enumeration over ordered pool pairs."""

    def test_chains_on_matching_tokens_only(self):
        pools = [
            Pool("uniswapv3", WETH, USDC, 800_000, 3510.0, 1 / 3510),
            Pool("sushi", USDC, DAI, 300_000, 1.0, 1.0),
            Pool("uniswapv2", WETH, DAI, 500_000, 3500.0, 1 / 3500),
        ]

        opportunities = generate_two_hop(pools)

        self.assertEqual(len(opportunities), 1)
        opp = opportunities[0]
        self.assertEqual(opp.path, ("WETH", "USDC", "DAI"))
        self.assertEqual(opp.hops, 2)
        self.assertEqual(opp.spread_bps, 28)
        self.assertEqual(opp.min_liquidity_usd, 300_000)
        self.assertEqual(opp.dexes, ("uniswapv3", "sushi"))

    def test_pool_is_never_paired_with_itself(self):
        # DAI/DAI would chain onto itself if indices were not distinct
        loop = Pool("curve", DAI, DAI, 100_000, 1.0, 1.0)
        self.assertEqual(generate_two_hop([loop]), [])

    def test_liquidity_rounded_to_four_decimals(self):
        pools = [
            Pool("uniswapv3", WETH, USDC, 123_456.123456, 3500.0, 1 / 3500),
            Pool("sushi", USDC, DAI, 999_999.0, 1.0, 1.0),
        ]
        opp = generate_two_hop(pools)[0]
        self.assertEqual(opp.min_liquidity_usd, 123_456.1235)

    def test_mock_snapshot_sorted_descending(self):
        opportunities = generate_two_hop(fetch_mock_pools())

        self.assertEqual(len(opportunities), 6)
        spreads = [o.spread_bps for o in opportunities]
        self.assertEqual(spreads, sorted(spreads, reverse=True))
        self.assertEqual(spreads[0], 28)
        self.assertEqual(spreads[-1], -9998)


class TestThreeHop(unittest.TestCase):
    """3-hop enumeration over ordered triples of distinct pools."""

    def test_mock_snapshot_paths(self):
        opportunities = generate_three_hop(fetch_mock_pools())

        self.assertEqual(len(opportunities), 4)
        self.assertTrue(all(o.hops == 3 and len(o.path) == 4 for o in opportunities))
        self.assertEqual([o.spread_bps for o in opportunities], [28, 28, 0, 0])
        self.assertIn(("WETH", "USDC", "DAI", "USDC"), [o.path for o in opportunities])

    def test_implied_price_is_product_of_hops(self):
        pools = [
            Pool("uniswapv3", WETH, USDC, 800_000, 3500.0, 1 / 3500),
            Pool("sushi", USDC, DAI, 300_000, 1.01, 1 / 1.01),
            Pool("curve", DAI, USDC, 200_000, 1.0, 1.0),
        ]
        opportunities = generate_three_hop(pools)

        self.assertEqual(len(opportunities), 1)
        # 3500 * 1.01 * 1.0 -> +100 bps
        self.assertEqual(opportunities[0].spread_bps, 100)
        self.assertEqual(opportunities[0].min_liquidity_usd, 200_000)


class TestFindOpportunities(unittest.TestCase):
    def test_merges_both_hop_counts(self):
        pools = fetch_mock_pools()
        merged = find_opportunities(pools)

        self.assertEqual(len(merged), 10)
        self.assertEqual({o.hops for o in merged}, {2, 3})
        self.assertEqual(merged[0].path, ("WETH", "USDC", "DAI"))

    def test_empty_pool_set(self):
        self.assertEqual(find_opportunities([]), [])

    def test_pure_function(self):
        pools = fetch_mock_pools()
        self.assertEqual(find_opportunities(pools), find_opportunities(pools))


if __name__ == "__main__":
    unittest.main()
