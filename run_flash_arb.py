#!/usr/bin/env python3
"""
Flash-loan arbitrage runner CLI.

Runs discover -> evaluate -> simulate -> execute cycles against the mock pool
snapshot and prints each cycle report.

Usage:
    python3 run_flash_arb.py --dry-run --once
    python3 run_flash_arb.py --config config/default.yaml --dry-run --offline --once
    python3 run_flash_arb.py --config config/default.yaml --cycles 10
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from web3 import Web3

from flash_arbitrage.config_loader import load_config, load_secrets
from flash_arbitrage.discovery.mock_pools import fetch_mock_pools
from flash_arbitrage.exceptions import ConfigurationError, ValidationError
from flash_arbitrage.pipeline import ArbitragePipeline
from flash_arbitrage.utils import setup_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Flash-loan arbitrage bot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plan a single transaction without signing it
  python3 run_flash_arb.py --dry-run --once

  # Offline planning (no simulation RPC calls)
  python3 run_flash_arb.py --dry-run --offline --once
        """,
    )

    parser.add_argument("--config", default=None, help="Path to config YAML file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the transaction but do not sign or send it",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the generic simulator instead of the executor contract",
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--cycles", type=int, default=None, help="Number of cycles to run")
    parser.add_argument("--json", action="store_true", help="Print reports as JSON")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")

    return parser.parse_args(argv)


def print_report(report, as_json: bool) -> None:
    data = report.to_dict()
    if as_json:
        print(json.dumps(data, indent=2))
        return

    print("\n=== Cycle Result ===")
    print(f"Status: {data['status']}")
    print(f"Candidates: {data['candidates']} (accepted: {data['accepted']})")
    if data["top"]:
        print(f"Path: {' -> '.join(data['top']['path'])}")
        print(f"Spread: {data['top']['spread_bps']} bps")
    execution = data["execution"]
    if execution:
        if execution.get("revert_reason"):
            print(f"Reason: {execution['revert_reason']}")
        if execution.get("tx_hash"):
            print(f"TX Hash: {execution['tx_hash']}")
        if execution.get("tx_data"):
            print(f"Gas Limit: {execution['tx_data']['gas_limit']}")
            print(f"Max Fee Per Gas: {execution['tx_data']['max_fee_per_gas']} wei")
    if data["paused_after"]:
        print("🔒 Bot paused until manual unpause by owner.")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
    except (ConfigurationError, ValidationError) as e:
        print(f"❌ Config error: {e}", file=sys.stderr)
        return 1

    secrets = load_secrets()
    web3 = Web3(
        Web3.HTTPProvider(
            config.rpc_url, request_kwargs={"timeout": config.rpc_timeout_seconds}
        )
    )
    pipeline = ArbitragePipeline(
        config,
        web3=web3,
        private_key=secrets.private_key,
        owner_address=secrets.owner_address,
    )
    pipeline.preflight()

    max_cycles = 1 if args.once else args.cycles
    try:
        reports = asyncio.run(
            pipeline.run(
                fetch_mock_pools,
                max_cycles=max_cycles,
                dry_run=args.dry_run,
                offline=args.offline,
            )
        )
    except KeyboardInterrupt:
        print("\n\n⏸ Stopped by user")
        return 0

    for report in reports:
        print_report(report, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
