"""Shared fixtures for the flash-loan arbitrage test suite."""

import logging
from unittest.mock import Mock

import pytest
from prometheus_client import CollectorRegistry

from flash_arbitrage.config_schema import RuntimeConfig
from flash_arbitrage.metrics import ExecutionMetrics
from flash_arbitrage.simulation.simulator import SimulationResult

GWEI = 10**9

# Well-known local development key (hardhat account #0); never funded on a real network
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_EXECUTOR_ADDRESS = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
TEST_TX_HASH = "0x" + "ab" * 32


def build_config(**overrides) -> RuntimeConfig:
    """RuntimeConfig with fast timeouts for tests."""
    data = {
        "network": "sepolia",
        "rpc_url": "http://localhost:8545",
        "executor_address": TEST_EXECUTOR_ADDRESS,
        "min_net_profit_wei": 10**15,
        "max_slippage_bps": 50,
        "deadline_seconds": 60,
        "scan_interval_ms": 10,
        "max_gas_wei": 5 * 10**15,
        "min_liquidity_usd": 100000,
        "mev_buffer_bps": 5,
        "flash_loan": {"provider": "aaveV3", "fee_bps": 5},
        "rpc_timeout_seconds": 1.0,
        "confirmation_timeout_seconds": 0.2,
    }
    data.update(overrides)
    return RuntimeConfig(**data)


def make_web3(
    gas_estimate=150_000,
    base_fee=9 * GWEI,
    priority_fee=2 * GWEI,
    receipt=None,
    chain_id=11155111,
):
    """Mock web3 whose eth namespace answers the calls the pipeline makes."""
    web3 = Mock()
    web3.eth.estimate_gas.return_value = gas_estimate
    web3.eth.call.return_value = b""
    web3.eth.get_block.return_value = {"baseFeePerGas": base_fee}
    web3.eth.max_priority_fee = priority_fee
    web3.eth.gas_price = 20 * GWEI
    web3.eth.get_transaction_count.return_value = 7
    web3.eth.chain_id = chain_id
    web3.eth.send_raw_transaction.return_value = bytes.fromhex(TEST_TX_HASH[2:])
    web3.eth.get_transaction_receipt.return_value = receipt
    web3.eth.get_balance.return_value = 10**18
    return web3


def make_simulation(**overrides) -> SimulationResult:
    data = {
        "path": ("WETH", "USDC", "DAI"),
        "expected_out_wei": 4_297_714_285_714_285_714,
        "gas_estimated_wei": 3 * 10**15,
        "net_profit_wei": 3 * 10**16,
        "ok": True,
        "revert_reason": None,
    }
    data.update(overrides)
    return SimulationResult(**data)


@pytest.fixture
def config():
    return build_config()


@pytest.fixture
def test_registry():
    """Create a test-specific registry"""
    return CollectorRegistry()


@pytest.fixture
def metrics(test_registry):
    """Create ExecutionMetrics instance with test registry"""
    return ExecutionMetrics(test_registry)


@pytest.fixture
def restore_logging():
    """Undo setup_logging's changes to the root and package loggers"""
    root = logging.getLogger()
    logging.getLogger("flash_arbitrage")
    saved = {
        name: (existing.handlers[:], existing.level, existing.propagate)
        for name, existing in logging.root.manager.loggerDict.items()
        if name.startswith("flash_arbitrage") and isinstance(existing, logging.Logger)
    }
    root_handlers, root_level = root.handlers[:], root.level
    yield
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
    for name, (handlers, level, propagate) in saved.items():
        existing = logging.getLogger(name)
        existing.handlers[:] = handlers
        existing.setLevel(level)
        existing.propagate = propagate
