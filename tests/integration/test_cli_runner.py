"""End-to-end tests for the run_flash_arb command line runner."""

import json
from unittest.mock import patch

import pytest
import yaml

import run_flash_arb
from conftest import TEST_EXECUTOR_ADDRESS, make_web3

ENV_KEYS = [
    "RPC_URL",
    "NETWORK",
    "RELAY_URL",
    "EXECUTOR_ADDRESS",
    "LOSS_LIMIT_WEI",
    "PRIVATE_KEY",
    "OWNER_ADDRESS",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "flash.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "network": "sepolia",
                "rpc_url": "http://localhost:8545",
                "executor_address": TEST_EXECUTOR_ADDRESS,
                "min_net_profit_wei": 10**15,
                "max_slippage_bps": 50,
                "deadline_seconds": 60,
                "scan_interval_ms": 10,
                "max_gas_wei": 5 * 10**15,
                "min_liquidity_usd": 100000,
                "notional_usd_default": 15000,
                "flash_loan": {"provider": "aaveV3", "fee_bps": 5},
            }
        )
    )
    return path


def test_dry_run_once_prints_json(clean_env, restore_logging, config_file, capsys):
    with patch("run_flash_arb.Web3") as mock_web3:
        mock_web3.return_value = make_web3()
        exit_code = run_flash_arb.main(
            [
                "--config",
                str(config_file),
                "--dry-run",
                "--offline",
                "--once",
                "--json",
                "--log-level",
                "INFO",
            ]
        )

    assert exit_code == 0
    captured = capsys.readouterr()
    # Logs go to stderr so stdout stays a single JSON document
    report = json.loads(captured.out)
    assert report["status"] == "dry-run"
    assert report["top"]["path"] == ["WETH", "USDC", "DAI"]
    assert report["execution"]["tx_data"]["gas_limit"] == "180000"
    assert "DRY_RUN" in captured.err
    assert captured.err.count("DRY_RUN") == 1


def test_config_error_exit_code(clean_env, restore_logging, tmp_path, capsys):
    exit_code = run_flash_arb.main(["--config", str(tmp_path / "missing.yaml")])

    assert exit_code == 1
    assert "Config error" in capsys.readouterr().err
