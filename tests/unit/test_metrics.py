"""
Unit tests for Prometheus execution metrics
"""

import pytest
from prometheus_client import CollectorRegistry, generate_latest

from flash_arbitrage.execution.types import (
    ExecutionBlocked,
    ExecutionDryRun,
    ExecutionReverted,
    ExecutionSuccess,
    TxData,
)
from flash_arbitrage.metrics import ExecutionMetrics, get_metrics, initialize_metrics

TX = TxData(
    to="0x5FbDB2315678afecb367f032d93F642f64180aa3",
    data="0x",
    value=0,
    gas_limit=180_000,
    max_fee_per_gas=22 * 10**9,
    max_priority_fee_per_gas=2 * 10**9,
)


def success(gas_used=120_000, profit=10**16):
    return ExecutionSuccess(
        tx_hash="0x" + "ab" * 32, gas_used=gas_used, profit_expected=profit, relay_used=False, tx_data=TX
    )


class TestExecutionMetrics:
    """Test ExecutionMetrics functionality"""

    def test_initialization(self, metrics):
        """Test metrics initialization"""
        assert metrics.registry is not None
        assert hasattr(metrics, "exec_success_total")
        assert hasattr(metrics, "exec_blocked_total")
        assert hasattr(metrics, "paused_state")

    def test_outcome_counters(self, metrics):
        """Each status lands in its own counter"""
        metrics.record_execution_result(success())
        metrics.record_execution_result(ExecutionReverted("transaction-reverted", 10**16))
        metrics.record_execution_result(ExecutionBlocked("gas-cost-too-high", 10**16))

        registry = metrics.registry
        assert registry.get_sample_value("flash_arb_exec_success_total") == 1
        assert registry.get_sample_value("flash_arb_exec_revert_total") == 1
        assert registry.get_sample_value(
            "flash_arb_exec_blocked_total", {"reason": "gas-cost-too-high"}
        ) == 1
        assert registry.get_sample_value("flash_arb_executions_total") == 3
        assert registry.get_sample_value("flash_arb_last_execution_timestamp") > 0

    def test_dry_run_not_recorded(self, metrics):
        metrics.record_execution_result(ExecutionDryRun(tx_data=TX, profit_expected=1))
        assert metrics.total_executions == 0
        assert metrics.registry.get_sample_value("flash_arb_executions_total") == 0

    def test_gas_averages(self, metrics):
        """Rolling averages only cover attempts with gas data"""
        metrics.record_execution_result(success(gas_used=100_000, profit=10))
        metrics.record_execution_result(success(gas_used=200_000, profit=30))
        metrics.record_execution_result(ExecutionBlocked("paused", 0))

        assert metrics.registry.get_sample_value("flash_arb_avg_gas_used") == 150_000
        assert metrics.registry.get_sample_value("flash_arb_avg_profit_wei") == 20
        assert metrics.registry.get_sample_value("flash_arb_gas_used_count") == 2

    def test_rolling_window(self, test_registry):
        metrics = ExecutionMetrics(test_registry, window_size=2)
        for gas in (100_000, 200_000, 400_000):
            metrics.record_execution_result(success(gas_used=gas))
        assert metrics.summary()["avg_gas_used"] == 300_000

    def test_record_blocked_before_executor(self, metrics):
        metrics.record_blocked("paused")
        metrics.record_blocked("paused")
        assert metrics.registry.get_sample_value("flash_arb_exec_blocked_total", {"reason": "paused"}) == 2
        assert metrics.total_executions == 2

    def test_pause_gauge_and_transitions(self, metrics):
        metrics.set_bot_paused(True)
        assert metrics.registry.get_sample_value("flash_arb_paused_state") == 1
        metrics.set_bot_paused(False)
        assert metrics.registry.get_sample_value("flash_arb_paused_state") == 0
        assert metrics.registry.get_sample_value("flash_arb_paused_total") == 1

    def test_opportunities_counter(self, metrics):
        metrics.record_opportunities(10)
        metrics.record_opportunities(0)
        assert metrics.registry.get_sample_value("flash_arb_opportunities_total") == 10

    def test_summary(self, metrics):
        """Test metrics summary generation"""
        metrics.record_execution_result(success())
        metrics.record_execution_result(ExecutionReverted("transaction-reverted", 0))

        summary = metrics.summary()

        assert summary["total_executions"] == 2
        assert summary["success"] == 1
        assert summary["reverted"] == 1
        assert summary["success_rate"] == pytest.approx(50.0)
        assert "timestamp" in summary

    def test_success_rate_without_attempts(self, metrics):
        assert metrics.success_rate() == 0.0

    def test_render(self, metrics):
        metrics.record_execution_result(success())
        output = metrics.render().decode("utf-8")
        assert "flash_arb_exec_success_total" in output
        assert output == generate_latest(metrics.registry).decode("utf-8")


class TestGlobalMetrics:
    def test_initialize_replaces_global(self):
        registry = CollectorRegistry()
        metrics = initialize_metrics(registry)
        assert get_metrics() is metrics
        assert metrics.registry is registry
