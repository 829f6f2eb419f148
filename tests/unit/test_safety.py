"""
Tests for SafetyState

Covers the daily loss limit, the test-mode revert streak, explicit unpause
and persistence of the loss aggregate.
"""

import pytest

from flash_arbitrage.constants import DAILY_LOSS_METRIC
from flash_arbitrage.exceptions import SafetyError
from flash_arbitrage.execution.types import (
    ExecutionBlocked,
    ExecutionReverted,
    ExecutionSuccess,
    TxData,
)
from flash_arbitrage.metric_store import InMemoryMetricStore, SqliteMetricStore
from flash_arbitrage.safety import SafetyState

TX = TxData(
    to="0x5FbDB2315678afecb367f032d93F642f64180aa3",
    data="0x",
    value=0,
    gas_limit=180_000,
    max_fee_per_gas=22 * 10**9,
    max_priority_fee_per_gas=2 * 10**9,
)


def reverted():
    return ExecutionReverted(revert_reason="transaction-reverted", profit_expected=10**16)


def success():
    return ExecutionSuccess(
        tx_hash="0x" + "ab" * 32, gas_used=120_000, profit_expected=10**16, relay_used=False, tx_data=TX
    )


class TestLossLimit:
    def test_loss_above_limit_pauses_until_unpause(self, metrics):
        safety = SafetyState(loss_limit_wei=5 * 10**15, metrics=metrics)

        assert safety.apply_pause_if_needed(loss_wei=7 * 10**15) is True
        assert safety.is_paused
        assert safety.daily_loss_wei == 7 * 10**15
        assert metrics.registry.get_sample_value("flash_arb_paused_state") == 1
        assert metrics.registry.get_sample_value("flash_arb_daily_loss_wei") == 7 * 10**15

        # Still paused on later non-loss events
        assert safety.apply_pause_if_needed(revert=False) is True

        safety.unpause()
        assert not safety.is_paused
        assert metrics.registry.get_sample_value("flash_arb_paused_state") == 0

    def test_unpause_keeps_aggregate(self, metrics):
        safety = SafetyState(loss_limit_wei=5 * 10**15, metrics=metrics)
        safety.apply_pause_if_needed(loss_wei=7 * 10**15)
        safety.unpause()

        assert safety.daily_loss_wei == 7 * 10**15
        assert safety.apply_pause_if_needed(loss_wei=1) is True

    def test_losses_accumulate(self, metrics):
        safety = SafetyState(loss_limit_wei=5 * 10**15, metrics=metrics)

        assert safety.apply_pause_if_needed(loss_wei=3 * 10**15) is False
        assert safety.apply_pause_if_needed(loss_wei=3 * 10**15) is True

    def test_loss_equal_to_limit_does_not_pause(self, metrics):
        safety = SafetyState(loss_limit_wei=5 * 10**15, metrics=metrics)
        assert safety.apply_pause_if_needed(loss_wei=5 * 10**15) is False

    def test_zero_limit_disables_check(self, metrics):
        safety = SafetyState(loss_limit_wei=0, metrics=metrics)
        assert safety.apply_pause_if_needed(loss_wei=10**20) is False
        assert safety.daily_loss_wei == 10**20

    def test_pause_counted_once(self, metrics):
        safety = SafetyState(loss_limit_wei=1, metrics=metrics)
        safety.apply_pause_if_needed(loss_wei=2)
        safety.apply_pause_if_needed(loss_wei=2)
        assert metrics.registry.get_sample_value("flash_arb_paused_total") == 1


class TestRevertStreak:
    def test_three_reverts_pause_in_test_mode(self, metrics):
        safety = SafetyState(metrics=metrics)

        assert safety.record_outcome(reverted(), test_mode=True) is False
        assert safety.record_outcome(reverted(), test_mode=True) is False
        assert safety.record_outcome(reverted(), test_mode=True) is True
        assert safety.consecutive_reverts == 3

    def test_success_resets_streak(self, metrics):
        safety = SafetyState(metrics=metrics)
        safety.record_outcome(reverted(), test_mode=True)
        safety.record_outcome(reverted(), test_mode=True)
        safety.record_outcome(success(), test_mode=True)
        safety.record_outcome(reverted(), test_mode=True)

        assert safety.consecutive_reverts == 1
        assert not safety.is_paused

    def test_blocked_leaves_streak_untouched(self, metrics):
        safety = SafetyState(metrics=metrics)
        safety.record_outcome(reverted(), test_mode=True)
        safety.record_outcome(ExecutionBlocked("paused", 0), test_mode=True)
        assert safety.consecutive_reverts == 1

    def test_streak_ignored_outside_test_mode(self, metrics):
        safety = SafetyState(metrics=metrics)
        for _ in range(5):
            safety.record_outcome(reverted())
        assert safety.consecutive_reverts == 0
        assert not safety.is_paused


class TestPersistence:
    def test_loss_saved_to_store(self, metrics):
        store = InMemoryMetricStore()
        SafetyState(loss_limit_wei=10**18, store=store, metrics=metrics).apply_pause_if_needed(
            loss_wei=4 * 10**15
        )
        assert store.get_metrics_summary()[DAILY_LOSS_METRIC] == 4 * 10**15

    def test_aggregate_survives_restart(self, metrics, tmp_path):
        db_path = tmp_path / "metrics.db"
        first = SafetyState(loss_limit_wei=5 * 10**15, store=SqliteMetricStore(db_path), metrics=metrics)
        first.apply_pause_if_needed(loss_wei=4 * 10**15)
        assert not first.is_paused

        second = SafetyState(loss_limit_wei=5 * 10**15, store=SqliteMetricStore(db_path), metrics=metrics)
        assert second.daily_loss_wei == 4 * 10**15
        assert second.apply_pause_if_needed(loss_wei=2 * 10**15) is True

    def test_threshold_must_be_positive(self, metrics):
        with pytest.raises(SafetyError):
            SafetyState(metrics=metrics, revert_threshold=0)

    def test_from_config(self, config, metrics):
        safety = SafetyState.from_config(config.model_copy(update={"loss_limit_wei": 42}), metrics=metrics)
        assert safety.loss_limit_wei == 42


@pytest.mark.parametrize("loss", [0, -5])
def test_non_positive_loss_not_saved(metrics, loss):
    store = InMemoryMetricStore()
    SafetyState(store=store, metrics=metrics).apply_pause_if_needed(loss_wei=loss)
    assert store.get_metrics_summary() == {}
