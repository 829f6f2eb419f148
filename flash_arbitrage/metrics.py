"""
Prometheus metrics for flash-loan arbitrage execution

Every non-dry-run execution attempt, including every blocked one, is recorded
here. Serving the registry over HTTP is left to the deployment.
"""

import logging
import threading
import time
from collections import deque
from typing import Any, Dict, Optional

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from .constants import STATUS_BLOCKED, STATUS_REVERTED, STATUS_SUCCESS

logger = logging.getLogger(__name__)


class ExecutionMetrics:
    """
    Execution metrics collection

    Provides Prometheus-compatible metrics for:
    - Execution outcomes (success / reverted / blocked by reason)
    - Gas usage and expected profit (rolling averages)
    - Pause state and accumulated daily loss
    """

    def __init__(
        self, registry: Optional[CollectorRegistry] = None, window_size: int = 100
    ):
        """Initialize metrics with custom registry or default"""
        self.registry = registry or REGISTRY
        self._initialize_metrics()

        self._gas_history = deque(maxlen=window_size)
        self._profit_history = deque(maxlen=window_size)

        # Plain counters mirrored for summary()
        self._success = 0
        self._reverted = 0
        self._blocked = 0

        # Thread-safe access
        self._lock = threading.RLock()

    def _initialize_metrics(self):
        """Initialize all Prometheus metrics"""

        # === EXECUTION OUTCOMES ===
        self.exec_success_total = Counter(
            "flash_arb_exec_success_total",
            "Total number of successful arbitrage executions",
            registry=self.registry,
        )

        self.exec_revert_total = Counter(
            "flash_arb_exec_revert_total",
            "Total number of reverted arbitrage executions",
            registry=self.registry,
        )

        self.exec_blocked_total = Counter(
            "flash_arb_exec_blocked_total",
            "Total number of executions blocked by safety guards",
            ["reason"],
            registry=self.registry,
        )

        self.executions_total = Counter(
            "flash_arb_executions_total",
            "Total number of execution attempts",
            registry=self.registry,
        )

        self.opportunities_total = Counter(
            "flash_arb_opportunities_total",
            "Total number of candidate paths evaluated",
            registry=self.registry,
        )

        self.last_execution_timestamp = Gauge(
            "flash_arb_last_execution_timestamp",
            "Unix timestamp of the last execution attempt",
            registry=self.registry,
        )

        # === GAS / PROFIT ===
        self.gas_used = Histogram(
            "flash_arb_gas_used",
            "Gas used per execution attempt",
            buckets=[50_000, 100_000, 200_000, 300_000, 500_000, 1_000_000],
            registry=self.registry,
        )

        self.avg_gas_used = Gauge(
            "flash_arb_avg_gas_used",
            "Average gas used (last 100 attempts with gas data)",
            registry=self.registry,
        )

        self.avg_profit_wei = Gauge(
            "flash_arb_avg_profit_wei",
            "Average expected profit in wei (last 100 attempts with gas data)",
            registry=self.registry,
        )

        # === SAFETY ===
        self.paused_state = Gauge(
            "flash_arb_paused_state",
            "1 while the bot is paused, 0 otherwise",
            registry=self.registry,
        )

        self.paused_total = Counter(
            "flash_arb_paused_total",
            "Number of transitions into the paused state",
            registry=self.registry,
        )

        self.daily_loss_wei = Gauge(
            "flash_arb_daily_loss_wei",
            "Accumulated daily loss in wei",
            registry=self.registry,
        )

    def record_execution_result(self, result) -> None:
        """
        Record one execution attempt.

        Dry-run results are ignored; they are planning output, not attempts.
        """
        status = result.status
        if status not in (STATUS_SUCCESS, STATUS_REVERTED, STATUS_BLOCKED):
            return

        with self._lock:
            self.executions_total.inc()
            self.last_execution_timestamp.set(time.time())

            if status == STATUS_SUCCESS:
                self._success += 1
                self.exec_success_total.inc()
            elif status == STATUS_REVERTED:
                self._reverted += 1
                self.exec_revert_total.inc()
            else:
                self._blocked += 1
                self.exec_blocked_total.labels(reason=result.revert_reason).inc()
                logger.info(f"Execution blocked: {result.revert_reason}")

            gas_used = getattr(result, "gas_used", None)
            if gas_used is not None:
                self.gas_used.observe(gas_used)
                self._update_averages(gas_used, result.profit_expected)

    def record_blocked(self, reason: str) -> None:
        """Record a refusal that happened before the executor was invoked."""
        with self._lock:
            self._blocked += 1
            self.executions_total.inc()
            self.last_execution_timestamp.set(time.time())
            self.exec_blocked_total.labels(reason=reason).inc()

    def record_opportunities(self, count: int) -> None:
        if count > 0:
            self.opportunities_total.inc(count)

    def set_bot_paused(self, paused: bool) -> None:
        with self._lock:
            if paused:
                self.paused_total.inc()
            self.paused_state.set(1 if paused else 0)

    def set_daily_loss(self, loss_wei: int) -> None:
        self.daily_loss_wei.set(loss_wei)

    def _update_averages(self, gas_used: int, profit_wei: int) -> None:
        self._gas_history.append(int(gas_used))
        self._profit_history.append(int(profit_wei))
        self.avg_gas_used.set(sum(self._gas_history) / len(self._gas_history))
        self.avg_profit_wei.set(sum(self._profit_history) / len(self._profit_history))

    @property
    def total_executions(self) -> int:
        return self._success + self._reverted + self._blocked

    def success_rate(self) -> float:
        """Success rate as a percentage of all recorded attempts."""
        total = self.total_executions
        if total == 0:
            return 0.0
        return self._success / total * 100

    def summary(self) -> Dict[str, Any]:
        """Get summary of key metrics"""
        with self._lock:
            avg_gas = (
                sum(self._gas_history) / len(self._gas_history)
                if self._gas_history
                else 0.0
            )
            avg_profit = (
                sum(self._profit_history) / len(self._profit_history)
                if self._profit_history
                else 0.0
            )
            return {
                "success_rate": self.success_rate(),
                "total_executions": self.total_executions,
                "success": self._success,
                "reverted": self._reverted,
                "blocked": self._blocked,
                "avg_gas_used": avg_gas,
                "avg_profit_wei": avg_profit,
                "timestamp": time.time(),
            }

    def render(self) -> bytes:
        """Prometheus text exposition of this registry."""
        return generate_latest(self.registry)


# Global metrics instance
_global_metrics: Optional[ExecutionMetrics] = None


def get_metrics() -> ExecutionMetrics:
    """Get or create global metrics instance"""
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = ExecutionMetrics()
    return _global_metrics


def initialize_metrics(registry: Optional[CollectorRegistry] = None) -> ExecutionMetrics:
    """Initialize global metrics with custom registry"""
    global _global_metrics
    _global_metrics = ExecutionMetrics(registry)
    return _global_metrics
