"""
Process-wide pause state machine.

The bot pauses when the persisted daily-loss aggregate exceeds the configured
limit, or (test mode only) after consecutive reverted attempts. Unpausing is an
explicit operation and does not reset the loss aggregate, so the next loss
event re-pauses while the aggregate is still above the limit.

Mutations are serialized with an in-process lock. The loss aggregate lives in
a MetricStore; running several processes against one store requires a single
writer.
"""

import threading
from typing import Optional

from .constants import (
    AUTO_PAUSE_REVERT_THRESHOLD,
    CONSECUTIVE_REVERTS_METRIC,
    DAILY_LOSS_METRIC,
    STATUS_REVERTED,
    STATUS_SUCCESS,
)
from .exceptions import SafetyError
from .metric_store import InMemoryMetricStore, MetricStore
from .metrics import ExecutionMetrics, get_metrics
from .utils import get_logger

logger = get_logger(__name__, extra={"security": True})


class SafetyState:
    """
    Injectable pause / loss / revert-streak state.

    Attributes:
        loss_limit_wei: Daily loss limit, 0 disables the loss check
        revert_threshold: Consecutive reverts that pause the bot in test mode
    """

    def __init__(
        self,
        loss_limit_wei: int = 0,
        store: Optional[MetricStore] = None,
        metrics: Optional[ExecutionMetrics] = None,
        revert_threshold: int = AUTO_PAUSE_REVERT_THRESHOLD,
    ):
        if revert_threshold < 1:
            raise SafetyError(
                "revert_threshold must be at least 1",
                {"revert_threshold": revert_threshold},
            )
        self.loss_limit_wei = int(loss_limit_wei)
        self.store = store if store is not None else InMemoryMetricStore()
        self.metrics = metrics or get_metrics()
        self.revert_threshold = revert_threshold

        self._paused = False
        self._consecutive_reverts = 0
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config, store=None, metrics=None) -> "SafetyState":
        return cls(loss_limit_wei=config.loss_limit_wei, store=store, metrics=metrics)

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    @property
    def consecutive_reverts(self) -> int:
        with self._lock:
            return self._consecutive_reverts

    @property
    def daily_loss_wei(self) -> int:
        return int(self.store.get_metrics_summary().get(DAILY_LOSS_METRIC, 0))

    def _pause(self) -> None:
        if not self._paused:
            self._paused = True
            self.metrics.set_bot_paused(True)

    def unpause(self) -> None:
        """Clear the pause flag and its gauge; the loss aggregate is kept."""
        with self._lock:
            was_paused = self._paused
            self._paused = False
            self.metrics.set_bot_paused(False)
        if was_paused:
            logger.info("Bot unpaused")

    def apply_pause_if_needed(
        self,
        loss_wei: int = 0,
        revert: Optional[bool] = None,
        test_mode: bool = False,
    ) -> bool:
        """
        Account one attempt and pause if a limit is crossed.

        Args:
            loss_wei: Loss of this attempt in wei; saved when positive
            revert: True for a reverted attempt, False for a success,
                None for outcomes that leave the streak untouched
            test_mode: Enables the consecutive-revert auto-pause

        Returns:
            Whether the bot is paused after this call
        """
        with self._lock:
            if loss_wei > 0:
                self.store.save_metric(DAILY_LOSS_METRIC, int(loss_wei))

            if self.loss_limit_wei > 0:
                daily_loss = self.daily_loss_wei
                self.metrics.set_daily_loss(daily_loss)
                if daily_loss > self.loss_limit_wei:
                    self._pause()
                    logger.warning(
                        f"Loss limit reached, pausing bot: loss={daily_loss} wei "
                        f"limit={self.loss_limit_wei} wei"
                    )
                    logger.warning("Bot paused until manual unpause by owner.")
                    return True

            if test_mode and revert:
                self._consecutive_reverts += 1
                self.store.save_metric(CONSECUTIVE_REVERTS_METRIC, 1)
                if self._consecutive_reverts >= self.revert_threshold:
                    self._pause()
                    logger.warning(
                        f"AutoPause: {self._consecutive_reverts} consecutive reverts"
                    )
            elif revert is False:
                self._consecutive_reverts = 0

            return self._paused

    def record_outcome(self, result, loss_wei: int = 0, test_mode: bool = False) -> bool:
        """Map an ExecutionResult onto apply_pause_if_needed."""
        if result.status == STATUS_SUCCESS:
            revert = False
        elif result.status == STATUS_REVERTED:
            revert = True
        else:
            revert = None
        return self.apply_pause_if_needed(loss_wei=loss_wei, revert=revert, test_mode=test_mode)
