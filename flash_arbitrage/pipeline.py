"""
Cycle orchestration: discover -> evaluate -> simulate -> execute -> account.

One candidate is handled per cycle and there is no fan-out across candidates.
The pause flag is checked before anything else; a paused cycle is reported to
metrics as a blocked attempt and the executor is never invoked.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from .constants import STATUS_REVERTED
from .discovery.pathfinder import find_opportunities
from .discovery.types import Pool
from .evaluation.evaluator import evaluate_all
from .evaluation.types import EvaluatedOpportunity, EvaluationContext
from .execution.executor import FlashArbExecutor
from .execution.types import REASON_PAUSED, ExecutionResult
from .metrics import ExecutionMetrics, get_metrics
from .safety import SafetyState
from .security import SecurityWarning, check_security_warnings
from .simulation.simulator import SimulationResult, simulate_on_chain, simulate_opportunity
from .utils import get_logger

logger = get_logger(__name__)

CYCLE_PAUSED = "paused"
CYCLE_NO_OPPORTUNITIES = "no-opportunities"


@dataclass
class CycleReport:
    """Everything one cycle observed, in JSON-friendly form via to_dict()."""

    status: str
    candidates: int = 0
    accepted: int = 0
    top: Optional[EvaluatedOpportunity] = None
    simulation: Optional[SimulationResult] = None
    execution: Optional[ExecutionResult] = None
    paused_after: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "candidates": self.candidates,
            "accepted": self.accepted,
            "top": self.top.to_dict() if self.top else None,
            "simulation": self.simulation.to_dict() if self.simulation else None,
            "execution": self.execution.to_dict() if self.execution else None,
            "paused_after": self.paused_after,
        }


def loss_for_result(result: ExecutionResult) -> int:
    """Gas burnt by a reverted transaction, priced at its max fee."""
    if result.status != STATUS_REVERTED:
        return 0
    gas_used = getattr(result, "gas_used", None)
    tx_data = getattr(result, "tx_data", None)
    if gas_used is None or tx_data is None:
        return 0
    return int(gas_used) * int(tx_data.max_fee_per_gas)


class ArbitragePipeline:
    """
    Process orchestrator owning the safety state for its cycles.

    Components are injectable so tests can isolate metrics, safety and the
    executor.
    """

    def __init__(
        self,
        config,
        web3=None,
        safety: Optional[SafetyState] = None,
        metrics: Optional[ExecutionMetrics] = None,
        executor: Optional[FlashArbExecutor] = None,
        private_key: Optional[str] = None,
        owner_address: Optional[str] = None,
    ):
        self.config = config
        self.web3 = web3
        self.metrics = metrics or get_metrics()
        self.safety = safety or SafetyState.from_config(config, metrics=self.metrics)
        self.executor = executor or FlashArbExecutor(web3, config, metrics=self.metrics)
        self.private_key = private_key
        self.owner_address = owner_address
        self.ctx = EvaluationContext.from_config(config)

    def preflight(self) -> List[SecurityWarning]:
        """Non-blocking security warnings for the configured signer and executor."""
        return check_security_warnings(
            web3=self.web3,
            private_key=self.private_key,
            owner_address=self.owner_address,
            executor_address=self.config.executor_address,
            min_required_eth=self.config.min_required_eth,
        )

    async def _simulate(self, top: EvaluatedOpportunity, offline: bool) -> SimulationResult:
        timeout_ms = self.config.simulation_timeout_ms
        if offline or self.web3 is None:
            return await simulate_opportunity(top.opportunity, self.ctx, None, timeout_ms)
        return await simulate_on_chain(
            top.opportunity,
            self.ctx,
            self.web3,
            self.config.executor_address,
            timeout_ms,
        )

    async def run_cycle(
        self, pools: Sequence[Pool], dry_run: bool = False, offline: bool = False
    ) -> CycleReport:
        """
        Run one discover/evaluate/simulate/execute cycle.

        Args:
            pools: Pool snapshot for this cycle
            dry_run: Build but do not sign or send the transaction
            offline: Use the generic simulator without RPC calls

        Returns:
            CycleReport with the terminal status of the cycle
        """
        if self.safety.is_paused:
            logger.warning("Bot is paused, skipping cycle")
            self.metrics.record_blocked(REASON_PAUSED)
            return CycleReport(status=CYCLE_PAUSED, paused_after=True)

        opportunities = find_opportunities(pools)
        self.metrics.record_opportunities(len(opportunities))
        evaluated = evaluate_all(opportunities, self.ctx)
        accepted = [ev for ev in evaluated if ev.accepted and ev.net_profit_wei > 0]

        if not accepted:
            logger.info("No profitable opportunities found")
            return CycleReport(
                status=CYCLE_NO_OPPORTUNITIES,
                candidates=len(evaluated),
                paused_after=self.safety.is_paused,
            )

        top = accepted[0]
        logger.info(
            f"Top candidate {top.opportunity.path_label}: "
            f"spread={top.opportunity.spread_bps} bps net={top.net_profit_wei} wei"
        )
        simulation = await self._simulate(top, offline)
        execution = await self.executor.execute_opportunity(
            top.opportunity, simulation, dry_run=dry_run, private_key=self.private_key
        )

        if not dry_run:
            self.safety.record_outcome(
                execution,
                loss_wei=loss_for_result(execution),
                test_mode=self.config.test_mode,
            )

        report = CycleReport(
            status=execution.status,
            candidates=len(evaluated),
            accepted=len(accepted),
            top=top,
            simulation=simulation,
            execution=execution,
            paused_after=self.safety.is_paused,
        )
        logger.info("CYCLE_RESULT: " + json.dumps(report.to_dict()))
        return report

    async def run(
        self,
        pool_source: Callable[[], Sequence[Pool]],
        max_cycles: Optional[int] = None,
        dry_run: bool = False,
        offline: bool = False,
    ) -> List[CycleReport]:
        """
        Run cycles every scan_interval_ms.

        Reports are collected only for a bounded run; with max_cycles=None the
        loop runs until cancelled.
        """
        reports: List[CycleReport] = []
        interval = self.config.scan_interval_ms / 1000.0
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            report = await self.run_cycle(pool_source(), dry_run=dry_run, offline=offline)
            cycles += 1
            if max_cycles is not None:
                reports.append(report)
                if cycles >= max_cycles:
                    break
            await asyncio.sleep(interval)
        return reports
