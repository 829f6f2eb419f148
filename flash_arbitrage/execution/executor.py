"""
Guarded flash-loan arbitrage execution.

Handles:
- Ordered safety guards (network, profit, simulation, executor address)
- Fresh guard parameters and executeOperation calldata
- Gas limit estimation (+20%) and EIP-1559 pricing
- Dry-run planning without signing
- Signing, relay-then-direct submission and confirmation polling

execute_opportunity never raises; every attempt ends in exactly one
ExecutionResult, and only non-dry-run results are recorded in metrics.
"""

import asyncio
import json
import time
from typing import Optional

from eth_account import Account
from web3 import Web3
from web3.exceptions import TransactionNotFound

from ..constants import EIP1559_TX_TYPE, GAS_LIMIT_BUFFER_PCT
from ..discovery.types import Opportunity
from ..exceptions import RpcTimeoutError
from ..metrics import ExecutionMetrics, get_metrics
from ..rpc_helpers import run_blocking
from ..simulation.guard_params import (
    build_flash_loan_leg,
    build_guard_params,
    encode_execute_operation,
    encode_guard_payload,
    simulation_notional_usd,
)
from ..simulation.simulator import SimulationResult
from ..utils import get_logger, usd_to_wei
from .fees import calculate_eip1559_pricing
from .submission import RelayThenDirectStrategy
from .types import (
    REASON_EXECUTION_ERROR,
    REASON_GAS_COST_TOO_HIGH,
    REASON_MISSING_EXECUTOR,
    REASON_MISSING_PRIVATE_KEY,
    REASON_NETWORK_NOT_ALLOWED,
    REASON_PROFIT_BELOW_MINIMUM,
    REASON_SIMULATION_FAILED,
    REASON_TRANSACTION_REVERTED,
    REASON_TRANSACTION_TIMEOUT,
    ExecutionBlocked,
    ExecutionDryRun,
    ExecutionResult,
    ExecutionReverted,
    ExecutionSuccess,
    TxData,
)

logger = get_logger(__name__)


class FlashArbExecutor:
    """
    Executes simulated flash-loan arbitrage candidates on the allowed network.

    The executor has no knowledge of the pause flag; callers must consult
    SafetyState before invoking it.
    """

    def __init__(
        self,
        web3: Web3,
        config,
        metrics: Optional[ExecutionMetrics] = None,
        submission: Optional[RelayThenDirectStrategy] = None,
        confirmation_poll_seconds: float = 1.0,
    ):
        """
        Initialize executor.

        Args:
            web3: Web3 instance for estimation, pricing, nonce and receipts
            config: RuntimeConfig
            metrics: Metrics sink (defaults to the process-wide instance)
            submission: Submission strategy (defaults to relay-then-direct from config)
            confirmation_poll_seconds: Receipt polling interval
        """
        self.web3 = web3
        self.config = config
        self.metrics = metrics or get_metrics()
        self.submission = submission or RelayThenDirectStrategy.from_config(web3, config)
        self.confirmation_poll_seconds = confirmation_poll_seconds

    def check_guards(self, simulation: SimulationResult) -> Optional[str]:
        """First failing guard reason, or None when all pass."""
        if self.config.network != self.config.allowed_network:
            return REASON_NETWORK_NOT_ALLOWED
        if simulation.net_profit_wei <= self.config.min_net_profit_wei:
            return REASON_PROFIT_BELOW_MINIMUM
        if not simulation.ok:
            return simulation.revert_reason or REASON_SIMULATION_FAILED
        if not self.config.executor_address:
            return REASON_MISSING_EXECUTOR
        return None

    async def execute_opportunity(
        self,
        opportunity: Opportunity,
        simulation: SimulationResult,
        dry_run: bool = False,
        private_key: Optional[str] = None,
    ) -> ExecutionResult:
        """
        Guard, price, and (unless dry-run) sign, submit and confirm.

        Args:
            opportunity: Candidate being executed
            simulation: Its simulation result
            dry_run: Build the transaction but do not sign or send it
            private_key: Signing key; required for real execution

        Returns:
            ExecutionResult (success, reverted, blocked or dry-run)
        """
        profit_expected = simulation.net_profit_wei
        logger.info(
            "EXECUTION_START: "
            + json.dumps(
                {
                    "path": list(opportunity.path),
                    "net_profit_wei": str(profit_expected),
                    "dry_run": dry_run,
                }
            )
        )

        reason = self.check_guards(simulation)
        if reason:
            return self._finish(ExecutionBlocked(reason, profit_expected), record=not dry_run)

        try:
            tx_data = await self._build_transaction(simulation)

            if not dry_run and tx_data.gas_limit * tx_data.max_fee_per_gas > self.config.max_gas_wei:
                return self._finish(
                    ExecutionBlocked(REASON_GAS_COST_TOO_HIGH, profit_expected)
                )

            if dry_run:
                result = ExecutionDryRun(tx_data=tx_data, profit_expected=profit_expected)
                logger.info("DRY_RUN: " + json.dumps(result.to_dict()))
                return result

            if not private_key:
                return self._finish(
                    ExecutionBlocked(REASON_MISSING_PRIVATE_KEY, profit_expected)
                )

            raw_tx = await self._sign(tx_data, private_key)
            outcome = await run_blocking(
                self.submission.submit, raw_tx, label="submit_transaction"
            )
            logger.info(
                f"Waiting for tx {outcome.tx_hash} (relay={outcome.relay_used})..."
            )
        except Exception as e:
            logger.error(f"Execution error: {e}")
            return self._finish(
                ExecutionReverted(
                    revert_reason=str(e) or REASON_EXECUTION_ERROR,
                    profit_expected=profit_expected,
                ),
                record=not dry_run,
            )

        # The transaction is broadcast; every result from here carries its hash.
        try:
            receipt = await self._wait_for_receipt(
                outcome.tx_hash, self.config.confirmation_timeout_seconds
            )
        except Exception as e:
            logger.error(f"Confirmation error for {outcome.tx_hash}: {e}")
            return self._finish(
                ExecutionReverted(
                    revert_reason=str(e) or REASON_EXECUTION_ERROR,
                    profit_expected=profit_expected,
                    relay_used=outcome.relay_used,
                    tx_hash=outcome.tx_hash,
                    tx_data=tx_data,
                )
            )

        if receipt is None:
            return self._finish(
                ExecutionReverted(
                    revert_reason=REASON_TRANSACTION_TIMEOUT,
                    profit_expected=profit_expected,
                    relay_used=outcome.relay_used,
                    tx_hash=outcome.tx_hash,
                    tx_data=tx_data,
                )
            )

        gas_used = int(receipt.get("gasUsed") or 0)
        if receipt.get("status") == 1:
            return self._finish(
                ExecutionSuccess(
                    tx_hash=outcome.tx_hash,
                    gas_used=gas_used,
                    profit_expected=profit_expected,
                    relay_used=outcome.relay_used,
                    tx_data=tx_data,
                )
            )
        return self._finish(
            ExecutionReverted(
                revert_reason=REASON_TRANSACTION_REVERTED,
                profit_expected=profit_expected,
                relay_used=outcome.relay_used,
                tx_hash=outcome.tx_hash,
                gas_used=gas_used,
                tx_data=tx_data,
            )
        )

    async def _build_transaction(self, simulation: SimulationResult) -> TxData:
        """Fresh guard params, calldata, buffered gas limit and fee fields."""
        config = self.config
        notional_usd = simulation_notional_usd(config.notional_usd_default)
        input_wei = usd_to_wei(notional_usd, config.eth_usd_price)
        leg = build_flash_loan_leg(input_wei, config.flash_loan.fee_bps)
        guard = build_guard_params(
            simulation.expected_out_wei, config.max_slippage_bps, config.deadline_seconds
        )
        to = Web3.to_checksum_address(config.executor_address)
        data = encode_execute_operation(
            leg, encode_guard_payload(guard, simulation.expected_out_wei)
        )

        gas_estimate = await run_blocking(
            self.web3.eth.estimate_gas,
            {"to": to, "data": data},
            timeout=config.rpc_timeout_seconds,
            label="estimate_gas",
        )
        gas_limit = (int(gas_estimate) * GAS_LIMIT_BUFFER_PCT) // 100

        fees = await calculate_eip1559_pricing(self.web3, timeout=config.rpc_timeout_seconds)
        if fees.degraded:
            logger.warning(f"Using {fees.source} fee quote ({fees.diagnostic or 'no base fee'})")

        return TxData(
            to=to,
            data=data,
            value=0,
            gas_limit=gas_limit,
            max_fee_per_gas=fees.max_fee_per_gas,
            max_priority_fee_per_gas=fees.max_priority_fee_per_gas,
        )

    async def _sign(self, tx_data: TxData, private_key: str) -> bytes:
        """Build and sign a type-2 transaction from the signer's pending nonce."""
        account = Account.from_key(private_key)
        timeout = self.config.rpc_timeout_seconds
        nonce = await run_blocking(
            self.web3.eth.get_transaction_count,
            account.address,
            "pending",
            timeout=timeout,
            label="get_transaction_count",
        )
        chain_id = await run_blocking(
            lambda: self.web3.eth.chain_id, timeout=timeout, label="chain_id"
        )
        tx = {
            "to": tx_data.to,
            "data": tx_data.data,
            "value": 0,
            "gas": tx_data.gas_limit,
            "maxFeePerGas": tx_data.max_fee_per_gas,
            "maxPriorityFeePerGas": tx_data.max_priority_fee_per_gas,
            "nonce": nonce,
            "chainId": chain_id,
            "type": EIP1559_TX_TYPE,
        }
        signed = account.sign_transaction(tx)
        return signed.raw_transaction

    async def _wait_for_receipt(self, tx_hash: str, timeout: float):
        """
        Poll for the transaction receipt.

        Returns:
            The receipt, or None if it did not arrive within timeout
        """
        deadline = time.monotonic() + timeout

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            try:
                receipt = await run_blocking(
                    self.web3.eth.get_transaction_receipt,
                    tx_hash,
                    timeout=remaining,
                    label="get_transaction_receipt",
                )
                if receipt:
                    return receipt
            except (TransactionNotFound, RpcTimeoutError):
                pass

            await asyncio.sleep(min(self.confirmation_poll_seconds, max(remaining, 0)))

    def _finish(self, result: ExecutionResult, record: bool = True) -> ExecutionResult:
        """Log a terminal result; record it in metrics unless it came from a dry run."""
        if record:
            self.metrics.record_execution_result(result)
        if isinstance(result, ExecutionBlocked):
            logger.warning(f"Execution blocked: {result.revert_reason}")
        logger.info("EXECUTION_RESULT: " + json.dumps(result.to_dict()))
        return result
