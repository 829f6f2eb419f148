"""
Pre-flight verification of accepted candidates.

Two variants share the same economics:

- simulate_opportunity: generic provider check (estimate_gas + eth_call on the
  zero address) bounded per call, degrading to fixed fallbacks.
- simulate_on_chain: gas-estimates and statically calls executeOperation on
  the deployed executor contract and extracts the revert reason on failure.

Neither variant mutates chain state, and a failure never raises: it is
returned as SimulationResult(ok=False) with fallback gas accounting.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..constants import FALLBACK_GAS_UNITS, SIMULATION_TIMEOUT_MS, ZERO_ADDRESS
from ..discovery.types import Opportunity
from ..evaluation.evaluator import gas_unit_price, gross_profit_wei
from ..evaluation.types import EvaluationContext
from ..exceptions import RpcTimeoutError, SimulationError
from ..rpc_helpers import call_with_fallback, run_blocking
from ..utils import bps_of, get_logger, usd_to_wei
from .guard_params import (
    build_flash_loan_leg,
    build_guard_params,
    encode_execute_operation,
    encode_guard_payload,
    expected_out_wei,
    simulation_notional_usd,
)

logger = get_logger(__name__)

REASON_DEADLINE_EXPIRED = "deadline-expired"
REASON_CALLSTATIC_REVERT = "callstatic-revert"
REASON_MISSING_EXECUTOR = "missing-executor-address"
REASON_SIMULATION_TIMEOUT = "simulation-timeout"


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one simulation attempt."""

    path: Tuple[str, ...]
    expected_out_wei: int
    gas_estimated_wei: int
    net_profit_wei: int
    ok: bool
    revert_reason: Optional[str] = None
    on_chain: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path),
            "expected_out_wei": str(self.expected_out_wei),
            "gas_estimated_wei": str(self.gas_estimated_wei),
            "net_profit_wei": str(self.net_profit_wei),
            "ok": self.ok,
            "revert_reason": self.revert_reason,
            "on_chain": self.on_chain,
        }


def parse_revert_reason(err: BaseException) -> Optional[str]:
    """
    Best-effort revert reason from a failed estimate/call.

    Checks reason, short message, message, the exception text and finally raw
    revert data; the first non-empty string wins.
    """
    for attr in ("reason", "short_message", "shortMessage", "message"):
        value = getattr(err, attr, None)
        if isinstance(value, str) and value:
            return value
    text = str(err)
    if text:
        return text
    data = getattr(err, "data", None)
    if isinstance(data, str) and data:
        return data
    if isinstance(data, (bytes, bytearray)) and data:
        return "0x" + bytes(data).hex()
    return None


def _net_profit(
    notional_usd: float,
    input_wei: int,
    spread_bps: int,
    gas_estimated_wei: int,
    ctx: EvaluationContext,
) -> int:
    gross = gross_profit_wei(notional_usd, spread_bps, ctx.eth_usd_price)
    flash_fee = bps_of(input_wei, ctx.flash_fee_bps)
    mev_buffer = bps_of(input_wei, ctx.mev_buffer_bps)
    return gross - flash_fee - gas_estimated_wei - mev_buffer


def _log_outcome(result: SimulationResult) -> None:
    if result.ok:
        logger.info(
            f"Simulation ok for {' -> '.join(result.path)}: "
            f"net={result.net_profit_wei} wei gas={result.gas_estimated_wei} wei"
        )
    else:
        logger.info(
            f"Simulation failed for {' -> '.join(result.path)}: {result.revert_reason}"
        )


async def simulate_opportunity(
    opportunity: Opportunity,
    ctx: EvaluationContext,
    web3=None,
    timeout_ms: int = SIMULATION_TIMEOUT_MS,
) -> SimulationResult:
    """
    Generic pre-flight check with per-call timeouts and offline fallbacks.

    A non-positive deadline window fails immediately, before any RPC call.
    Without a web3 instance the fallbacks are used directly.
    """
    notional_usd = simulation_notional_usd(ctx.notional_usd_default)
    input_wei = usd_to_wei(notional_usd, ctx.eth_usd_price)
    expected_out = expected_out_wei(notional_usd, opportunity.spread_bps, ctx.eth_usd_price)
    unit_price = gas_unit_price(ctx.max_gas_wei)
    timeout = timeout_ms / 1000.0

    ok = True
    reason = None
    if ctx.deadline_seconds <= 0:
        ok = False
        reason = REASON_DEADLINE_EXPIRED
        gas_units = FALLBACK_GAS_UNITS
    elif web3 is None:
        gas_units = FALLBACK_GAS_UNITS
    else:
        gas_units = await call_with_fallback(
            web3.eth.estimate_gas,
            {"to": ZERO_ADDRESS},
            timeout=timeout,
            fallback=FALLBACK_GAS_UNITS,
            label="estimate_gas",
        )
        await call_with_fallback(
            web3.eth.call,
            {"to": ZERO_ADDRESS, "data": "0x"},
            timeout=timeout,
            fallback=b"",
            label="eth_call",
        )

    gas_estimated_wei = int(gas_units) * unit_price
    result = SimulationResult(
        path=opportunity.path,
        expected_out_wei=expected_out,
        gas_estimated_wei=gas_estimated_wei,
        net_profit_wei=_net_profit(
            notional_usd, input_wei, opportunity.spread_bps, gas_estimated_wei, ctx
        ),
        ok=ok,
        revert_reason=reason,
    )
    _log_outcome(result)
    return result


async def simulate_on_chain(
    opportunity: Opportunity,
    ctx: EvaluationContext,
    web3,
    executor_address: Optional[str] = None,
    timeout_ms: int = SIMULATION_TIMEOUT_MS,
) -> SimulationResult:
    """
    Gas-estimate and statically call executeOperation on the executor contract.

    Args:
        opportunity: Accepted candidate
        ctx: Pricing inputs and thresholds
        web3: Connected Web3 instance
        executor_address: Deployed executor contract
        timeout_ms: Deadline for each RPC call

    Returns:
        SimulationResult; ok=False carries the parsed revert reason and a gas
        estimate computed from the fallback unit count
    """
    notional_usd = simulation_notional_usd(ctx.notional_usd_default)
    input_wei = usd_to_wei(notional_usd, ctx.eth_usd_price)
    expected_out = expected_out_wei(notional_usd, opportunity.spread_bps, ctx.eth_usd_price)
    unit_price = gas_unit_price(ctx.max_gas_wei)
    timeout = timeout_ms / 1000.0

    guard = build_guard_params(expected_out, ctx.max_slippage_bps, ctx.deadline_seconds)
    leg = build_flash_loan_leg(input_wei, ctx.flash_fee_bps)

    ok = True
    reason = None
    try:
        if not executor_address:
            raise SimulationError(REASON_MISSING_EXECUTOR)
        tx = {
            "to": executor_address,
            "data": encode_execute_operation(leg, encode_guard_payload(guard, expected_out)),
        }
        gas_units = await run_blocking(
            web3.eth.estimate_gas, tx, timeout=timeout, label="estimate_gas"
        )
        gas_estimated_wei = int(gas_units) * unit_price
        await run_blocking(web3.eth.call, tx, timeout=timeout, label="eth_call")
    except RpcTimeoutError as e:
        logger.warning(f"On-chain simulation timed out: {e}")
        ok = False
        reason = REASON_SIMULATION_TIMEOUT
        gas_estimated_wei = FALLBACK_GAS_UNITS * unit_price
    except Exception as e:
        ok = False
        reason = parse_revert_reason(e) or REASON_CALLSTATIC_REVERT
        gas_estimated_wei = FALLBACK_GAS_UNITS * unit_price

    result = SimulationResult(
        path=opportunity.path,
        expected_out_wei=expected_out,
        gas_estimated_wei=gas_estimated_wei,
        net_profit_wei=_net_profit(
            notional_usd, input_wei, opportunity.spread_bps, gas_estimated_wei, ctx
        ),
        ok=ok,
        revert_reason=reason,
        on_chain=True,
    )
    _log_outcome(result)
    return result
