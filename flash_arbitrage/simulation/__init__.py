"""
On-chain pre-flight simulation of accepted candidates.
"""

from .guard_params import (
    FlashLoanLeg,
    GuardParams,
    build_flash_loan_leg,
    build_guard_params,
    encode_execute_operation,
    encode_guard_payload,
    expected_out_wei,
    simulation_notional_usd,
)
from .simulator import (
    SimulationResult,
    parse_revert_reason,
    simulate_on_chain,
    simulate_opportunity,
)

__all__ = [
    "GuardParams",
    "FlashLoanLeg",
    "build_guard_params",
    "build_flash_loan_leg",
    "encode_guard_payload",
    "encode_execute_operation",
    "expected_out_wei",
    "simulation_notional_usd",
    "SimulationResult",
    "simulate_opportunity",
    "simulate_on_chain",
    "parse_revert_reason",
]
