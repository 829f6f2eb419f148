"""Evaluator: sizing, gas and net-profit scoring of candidate paths."""

from .evaluator import (
    choose_notional_usd,
    estimate_gas_units,
    evaluate_all,
    evaluate_opportunity,
    gas_unit_price,
    gross_profit_wei,
    rejection_reason,
)
from .types import (
    REASON_BELOW_MIN_PROFIT,
    REASON_GAS_TOO_EXPENSIVE,
    REASON_LOW_LIQUIDITY,
    REASON_NEGATIVE_PROFIT,
    REASON_SLIPPAGE_TOO_HIGH,
    REJECTION_REASONS,
    EvaluatedOpportunity,
    EvaluationContext,
)

__all__ = [
    "EvaluationContext",
    "EvaluatedOpportunity",
    "REJECTION_REASONS",
    "REASON_LOW_LIQUIDITY",
    "REASON_SLIPPAGE_TOO_HIGH",
    "REASON_NEGATIVE_PROFIT",
    "REASON_BELOW_MIN_PROFIT",
    "REASON_GAS_TOO_EXPENSIVE",
    "choose_notional_usd",
    "estimate_gas_units",
    "gas_unit_price",
    "gross_profit_wei",
    "rejection_reason",
    "evaluate_opportunity",
    "evaluate_all",
]
