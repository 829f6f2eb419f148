"""
Flash-Loan Arbitrage Bot.

Finds multi-hop price discrepancies across DEX pools, scores them, verifies
them against the on-chain executor contract and submits guarded flash-loan
transactions, pausing itself on excessive losses or revert streaks.
"""

from .version import __version__

PROJECT_NAME = "Flash-Arbitrage-Bot"
VERSION = __version__

# Export main components for easier imports
from .config_loader import load_config, load_secrets
from .config_schema import RuntimeConfig
from .discovery import Opportunity, Pool, Token, fetch_mock_pools, find_opportunities
from .evaluation import EvaluatedOpportunity, EvaluationContext, evaluate_opportunity
from .execution import (
    ExecutionBlocked,
    ExecutionDryRun,
    ExecutionReverted,
    ExecutionSuccess,
    FlashArbExecutor,
)
from .metrics import ExecutionMetrics
from .pipeline import ArbitragePipeline, CycleReport
from .safety import SafetyState
from .simulation import SimulationResult, simulate_on_chain, simulate_opportunity

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "RuntimeConfig",
    "load_config",
    "load_secrets",
    "Token",
    "Pool",
    "Opportunity",
    "fetch_mock_pools",
    "find_opportunities",
    "EvaluationContext",
    "EvaluatedOpportunity",
    "evaluate_opportunity",
    "SimulationResult",
    "simulate_opportunity",
    "simulate_on_chain",
    "FlashArbExecutor",
    "ExecutionSuccess",
    "ExecutionReverted",
    "ExecutionBlocked",
    "ExecutionDryRun",
    "ExecutionMetrics",
    "SafetyState",
    "ArbitragePipeline",
    "CycleReport",
]
