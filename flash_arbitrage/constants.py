"""
Constants shared by the evaluation, simulation and execution stages.

Gas heuristics, fee fallbacks and the executor contract interface live here so
that the evaluator, the simulator and the executor price a candidate the same way.
"""

# ============================================================================
# Units
# ============================================================================

WEI_PER_ETH = 10**18
WEI_PER_GWEI = 10**9
BPS_DENOMINATOR = 10_000

# ============================================================================
# Path discovery
# ============================================================================

# Expected fair price of the base asset (WETH in USD-stable units). Every path
# is scored against this single value rather than a per-path fair price.
REFERENCE_PRICE = 3500.0
LIQUIDITY_DECIMALS = 4

# ============================================================================
# Sizing and gas heuristics
# ============================================================================

MIN_NOTIONAL_USD = 1000
MAX_NOTIONAL_USD = 50000
NOTIONAL_LIQUIDITY_FRACTION = 0.05

GAS_BASE_UNITS = 50_000  # overhead of the flash loan round trip
GAS_UNITS_PER_HOP = 70_000
# max_gas_wei / GAS_BUDGET_UNITS is the per-unit price, so the estimate stays under the cap
GAS_BUDGET_UNITS = 250_000
FALLBACK_GAS_UNITS = 200_000

GAS_LIMIT_BUFFER_PCT = 120  # +20% on top of eth_estimateGas

# ============================================================================
# EIP-1559 pricing
# ============================================================================

FEE_BUFFER_PCT = 110  # provider suggestion x1.10
LEGACY_PRIORITY_FEE_WEI = 2 * WEI_PER_GWEI
FALLBACK_MAX_FEE_WEI = 30 * WEI_PER_GWEI
FALLBACK_PRIORITY_FEE_WEI = 2 * WEI_PER_GWEI
EIP1559_TX_TYPE = 2

# ============================================================================
# Timeouts
# ============================================================================

SIMULATION_TIMEOUT_MS = 800
CONFIRMATION_TIMEOUT_SECONDS = 30
CONFIRMATIONS_REQUIRED = 1

# ============================================================================
# Executor contract interface
# ============================================================================

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
# Placeholder flash-loan initiator passed to executeOperation
DEFAULT_INITIATOR = "0x000000000000000000000000000000000000beef"

EXECUTE_OPERATION_SIGNATURE = (
    "executeOperation(address[],uint256[],uint256[],address,bytes)"
)
EXECUTE_OPERATION_ARG_TYPES = ["address[]", "uint256[]", "uint256[]", "address", "bytes"]
GUARD_PAYLOAD_TYPES = ["(uint256,uint256,uint256)", "uint256"]

# ============================================================================
# Safety
# ============================================================================

DEFAULT_ALLOWED_NETWORK = "sepolia"
AUTO_PAUSE_REVERT_THRESHOLD = 3
DAILY_LOSS_METRIC = "daily_loss_total_wei"
CONSECUTIVE_REVERTS_METRIC = "consecutive_reverts"

# ============================================================================
# Execution statuses
# ============================================================================

STATUS_SUCCESS = "success"
STATUS_REVERTED = "reverted"
STATUS_BLOCKED = "blocked"
STATUS_DRY_RUN = "dry-run"
