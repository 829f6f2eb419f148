"""
Configuration schema validation using Pydantic
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from web3 import Web3

from .constants import (
    CONFIRMATION_TIMEOUT_SECONDS,
    DEFAULT_ALLOWED_NETWORK,
    REFERENCE_PRICE,
    SIMULATION_TIMEOUT_MS,
)

DexName = Literal["uniswapv2", "uniswapv3", "sushi", "curve", "balancer"]


class FlashLoanConfig(BaseModel):
    """Flash-loan provider configuration"""

    provider: Literal["aaveV3"] = "aaveV3"
    fee_bps: int = Field(ge=0, le=10000, description="Flash-loan premium in bps")

    model_config = {"extra": "forbid"}


class RuntimeConfig(BaseModel):
    """Complete runtime configuration for the arbitrage pipeline"""

    # Network
    network: str = Field(min_length=1, description="Target network name")
    rpc_url: str = Field(min_length=1, description="JSON-RPC endpoint")
    relay_url: Optional[str] = Field(
        default=None, description="Private relay endpoint (eth_sendRawTransaction)"
    )
    executor_address: Optional[str] = Field(
        default=None, description="Deployed flash-arb executor contract"
    )
    allowed_network: str = Field(
        default=DEFAULT_ALLOWED_NETWORK,
        description="The only network real transactions may be sent on",
    )

    # Economics
    min_net_profit_wei: int = Field(ge=0, description="Minimum net profit in wei")
    max_slippage_bps: int = Field(ge=0, le=10000, description="Maximum slippage in bps")
    deadline_seconds: int = Field(
        description="Guard deadline window; non-positive values fail simulation"
    )
    scan_interval_ms: int = Field(default=5000, gt=0)
    max_gas_wei: int = Field(ge=0, description="Maximum gas budget per transaction in wei")
    min_liquidity_usd: float = Field(ge=0, description="Liquidity floor per path in USD")
    mev_buffer_bps: int = Field(default=5, ge=0, le=10000)
    notional_usd_default: Optional[float] = Field(default=None, ge=0)
    eth_usd_price: float = Field(default=REFERENCE_PRICE, gt=0)
    dexes: List[DexName] = Field(default_factory=lambda: ["uniswapv2", "uniswapv3", "sushi"])
    flash_loan: FlashLoanConfig

    # Safety
    loss_limit_wei: int = Field(default=0, ge=0, description="Daily loss limit, 0 disables")
    test_mode: bool = False
    min_required_eth: float = Field(default=0.01, ge=0)

    # Timeouts
    simulation_timeout_ms: int = Field(default=SIMULATION_TIMEOUT_MS, gt=0)
    rpc_timeout_seconds: float = Field(default=10.0, gt=0)
    relay_timeout_seconds: float = Field(default=5.0, gt=0)
    confirmation_timeout_seconds: float = Field(
        default=CONFIRMATION_TIMEOUT_SECONDS, gt=0
    )

    @field_validator("network", "allowed_network")
    @classmethod
    def normalize_network(cls, v):
        return v.strip().lower()

    @field_validator("relay_url", "executor_address", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("executor_address")
    @classmethod
    def validate_executor_address(cls, v):
        if v is not None and not Web3.is_address(v):
            raise ValueError(f"executor_address is not a valid address: {v}")
        return v

    @model_validator(mode="after")
    def validate_notional(self):
        if self.notional_usd_default is not None and self.notional_usd_default == 0:
            raise ValueError("notional_usd_default must be positive when set")
        return self

    @property
    def simulation_timeout_seconds(self) -> float:
        return self.simulation_timeout_ms / 1000.0

    model_config = {
        "extra": "forbid",  # Disallow extra fields
        "validate_assignment": True,
    }
