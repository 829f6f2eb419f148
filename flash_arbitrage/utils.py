"""
Common utilities and helper functions for the flash-loan arbitrage bot.

This module provides centralized helpers for logging setup, unit conversions
between USD, ETH and wei, and basis-point arithmetic.
"""

import logging
import os
import sys
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

from .constants import BPS_DENOMINATOR, WEI_PER_ETH


# Timestamp utilities
def unix_seconds() -> int:
    """Get current Unix timestamp truncated to whole seconds."""
    return int(time.time())


# Math utilities
def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value between min and max bounds."""
    return max(min_val, min(value, max_val))


def bps_of(amount_wei: int, bps: int) -> int:
    """Integer share of a wei amount expressed in basis points (floored)."""
    return (amount_wei * int(bps)) // BPS_DENOMINATOR


def usd_to_wei(usd: Union[int, float, Decimal], eth_usd_price: Union[int, float, Decimal]) -> int:
    """
    Convert a USD amount to wei at the given ETH/USD rate.

    Args:
        usd: Amount in USD
        eth_usd_price: Price of one ETH in USD

    Returns:
        Amount in wei, rounded half-up to an integer
    """
    eth = Decimal(str(usd)) / Decimal(str(eth_usd_price))
    return int((eth * WEI_PER_ETH).to_integral_value(rounding=ROUND_HALF_UP))


def wei_to_eth(value_wei: int) -> float:
    """Convert wei to ETH as float (display only)."""
    return float(Decimal(value_wei) / WEI_PER_ETH)


def format_wei(value_wei: Optional[int]) -> str:
    """Format a wei amount with its ETH equivalent for log lines."""
    if value_wei is None:
        return "n/a"
    return f"{value_wei:,} wei (~{wei_to_eth(value_wei):.6f} ETH)"


# Logging utilities
def get_logger(
    name: str,
    level: Union[str, int] = logging.INFO,
    extra: Optional[Dict[str, Any]] = None,
    minimal: bool = False,
) -> logging.Logger:
    """
    Get a structured logger with consistent formatting and extra context.

    Args:
        name: Logger name (typically __name__)
        level: Logging level
        extra: Additional context fields to include in all log messages
        minimal: If True, use simplified format (time + message only)

    Returns:
        Configured logger with structured output
    """
    logger = logging.getLogger(name)

    # Set level if not already set
    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    # Handlers only when nothing upstream will format the record
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()

        if minimal:
            format_str = "%(asctime)s | %(message)s"
        else:
            format_str = (
                "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | " "%(message)s"
            )

        if extra:
            extra_fields = " | ".join([f"{k}=%(extra_{k})s" for k in extra.keys()])
            format_str = format_str.replace(
                " | %(message)s", f" | {extra_fields} | %(message)s"
            )

        formatter = logging.Formatter(format_str, datefmt="%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if extra:
        return logging.LoggerAdapter(
            logger, {"extra_" + k: v for k, v in extra.items()}
        )

    return logger


def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    Configure the root logger for a bot process.

    - Level from argument, else LOG_LEVEL env, else INFO
    - Short HH:MM:SS timestamps on stderr; stdout is left for reports
    - Package loggers drop their own handlers and inherit root's
    - Quiets HTTP and web3 provider chatter
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(console)

    for name, existing in list(logging.root.manager.loggerDict.items()):
        if name.startswith("flash_arbitrage.") and isinstance(existing, logging.Logger):
            existing.handlers.clear()
            existing.setLevel(logging.NOTSET)
            existing.propagate = True

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("flash_arbitrage").setLevel(level)
