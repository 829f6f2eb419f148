"""
Non-blocking security pre-flight checks.

Each check either passes silently or yields a SecurityWarning. A check that
itself fails yields a warning of kind "check-failed" carrying the error text
instead of being dropped.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from eth_account import Account

from .constants import WEI_PER_ETH
from .utils import get_logger

logger = get_logger(__name__, extra={"security": True})

KIND_OWNER_IS_EXECUTOR = "owner-is-executor"
KIND_LOW_BALANCE = "low-balance"
KIND_CHECK_FAILED = "check-failed"


@dataclass(frozen=True)
class SecurityWarning:
    kind: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


def _normalize(address: Optional[str]) -> str:
    return (address or "").strip().lower()


def check_owner_executor(
    owner_address: Optional[str],
    executor_address: Optional[str],
    private_key: Optional[str],
) -> Optional[SecurityWarning]:
    """Warn when the owner coincides with the executor (or, absent one, the signer)."""
    owner = _normalize(owner_address)
    if not owner:
        return None
    executor = _normalize(executor_address)
    if not executor and private_key:
        executor = Account.from_key(private_key).address.lower()
    if executor and executor == owner:
        return SecurityWarning(
            kind=KIND_OWNER_IS_EXECUTOR,
            message="Owner and executor addresses coincide",
            details={"owner": owner, "executor": executor},
        )
    return None


def check_balance(
    web3, private_key: Optional[str], min_required_eth: float
) -> Optional[SecurityWarning]:
    """Warn when the signer balance is below min_required_eth."""
    if web3 is None or not private_key:
        return None
    address = Account.from_key(private_key).address
    balance_wei = int(web3.eth.get_balance(address))
    min_wei = int(Decimal(str(min_required_eth)) * WEI_PER_ETH)
    if balance_wei < min_wei:
        return SecurityWarning(
            kind=KIND_LOW_BALANCE,
            message="Low wallet balance",
            details={
                "address": address,
                "balance_wei": balance_wei,
                "min_required_eth": min_required_eth,
            },
        )
    return None


def check_security_warnings(
    web3=None,
    private_key: Optional[str] = None,
    owner_address: Optional[str] = None,
    executor_address: Optional[str] = None,
    min_required_eth: float = 0.01,
) -> List[SecurityWarning]:
    """
    Run all pre-flight checks.

    Returns:
        Warnings found; never raises and never blocks execution
    """
    warnings: List[SecurityWarning] = []
    checks = (
        ("owner-executor", lambda: check_owner_executor(owner_address, executor_address, private_key)),
        ("balance", lambda: check_balance(web3, private_key, min_required_eth)),
    )
    for name, check in checks:
        try:
            warning = check()
        except Exception as e:
            warning = SecurityWarning(
                kind=KIND_CHECK_FAILED,
                message=f"{name} check failed: {e}",
                details={"check": name, "error": str(e)},
            )
        if warning is not None:
            logger.warning(f"{warning.message} {warning.details}")
            warnings.append(warning)
    return warnings
