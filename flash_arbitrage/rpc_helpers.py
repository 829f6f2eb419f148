"""
Deadline-bounded wrappers around blocking JSON-RPC calls.

web3's HTTP provider is synchronous; each call is pushed to the default thread
pool and awaited with a timeout. Once the timeout fires the pending call's
eventual result is discarded.
"""

import asyncio
import functools
from typing import Any, Callable, Optional, TypeVar

from .exceptions import RpcTimeoutError
from .utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _label_for(func: Callable[..., Any], label: Optional[str]) -> str:
    if label:
        return label
    return getattr(func, "__name__", None) or repr(func)


async def run_blocking(
    func: Callable[..., T],
    *args: Any,
    timeout: Optional[float] = None,
    label: Optional[str] = None,
) -> T:
    """
    Run a blocking call in the executor and await it with a deadline.

    Args:
        func: Blocking callable (e.g. web3.eth.estimate_gas)
        *args: Positional arguments for func
        timeout: Seconds to wait, None for no deadline
        label: Name used in errors and logs

    Returns:
        Whatever func returns

    Raises:
        RpcTimeoutError: If the call does not finish within timeout
        Exception: Anything func itself raises
    """
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, functools.partial(func, *args))
    try:
        return await asyncio.wait_for(future, timeout=timeout)
    except asyncio.TimeoutError:
        name = _label_for(func, label)
        raise RpcTimeoutError(
            f"{name} timed out after {timeout:.3f}s", endpoint=name
        ) from None


async def call_with_fallback(
    func: Callable[..., T],
    *args: Any,
    timeout: float,
    fallback: T,
    label: Optional[str] = None,
) -> T:
    """
    Execute a blocking call with a deadline, resolving to fallback on timeout or error.

    Args:
        func: Blocking callable
        *args: Positional arguments for func
        timeout: Seconds to wait
        fallback: Value returned when the call times out or raises
        label: Name used in logs

    Returns:
        The call result, or fallback
    """
    name = _label_for(func, label)
    try:
        return await run_blocking(func, *args, timeout=timeout, label=name)
    except RpcTimeoutError:
        logger.warning(f"{name} timed out after {timeout * 1000:.0f}ms, using fallback")
        return fallback
    except Exception as e:
        logger.warning(f"{name} failed ({e}), using fallback")
        return fallback
