"""
Signed-transaction submission: private relay first, primary provider second.

RelayThenDirectStrategy owns the fallback policy so it can be exercised on its
own; at most one of the two paths reaches the network per attempt.
"""

from dataclasses import dataclass
from typing import Optional, Union

import requests
from web3 import Web3

from ..exceptions import ExecutionError, RelayError
from ..utils import get_logger

logger = get_logger(__name__)

RawTransaction = Union[bytes, str]


@dataclass(frozen=True)
class SubmissionOutcome:
    tx_hash: str
    relay_used: bool


def _raw_hex(raw_tx: RawTransaction) -> str:
    if isinstance(raw_tx, str):
        return raw_tx if raw_tx.startswith("0x") else "0x" + raw_tx
    return Web3.to_hex(raw_tx)


class RelaySubmitter:
    """POSTs eth_sendRawTransaction to a JSON-RPC relay endpoint."""

    def __init__(self, relay_url: str, timeout_seconds: float = 5.0):
        self.relay_url = relay_url
        self.timeout_seconds = timeout_seconds

    def send(self, raw_tx: RawTransaction) -> str:
        """
        Submit through the relay.

        Returns:
            Transaction hash reported by the relay

        Raises:
            RelayError: On transport failure, a non-JSON body, or a response
                without a result field
        """
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_sendRawTransaction",
            "params": [_raw_hex(raw_tx)],
            "id": 1,
        }
        try:
            response = requests.post(
                self.relay_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            status = getattr(getattr(e, "response", None), "status_code", None)
            raise RelayError(
                f"Relay request failed: {e}", relay_url=self.relay_url, status_code=status
            ) from e
        except ValueError as e:
            raise RelayError(
                f"Relay returned a non-JSON response: {e}", relay_url=self.relay_url
            ) from e

        result = body.get("result") if isinstance(body, dict) else None
        if not result:
            error = body.get("error") if isinstance(body, dict) else body
            raise RelayError(
                f"Relay returned no result: {error}",
                relay_url=self.relay_url,
                details={"error": error},
            )
        return result


class DirectSubmitter:
    """Submits through the primary provider's eth_sendRawTransaction."""

    def __init__(self, web3):
        self.web3 = web3

    def send(self, raw_tx: RawTransaction) -> str:
        try:
            tx_hash = self.web3.eth.send_raw_transaction(raw_tx)
        except Exception as e:
            raise ExecutionError(f"Direct submission failed: {e}") from e
        return Web3.to_hex(tx_hash)


class RelayThenDirectStrategy:
    """
    Two-step submission strategy.

    Step one is the relay (skipped when none is configured); any RelayError
    falls through to step two, direct submission. Errors from direct
    submission propagate to the caller as ExecutionError.
    """

    def __init__(self, direct: DirectSubmitter, relay: Optional[RelaySubmitter] = None):
        self.direct = direct
        self.relay = relay

    @classmethod
    def from_config(cls, web3, config) -> "RelayThenDirectStrategy":
        relay = None
        if config.relay_url:
            relay = RelaySubmitter(config.relay_url, config.relay_timeout_seconds)
        return cls(DirectSubmitter(web3), relay)

    def submit(self, raw_tx: RawTransaction) -> SubmissionOutcome:
        if self.relay is not None:
            try:
                tx_hash = self.relay.send(raw_tx)
                logger.info(f"Transaction submitted via relay: {tx_hash}")
                return SubmissionOutcome(tx_hash=tx_hash, relay_used=True)
            except RelayError as e:
                logger.warning(f"Relay failed, falling back to direct submission: {e}")

        tx_hash = self.direct.send(raw_tx)
        logger.info(f"Transaction submitted directly: {tx_hash}")
        return SubmissionOutcome(tx_hash=tx_hash, relay_used=False)
