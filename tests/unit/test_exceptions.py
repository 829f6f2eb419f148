"""Tests for the exceptions module."""

from flash_arbitrage.exceptions import (
    ConfigurationError,
    ExecutionError,
    FlashArbitrageError,
    NetworkError,
    RelayError,
    RpcTimeoutError,
    SafetyError,
    SimulationError,
    ValidationError,
)


def test_base_exception():
    """Test the base exception class."""
    error = FlashArbitrageError("Test error")
    assert str(error) == "Test error"
    assert error.details == {}

    error_with_details = FlashArbitrageError("Test error", {"key": "value"})
    assert error_with_details.details == {"key": "value"}


def test_configuration_error():
    """Test configuration error."""
    error = ConfigurationError("Config error", {"config_file": "test.yaml"})
    assert str(error) == "Config error"
    assert error.details["config_file"] == "test.yaml"
    assert isinstance(error, FlashArbitrageError)


def test_validation_and_simulation_errors():
    assert isinstance(ValidationError("bad"), FlashArbitrageError)
    assert isinstance(SimulationError("missing-executor-address"), FlashArbitrageError)
    assert isinstance(SafetyError("inconsistent"), FlashArbitrageError)


def test_execution_error():
    """Test execution error carries the transaction hash."""
    error = ExecutionError("Submission failed", tx_hash="0xabc")
    assert error.tx_hash == "0xabc"
    assert isinstance(error, FlashArbitrageError)


def test_network_errors():
    """Test network error hierarchy."""
    error = NetworkError("Connection failed", endpoint="https://rpc", status_code=503)
    assert error.endpoint == "https://rpc"
    assert error.status_code == 503

    timeout = RpcTimeoutError("estimate_gas timed out after 0.800s", endpoint="estimate_gas")
    assert isinstance(timeout, NetworkError)

    relay = RelayError("Relay returned no result", relay_url="https://relay", status_code=400)
    assert isinstance(relay, NetworkError)
    assert relay.relay_url == "https://relay"
    assert relay.endpoint == "https://relay"
    assert relay.status_code == 400
