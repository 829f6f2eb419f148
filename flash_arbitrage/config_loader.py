"""
Configuration loading for the flash-loan arbitrage bot.

Resolves the YAML profile, applies environment overrides and validates the
result into a RuntimeConfig. Secrets stay in the environment and are handed
out separately through load_secrets().
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from .config_schema import RuntimeConfig
from .exceptions import ConfigurationError, ValidationError

# env var -> config key
ENV_OVERRIDES = {
    "RPC_URL": "rpc_url",
    "NETWORK": "network",
    "RELAY_URL": "relay_url",
    "EXECUTOR_ADDRESS": "executor_address",
    "LOSS_LIMIT_WEI": "loss_limit_wei",
}


@dataclass(frozen=True)
class Secrets:
    """Signing material read from the environment only."""

    private_key: Optional[str] = None
    owner_address: Optional[str] = None

    def __repr__(self) -> str:
        masked = "set" if self.private_key else "unset"
        return f"Secrets(private_key={masked}, owner_address={self.owner_address!r})"


def _clean_env_value(value: str) -> str:
    """Strip whitespace, quotes and backticks that leak in from copy-pasted .env files."""
    return value.replace("`", "").replace('"', "").replace("'", "").strip()


def resolve_config_path(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """
    Find the configuration file.

    Order: explicit path, $CONFIG_PATH, config/<$FL_CONFIG or default>.yaml in
    the working directory, then in its parent.
    """
    env = os.environ if environ is None else environ

    if config_path:
        return Path(config_path)

    custom = env.get("CONFIG_PATH")
    if custom and Path(custom).exists():
        return Path(custom)

    filename = f"{env.get('FL_CONFIG', 'default')}.yaml"
    local = Path.cwd() / "config" / filename
    if local.exists():
        return local
    return Path.cwd().parent / "config" / filename


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and parse YAML configuration file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")

    if config_dict is None:
        raise ConfigurationError(f"Empty configuration file: {config_path}")
    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    return config_dict


def apply_env_overrides(
    config_dict: Dict[str, Any], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Return a copy of config_dict with non-empty environment overrides applied."""
    env = os.environ if environ is None else environ
    result = dict(config_dict)
    for env_key, config_key in ENV_OVERRIDES.items():
        raw = env.get(env_key)
        if raw is None:
            continue
        value = _clean_env_value(raw)
        if value:
            result[config_key] = value
    return result


def validate_runtime_config(config_dict: Dict[str, Any]) -> RuntimeConfig:
    """
    Validate a configuration dictionary.

    Raises:
        ValidationError: If the dictionary does not satisfy the schema
    """
    try:
        return RuntimeConfig(**config_dict)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Configuration validation failed: {e}", {"errors": e.errors()}
        )


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> RuntimeConfig:
    """
    Load, override and validate the runtime configuration.

    Args:
        config_path: Explicit YAML path; resolved from the environment if None
        environ: Environment mapping (defaults to os.environ)
        use_dotenv: Load a .env file into os.environ first

    Returns:
        Validated RuntimeConfig

    Raises:
        ConfigurationError: If the file is missing or unreadable
        ValidationError: If the merged configuration is invalid
    """
    if use_dotenv:
        load_dotenv()

    path = resolve_config_path(config_path, environ)
    config_dict = load_yaml_config(path)
    return validate_runtime_config(apply_env_overrides(config_dict, environ))


def load_secrets(environ: Optional[Mapping[str, str]] = None) -> Secrets:
    """Read PRIVATE_KEY and OWNER_ADDRESS from the environment."""
    env = os.environ if environ is None else environ
    private_key = _clean_env_value(env.get("PRIVATE_KEY", "")) or None
    owner_address = _clean_env_value(env.get("OWNER_ADDRESS", "")) or None
    return Secrets(private_key=private_key, owner_address=owner_address)
