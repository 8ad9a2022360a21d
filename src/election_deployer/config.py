"""Environment loading and configuration validation for election-deployer."""

import logging
import os
import re
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv import dotenv_values

from .constants import (
    API_KEY_ENV,
    PLACEHOLDER_VALUES,
    PRIVATE_KEY_ENV,
    RECOGNIZED_ENV_KEYS,
    REQUIRED_CREDENTIAL_KEYS,
    RPC_URL_ENV,
)
from .exceptions import ConfigError
from .types import NetworkProfile

logger = logging.getLogger(__name__)

_PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")


def load_environment(
    dotenv_path: Optional[Union[Path, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Optional[str]]:
    """
    Collect recognized environment values.

    Values from the process environment take precedence over the .env file.

    Args:
        dotenv_path: Path to a .env file (defaults to ./.env if it exists)
        environ: Process environment (defaults to os.environ)

    Returns:
        Dictionary with every recognized key; absent keys map to None
    """
    if dotenv_path is None:
        dotenv_path = Path.cwd() / ".env"
    if environ is None:
        environ = os.environ

    file_values: Dict[str, Optional[str]] = {}
    if Path(dotenv_path).exists():
        logger.debug("Loading environment from %s", dotenv_path)
        file_values = dotenv_values(dotenv_path)

    env: Dict[str, Optional[str]] = {}
    for key in RECOGNIZED_ENV_KEYS:
        value = environ.get(key)
        if value is None:
            value = file_values.get(key)
        env[key] = value
    return env


def is_placeholder(value: Optional[str]) -> bool:
    """Return True if value is one of the documentation sample values."""
    if value is None:
        return False
    return value.strip() in PLACEHOLDER_VALUES


def validate_config(profile: NetworkProfile, env: Mapping[str, Optional[str]]) -> None:
    """
    Check that credentials required by the target network are usable.

    Networks that do not require credentials are not checked at all.

    Args:
        profile: Target network profile
        env: Recognized environment values

    Raises:
        ConfigError: For the first required key (credential before API key)
                     that is missing, blank, a placeholder, or malformed
    """
    if not profile.requires_credentials:
        logger.debug("Skipping configuration checks for %s", profile.name)
        return

    for key in REQUIRED_CREDENTIAL_KEYS:
        value = env.get(key)
        if value is None or not value.strip():
            raise ConfigError(key, profile.name, "missing")
        if is_placeholder(value):
            raise ConfigError(key, profile.name, "placeholder")
        if key == PRIVATE_KEY_ENV and not _PRIVATE_KEY_PATTERN.match(value.strip()):
            raise ConfigError(key, profile.name, "malformed")

    logger.info("Configuration validated for %s", profile.name)


def resolve_rpc_url(profile: NetworkProfile, env: Mapping[str, Optional[str]]) -> str:
    """
    Determine the JSON-RPC endpoint for a network.

    Args:
        profile: Target network profile
        env: Recognized environment values

    Returns:
        RPC URL ($RPC_URL if set, otherwise the profile URL with the API key filled in)

    Raises:
        ConfigError: If no endpoint is known for the network
    """
    override = env.get(RPC_URL_ENV)
    if override and override.strip():
        return override.strip()

    if profile.rpc_url is None:
        raise ConfigError(RPC_URL_ENV, profile.name, "missing")

    if "{api_key}" in profile.rpc_url:
        api_key = env.get(API_KEY_ENV)
        if not api_key or not api_key.strip():
            raise ConfigError(API_KEY_ENV, profile.name, "missing")
        if is_placeholder(api_key):
            raise ConfigError(API_KEY_ENV, profile.name, "placeholder")
        return profile.rpc_url.format(api_key=api_key.strip())

    return profile.rpc_url


def usable_private_key(env: Mapping[str, Optional[str]]) -> Optional[str]:
    """
    Return the configured private key if it is well-formed, None otherwise.

    Local networks fall back to the node's own accounts when this is None.
    """
    value = env.get(PRIVATE_KEY_ENV)
    if value is None or is_placeholder(value):
        return None
    value = value.strip()
    if not _PRIVATE_KEY_PATTERN.match(value):
        return None
    return value if value.startswith("0x") else "0x" + value
