"""Network profile registry for election-deployer."""

from typing import List

from .constants import NETWORK_PROFILES
from .types import NetworkProfile


def get_network_profile(name: str) -> NetworkProfile:
    """
    Look up the profile of a deployment target.

    Args:
        name: Network name (e.g., "localhost", "sepolia")

    Returns:
        NetworkProfile for the network. Unknown names get a profile that
        requires no credentials and has no balance threshold.
    """
    config = NETWORK_PROFILES.get(name)
    if config is None:
        return NetworkProfile(name=name)

    return NetworkProfile(
        name=name,
        requires_credentials=config["requires_credentials"],
        min_balance=config["min_balance"],
        faucet_hint=config["faucet_hint"],
        chain_id=config["chain_id"],
        rpc_url=config["rpc_url"],
    )


def known_networks() -> List[str]:
    """Return the names of all networks in the static table."""
    return list(NETWORK_PROFILES.keys())
