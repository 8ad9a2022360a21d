"""Deployer account generation for election-deployer."""

from dataclasses import dataclass
from typing import List

from eth_account import Account

from .constants import PRIVATE_KEY_ENV


@dataclass(frozen=True)
class GeneratedAccount:
    """A freshly generated key pair. Development use only."""

    address: str
    private_key: str  # 0x-prefixed hex


def generate_account() -> GeneratedAccount:
    """Create a random account to use as the deployer."""
    account = Account.create()
    return GeneratedAccount(
        address=account.address,
        private_key="0x" + bytes(account.key).hex(),
    )


def env_lines(account: GeneratedAccount) -> List[str]:
    """Lines to add to .env so the deployer and backend use the account."""
    return [
        f"{PRIVATE_KEY_ENV}={account.private_key}",
        f"ADMIN_WALLET_PRIVATE_KEY={account.private_key}",
        f"ADMIN_WALLET_ADDRESS={account.address}",
    ]
