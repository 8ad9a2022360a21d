"""Shared pytest fixtures for election-deployer tests."""

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest

from election_deployer.exceptions import ChainClientError, TransactionFailedError
from election_deployer.types import PendingDeployment

# Hardhat's first default account; public test key
HARDHAT_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
HARDHAT_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

FIXED_TIME = datetime(2024, 3, 1, 12, 30, 0, tzinfo=timezone.utc)


class FakeChainClient:
    """In-memory chain client that records every call."""

    def __init__(
        self,
        deployer: str = HARDHAT_ADDRESS,
        balance: Decimal = Decimal("1"),
        fail_on: Iterable[str] = (),
        address_offset: int = 0x1000,
        balance_error: bool = False,
    ):
        self.deployer = deployer
        self.balance = balance
        self.fail_on = set(fail_on)
        self.balance_error = balance_error
        self.calls: List[tuple] = []
        self.deploy_calls: List[tuple] = []
        self.confirmed: Dict[str, str] = {}
        self._next_address = address_offset

    def resolve_signers(self) -> str:
        self.calls.append(("resolve_signers",))
        return self.deployer

    def get_balance(self, address: str) -> Decimal:
        self.calls.append(("get_balance", address))
        if self.balance_error:
            raise ChainClientError("eth_getBalance failed with status 503")
        return self.balance

    def deploy_contract(self, contract_name: str, constructor_args: Any) -> PendingDeployment:
        self.calls.append(("deploy_contract", contract_name))
        self.deploy_calls.append((contract_name, list(constructor_args)))
        if contract_name in self.fail_on:
            raise TransactionFailedError(f"{contract_name} transaction reverted")
        return PendingDeployment(
            contract_name=contract_name,
            transaction_hash="0x" + format(len(self.deploy_calls), "064x"),
        )

    def await_confirmation(self, pending: PendingDeployment) -> str:
        self.calls.append(("await_confirmation", pending.contract_name))
        address = "0x" + format(self._next_address, "040x")
        self._next_address += 1
        self.confirmed[pending.contract_name] = address
        return address

    def args_for(self, contract_name: str) -> Optional[List[Any]]:
        for name, args in self.deploy_calls:
            if name == contract_name:
                return args
        return None

    def called(self, method: str) -> bool:
        return any(call[0] == method for call in self.calls)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def artifacts_dir(fixtures_dir: Path) -> Path:
    """Return the path to the sample hardhat artifacts."""
    return fixtures_dir / "artifacts"


@pytest.fixture
def sample_record_json(fixtures_dir: Path) -> Dict[str, Any]:
    """Load and return the sample sepolia deployment record."""
    with open(fixtures_dir / "deployments" / "sepolia" / "deployment.json") as f:
        return json.load(f)


@pytest.fixture
def deployments_root(tmp_path: Path) -> Path:
    """Create a temporary deployments directory for tests."""
    root = tmp_path / "deployments"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def fake_client() -> FakeChainClient:
    """Return a fresh recording chain client."""
    return FakeChainClient()


@pytest.fixture
def client_factory() -> Callable[..., FakeChainClient]:
    """Build recording chain clients with custom behaviour."""
    return FakeChainClient


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_TIME."""
    return lambda: FIXED_TIME


@pytest.fixture
def credentials_env() -> Dict[str, Optional[str]]:
    """Valid credentials for a network that requires them."""
    return {
        "PRIVATE_KEY": HARDHAT_PRIVATE_KEY,
        "ALCHEMY_API_KEY": "abc123",
        "RPC_URL": None,
        "DEPLOYMENTS_DIR": None,
        "ARTIFACTS_DIR": None,
    }


@pytest.fixture
def empty_env() -> Dict[str, Optional[str]]:
    """No recognized environment values at all."""
    return {
        "PRIVATE_KEY": None,
        "ALCHEMY_API_KEY": None,
        "RPC_URL": None,
        "DEPLOYMENTS_DIR": None,
        "ARTIFACTS_DIR": None,
    }
