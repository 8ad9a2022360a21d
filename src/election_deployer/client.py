"""Chain client capability for election-deployer."""

import itertools
import logging
import time
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

import requests
from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_account import Account
from eth_utils import to_checksum_address

from .artifacts import load_contract_artifact
from .constants import WEI_PER_ETHER
from .exceptions import ChainClientError, TransactionFailedError
from .types import PendingDeployment

logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    """Operations the deployment pipeline needs from a chain."""

    def resolve_signers(self) -> str:
        """Return the deployer address."""
        ...

    def get_balance(self, address: str) -> Decimal:
        """Return the balance of address in ETH."""
        ...

    def deploy_contract(self, contract_name: str, constructor_args: Sequence[Any]) -> PendingDeployment:
        """Submit a deployment transaction."""
        ...

    def await_confirmation(self, pending: PendingDeployment) -> str:
        """Block until the deployment is confirmed and return the contract address."""
        ...


# Headroom on top of eth_estimateGas
GAS_MULTIPLIER_NUMERATOR = 12
GAS_MULTIPLIER_DENOMINATOR = 10


def _quantity(value: Any, what: str) -> int:
    """Parse a hex quantity from an RPC result."""
    if isinstance(value, int):
        return value
    try:
        return int(value, 16)
    except (TypeError, ValueError) as e:
        raise ChainClientError(f"{what} is not a hex quantity: {value!r}") from e


def _checksum(value: Any, what: str) -> str:
    try:
        return to_checksum_address(value)
    except (TypeError, ValueError) as e:
        raise ChainClientError(f"{what} is not an address: {value!r}") from e


class JsonRpcChainClient:
    """
    Chain client speaking JSON-RPC 2.0 over HTTP.

    With a private key, transactions are signed locally with eth-account and
    sent raw. Without one, the node's first unlocked account deploys via
    eth_sendTransaction (hardhat and other local development nodes).
    """

    def __init__(
        self,
        rpc_url: str,
        artifacts_dir: Optional[Union[Path, str]] = None,
        private_key: Optional[str] = None,
        poll_interval: float = 1.0,
        request_timeout: float = 30,
        confirmation_timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            rpc_url: JSON-RPC endpoint
            artifacts_dir: Compiled artifacts directory (defaults to ./artifacts)
            private_key: Hex private key of the deployer, if signing locally
            poll_interval: Seconds between receipt polls
            request_timeout: HTTP timeout per RPC request
            confirmation_timeout: Give up waiting for a receipt after this many
                                  seconds. None waits indefinitely.
        """
        self.rpc_url = rpc_url
        self.artifacts_dir = artifacts_dir
        self.poll_interval = poll_interval
        self.request_timeout = request_timeout
        self.confirmation_timeout = confirmation_timeout
        self._account = Account.from_key(private_key) if private_key else None
        self._ids = itertools.count(1)
        self._deployer: Optional[str] = None

    def _call(self, method: str, params: List[Any]) -> Any:
        """
        Make a JSON-RPC call.

        Raises:
            ChainClientError: On network errors, HTTP errors, or RPC error responses
        """
        try:
            response = requests.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": next(self._ids),
                },
                timeout=self.request_timeout,
            )
        except requests.RequestException as e:
            raise ChainClientError(f"Network error during {method}: {e}") from e

        if response.status_code != 200:
            raise ChainClientError(f"{method} failed with status {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise ChainClientError(f"{method} returned a non-JSON response") from e
        if not isinstance(result, dict):
            raise ChainClientError(f"{method} returned a malformed response: {result!r}")

        if "error" in result:
            error = result["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ChainClientError(f"{method} returned RPC error: {message}")

        return result.get("result")

    def _call_quantity(self, method: str, params: List[Any]) -> int:
        """Make a JSON-RPC call whose result is a hex quantity."""
        return _quantity(self._call(method, params), method)

    def resolve_signers(self) -> str:
        if self._deployer is not None:
            return self._deployer

        if self._account is not None:
            self._deployer = self._account.address
        else:
            accounts = self._call("eth_accounts", [])
            if not isinstance(accounts, list) or not accounts:
                raise ChainClientError("Node exposes no accounts and no private key was given")
            self._deployer = _checksum(accounts[0], "eth_accounts")

        return self._deployer

    def get_balance(self, address: str) -> Decimal:
        wei = self._call_quantity("eth_getBalance", [address, "latest"])
        return Decimal(wei) / WEI_PER_ETHER

    def build_deploy_data(self, contract_name: str, constructor_args: Sequence[Any]) -> str:
        """
        Creation bytecode followed by the ABI-encoded constructor arguments.

        Raises:
            ArtifactNotFoundError: If the contract has not been compiled
            ChainClientError: If the arguments do not match the constructor
        """
        artifact = load_contract_artifact(contract_name, self.artifacts_dir)
        types = list(artifact.constructor_types)
        if len(types) != len(constructor_args):
            raise ChainClientError(
                f"{contract_name} constructor expects {len(types)} arguments, "
                f"got {len(constructor_args)}"
            )
        if not types:
            return artifact.bytecode
        try:
            encoded = encode(types, list(constructor_args))
        except EncodingError as e:
            raise ChainClientError(f"{contract_name} constructor arguments cannot be encoded: {e}") from e
        return artifact.bytecode + encoded.hex()

    def deploy_contract(self, contract_name: str, constructor_args: Sequence[Any]) -> PendingDeployment:
        data = self.build_deploy_data(contract_name, constructor_args)
        deployer = self.resolve_signers()

        try:
            if self._account is not None:
                tx_hash = self._send_signed(deployer, data)
            else:
                tx_hash = self._call("eth_sendTransaction", [{"from": deployer, "data": data}])
        except TransactionFailedError:
            raise
        except ChainClientError as e:
            raise TransactionFailedError(f"{contract_name} deployment rejected: {e}") from e

        if not isinstance(tx_hash, str) or not tx_hash:
            raise TransactionFailedError(f"{contract_name} deployment returned no transaction hash")

        return PendingDeployment(contract_name=contract_name, transaction_hash=tx_hash)

    def _send_signed(self, deployer: str, data: str) -> str:
        nonce = self._call_quantity("eth_getTransactionCount", [deployer, "pending"])
        gas_price = self._call_quantity("eth_gasPrice", [])
        gas_estimate = self._call_quantity("eth_estimateGas", [{"from": deployer, "data": data}])
        chain_id = self._call_quantity("eth_chainId", [])

        transaction: Dict[str, Any] = {
            "nonce": nonce,
            "gasPrice": gas_price,
            "gas": gas_estimate * GAS_MULTIPLIER_NUMERATOR // GAS_MULTIPLIER_DENOMINATOR,
            "value": 0,
            "data": data,
            "chainId": chain_id,
        }
        signed = self._account.sign_transaction(transaction)
        raw = "0x" + bytes(signed.raw_transaction).hex()
        return self._call("eth_sendRawTransaction", [raw])

    def await_confirmation(self, pending: PendingDeployment) -> str:
        started = time.monotonic()
        while True:
            receipt = self._call("eth_getTransactionReceipt", [pending.transaction_hash])
            if receipt is not None:
                break
            if (
                self.confirmation_timeout is not None
                and time.monotonic() - started > self.confirmation_timeout
            ):
                raise ChainClientError(
                    f"Timed out waiting for {pending.contract_name} "
                    f"transaction {pending.transaction_hash}"
                )
            logger.debug("Waiting for confirmation of %s...", pending.transaction_hash)
            time.sleep(self.poll_interval)

        if not isinstance(receipt, dict):
            raise ChainClientError(f"Malformed receipt for {pending.transaction_hash}: {receipt!r}")

        status = receipt.get("status")
        if status is not None and _quantity(status, "receipt status") == 0:
            raise TransactionFailedError(
                f"{pending.contract_name} transaction {pending.transaction_hash} reverted"
            )

        address = receipt.get("contractAddress")
        if not address:
            raise TransactionFailedError(
                f"Receipt for {pending.transaction_hash} has no contract address"
            )
        return _checksum(address, "contractAddress")
