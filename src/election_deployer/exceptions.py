"""Custom exception classes for election-deployer."""

from decimal import Decimal
from typing import Optional


class DeployerError(Exception):
    """Base exception for deployment pipeline errors."""

    pass


class ConfigError(DeployerError, ValueError):
    """Raised when a required environment value is missing, a placeholder, or malformed."""

    def __init__(self, missing_key: str, network: str = "", reason: str = "missing"):
        self.missing_key = missing_key
        self.network = network
        self.reason = reason
        where = f" for network '{network}'" if network else ""
        super().__init__(f"{missing_key} is {reason}{where}")


class PlanDefinitionError(DeployerError, ValueError):
    """Raised when a deployment plan is authored incorrectly."""

    pass


class UnresolvedDependencyError(PlanDefinitionError):
    """Raised when a contract references a dependency that is not deployed before it."""

    def __init__(self, contract_name: str, dependency: str):
        self.contract_name = contract_name
        self.dependency = dependency
        super().__init__(
            f"Contract '{contract_name}' references '{dependency}', "
            "which is not deployed before it"
        )


class ChainClientError(DeployerError, RuntimeError):
    """Raised when the chain client cannot complete an RPC call."""

    pass


class TransactionFailedError(ChainClientError):
    """Raised when a submitted transaction is rejected or reverted."""

    pass


class DeploymentError(DeployerError, RuntimeError):
    """Raised when a deployment step fails and the run must halt."""

    def __init__(self, contract_name: str, network: str, reason: str):
        self.contract_name = contract_name
        self.network = network
        self.reason = reason
        super().__init__(
            f"Deployment of '{contract_name}' on network '{network}' failed: {reason}"
        )


class ArtifactNotFoundError(DeployerError, FileNotFoundError):
    """Raised when a compiled contract artifact is not found."""

    pass


class RecordNotFoundError(DeployerError, FileNotFoundError):
    """Raised when no deployment record exists for a network."""

    pass


class RecordWriteError(DeployerError, OSError):
    """Raised when a deployment record cannot be written."""

    pass


class InvalidNetworkNameError(DeployerError, ValueError):
    """Raised when a network name cannot be used as a record directory."""

    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Invalid network name '{network}': must be a single path component")


class InsufficientBalanceWarning(UserWarning):
    """Deployer balance is below the network's recommended minimum."""

    def __init__(
        self,
        network: str,
        balance: Decimal,
        minimum: Decimal,
        faucet_hint: Optional[str] = None,
    ):
        self.network = network
        self.balance = balance
        self.minimum = minimum
        self.faucet_hint = faucet_hint
        message = (
            f"Account balance on '{network}' is low: {balance} ETH "
            f"(minimum recommended: {minimum} ETH)"
        )
        if faucet_hint:
            message += f". Fund your account: {faucet_hint}"
        super().__init__(message)
