"""Data types and dataclasses for election-deployer."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from .client import ChainClient


@dataclass(frozen=True)
class NetworkProfile:
    """Static description of a deployment target."""

    name: str
    requires_credentials: bool = False
    min_balance: Decimal = Decimal("0")
    faucet_hint: Optional[str] = None
    chain_id: Optional[int] = None
    rpc_url: Optional[str] = None  # may contain an {api_key} placeholder


@dataclass(frozen=True)
class ContractRef:
    """Constructor argument standing for the deployed address of another contract."""

    name: str


@dataclass(frozen=True)
class ContractSpec:
    """Declarative description of one contract to deploy."""

    name: str
    constructor_args: Tuple[Any, ...] = ()  # literals or ContractRef
    depends_on: Tuple[str, ...] = ()

    def references(self) -> List[str]:
        """Names referenced by constructor arguments, in argument order."""
        return [arg.name for arg in self.constructor_args if isinstance(arg, ContractRef)]


@dataclass(frozen=True)
class DeployedContract:
    """A contract confirmed on-chain during the current run."""

    name: str
    address: str  # Checksummed address
    deployed_at: datetime
    constructor_args: Tuple[Any, ...] = ()
    transaction_hash: Optional[str] = None


@dataclass
class DeploymentRecord:
    """Durable record of the latest successful run on a network."""

    network: str
    deployer: str
    contracts: Dict[str, str]  # name -> address, in deployment order
    timestamp: str  # ISO-8601, UTC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "deployer": self.deployer,
            "contracts": dict(self.contracts),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        return cls(
            network=data["network"],
            deployer=data["deployer"],
            contracts=dict(data["contracts"]),
            timestamp=data["timestamp"],
        )


@dataclass(frozen=True)
class DeploymentContext:
    """Everything a pipeline component needs about the current run."""

    profile: NetworkProfile
    deployer: str
    client: "ChainClient"

    @property
    def network(self) -> str:
        return self.profile.name


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract loaded from a hardhat artifact file."""

    name: str
    abi: List[Dict[str, Any]]
    bytecode: str  # 0x-prefixed creation bytecode
    constructor_types: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PendingDeployment:
    """Handle for a submitted deployment transaction."""

    contract_name: str
    transaction_hash: str
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)
