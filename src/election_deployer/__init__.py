"""
election-deployer: deploy the election contract suite and record where it went
"""

from importlib.metadata import PackageNotFoundError, version

from .client import ChainClient, JsonRpcChainClient
from .exceptions import (
    ArtifactNotFoundError,
    ChainClientError,
    ConfigError,
    DeployerError,
    DeploymentError,
    InsufficientBalanceWarning,
    InvalidNetworkNameError,
    PlanDefinitionError,
    RecordNotFoundError,
    RecordWriteError,
    TransactionFailedError,
    UnresolvedDependencyError,
)
from .networks import get_network_profile
from .persistence import load_deployment_record, save_deployment_record
from .pipeline import PipelineResult, PipelineStatus, run_pipeline
from .plan import contract, election_plan, ref
from .sequencer import DeploymentSequencer
from .types import (
    ContractRef,
    ContractSpec,
    DeployedContract,
    DeploymentContext,
    DeploymentRecord,
    NetworkProfile,
)

try:
    __version__ = version("election-deployer")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "run_pipeline",
    "PipelineResult",
    "PipelineStatus",
    "DeploymentSequencer",
    "ChainClient",
    "JsonRpcChainClient",
    "get_network_profile",
    "election_plan",
    "contract",
    "ref",
    "save_deployment_record",
    "load_deployment_record",
    "NetworkProfile",
    "ContractRef",
    "ContractSpec",
    "DeployedContract",
    "DeploymentContext",
    "DeploymentRecord",
    "DeployerError",
    "ConfigError",
    "PlanDefinitionError",
    "UnresolvedDependencyError",
    "DeploymentError",
    "ChainClientError",
    "TransactionFailedError",
    "ArtifactNotFoundError",
    "RecordNotFoundError",
    "RecordWriteError",
    "InvalidNetworkNameError",
    "InsufficientBalanceWarning",
]
