"""Ordered contract deployment for election-deployer."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .exceptions import ArtifactNotFoundError, ChainClientError, DeploymentError, UnresolvedDependencyError
from .plan import validate_plan
from .types import ContractRef, ContractSpec, DeployedContract, DeploymentContext

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_constructor_args(spec: ContractSpec, addresses: Mapping[str, str]) -> List[Any]:
    """
    Substitute contract references with recorded addresses.

    Args:
        spec: Contract to resolve arguments for
        addresses: Addresses of contracts deployed so far in this run

    Returns:
        Constructor arguments ready to be encoded

    Raises:
        UnresolvedDependencyError: If a referenced contract is not deployed yet
    """
    resolved = []
    for arg in spec.constructor_args:
        if isinstance(arg, ContractRef):
            if arg.name not in addresses:
                raise UnresolvedDependencyError(spec.name, arg.name)
            resolved.append(addresses[arg.name])
        else:
            resolved.append(arg)
    return resolved


class DeploymentSequencer:
    """Deploys a plan strictly in order, one confirmed contract at a time."""

    def __init__(
        self,
        context: DeploymentContext,
        specs: Sequence[ContractSpec],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the sequencer.

        Args:
            context: Current deployment context
            specs: Ordered contract specs (validated here)
            clock: Returns the current time (defaults to UTC now)

        Raises:
            PlanDefinitionError: If the plan cannot be deployed in the given order
        """
        self.context = context
        self.specs = validate_plan(specs)
        self._clock = clock or _utc_now
        self.deployed: List[DeployedContract] = []

    @property
    def addresses(self) -> Dict[str, str]:
        """Addresses deployed so far, in deployment order."""
        return {c.name: c.address for c in self.deployed}

    def run(self) -> List[DeployedContract]:
        """
        Deploy every contract in the plan.

        Each step waits for confirmation before the next one starts, since
        later constructors need the chain-assigned address.

        Returns:
            Deployed contracts in deployment order

        Raises:
            UnresolvedDependencyError: If a reference cannot be resolved
            DeploymentError: If a step fails; no further steps are attempted
        """
        total = len(self.specs)
        for index, spec in enumerate(self.specs, start=1):
            args = resolve_constructor_args(spec, self.addresses)
            logger.info("%d/%d Deploying %s...", index, total, spec.name)
            self.deployed.append(self._deploy(spec, args))
        return list(self.deployed)

    def _deploy(self, spec: ContractSpec, args: List[Any]) -> DeployedContract:
        client = self.context.client
        try:
            pending = client.deploy_contract(spec.name, args)
            logger.debug("Transaction sent: %s", pending.transaction_hash)
            address = client.await_confirmation(pending)
        except (ChainClientError, ArtifactNotFoundError) as e:
            logger.error("%s deployment failed on %s: %s", spec.name, self.context.network, e)
            raise DeploymentError(spec.name, self.context.network, str(e)) from e

        logger.info("%s deployed to: %s", spec.name, address)
        return DeployedContract(
            name=spec.name,
            address=address,
            deployed_at=self._clock(),
            constructor_args=tuple(args),
            transaction_hash=pending.transaction_hash,
        )
