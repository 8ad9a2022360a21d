"""End-to-end deployment pipeline for election-deployer."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Union

from .balance import check_balance
from .client import ChainClient
from .config import validate_config
from .exceptions import (
    ChainClientError,
    ConfigError,
    DeployerError,
    DeploymentError,
    InsufficientBalanceWarning,
    InvalidNetworkNameError,
    PlanDefinitionError,
    RecordWriteError,
)
from .networks import get_network_profile
from .persistence import build_deployment_record, save_deployment_record
from .paths import get_record_path
from .plan import election_plan, validate_plan
from .sequencer import DeploymentSequencer
from .types import ContractSpec, DeployedContract, DeploymentContext, DeploymentRecord

logger = logging.getLogger(__name__)


class PipelineStatus(Enum):
    """
    Outcome of a pipeline run.

    Value strings are what the command line reports.
    """

    SUCCESS = "success"
    CONFIG_ERROR = "config-error"
    PLAN_ERROR = "plan-error"
    CHAIN_ERROR = "chain-error"
    DEPLOYMENT_ERROR = "deployment-error"
    RECORD_ERROR = "record-error"


@dataclass
class PipelineResult:
    """Typed result of run_pipeline(); only the caller decides the exit status."""

    network: str
    status: PipelineStatus
    record: Optional[DeploymentRecord] = None
    record_path: Optional[Path] = None
    deployed: List[DeployedContract] = field(default_factory=list)
    warnings: List[InsufficientBalanceWarning] = field(default_factory=list)
    error: Optional[DeployerError] = None

    @property
    def ok(self) -> bool:
        return self.status is PipelineStatus.SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def run_pipeline(
    network: str,
    env: Mapping[str, Optional[str]],
    client: ChainClient,
    specs: Optional[Sequence[ContractSpec]] = None,
    deployments_root: Optional[Union[Path, str]] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> PipelineResult:
    """
    Validate, deploy and record the contract suite on one network.

    Steps: profile lookup, configuration and plan checks (may halt), signer
    resolution, balance check (warn only), ordered deployment, and record
    persistence (full success only). Nothing touches the chain until both
    checks pass.

    Args:
        network: Target network name
        env: Recognized environment values
        client: Chain client for the target network
        specs: Ordered plan (defaults to election_plan())
        deployments_root: Where records are written (defaults to ./deployments)
        clock: Returns the current time (defaults to UTC now)

    Returns:
        PipelineResult. Fatal errors are reported through status and error,
        never raised.
    """
    clock = clock or _utc_now
    profile = get_network_profile(network)
    logger.info("Deploying to network: %s", network)

    try:
        get_record_path(network, deployments_root)
        validate_config(profile, env)
    except (ConfigError, InvalidNetworkNameError) as e:
        logger.error("Configuration error on %s: %s", network, e)
        return PipelineResult(network=network, status=PipelineStatus.CONFIG_ERROR, error=e)

    if specs is None:
        specs = election_plan()
    try:
        specs = validate_plan(specs)
    except PlanDefinitionError as e:
        logger.error("Invalid deployment plan: %s", e)
        return PipelineResult(network=network, status=PipelineStatus.PLAN_ERROR, error=e)

    try:
        deployer = client.resolve_signers()
    except ChainClientError as e:
        logger.error("Could not resolve deployer on %s: %s", network, e)
        return PipelineResult(network=network, status=PipelineStatus.CHAIN_ERROR, error=e)

    logger.info("Deploying contracts with account: %s", deployer)
    context = DeploymentContext(profile=profile, deployer=deployer, client=client)

    warnings = []
    warning = check_balance(context)
    if warning is not None:
        warnings.append(warning)

    sequencer = DeploymentSequencer(context, specs, clock=clock)
    try:
        deployed = sequencer.run()
    except PlanDefinitionError as e:
        logger.error("Invalid deployment plan: %s", e)
        return PipelineResult(
            network=network,
            status=PipelineStatus.PLAN_ERROR,
            deployed=list(sequencer.deployed),
            warnings=warnings,
            error=e,
        )
    except DeploymentError as e:
        if sequencer.deployed:
            logger.error(
                "Contracts already deployed in this run were not recorded: %s",
                ", ".join(f"{c.name}={c.address}" for c in sequencer.deployed),
            )
        return PipelineResult(
            network=network,
            status=PipelineStatus.DEPLOYMENT_ERROR,
            deployed=list(sequencer.deployed),
            warnings=warnings,
            error=e,
        )

    record = build_deployment_record(network, deployer, deployed, clock())
    try:
        record_path = save_deployment_record(record, deployments_root)
    except RecordWriteError as e:
        logger.error(
            "Deployed contracts on %s were not recorded: %s (%s)",
            network,
            ", ".join(f"{c.name}={c.address}" for c in deployed),
            e,
        )
        return PipelineResult(
            network=network,
            status=PipelineStatus.RECORD_ERROR,
            deployed=deployed,
            warnings=warnings,
            error=e,
        )

    return PipelineResult(
        network=network,
        status=PipelineStatus.SUCCESS,
        record=record,
        record_path=record_path,
        deployed=deployed,
        warnings=warnings,
    )
