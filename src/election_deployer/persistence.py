"""Deployment record persistence for election-deployer."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Union

from .exceptions import RecordNotFoundError, RecordWriteError
from .paths import get_record_path
from .types import DeployedContract, DeploymentRecord

logger = logging.getLogger(__name__)


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC.

    Example: 2024-03-01T12:30:00.000Z
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_deployment_record(
    network: str,
    deployer: str,
    deployed: Sequence[DeployedContract],
    timestamp: datetime,
) -> DeploymentRecord:
    """
    Build a DeploymentRecord from a completed run.

    Args:
        network: Network name
        deployer: Deployer address
        deployed: Deployed contracts in deployment order
        timestamp: Completion time of the run

    Returns:
        DeploymentRecord with contracts in deployment order
    """
    return DeploymentRecord(
        network=network,
        deployer=deployer,
        contracts={c.name: c.address for c in deployed},
        timestamp=format_timestamp(timestamp),
    )


def save_deployment_record(
    record: DeploymentRecord, deployments_root: Optional[Union[Path, str]] = None
) -> Path:
    """
    Write a deployment record, replacing any earlier record for the network.

    Args:
        record: Record to save
        deployments_root: Custom deployments directory (defaults to ./deployments)

    Returns:
        Path the record was written to

    Raises:
        InvalidNetworkNameError: If the network name is not a single path component
        RecordWriteError: If the record file cannot be written

    Creates parent directories if they don't exist.
    """
    record_path = get_record_path(record.network, deployments_root)
    try:
        record_path.parent.mkdir(parents=True, exist_ok=True)
        with open(record_path, "w") as f:
            json.dump(record.to_dict(), f, indent=2)
    except OSError as e:
        raise RecordWriteError(f"Could not write deployment record to {record_path}: {e}") from e

    logger.info("Deployment info saved to: %s", record_path)
    return record_path


def load_deployment_record(
    network: str, deployments_root: Optional[Union[Path, str]] = None
) -> DeploymentRecord:
    """
    Load the latest deployment record for a network.

    Args:
        network: Network name
        deployments_root: Custom deployments directory (defaults to ./deployments)

    Returns:
        DeploymentRecord

    Raises:
        RecordNotFoundError: If no record exists for the network
    """
    record_path = get_record_path(network, deployments_root)
    if not record_path.exists():
        raise RecordNotFoundError(
            f"No deployment record for network '{network}' at {record_path}"
        )

    with open(record_path) as f:
        return DeploymentRecord.from_dict(json.load(f))
