"""Path management utilities for election-deployer."""

from pathlib import Path
from typing import Optional, Union

from .exceptions import InvalidNetworkNameError

RECORD_FILENAME = "deployment.json"


def get_default_deployments_dir() -> Path:
    """
    Get default deployments directory.

    Returns:
        Path to ./deployments
    """
    return Path.cwd() / "deployments"


def get_default_artifacts_dir() -> Path:
    """
    Get default compiled artifacts directory (hardhat layout).

    Returns:
        Path to ./artifacts
    """
    return Path.cwd() / "artifacts"


def get_record_path(network: str, deployments_root: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the deployment record path for a network.

    Args:
        network: Network name
        deployments_root: Custom deployments directory (defaults to ./deployments)

    Returns:
        Path to <deployments_root>/<network>/deployment.json

    Raises:
        InvalidNetworkNameError: If the name would leave the deployments root
    """
    if network in ("", ".", "..") or "/" in network or "\\" in network:
        raise InvalidNetworkNameError(network)

    if deployments_root is None:
        deployments_root = get_default_deployments_dir()
    else:
        deployments_root = Path(deployments_root).absolute()

    return deployments_root / network / RECORD_FILENAME


def get_artifact_path(contract_name: str, artifacts_dir: Optional[Union[Path, str]] = None) -> Path:
    """
    Get the compiled artifact path for a contract.

    Args:
        contract_name: Contract name, also the Solidity file stem
        artifacts_dir: Custom artifacts directory (defaults to ./artifacts)

    Returns:
        Path to <artifacts_dir>/contracts/<Name>.sol/<Name>.json
    """
    if artifacts_dir is None:
        artifacts_dir = get_default_artifacts_dir()
    else:
        artifacts_dir = Path(artifacts_dir).absolute()

    return artifacts_dir / "contracts" / f"{contract_name}.sol" / f"{contract_name}.json"
