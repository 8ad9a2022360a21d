"""Compiled contract artifact handling for election-deployer."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .constants import ABI_EXPORT_CONTRACTS
from .exceptions import ArtifactNotFoundError
from .paths import get_artifact_path
from .types import ContractArtifact

logger = logging.getLogger(__name__)


def abi_type(param: Dict[str, Any]) -> str:
    """
    Canonical ABI type string for a function parameter.

    Tuples are expanded from their components, e.g. "(address,uint256)[]".
    """
    type_str = param["type"]
    if type_str.startswith("tuple"):
        inner = ",".join(abi_type(c) for c in param.get("components", []))
        return f"({inner}){type_str[len('tuple'):]}"
    return type_str


def constructor_types(abi: List[Dict[str, Any]]) -> Tuple[str, ...]:
    """Return constructor input types, empty if the ABI declares no constructor."""
    for item in abi:
        if item.get("type") == "constructor":
            return tuple(abi_type(p) for p in item.get("inputs", []))
    return ()


def load_contract_artifact(
    contract_name: str, artifacts_dir: Optional[Union[Path, str]] = None
) -> ContractArtifact:
    """
    Load a hardhat compilation artifact.

    Args:
        contract_name: Contract name
        artifacts_dir: Custom artifacts directory (defaults to ./artifacts)

    Returns:
        ContractArtifact with ABI, 0x-prefixed bytecode and constructor types

    Raises:
        ArtifactNotFoundError: If the artifact file does not exist or has no bytecode
    """
    artifact_path = get_artifact_path(contract_name, artifacts_dir)
    if not artifact_path.exists():
        raise ArtifactNotFoundError(
            f"Artifact for '{contract_name}' not found at {artifact_path}. "
            "Compile the contracts first."
        )

    with open(artifact_path) as f:
        data = json.load(f)

    bytecode = data.get("bytecode") or ""
    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    if bytecode == "0x":
        raise ArtifactNotFoundError(f"Artifact for '{contract_name}' has no bytecode")

    abi = data["abi"]
    return ContractArtifact(
        name=contract_name,
        abi=abi,
        bytecode=bytecode,
        constructor_types=constructor_types(abi),
    )


def export_abis(
    destinations: Iterable[Union[Path, str]],
    artifacts_dir: Optional[Union[Path, str]] = None,
    contract_names: Iterable[str] = ABI_EXPORT_CONTRACTS,
) -> List[str]:
    """
    Copy contract ABIs out of the artifacts into each destination directory.

    Missing artifacts are skipped with a warning.

    Args:
        destinations: Directories to write <Name>.json ABI files into
        artifacts_dir: Custom artifacts directory (defaults to ./artifacts)
        contract_names: Contracts to export

    Returns:
        Names of the contracts that were exported
    """
    dest_dirs = [Path(d) for d in destinations]
    for dest in dest_dirs:
        dest.mkdir(parents=True, exist_ok=True)

    exported = []
    for name in contract_names:
        artifact_path = get_artifact_path(name, artifacts_dir)
        if not artifact_path.exists():
            logger.warning("Artifact not found for %s", name)
            continue

        with open(artifact_path) as f:
            abi = json.load(f)["abi"]

        for dest in dest_dirs:
            with open(dest / f"{name}.json", "w") as f:
                json.dump(abi, f, indent=2)
            logger.info("Copied %s ABI to %s", name, dest)

        exported.append(name)

    return exported
