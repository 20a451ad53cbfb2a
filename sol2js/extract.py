import json
import os
from typing import Any, Dict

from sol2js import log
from sol2js.models import ContractArtifact

MARKER_INTERFACE = "Deployable"


def split_key(key: str):
    """'path/to/File.sol:Name' -> ('path/to/File.sol', 'Name')"""
    path, _, name = key.rpartition(":")
    return path, name


def is_marker_interface(key: str) -> bool:
    path, name = split_key(key)
    return os.path.basename(path) == f"{MARKER_INTERFACE}.sol" or name == MARKER_INTERFACE


def _load_abi(raw: Any):
    # solc < 0.8 emits the abi as a JSON string inside combined.json
    if isinstance(raw, str):
        return json.loads(raw) if raw else []
    return list(raw or [])


def extract_contracts(combined: Dict[str, Any]) -> Dict[str, ContractArtifact]:
    """
    Turn solc's combined JSON into artifacts keyed by contract name.

    The marker interface itself is dropped. Every other contract is kept
    and tagged `deployable` when its ABI declares the marker function.
    """
    contracts: Dict[str, ContractArtifact] = {}
    for key, entry in (combined.get("contracts") or {}).items():
        if is_marker_interface(key):
            continue
        path, name = split_key(key)
        artifact = ContractArtifact.from_abi(
            name, _load_abi(entry.get("abi")), entry.get("bin", ""), source=path or None
        )
        if name in contracts:
            log.warning(
                f"contract name {name} defined in both {contracts[name].source} and {path}; "
                f"keeping the last definition"
            )
        contracts[name] = artifact
    return contracts


def select_deployable(contracts: Dict[str, ContractArtifact]) -> Dict[str, ContractArtifact]:
    return {name: c for name, c in contracts.items() if c.deployable}
