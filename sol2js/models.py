"""
Data model shared by the extractor, deployer and binding generator.

A `ContractArtifact` is created by the extractor, gets its `address` from
the deployer and is only read by the generator. `FunctionDescriptor` is
immutable and mirrors one ABI entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DEPLOYABLE_MARKER = "deployable"


def canonical_type(param: Dict[str, Any]) -> str:
    """ABI type with tuples spelled out: tuple[] -> (address,uint256)[]"""
    kind = str(param.get("type", ""))
    if kind.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components") or [])
        suffix = kind[len("tuple"):]
        return f"({inner}){suffix}"
    return kind


@dataclass(frozen=True)
class FunctionInput:
    type: str
    name: str
    canonical: str = ""


@dataclass(frozen=True)
class FunctionDescriptor:
    name: str
    inputs: Tuple[FunctionInput, ...] = ()
    payable: bool = False
    kind: str = "function"

    @classmethod
    def from_abi(cls, entry: Dict[str, Any]) -> "FunctionDescriptor":
        # entries without "type" are functions in the solidity ABI format
        kind = entry.get("type") or "function"
        payable = bool(entry.get("payable")) or entry.get("stateMutability") == "payable"
        inputs = tuple(
            FunctionInput(type=str(i.get("type", "")), name=str(i.get("name", "")),
                          canonical=canonical_type(i))
            for i in entry.get("inputs") or []
        )
        return cls(name=str(entry.get("name", "")), inputs=inputs, payable=payable, kind=kind)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(i.canonical or i.type for i in self.inputs)})"

    @property
    def is_function(self) -> bool:
        return self.kind == "function"


@dataclass
class ContractArtifact:
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    functions: Tuple[FunctionDescriptor, ...] = ()
    address: Optional[str] = None
    source: Optional[str] = None
    deployable: bool = False

    @classmethod
    def from_abi(cls, name: str, abi: List[Dict[str, Any]], bytecode: str,
                 source: Optional[str] = None) -> "ContractArtifact":
        functions = tuple(FunctionDescriptor.from_abi(entry) for entry in abi)
        return cls(
            name=name,
            abi=abi,
            bytecode=bytecode,
            functions=functions,
            source=source,
            deployable=any(f.name == DEPLOYABLE_MARKER for f in functions),
        )

    def to_json(self) -> Dict[str, Any]:
        """Shape embedded in the generated bindings module."""
        return {"abi": self.abi, "bin": self.bytecode, "address": self.address}


@dataclass
class DeploymentTask:
    name: str
    artifact: ContractArtifact
    args: List[Any] = field(default_factory=list)


@dataclass
class DeploymentResult:
    name: str
    address: str
    tx_hash: str
