"""Compile Solidity, deploy the contracts and generate JavaScript bindings."""

from sol2js.config import Settings
from sol2js.errors import (
    ChainConnectionError,
    CompilationError,
    DeploymentError,
    Sol2JsError,
    ToolchainNotFoundError,
)
from sol2js.models import ContractArtifact, FunctionDescriptor
from sol2js.pipeline import compile_contracts

__version__ = "0.1.0"

__all__ = [
    "compile_contracts",
    "Settings",
    "ContractArtifact",
    "FunctionDescriptor",
    "Sol2JsError",
    "ToolchainNotFoundError",
    "CompilationError",
    "ChainConnectionError",
    "DeploymentError",
]
