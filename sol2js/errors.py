"""
Error classes raised by sol2js.

Every stage logs its failure where it happens and re-raises; callers can
catch a specific failure mode or the base `Sol2JsError`. Filesystem
failures are left as plain `OSError`.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "Sol2JsError",
    "ToolchainNotFoundError",
    "CompilationError",
    "ChainConnectionError",
    "DeploymentError",
]


class Sol2JsError(Exception):
    """Base class for all sol2js errors."""


class ToolchainNotFoundError(Sol2JsError):
    """The solc compiler could not be found or installed."""


class CompilationError(Sol2JsError):
    """solc exited with an error."""

    def __init__(self, message: str, stderr: Optional[str] = None) -> None:
        super().__init__(message)
        self.stderr = stderr


class ChainConnectionError(Sol2JsError):
    """The JSON-RPC endpoint is unreachable."""


class DeploymentError(Sol2JsError):
    """A deployment transaction failed or reverted."""

    def __init__(self, contract: str, message: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(f"{contract}: {message}")
        self.contract = contract
        self.tx_hash = tx_hash
