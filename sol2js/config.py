import os
from dataclasses import dataclass, field, replace
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_WALLET_CONTEXT = "../context/WalletContext"
DEFAULT_DAPP_CONTEXT = "../context/DappContext"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _int(value: Optional[str]) -> Optional[int]:
    return int(value) if value else None


def _float(value: Optional[str]) -> Optional[float]:
    return float(value) if value else None


def _list(value: Optional[str]) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


@dataclass
class Settings:
    """Run settings, read from the environment (and an optional .env file)."""

    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    account_address: Optional[str] = None
    chain_id: Optional[int] = None
    gas: Optional[int] = None
    gas_price_gwei: Optional[float] = None
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT

    solc_version: Optional[str] = None
    solc_binary: Optional[str] = None
    import_remappings: List[str] = field(default_factory=list)
    optimize: bool = False

    wallet_context: str = DEFAULT_WALLET_CONTEXT
    dapp_context: str = DEFAULT_DAPP_CONTEXT

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file or find_dotenv(usecwd=True))
        return cls(
            rpc_url=os.getenv("RPC_URL") or DEFAULT_RPC_URL,
            private_key=os.getenv("PRIVATE_KEY") or None,
            account_address=os.getenv("ACCOUNT_ADDRESS") or None,
            chain_id=_int(os.getenv("CHAIN_ID")),
            gas=_int(os.getenv("GAS")),
            gas_price_gwei=_float(os.getenv("GAS_PRICE_GWEI")),
            receipt_timeout=_float(os.getenv("RECEIPT_TIMEOUT")) or DEFAULT_RECEIPT_TIMEOUT,
            solc_version=os.getenv("SOLC_VERSION") or None,
            solc_binary=os.getenv("SOLC_BINARY") or None,
            import_remappings=_list(os.getenv("IMPORT_REMAPPINGS")),
            optimize=_flag(os.getenv("SOLC_OPTIMIZE")),
            wallet_context=os.getenv("WALLET_CONTEXT_MODULE") or DEFAULT_WALLET_CONTEXT,
            dapp_context=os.getenv("DAPP_CONTEXT_MODULE") or DEFAULT_DAPP_CONTEXT,
        )

    def override(self, **changes) -> "Settings":
        """Copy with the non-None values of `changes` applied (CLI flags)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
