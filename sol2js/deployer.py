"""
Sequential contract deployment through web3.

Each `DeploymentTask` is submitted and its receipt awaited before the
next one starts. With a private key the transaction is built and signed
locally, otherwise it is sent from an account unlocked on the node.
"""

from typing import Any, Dict, List, Optional

from web3 import Web3

from sol2js import log
from sol2js.config import DEFAULT_RECEIPT_TIMEOUT, Settings
from sol2js.errors import ChainConnectionError, DeploymentError
from sol2js.models import ContractArtifact, DeploymentResult, DeploymentTask


def _hex(value) -> str:
    text = value.hex() if hasattr(value, "hex") else str(value)
    return text if text.startswith("0x") else "0x" + text


class Deployer:
    def __init__(self, w3, account: Optional[str] = None, private_key: Optional[str] = None,
                 gas: Optional[int] = None, gas_price_gwei: Optional[float] = None,
                 chain_id: Optional[int] = None,
                 receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT):
        self.w3 = w3
        self.account = account
        self.private_key = private_key
        self.gas = gas
        self.gas_price_gwei = gas_price_gwei
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "Deployer":
        w3 = Web3(Web3.HTTPProvider(settings.rpc_url))
        return cls(
            w3,
            account=settings.account_address,
            private_key=settings.private_key,
            gas=settings.gas,
            gas_price_gwei=settings.gas_price_gwei,
            chain_id=settings.chain_id,
            receipt_timeout=settings.receipt_timeout,
        )

    # ------------------------------------------------------------------

    def sender(self) -> str:
        if self.private_key:
            return self.w3.eth.account.from_key(self.private_key).address
        if self.account:
            return self.w3.to_checksum_address(self.account)
        accounts = self.w3.eth.accounts
        if not accounts:
            raise ChainConnectionError("node exposes no unlocked account; set PRIVATE_KEY")
        return accounts[0]

    def _tx_params(self, sender: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {"from": sender}
        if self.gas is not None:
            params["gas"] = self.gas
        if self.gas_price_gwei is not None:
            params["gasPrice"] = self.w3.to_wei(self.gas_price_gwei, "gwei")
        if self.chain_id is not None:
            params["chainId"] = self.chain_id
        return params

    def plan(self, artifacts: Dict[str, ContractArtifact],
             constructor_args: Optional[Dict[str, List[Any]]] = None) -> List[DeploymentTask]:
        """One task per deployable artifact, in artifact order."""
        constructor_args = constructor_args or {}
        return [
            DeploymentTask(name=name, artifact=artifact, args=list(constructor_args.get(name, [])))
            for name, artifact in artifacts.items()
            if artifact.deployable
        ]

    def deploy(self, task: DeploymentTask) -> DeploymentResult:
        artifact = task.artifact
        bytecode = artifact.bytecode if artifact.bytecode.startswith("0x") else "0x" + artifact.bytecode
        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=bytecode)
        sender = self.sender()
        params = self._tx_params(sender)

        if self.private_key:
            params["nonce"] = self.w3.eth.get_transaction_count(sender)
            tx = factory.constructor(*task.args).build_transaction(params)
            signed = self.w3.eth.account.sign_transaction(tx, private_key=self.private_key)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            tx_hash = factory.constructor(*task.args).transact(params)
        log.info(f"⏳ deploying {task.name}, tx {_hex(tx_hash)}")

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        if receipt.status == 0:
            raise DeploymentError(task.name, "deployment transaction reverted", tx_hash=_hex(tx_hash))

        artifact.address = receipt.contractAddress
        log.success(f"{task.name} deployed at {artifact.address}")
        return DeploymentResult(name=task.name, address=artifact.address, tx_hash=_hex(tx_hash))

    def run(self, tasks: List[DeploymentTask]) -> List[DeploymentResult]:
        """Deploy tasks in order; the first failure aborts the run."""
        if tasks and not self.w3.is_connected():
            log.error("could not connect to the chain endpoint")
            raise ChainConnectionError("could not connect to the chain endpoint")

        results = []
        for task in tasks:
            try:
                results.append(self.deploy(task))
            except Exception as e:
                log.error(f"deployment of {task.name} failed: {e}")
                raise
        return results
