import json
from pathlib import Path
from types import SimpleNamespace

import pytest
import solcx

from sol2js import compiler, pipeline

STORE_ABI = [
    {
        "type": "function",
        "name": "deployable",
        "inputs": [],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "setValue",
        "inputs": [{"name": "value", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "payable",
    },
]

MARKER_ABI = [
    {
        "type": "function",
        "name": "deployable",
        "inputs": [],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
    }
]

HELPER_ABI = [
    {
        "type": "function",
        "name": "help",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    }
]


def make_combined(contracts):
    """{key: abi} -> combined JSON as written by solc (abi as a string)."""
    return {
        "contracts": {
            key: {"abi": json.dumps(abi), "bin": "6080604052" + format(i, "02x")}
            for i, (key, abi) in enumerate(contracts.items())
        },
        "version": "0.8.20+commit.a1b79de6.Linux.g++",
    }


@pytest.fixture
def store_combined():
    return make_combined({
        "contracts/Deployable.sol:Deployable": MARKER_ABI,
        "contracts/Store.sol:Store": STORE_ABI,
        "contracts/Store.sol:Helper": HELPER_ABI,
    })


@pytest.fixture
def fake_solc(monkeypatch):
    """
    Replace solcx.compile_files with a stub that writes `combined` into
    output_dir the way solc --combined-json -o does. Set `.combined` on
    the returned handle before calling.
    """
    handle = SimpleNamespace(combined={"contracts": {}}, calls=[], error=None)

    def compile_files(source_files, output_dir=None, **kwargs):
        handle.calls.append({"source_files": source_files, "output_dir": output_dir, **kwargs})
        if handle.error is not None:
            raise handle.error
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        (out / "combined.json").write_text(json.dumps(handle.combined), encoding="utf-8")
        return handle.combined["contracts"]

    monkeypatch.setattr(solcx, "compile_files", compile_files)

    def find_solc(version=None, binary=None):
        return "/usr/bin/solc"

    monkeypatch.setattr(compiler, "find_solc", find_solc)
    monkeypatch.setattr(pipeline, "find_solc", find_solc)
    return handle


# --- fake web3 -------------------------------------------------------------------

class FakeConstructor:
    def __init__(self, eth, abi, bytecode, args):
        self.eth = eth
        self.abi = abi
        self.bytecode = bytecode
        self.args = args

    def _record(self, params):
        self.eth.sent.append({"bytecode": self.bytecode, "args": self.args, "params": dict(params)})
        return bytes([len(self.eth.sent)]) * 32

    def transact(self, params):
        return self._record(params)

    def build_transaction(self, params):
        tx = dict(params)
        tx["data"] = self.bytecode
        tx["_hash"] = self._record(params)
        return tx


class FakeFactory:
    def __init__(self, eth, abi, bytecode):
        self.eth = eth
        self.abi = abi
        self.bytecode = bytecode

    def constructor(self, *args):
        return FakeConstructor(self.eth, self.abi, self.bytecode, list(args))


class FakeAccountApi:
    def __init__(self):
        self.signed = []

    def from_key(self, key):
        return SimpleNamespace(address="0x00000000000000000000000000000000000000AA")

    def sign_transaction(self, tx, private_key=None):
        self.signed.append((tx, private_key))
        return SimpleNamespace(raw_transaction=tx["_hash"])


class FakeEth:
    def __init__(self):
        self.accounts = ["0x0000000000000000000000000000000000000001"]
        self.sent = []
        self.receipt_status = {}
        self.account = FakeAccountApi()
        self.waited = []

    def contract(self, abi=None, bytecode=None):
        return FakeFactory(self, abi, bytecode)

    def get_transaction_count(self, address):
        return len(self.sent)

    def send_raw_transaction(self, raw):
        return raw

    def wait_for_transaction_receipt(self, tx_hash, timeout=120):
        self.waited.append((tx_hash, timeout))
        index = tx_hash[0]
        return SimpleNamespace(
            status=self.receipt_status.get(index, 1),
            contractAddress="0x" + format(index, "040x"),
        )


class FakeWeb3:
    def __init__(self, connected=True):
        self.eth = FakeEth()
        self.connected = connected

    def is_connected(self):
        return self.connected

    def to_checksum_address(self, address):
        return address

    def to_wei(self, value, unit):
        assert unit == "gwei"
        return int(value * 10**9)


@pytest.fixture
def fake_w3():
    return FakeWeb3()
