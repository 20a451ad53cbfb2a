import re

import pytest
from solcx.exceptions import SolcError
from conftest import HELPER_ABI, MARKER_ABI, STORE_ABI, FakeWeb3, make_combined

from sol2js.config import Settings
from sol2js.deployer import Deployer
from sol2js.errors import CompilationError, DeploymentError
from sol2js.pipeline import compile_contracts


@pytest.fixture
def settings():
    return Settings()


def test_end_to_end_single_contract(tmp_path, fake_solc, settings):
    fake_solc.combined = make_combined({"test2.sol:Store": STORE_ABI})
    w3 = FakeWeb3()
    out = tmp_path / "output"

    contracts = compile_contracts(tmp_path / "test2.sol", out, settings=settings, deployer=Deployer(w3))

    assert list(contracts) == ["Store"]
    assert contracts["Store"].address == "0x" + format(1, "040x")
    assert (out / "test2.json").is_file()

    js = (out / "test2.js").read_text(encoding="utf-8")
    class_body = js.split("class Store {")[1]
    methods = re.findall(r"^    async (\w+)\(([^)]*)\)", class_body, re.M)
    assert methods == [("deployable", ""), ("setValue", "uint256_value, overrides")]
    assert contracts["Store"].address in js

    hooks = (out / "hooks" / "test2.js").read_text(encoding="utf-8")
    assert re.findall(r"^export function (\w+)", hooks, re.M) == ["useStoreDeployable", "useStoreSetValue"]


def test_only_marked_contracts_survive(tmp_path, fake_solc, settings):
    fake_solc.combined = make_combined({
        "Deployable.sol:Deployable": MARKER_ABI,
        "Main.sol:Store": STORE_ABI,
        "Main.sol:Helper": HELPER_ABI,
    })
    w3 = FakeWeb3()

    contracts = compile_contracts(tmp_path / "Main.sol", tmp_path, settings=settings, deployer=Deployer(w3))

    assert list(contracts) == ["Store"]
    assert len(w3.eth.sent) == 1
    js = (tmp_path / "Main.js").read_text(encoding="utf-8")
    assert "class Helper" not in js
    assert "class Deployable" not in js


def test_constructor_args_reach_deployment(tmp_path, fake_solc, settings):
    fake_solc.combined = make_combined({"A.sol:Store": STORE_ABI})
    w3 = FakeWeb3()

    compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings, deployer=Deployer(w3),
                      constructor_args={"Store": [42]})

    assert w3.eth.sent[0]["args"] == [42]


def test_nothing_to_deploy_still_writes_bindings(tmp_path, fake_solc, settings):
    fake_solc.combined = make_combined({"A.sol:Helper": HELPER_ABI})

    contracts = compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings,
                                  deployer=Deployer(FakeWeb3(connected=False)))

    assert contracts == {}
    assert "const contracts = {};" in (tmp_path / "A.js").read_text(encoding="utf-8")
    assert (tmp_path / "hooks" / "A.js").is_file()


def test_rerun_is_byte_identical(tmp_path, fake_solc, settings):
    fake_solc.combined = make_combined({"A.sol:Store": STORE_ABI})

    compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings, deployer=Deployer(FakeWeb3()))
    first = ((tmp_path / "A.js").read_bytes(), (tmp_path / "hooks" / "A.js").read_bytes())
    compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings, deployer=Deployer(FakeWeb3()))
    second = ((tmp_path / "A.js").read_bytes(), (tmp_path / "hooks" / "A.js").read_bytes())

    assert first == second


def test_compile_failure_is_logged_and_raised(tmp_path, fake_solc, settings, monkeypatch):
    errors = []
    monkeypatch.setattr("sol2js.pipeline.log.error", errors.append)
    fake_solc.error = SolcError(message="boom", stderr_data="ParserError: boom")

    with pytest.raises(CompilationError):
        compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings, deployer=Deployer(FakeWeb3()))

    assert errors[-1] == "compilation failed: ParserError: boom"
    assert not (tmp_path / "A.js").exists()


def test_deploy_failure_aborts_before_bindings(tmp_path, fake_solc, settings):
    fake_solc.combined = make_combined({"A.sol:Store": STORE_ABI})
    w3 = FakeWeb3()
    w3.eth.receipt_status[1] = 0

    with pytest.raises(DeploymentError):
        compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings, deployer=Deployer(w3))

    assert (tmp_path / "A.json").is_file()
    assert not (tmp_path / "A.js").exists()


def test_deployment_results_are_reported(tmp_path, fake_solc, settings, monkeypatch):
    messages = []
    monkeypatch.setattr("sol2js.pipeline.log.info", messages.append)
    fake_solc.combined = make_combined({"A.sol:Store": STORE_ABI})

    compile_contracts(tmp_path / "A.sol", tmp_path, settings=settings, deployer=Deployer(FakeWeb3()))

    address = "0x" + format(1, "040x")
    assert f"Store at {address}, tx 0x{'01' * 32}" in messages
