from pathlib import Path
from typing import Any, Dict, List, Optional

from sol2js import log
from sol2js.codegen import write_bindings
from sol2js.compiler import compile_to_json, find_solc, read_combined_json
from sol2js.config import Settings
from sol2js.deployer import Deployer
from sol2js.extract import extract_contracts, select_deployable
from sol2js.models import ContractArtifact


def compile_contracts(source_file, out_dir="./", settings: Optional[Settings] = None,
                      deployer: Optional[Deployer] = None,
                      constructor_args: Optional[Dict[str, List[Any]]] = None) -> Dict[str, ContractArtifact]:
    """
    Compile `source_file`, deploy its deployable contracts and write the
    JavaScript bindings into `out_dir`.

    Returns the deployed artifacts keyed by contract name. Any failure is
    logged and re-raised; files already written are left in place.
    """
    settings = settings or Settings.from_env()
    source_file = Path(source_file)
    out_dir = Path(out_dir or "./")

    try:
        # 1. compile to <out>/<stem>.json
        solc_binary = find_solc(settings.solc_version, settings.solc_binary)
        json_path = compile_to_json(
            source_file, out_dir, solc_binary,
            import_remappings=settings.import_remappings,
            optimize=settings.optimize,
        )

        # 2. keep the contracts carrying the deployable marker
        contracts = select_deployable(extract_contracts(read_combined_json(json_path)))
        log.info(f"deployable contracts: {', '.join(contracts) or 'none'}")

        # 3. deploy one after the other
        if contracts:
            deployer = deployer or Deployer.from_settings(settings)
            for result in deployer.run(deployer.plan(contracts, constructor_args)):
                log.info(f"{result.name} at {result.address}, tx {result.tx_hash}")

        # 4. bindings + hooks
        js_path, hooks_path = write_bindings(
            contracts, out_dir, source_file.stem,
            source_name=source_file.name,
            wallet_context=settings.wallet_context,
            dapp_context=settings.dapp_context,
        )
        log.success(f"bindings written to {js_path} and {hooks_path}")
    except Exception as e:
        log.error(f"compilation failed: {e}")
        raise

    return contracts
