"""
Thin wrapper over py-solc-x: locate solc, compile one source file to
combined JSON (abi + bin) inside the output directory.
"""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

import solcx
from solcx.exceptions import SolcError, SolcNotInstalled
from solcx.install import get_executable

from sol2js import log
from sol2js.errors import CompilationError, ToolchainNotFoundError

# file name solc uses for --combined-json output
JSON_FILENAME = "combined.json"
SOLC = "solc"

INSTALL_HINT = (
    "solc solidity compiler is not installed. Visit "
    "https://docs.soliditylang.org/en/latest/installing-solidity.html, "
    "or set SOLC_VERSION to let py-solc-x install one."
)


def find_solc(version: Optional[str] = None, binary: Optional[str] = None) -> str:
    """Return the path of the solc executable to use."""
    if binary:
        if Path(binary).is_file():
            return str(binary)
        log.error(f"solc binary not found at {binary}")
        raise ToolchainNotFoundError(f"solc binary not found at {binary}")

    if version:
        try:
            solcx.install_solc(version)
            return str(get_executable(version))
        except Exception as e:
            log.error(f"could not install solc {version}: {e}")
            raise ToolchainNotFoundError(f"could not install solc {version}: {e}") from e

    on_path = shutil.which(SOLC)
    if on_path:
        return on_path
    try:
        return str(get_executable())
    except SolcNotInstalled as e:
        log.error(INSTALL_HINT)
        raise ToolchainNotFoundError(INSTALL_HINT) from e


def compile_to_json(source_file, out_dir, solc_binary: str,
                    import_remappings: Optional[List[str]] = None,
                    optimize: bool = False) -> Path:
    """
    Compile `source_file` and leave the combined JSON in `out_dir` as
    `<source stem>.json`. Returns the renamed file path.
    """
    source_file = Path(source_file)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    try:
        solcx.compile_files(
            [str(source_file)],
            output_values=["abi", "bin"],
            import_remappings=import_remappings or None,
            output_dir=str(out_dir),
            overwrite=True,
            optimize=optimize,
            solc_binary=solc_binary,
            allow_empty=True,
        )
    except SolcError as e:
        stderr = getattr(e, "stderr_data", None) or str(e)
        log.error(stderr)
        raise CompilationError(stderr, stderr=stderr) from e
    log.success(f"compilation of {source_file} succeed")

    json_path = out_dir / f"{source_file.stem}.json"
    try:
        os.replace(out_dir / JSON_FILENAME, json_path)
    except OSError as e:
        log.error(f"could not rename {JSON_FILENAME}: {e}")
        raise
    return json_path


def read_combined_json(path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        log.error(f"could not read {path}: {e}")
        raise
