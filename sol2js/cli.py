"""
sol2js command line.

    $ sol2js compile contracts/Storage.sol --out ./output
    $ sol2js check

Chain and compiler settings come from the environment or a `.env` file
(see `sol2js.config.Settings`); flags override them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from sol2js import log
from sol2js.compiler import find_solc
from sol2js.config import Settings
from sol2js.errors import ToolchainNotFoundError
from sol2js.pipeline import compile_contracts

app = typer.Typer(help="Compile Solidity, deploy it and generate JavaScript bindings")

__all__ = ["app", "main"]


def _load_constructor_args(path: Optional[Path]):
    if path is None:
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"cannot read constructor args from {path}: {e}") from e
    if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
        raise typer.BadParameter("constructor args must map contract names to argument lists")
    return data


@app.command("compile")
def compile_cmd(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Solidity source file"),
    out: Path = typer.Option(Path("."), "--out", "-o", help="Output directory"),
    rpc: Optional[str] = typer.Option(None, "--rpc", help="JSON-RPC endpoint (RPC_URL)"),
    solc_version: Optional[str] = typer.Option(None, "--solc-version", help="Install/use this solc (SOLC_VERSION)"),
    constructor_args: Optional[Path] = typer.Option(
        None, "--constructor-args", dir_okay=False,
        help="JSON file mapping contract name -> constructor argument list",
    ),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help=".env file to load"),
) -> None:
    """Compile SOURCE, deploy its deployable contracts and write bindings into OUT."""
    args = _load_constructor_args(constructor_args)
    settings = Settings.from_env(str(env_file) if env_file else None).override(
        rpc_url=rpc, solc_version=solc_version
    )
    try:
        contracts = compile_contracts(source, out, settings=settings, constructor_args=args)
    except Exception as e:
        raise typer.Exit(code=1) from e
    for name, artifact in contracts.items():
        typer.echo(f"{name}\t{artifact.address}")


@app.command("check")
def check_cmd(
    env_file: Optional[Path] = typer.Option(None, "--env-file", help=".env file to load"),
) -> None:
    """Verify that the solc compiler is available."""
    settings = Settings.from_env(str(env_file) if env_file else None)
    try:
        path = find_solc(settings.solc_version, settings.solc_binary)
    except ToolchainNotFoundError as e:
        log.error(str(e))
        raise typer.Exit(code=1) from e
    log.success(f"solc found at {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
