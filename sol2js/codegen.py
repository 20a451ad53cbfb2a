"""
sol2js binding generator
========================

Turn deployed contract artifacts into JavaScript client code:

    <out>/<stem>.js        const contracts = {...} plus one class per contract,
                           one async method per ABI function
    <out>/hooks/<stem>.js  one React hook per ABI function, each performing
                           the call on mount and exposing
                           {status: 'loading' | 'success' | 'error', data, error}

The artifacts are first reduced to a small intermediate representation
(`ContractBinding` / `EmittedMember`); both files are rendered from it in
a single pass, so the output is byte-identical for identical input.

Parameters are named `<type>_<name>` from the ABI, verbatim. Identifier
legality is not checked: reserved words or odd ABI names produce invalid
JavaScript.
"""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from sol2js.config import DEFAULT_DAPP_CONTEXT, DEFAULT_WALLET_CONTEXT
from sol2js.models import ContractArtifact, FunctionDescriptor

OVERRIDES_PARAM = "overrides"
HOOKS_DIR = "hooks"
INDENT = "    "


# --- Intermediate representation ------------------------------------------------

@dataclass(frozen=True)
class EmittedMember:
    contract: str
    name: str
    params: Tuple[str, ...]
    payable: bool
    # JS method name and the key it is called through on the ethers contract;
    # both differ from `name` only for overloaded functions
    method: str
    call_key: str

    @property
    def hook_name(self) -> str:
        return f"use{self.contract}{self.method[:1].upper()}{self.method[1:]}"

    @property
    def call_expr(self) -> str:
        if self.call_key == self.name:
            return f"this.contract.{self.name}"
        return f"this.contract[{json.dumps(self.call_key)}]"


@dataclass(frozen=True)
class ContractBinding:
    name: str
    members: Tuple[EmittedMember, ...]


def param_names(func: FunctionDescriptor) -> Tuple[str, ...]:
    params = [f"{i.type}_{i.name}" for i in func.inputs]
    if func.payable:
        params.append(OVERRIDES_PARAM)
    return tuple(params)


def overload_suffix(func: FunctionDescriptor) -> str:
    """uint256[], (address,bool) -> uint256____address_bool_"""
    types = "_".join(i.canonical or i.type for i in func.inputs)
    return "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in types)


def build_members(contract: str, functions) -> Tuple[EmittedMember, ...]:
    functions = [f for f in functions if f.is_function]
    counts = Counter(f.name for f in functions)

    members = []
    used = set()
    for f in functions:
        method, call_key = f.name, f.name
        if counts[f.name] > 1:
            call_key = f.signature
            method = f"{f.name}_{overload_suffix(f)}" if f.inputs else f.name
        # suffixes can still clash (distinct tuples flatten alike)
        base, n = method, 2
        while method in used:
            method = f"{base}_{n}"
            n += 1
        used.add(method)
        members.append(EmittedMember(contract=contract, name=f.name, params=param_names(f),
                                     payable=f.payable, method=method, call_key=call_key))
    return tuple(members)


def build_bindings(artifacts: Dict[str, ContractArtifact]) -> List[ContractBinding]:
    """Only artifacts tagged deployable are bound."""
    return [
        ContractBinding(name=name, members=build_members(name, artifact.functions))
        for name, artifact in artifacts.items()
        if artifact.deployable
    ]


# --- Renderers ------------------------------------------------------------------

def _header(source_name: str) -> str:
    return f"// Generated by sol2js from {source_name}. Do not edit by hand.\n"


def render_bindings(artifacts: Dict[str, ContractArtifact], bindings: List[ContractBinding],
                    source_name: str) -> str:
    payload = {b.name: artifacts[b.name].to_json() for b in bindings}

    lines: List[str] = [_header(source_name)]
    lines.append(f"const contracts = {json.dumps(payload, indent=2)};\n")
    for b in bindings:
        lines.append("\n")
        lines.append(f"class {b.name} {{\n")
        lines.append(f"{INDENT}constructor(contract) {{\n")
        lines.append(f"{INDENT * 2}this.contract = contract;\n")
        lines.append(f"{INDENT}}}\n")
        for m in b.members:
            args = ", ".join(m.params)
            lines.append("\n")
            lines.append(f"{INDENT}async {m.method}({args}) {{\n")
            lines.append(f"{INDENT * 2}return await {m.call_expr}({args});\n")
            lines.append(f"{INDENT}}}\n")
        lines.append("}\n")
    exports = ", ".join(["contracts"] + [b.name for b in bindings])
    lines.append("\n")
    lines.append(f"export {{ {exports} }};\n")
    return "".join(lines)


def render_hooks(bindings: List[ContractBinding], source_name: str, bindings_module: str,
                 wallet_context: str = DEFAULT_WALLET_CONTEXT,
                 dapp_context: str = DEFAULT_DAPP_CONTEXT) -> str:
    names = ", ".join(["contracts"] + [b.name for b in bindings])

    lines: List[str] = [_header(source_name)]
    lines.append("import { useContext, useEffect, useState } from 'react';\n")
    lines.append("import { ethers } from 'ethers';\n")
    lines.append(f"import {{ WalletContext }} from '{wallet_context}';\n")
    lines.append(f"import {{ DappContext }} from '{dapp_context}';\n")
    lines.append(f"import {{ {names} }} from '{bindings_module}';\n")
    lines.append("\n")
    lines.append("const LOADING = { status: 'loading', data: undefined, error: undefined };\n")
    lines.append("\n")
    lines.append("function bind(name, Binding, signer, addresses) {\n")
    lines.append(f"{INDENT}const address = (addresses && addresses[name]) || contracts[name].address;\n")
    lines.append(f"{INDENT}return new Binding(new ethers.Contract(address, contracts[name].abi, signer));\n")
    lines.append("}\n")

    for b in bindings:
        for m in b.members:
            args = ", ".join(m.params)
            deps = ", ".join(("signer", "addresses") + m.params)
            lines.append("\n")
            lines.append(f"export function {m.hook_name}({args}) {{\n")
            lines.append(f"{INDENT}const {{ signer }} = useContext(WalletContext);\n")
            lines.append(f"{INDENT}const {{ addresses }} = useContext(DappContext);\n")
            lines.append(f"{INDENT}const [result, setResult] = useState(LOADING);\n")
            lines.append(f"{INDENT}useEffect(() => {{\n")
            lines.append(f"{INDENT * 2}let active = true;\n")
            lines.append(f"{INDENT * 2}setResult(LOADING);\n")
            lines.append(f"{INDENT * 2}bind('{b.name}', {b.name}, signer, addresses).{m.method}({args})\n")
            lines.append(f"{INDENT * 3}.then((data) => {{ if (active) setResult({{ status: 'success', data, error: undefined }}); }})\n")
            lines.append(f"{INDENT * 3}.catch((error) => {{ if (active) setResult({{ status: 'error', data: undefined, error }}); }});\n")
            lines.append(f"{INDENT * 2}return () => {{ active = false; }};\n")
            lines.append(f"{INDENT}}}, [{deps}]);\n")
            lines.append(f"{INDENT}return result;\n")
            lines.append("}\n")
    return "".join(lines)


# --- Files ----------------------------------------------------------------------

def write_bindings(artifacts: Dict[str, ContractArtifact], out_dir, stem: str,
                   source_name: Optional[str] = None,
                   wallet_context: str = DEFAULT_WALLET_CONTEXT,
                   dapp_context: str = DEFAULT_DAPP_CONTEXT) -> Tuple[Path, Path]:
    """Write `<out>/<stem>.js` and `<out>/hooks/<stem>.js`; return both paths."""
    out_dir = Path(out_dir)
    source_name = source_name or f"{stem}.sol"
    bindings = build_bindings(artifacts)

    js_path = out_dir / f"{stem}.js"
    hooks_path = out_dir / HOOKS_DIR / f"{stem}.js"
    hooks_path.parent.mkdir(parents=True, exist_ok=True)

    with open(js_path, "w", encoding="utf-8") as f:
        f.write(render_bindings(artifacts, bindings, source_name))
    with open(hooks_path, "w", encoding="utf-8") as f:
        f.write(render_hooks(bindings, source_name, f"../{stem}.js",
                             wallet_context=wallet_context, dapp_context=dapp_context))
    return js_path, hooks_path
