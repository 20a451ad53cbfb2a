"""Coloured console output: info, success, warning, error."""

from rich.console import Console

console = Console(highlight=False)


def info(msg) -> None:
    console.print(str(msg), style="blue", markup=False)


def success(msg) -> None:
    console.print(f"✅ {msg}", style="green", markup=False)


def warning(msg) -> None:
    console.print(f"⚠️ {msg}", style="dark_orange", markup=False)


def error(msg) -> None:
    console.print(f"❌ {msg}", style="red", markup=False)
