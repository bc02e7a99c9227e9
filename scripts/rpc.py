#!/usr/bin/env python3
"""
Frontend RPC and transaction hook from the command line.

Useful for setting limits and checking insights without the site.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import json
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from foxtagger.core.config import Config
from foxtagger.handlers.rpc import InvalidParamsError, MethodNotFoundError, RpcDispatcher
from foxtagger.handlers.transaction import on_transaction
from foxtagger.limits.store import SqlLedgerStore

app = typer.Typer(help="Call FoxTagger RPC methods")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _parse_json(raw: str, what: str):
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        console.print(f"[red]✗ Invalid {what} JSON: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def call(
    method: str = typer.Argument(..., help="RPC method name"),
    params: str = typer.Option(None, "--params", "-p", help="Params as JSON"),
):
    """
    Call an RPC method and print the result as JSON.

    Example:
        python scripts/rpc.py call setPersistentStorage -p '{"0xabc...": {"limit": 1.5, "period": "weekly"}}'
    """
    load_dotenv()
    config = Config.from_env()
    dispatcher = RpcDispatcher.from_config(config)

    payload = _parse_json(params, "params") if params is not None else None

    try:
        result = dispatcher.handle(method, payload)
    except (MethodNotFoundError, InvalidParamsError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print_json(json.dumps(result))


@app.command()
def transaction(
    descriptor: str = typer.Argument(..., help="Transaction as JSON (from, to, value, gas...)"),
):
    """
    Show spending insights for an outgoing transaction.
    """
    load_dotenv()
    config = Config.from_env()
    store = SqlLedgerStore(config)

    tx = _parse_json(descriptor, "transaction")
    if not isinstance(tx, dict):
        console.print("[red]✗ Transaction must be a JSON object[/red]")
        raise typer.Exit(code=1)

    result = on_transaction(tx, store, symbol=config.native_symbol)

    table = Table(title="Transaction insights")
    table.add_column("Insight", style="cyan")
    table.add_column("Value")
    for label, value in result["insights"].items():
        table.add_row(label, value)

    console.print(table)


if __name__ == "__main__":
    app()
