"""CLI commands for demiurge-studio.

The CLI is the single entry point: top-level query commands (chain-info,
balance, archon, nfts, listing, fabric-asset, block, send-tx, status) and
the ``config`` command group.
"""

import asyncio
from dataclasses import asdict, dataclass, is_dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from demiurge_studio import __logo__, __version__
from demiurge_studio.chain.client import ChainClient, QueryResult
from demiurge_studio.cli.command_groups.config_commands import register_config_commands
from demiurge_studio.cli.command_groups.status_command import status_command
from demiurge_studio.cli.shared.logging_utils import configure_stderr_logging, ensure_rotating_log_file
from demiurge_studio.config.loader import load_config
from demiurge_studio.config.schema import Config

T = TypeVar("T")

app = typer.Typer(
    name="demiurge-studio",
    help=f"{__logo__} demiurge-studio - Demiurge chain client",
    no_args_is_help=True,
)

console = Console()


@dataclass
class CliState:
    config: Config
    config_path: Path | None = None


def make_client(config: Config) -> ChainClient:
    """Build the chain client for one command invocation."""
    return ChainClient.from_config(config)


def run_with_client(ctx: typer.Context, work: Callable[[ChainClient], Awaitable[T]]) -> T:
    """Open a client, run ``work`` on the event loop, close the client."""
    state: CliState = ctx.obj

    async def _run() -> T:
        async with make_client(state.config) as client:
            return await work(client)

    return asyncio.run(_run())


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def _print_json(value: Any) -> None:
    console.print_json(data=_jsonable(value))


def _fail(result: QueryResult) -> None:
    label = f" ({result.address})" if result.address else ""
    console.print(f"[red]✗[/red] {result.method}{label}: {result.message}")
    logger.debug(f"{result.method} failed: {result.error.to_dict()}")


def _exit_on_errors(results: list[QueryResult]) -> None:
    failed = [r for r in results if not r.ok]
    for r in failed:
        _fail(r)
    if failed:
        raise typer.Exit(1)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} demiurge-studio v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    rpc_url: str = typer.Option(None, "--rpc-url", "-u", help="JSON-RPC endpoint (overrides config and DEMIURGE_RPC_URL)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.demiurge-studio/config.json)"),
    log_level: str = typer.Option(None, "--log-level", help="Log level for stderr (DEBUG, INFO, WARNING, ...)"),
):
    """demiurge-studio - query a Demiurge chain node."""
    try:
        config = load_config(config_path, overrides={"rpc_url": rpc_url, "log_level": log_level})
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    try:
        configure_stderr_logging(config.log_level)
    except ValueError:
        raise typer.BadParameter(f"unknown log level: {config.log_level}", param_hint="--log-level")
    if config.log_to_file:
        ensure_rotating_log_file("demiurge-studio", level=config.log_level)
    logger.debug(f"Using RPC endpoint {config.rpc_url}")
    ctx.obj = CliState(config=config, config_path=config_path)


# ============================================================================
# Core queries
# ============================================================================


@app.command("chain-info")
def chain_info(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show the current chain height."""
    result = run_with_client(ctx, lambda client: client.fetch_chain_info())
    _exit_on_errors([result])
    if as_json:
        _print_json({"height": result.value})
        return
    console.print(f"Height: [cyan]{result.value}[/cyan]")


@app.command()
def balance(
    ctx: typer.Context,
    addresses: list[str] = typer.Argument(..., help="Address hex strings"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show the CGT balance of one or more addresses (queried concurrently)."""

    async def _work(client: ChainClient) -> list[QueryResult]:
        return list(await asyncio.gather(*(client.fetch_balance(a) for a in addresses)))

    results = run_with_client(ctx, _work)
    ok = [r for r in results if r.ok]
    if as_json:
        _print_json({r.address: r.value for r in ok})
    else:
        table = Table(title="CGT balances")
        table.add_column("Address", style="cyan")
        table.add_column("Balance", justify="right")
        for r in ok:
            table.add_row(r.address, str(r.value))
        if ok:
            console.print(table)
    _exit_on_errors(results)


@app.command()
def archon(
    ctx: typer.Context,
    addresses: list[str] = typer.Argument(..., help="Address hex strings"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show whether addresses hold Archon status (queried concurrently)."""

    async def _work(client: ChainClient) -> list[QueryResult]:
        return list(await asyncio.gather(*(client.fetch_is_archon(a) for a in addresses)))

    results = run_with_client(ctx, _work)
    ok = [r for r in results if r.ok]
    if as_json:
        _print_json({r.address: r.value for r in ok})
    else:
        for r in ok:
            mark = "[green]✓ Archon[/green]" if r.value else "[dim]not Archon[/dim]"
            console.print(f"{r.address}: {mark}")
    _exit_on_errors(results)


@app.command("status")
def status(
    ctx: typer.Context,
    addresses: list[str] = typer.Argument(None, help="Addresses to inspect (default: config addresses)"),
):
    """Show chain height plus balance and Archon status per address."""
    state: CliState = ctx.obj
    targets = list(addresses or state.config.addresses)
    code = run_with_client(ctx, lambda client: status_command(console, client, targets))
    if code:
        raise typer.Exit(code)


# ============================================================================
# Assets, blocks and transactions
# ============================================================================


@app.command()
def nfts(
    ctx: typer.Context,
    address: str = typer.Argument(..., help="Owner address hex"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """List NFTs held by an address."""
    result = run_with_client(ctx, lambda client: client.fetch_nfts_by_owner(address))
    _exit_on_errors([result])
    if as_json:
        _print_json(result.value)
        return
    if not result.value:
        console.print(f"No NFTs owned by {address}.")
        return
    table = Table(title=f"NFTs of {address}")
    table.add_column("ID", style="cyan")
    table.add_column("Creator")
    table.add_column("Fabric root")
    table.add_column("Royalty (bps)", justify="right")
    for nft in result.value:
        if nft.missing:
            table.add_row(str(nft.id), "[dim]missing[/dim]", "", "")
            continue
        table.add_row(str(nft.id), nft.creator, nft.fabric_root_hash, str(nft.royalty_bps))
    console.print(table)


def _show_optional(ctx: typer.Context, work: Callable[[ChainClient], Awaitable[QueryResult]], label: str) -> None:
    result = run_with_client(ctx, work)
    _exit_on_errors([result])
    if result.value is None:
        console.print(f"[yellow]{label} not found[/yellow]")
        raise typer.Exit(1)
    _print_json(result.value)


@app.command()
def listing(
    ctx: typer.Context,
    listing_id: int = typer.Argument(..., help="Marketplace listing id"),
):
    """Show a marketplace listing."""
    _show_optional(ctx, lambda client: client.fetch_listing(listing_id), f"Listing {listing_id}")


@app.command("fabric-asset")
def fabric_asset(
    ctx: typer.Context,
    root_hash: str = typer.Argument(..., help="Fabric root hash (hex)"),
):
    """Show a Fabric asset by root hash."""
    _show_optional(ctx, lambda client: client.fetch_fabric_asset(root_hash), f"Fabric asset {root_hash}")


@app.command()
def block(
    ctx: typer.Context,
    height: int = typer.Argument(..., help="Block height"),
):
    """Show a block by height."""
    _show_optional(ctx, lambda client: client.fetch_block(height), f"Block {height}")


@app.command("send-tx")
def send_tx(
    ctx: typer.Context,
    tx_hex: str = typer.Argument(..., help="Hex-encoded signed transaction"),
):
    """Submit a raw transaction to the node's mempool."""
    result = run_with_client(ctx, lambda client: client.send_raw_transaction(tx_hex))
    _exit_on_errors([result])
    if result.value:
        console.print("[green]✓[/green] Transaction accepted")
        return
    console.print("[yellow]Transaction not accepted[/yellow]")
    raise typer.Exit(1)


# ============================================================================
# Config Commands
# ============================================================================

register_config_commands(app=app, console=console)


if __name__ == "__main__":
    app()
