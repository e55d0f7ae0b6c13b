"""Status command: chain height plus per-address balance and Archon flag."""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.table import Table

from demiurge_studio import __logo__
from demiurge_studio.chain.client import ChainClient, QueryResult


async def status_command(console: Console, client: ChainClient, addresses: list[str]) -> int:
    """Print a status overview; returns the process exit code."""
    info, *per_address = await asyncio.gather(
        client.fetch_chain_info(),
        *(
            asyncio.gather(client.fetch_balance(a), client.fetch_is_archon(a))
            for a in addresses
        ),
    )

    console.print(f"{__logo__} demiurge-studio Status\n")
    console.print(f"Endpoint: {client.endpoint_url}")
    if info.ok:
        console.print(f"Height: [cyan]{info.value}[/cyan] [green]✓[/green]")
    else:
        console.print(f"Height: [red]✗ {info.message}[/red]")

    failures: list[QueryResult] = [] if info.ok else [info]
    if addresses:
        table = Table()
        table.add_column("Address", style="cyan")
        table.add_column("Balance", justify="right")
        table.add_column("Archon")
        for address, (bal, arch) in zip(addresses, per_address):
            failures.extend(r for r in (bal, arch) if not r.ok)
            table.add_row(
                address,
                str(bal.value) if bal.ok else "[red]error[/red]",
                ("[green]yes[/green]" if arch.value else "no") if arch.ok else "[red]error[/red]",
            )
        console.print(table)
    else:
        console.print("[dim]No addresses given or configured.[/dim]")

    for r in failures:
        if r.address:
            console.print(f"[red]✗[/red] {r.method} ({r.address}): {r.message}")
    return 1 if failures else 0
