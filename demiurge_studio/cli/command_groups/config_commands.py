"""Config command group (show/path/set-endpoint/add-address)."""

from __future__ import annotations


import httpx
import typer
from rich.console import Console

from demiurge_studio.config.loader import convert_to_camel, get_config_path, save_config


def register_config_commands(app: typer.Typer, console: Console) -> None:
    """Register the config command group."""
    config_app = typer.Typer(help="Inspect and edit ~/.demiurge-studio/config.json")
    app.add_typer(config_app, name="config")

    @config_app.command("show")
    def config_show(ctx: typer.Context) -> None:
        """Print the effective configuration (file, env and CLI options merged)."""
        data = convert_to_camel(ctx.obj.config.model_dump())
        console.print_json(data=data)

    @config_app.command("path")
    def config_path(ctx: typer.Context) -> None:
        path = ctx.obj.config_path or get_config_path()
        mark = "[green]✓[/green]" if path.exists() else "[dim](not created yet)[/dim]"
        console.print(f"{path} {mark}")

    @config_app.command("set-endpoint")
    def config_set_endpoint(
        ctx: typer.Context,
        url: str = typer.Argument(..., help="JSON-RPC endpoint, e.g. http://127.0.0.1:8545/rpc"),
    ) -> None:
        """Persist a new default RPC endpoint."""
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            console.print(f"[red]Invalid URL:[/red] {e}")
            raise typer.Exit(1)
        if parsed.scheme not in ("http", "https") or not parsed.host:
            console.print(f"[red]Invalid URL:[/red] {url} (expected http:// or https://)")
            raise typer.Exit(1)
        cfg = ctx.obj.config.model_copy(update={"rpc_url": url})
        path = save_config(cfg, ctx.obj.config_path)
        ctx.obj.config = cfg
        console.print(f"[green]✓[/green] RPC endpoint set to {url} ({path})")

    @config_app.command("add-address")
    def config_add_address(
        ctx: typer.Context,
        address: str = typer.Argument(..., help="Address hex used by `status` when none is given"),
    ) -> None:
        cfg = ctx.obj.config
        if address in cfg.addresses:
            console.print(f"[yellow]Already configured:[/yellow] {address}")
            return
        cfg = cfg.model_copy(update={"addresses": [*cfg.addresses, address]})
        path = save_config(cfg, ctx.obj.config_path)
        ctx.obj.config = cfg
        console.print(f"[green]✓[/green] Added {address} ({path})")
