"""CLI: notifyfhe config show|set"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _load_config() -> dict:
    from notifyfhe.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from notifyfhe.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Saved settings (~/.notifyfhe/config.json)."""


@config.command("show")
def config_show():
    """Show saved settings."""
    cfg = _load_config()
    if not cfg:
        console.print("[yellow]No settings saved. Using defaults.[/yellow]")
        return
    for key, value in cfg.items():
        console.print(f"{key}: [bold]{value}[/bold]")


@config.command("set")
@click.option("--rpc-url", default=None, help="Ledger JSON-RPC endpoint")
@click.option("--wallet-url", default=None, help="Wallet JSON-RPC endpoint")
def config_set(rpc_url: Optional[str], wallet_url: Optional[str]):
    """Save endpoints for later commands."""
    cfg = _load_config()
    if rpc_url:
        cfg["rpc_url"] = rpc_url
    if wallet_url:
        cfg["wallet_url"] = wallet_url
    _save_config(cfg)
    console.print("[green]Settings saved.[/green]")
