"""
NotifyFHE CLI — `notifyfhe` command.

Commands:
  notifyfhe list             List messages (newest first)
  notifyfhe stats            Total / unread / sent / received counts
  notifyfhe send TITLE VALUE Encrypt and send a numeric message
  notifyfhe read ID          Mark a message as read
  notifyfhe reveal ID        Decrypt a message with a wallet signature
  notifyfhe config <cmd>     Show or change saved settings
"""

import asyncio
import json
import logging
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install notifyfhe[cli]")

from notifyfhe.client import AsyncNotifyFHE
from notifyfhe.errors import (
    LedgerUnavailableError,
    MailboxError,
    NotFoundError,
    UserDeclinedError,
    WalletNotConnectedError,
)
from notifyfhe.transport.rpc import DEFAULT_RPC_URL

console = Console()
CONFIG_FILE = Path.home() / ".notifyfhe" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client() -> AsyncNotifyFHE:
    cfg = _load_config()
    ctx = click.get_current_context(silent=True)
    overrides = (ctx.find_root().obj or {}) if ctx else {}
    return AsyncNotifyFHE(
        rpc_url=overrides.get("rpc_url") or cfg.get("rpc_url", DEFAULT_RPC_URL),
        wallet_url=overrides.get("wallet_url") or cfg.get("wallet_url"),
    )


def _run(coro):
    return asyncio.run(coro)


def _report(err: MailboxError) -> None:
    """Print a failure with a message specific to its kind, then exit non-zero."""
    if isinstance(err, UserDeclinedError):
        console.print(f"[yellow]{err}[/yellow]")
    elif isinstance(err, NotFoundError):
        console.print(f"[red]{err}[/red]")
    elif isinstance(err, WalletNotConnectedError):
        console.print("[red]Please connect wallet first (check `notifyfhe config show`).[/red]")
    elif isinstance(err, LedgerUnavailableError):
        console.print("[red]The ledger is not available right now. Try again later.[/red]")
    else:
        console.print(f"[red]Operation failed: {err}[/red]")
    raise SystemExit(1)


@click.group()
@click.version_option("0.1.0")
@click.option("--rpc-url", default=None, help="Ledger JSON-RPC endpoint")
@click.option("--wallet-url", default=None, help="Wallet JSON-RPC endpoint (defaults to --rpc-url)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, rpc_url, wallet_url, verbose):
    """NotifyFHE CLI — private numeric messages on a key-value ledger."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    ctx.obj = {"rpc_url": rpc_url, "wallet_url": wallet_url}


# Register subcommands from separate modules
from notifyfhe.cli.config import config
from notifyfhe.cli.messages import list_cmd, stats_cmd, send_cmd, read_cmd, reveal_cmd

main.add_command(config)
main.add_command(list_cmd)
main.add_command(stats_cmd)
main.add_command(send_cmd)
main.add_command(read_cmd)
main.add_command(reveal_cmd)


if __name__ == "__main__":
    main()
