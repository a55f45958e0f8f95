"""CLI: notifyfhe list, stats, send, read, reveal"""

import json
import math
from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

from notifyfhe.errors import MailboxError, NotFoundError
from notifyfhe.transform import format_number

console = Console()


def _get_client():
    from notifyfhe.cli.main import _get_client
    return _get_client()


def _run(coro):
    from notifyfhe.cli.main import _run
    return _run(coro)


def _report(err):
    from notifyfhe.cli.main import _report
    _report(err)


def _short(address: str) -> str:
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def _when(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


@click.command("list")
@click.option("--unread", "unread_only", is_flag=True, help="Show unread messages only")
@click.option("--search", default="", help="Filter by title")
@click.option("--json-output", "--json", is_flag=True)
def list_cmd(unread_only, search, json_output):
    """List messages, newest first."""

    async def _list():
        client = _get_client()
        try:
            await client.load_messages()
            messages = client.filter(search, unread_only)
        except MailboxError as e:
            _report(e)
        finally:
            await client.close()
        if json_output:
            click.echo(json.dumps([m.model_dump(by_alias=True) for m in messages], indent=2))
            return
        if not messages:
            console.print("[dim]No messages found[/dim]")
            return
        table = Table(title=f"Messages ({len(messages)})")
        table.add_column("ID", style="bold")
        table.add_column("Title")
        table.add_column("From")
        table.add_column("Date")
        table.add_column("Encrypted")
        for m in messages:
            title = m.title if m.is_read else f"[bold cyan]* {m.title}[/bold cyan]"
            table.add_row(m.id, title, _short(m.sender), _when(m.timestamp), m.payload[:50])
        console.print(table)

    _run(_list())


@click.command("stats")
def stats_cmd():
    """Show message counts."""

    async def _stats():
        client = _get_client()
        try:
            await client.load_messages()
            stats = await client.stats()
        except MailboxError as e:
            _report(e)
        finally:
            await client.close()
        table = Table(show_header=False)
        table.add_row("Total Messages", str(stats.total))
        table.add_row("Unread", str(stats.unread))
        table.add_row("Sent", str(stats.sent))
        table.add_row("Received", str(stats.received))
        console.print(table)

    _run(_stats())


@click.command("send")
@click.argument("title")
@click.argument("value", type=float)
def send_cmd(title: str, value: float):
    """Encrypt VALUE and send it under TITLE."""

    async def _send():
        client = _get_client()
        try:
            with console.status("Encrypting message..."):
                message = await client.send_message(title, value)
        except MailboxError as e:
            if e.details and e.details.get("orphaned"):
                console.print(f"[yellow]Message {e.details['message_id']} was stored but not indexed.[/yellow]")
            _report(e)
        finally:
            await client.close()
        console.print(f"[green]Message encrypted and sent: {message.id}[/green]")

    _run(_send())


@click.command("read")
@click.argument("message_id")
def read_cmd(message_id: str):
    """Mark a message as read."""

    async def _read():
        client = _get_client()
        try:
            await client.mark_as_read(message_id)
        except MailboxError as e:
            _report(e)
        finally:
            await client.close()
        console.print(f"[green]Marked {message_id} as read.[/green]")

    _run(_read())


@click.command("reveal")
@click.argument("message_id")
def reveal_cmd(message_id: str):
    """Decrypt a message after signing with the wallet."""

    async def _reveal():
        client = _get_client()
        try:
            messages = await client.load_messages()
            message = next((m for m in messages if m.id == message_id), None)
            if message is None:
                raise NotFoundError(message_id)
            if not message.is_read:
                await client.mark_as_read(message_id)
            with console.status("Waiting for wallet signature..."):
                value = await client.decrypt(message)
        except MailboxError as e:
            _report(e)
        finally:
            await client.close()
        console.print(f"[bold]{message.title}[/bold] from {_short(message.sender)} at {_when(message.timestamp)}")
        shown = format_number(value) if math.isfinite(value) else "unparsable"
        console.print(f"Decrypted content: [green]{shown}[/green]")

    _run(_reveal())
