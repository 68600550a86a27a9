"""CLI command handlers and rich output."""

import argparse
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from quote_board.bootstrap import QuoteBoard
from quote_board.broadcasting import QUOTES_CHANNEL, BroadcastMessage, Subscription
from quote_board.shared.models import Company, Quote

console = Console()


async def run_command(board: QuoteBoard, args: argparse.Namespace) -> None:
    """Dispatch one parsed CLI command against a bootstrapped board."""
    store = board.store

    if args.command == "init-db":
        console.print("[bold green]✓[/bold green] Database schema ready")
        return

    if args.command == "add-company":
        company = await store.create_company(args.name)
        console.print(f"[bold green]✓[/bold green] Company {company.id} created: {company.name}")
        return

    if args.command == "companies":
        print_companies(await store.list_companies())
        return

    if args.command == "list":
        print_quotes(await store.list_ordered())
        return

    # Mutating commands: show what the write broadcast on the quotes channel.
    async with board.hub.subscribe(QUOTES_CHANNEL) as subscription:
        if args.command == "create":
            quote = await store.create(args.name, args.company_id)
            console.print(f"[bold green]✓[/bold green] Quote {quote.id} created")
        elif args.command == "update":
            quote = await store.update(args.id, _changes(args))
            console.print(f"[bold green]✓[/bold green] Quote {quote.id} updated")
        elif args.command == "delete":
            await store.delete(args.id)
            console.print(f"[bold green]✓[/bold green] Quote {args.id} deleted")
        else:
            raise ValueError(f"Unknown command: {args.command}")

        await board.flush()
        print_messages(_drain(subscription))


def _changes(args: argparse.Namespace) -> dict[str, object]:
    changes: dict[str, object] = {}
    if args.name is not None:
        changes["name"] = args.name
    if args.company_id is not None:
        changes["company_id"] = args.company_id
    return changes


def _drain(subscription: Subscription) -> list[BroadcastMessage]:
    messages = []
    while subscription.pending:
        messages.append(subscription.get_nowait())
    return messages


def print_quotes(quotes: Sequence[Quote]) -> None:
    if not quotes:
        console.print("[yellow]No quotes yet[/yellow]")
        return

    table = Table(title="Quotes (newest first)")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Company", justify="right")
    table.add_column("Updated", style="dim")
    for quote in quotes:
        table.add_row(
            str(quote.id),
            quote.name,
            str(quote.company_id),
            quote.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)


def print_companies(companies: Sequence[Company]) -> None:
    if not companies:
        console.print("[yellow]No companies yet[/yellow]")
        return

    table = Table(title="Companies")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name")
    for company in companies:
        table.add_row(str(company.id), company.name)
    console.print(table)


def print_messages(messages: Sequence[BroadcastMessage]) -> None:
    for message in messages:
        console.print(
            f"[bold cyan]→ {QUOTES_CHANNEL}[/bold cyan] "
            f"{message.kind} target={message.target_id} insertion={message.insertion}"
        )
        console.print(message.to_turbo_stream(), markup=False, highlight=False, soft_wrap=True)
