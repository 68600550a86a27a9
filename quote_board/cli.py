"""CLI argument parsing for the quote board."""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser used by the main entrypoint."""
    parser = argparse.ArgumentParser(
        prog="quote-board",
        description="Quote board - quotes per company with live list broadcasts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create tables
  quote-board init-db

  # Add a company and a quote for it
  quote-board add-company "Kpop Corp"
  quote-board create "First quote" --company-id 1

  # Rename, delete, list newest first
  quote-board update 1 --name "Renamed quote"
  quote-board delete 1
  quote-board list

  # Deliver broadcasts from a background worker
  quote-board --broadcast-mode deferred create "Second quote" --company-id 1

Environment Variables:
  QUOTES_DB_CONNECTION   SQLAlchemy async URL (default: sqlite+aiosqlite:///quotes.db)
  QUOTES_ENGINE_KWARGS   JSON dict passed to create_async_engine
  QUOTES_SESSION_KWARGS  JSON dict passed to async_sessionmaker
  BROADCAST_MODE         inline | deferred (default: inline)
  SUBSCRIBER_QUEUE_SIZE  Per-subscriber queue bound (default: 100)
  LOG_LEVEL              Root log level (default: INFO)
  DEBUG_LOGGERS          Comma-separated quote_board submodules for DEBUG logging
        """,
    )

    parser.add_argument(
        "--db-connection",
        type=str,
        default=None,
        help="SQLAlchemy async database URL (overrides QUOTES_DB_CONNECTION).",
    )
    parser.add_argument(
        "--broadcast-mode",
        choices=["inline", "deferred"],
        default=None,
        help="Publish inside the write (inline) or from a background worker (deferred).",
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=None,
        help="Bound of each subscriber queue.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Root log level (DEBUG, INFO, WARNING, ...).",
    )
    parser.add_argument(
        "--debug-loggers",
        type=str,
        default=None,
        help="Comma-separated quote_board submodules for DEBUG logging.",
    )

    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    commands.add_parser("init-db", help="Create missing tables.")

    add_company = commands.add_parser("add-company", help="Create a company.")
    add_company.add_argument("name", type=str)

    commands.add_parser("companies", help="List companies.")

    create = commands.add_parser("create", help="Create a quote.")
    create.add_argument("name", type=str)
    create.add_argument("--company-id", type=int, required=True)

    update = commands.add_parser("update", help="Update a quote.")
    update.add_argument("id", type=int)
    update.add_argument("--name", type=str, default=None)
    update.add_argument("--company-id", type=int, default=None)

    delete = commands.add_parser("delete", help="Delete a quote.")
    delete.add_argument("id", type=int)

    commands.add_parser("list", help="List quotes, newest first.")

    return parser
