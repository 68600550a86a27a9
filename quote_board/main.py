"""Entry point for the quote board CLI."""

import argparse
import asyncio
import logging
import sys

from rich.console import Console

from quote_board.bootstrap import bootstrap
from quote_board.cli import build_parser
from quote_board.commands import run_command
from quote_board.errors import QuoteBoardError
from quote_board.logging_setup import configure_debug_loggers, configure_logging
from quote_board.runtime import RuntimeConfig, build_runtime_config
from quote_board.settings import Settings

logger = logging.getLogger(__name__)

error_console = Console(stderr=True)


async def run(config: RuntimeConfig, args: argparse.Namespace) -> None:
    """Bootstrap the board, run one command, release resources."""
    board = await bootstrap(
        db_connection=config.db_connection,
        broadcast_mode=config.broadcast_mode,
        subscriber_queue_size=config.subscriber_queue_size,
        engine_kwargs=config.db_engine_kwargs,
        session_kwargs=config.db_session_kwargs,
        create_schema=args.command == "init-db",
    )
    try:
        await run_command(board, args)
    finally:
        await board.close()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the quote board."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "update" and args.name is None and args.company_id is None:
        parser.error("update needs --name and/or --company-id")

    try:
        config = build_runtime_config(args, Settings())
    except Exception as e:
        sys.exit(f"Configuration error: {e}")

    configure_logging(config.log_level)
    configure_debug_loggers(config.debug_loggers)

    try:
        asyncio.run(run(config, args))
    except QuoteBoardError as e:
        error_console.print(f"[bold red]✗[/bold red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
