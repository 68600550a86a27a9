"""Logging setup helpers for quote board startup."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure base logging and quiet the database drivers."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)


def configure_debug_loggers(loggers_spec: str | None) -> None:
    """Enable DEBUG logs for quote_board submodules, e.g. "store,broadcasting.hub"."""
    for name in _parse_csv(loggers_spec):
        logging.getLogger(f"quote_board.{name}").setLevel(logging.DEBUG)
    if loggers_spec:
        logger.info("Enabling DEBUG logging for: %s", _parse_csv(loggers_spec))


def _parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
