"""Runtime configuration building for quote board startup."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any

from quote_board.settings import Settings

logger = logging.getLogger(__name__)

BROADCAST_MODES = ("inline", "deferred")


@dataclass(frozen=True)
class RuntimeConfig:
    """Resolved startup configuration after CLI/ENV merge."""

    db_connection: str
    db_engine_kwargs: dict[str, Any]
    db_session_kwargs: dict[str, Any]
    broadcast_mode: str
    subscriber_queue_size: int
    log_level: str
    debug_loggers: str | None


def build_runtime_config(args: argparse.Namespace, settings: Settings) -> RuntimeConfig:
    """Resolve final runtime configuration used by main()."""
    db_connection = _pick(args, "db_connection", settings.db_connection)
    broadcast_mode = _pick(args, "broadcast_mode", settings.broadcast_mode)
    subscriber_queue_size = _pick(args, "queue_size", settings.subscriber_queue_size)
    log_level = str(_pick(args, "log_level", settings.log_level)).upper()
    debug_loggers = _pick(args, "debug_loggers", settings.debug_loggers)

    if broadcast_mode not in BROADCAST_MODES:
        raise ValueError(f"BROADCAST_MODE must be one of {', '.join(BROADCAST_MODES)}")
    if subscriber_queue_size <= 0:
        raise ValueError("SUBSCRIBER_QUEUE_SIZE must be greater than 0")
    if log_level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown LOG_LEVEL: {log_level}")

    return RuntimeConfig(
        db_connection=db_connection,
        db_engine_kwargs=_resolve_engine_kwargs(db_connection, settings.db.engine_kwargs),
        db_session_kwargs=_resolve_session_kwargs(settings.db.session_kwargs),
        broadcast_mode=broadcast_mode,
        subscriber_queue_size=subscriber_queue_size,
        log_level=log_level,
        debug_loggers=debug_loggers,
    )


def _pick(args: argparse.Namespace, name: str, fallback: Any) -> Any:  # noqa: ANN401
    value = getattr(args, name, None)
    return value if value is not None else fallback


def _resolve_engine_kwargs(
    db_connection: str, service_engine_kwargs: dict[str, Any] | None
) -> dict[str, Any]:
    defaults: dict[str, Any] = {"echo": False}
    # Pool sizing is rejected by the in-memory SQLite pool; only servers get it.
    if not db_connection.startswith("sqlite"):
        defaults.update({"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20})
    return {**defaults, **(service_engine_kwargs or {})}


def _resolve_session_kwargs(service_session_kwargs: dict[str, Any] | None) -> dict[str, Any]:
    # Committed records are read after their session closes; expiry stays off.
    return {**(service_session_kwargs or {}), "expire_on_commit": False}
