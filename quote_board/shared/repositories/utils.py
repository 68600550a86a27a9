"""Utility functions for repository operations."""

from collections.abc import Sequence
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import asc, desc, select
from sqlmodel import SQLModel

# Signed 64-bit range shared by SQLite INTEGER and PostgreSQL BIGINT keys.
MIN_RECORD_ID = -(2**63)
MAX_RECORD_ID = 2**63 - 1

T = TypeVar("T", bound=SQLModel)


async def get_by_id(
    session: AsyncSession,
    model: type[T],
    record_id: int,
    for_update: bool = False,
) -> T | None:
    """Get a single record by integer primary key.

    Args:
        session: Database session
        model: Model class with an integer ``id`` primary key
        record_id: Primary key to search for
        for_update: Lock the row until the transaction ends (SELECT ... FOR UPDATE)

    Returns:
        Model instance or None if not found (including ids no column can hold)
    """
    if not MIN_RECORD_ID <= record_id <= MAX_RECORD_ID:
        return None

    stmt = select(model).where(model.id == record_id)  # type: ignore[attr-defined]
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_ordered(
    session: AsyncSession,
    model: type[T],
    column: str = "id",
    descending: bool = False,
) -> Sequence[T]:
    """Get all records of a model sorted by one column.

    Args:
        session: Database session
        model: Model class
        column: Name of the column to sort by (default: 'id')
        descending: Newest/highest first when True

    Returns:
        Sequence of model instances
    """
    order = desc if descending else asc
    stmt = select(model).order_by(order(getattr(model, column)))
    result = await session.execute(stmt)
    return result.scalars().all()
