"""Unit of Work implementation for the quote board.

Provides concrete UnitOfWork with the repositories needed for quotes and
their owning companies.
"""

import asyncio
from collections.abc import Callable
from types import TracebackType
from typing import Any, Self

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from quote_board.shared.repositories import CompanyRepository, QuoteRepository

# Type alias for UoW factory function
UOWFactoryType = Callable[[], "UnitOfWork"]


def setup_db_session(
    db_connection: str,
    session_kwargs: dict[str, Any] | None = None,
    engine_kwargs: dict[str, Any] | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Create a SQLAlchemy async session factory.

    ``expire_on_commit`` is always False: the store reads committed records
    after their session has closed to build commit notifications.
    """
    session_kwargs = {**(session_kwargs or {}), "expire_on_commit": False}
    engine_kwargs = engine_kwargs or {}

    engine = create_async_engine(db_connection, **engine_kwargs)
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        **session_kwargs,
    )


class UnitOfWorkFactory:
    """Callable producing UnitOfWork instances bound to one engine."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def __call__(self) -> "UnitOfWork":
        return UnitOfWork(self._session_factory)

    @property
    def engine(self) -> AsyncEngine:
        return self._session_factory.kw["bind"]

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


def create_uow_factory(
    db_connection: str,
    session_kwargs: dict[str, Any] | None = None,
    engine_kwargs: dict[str, Any] | None = None,
) -> UnitOfWorkFactory:
    """Create a factory that produces UnitOfWork instances.

    Args:
        db_connection: Database connection string
        session_kwargs: Additional kwargs for async_sessionmaker (optional)
        engine_kwargs: Additional kwargs for create_async_engine (optional)

    Returns:
        A callable that creates UnitOfWork instances
    """
    session_factory = setup_db_session(
        db_connection,
        session_kwargs=session_kwargs,
        engine_kwargs=engine_kwargs,
    )
    return UnitOfWorkFactory(session_factory)


class UnitOfWork:
    """Unit of Work for the quote board.

    Encapsulates the repositories and manages transaction boundaries.

    Repositories:
        - companies: Owners of quotes
        - quotes: Quote records

    Usage:
        async with uow_factory() as uow:
            company = await uow.companies.get(1)
            quotes = await uow.quotes.list_ordered()
    """

    companies: CompanyRepository
    quotes: QuoteRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize UnitOfWork with a session factory.

        Args:
            session_factory: SQLAlchemy async sessionmaker for creating database sessions
        """
        self._session_factory: async_sessionmaker[AsyncSession] = session_factory

    async def __aenter__(self) -> Self:
        """Initialize session and all repositories.

        Returns:
            Self: UnitOfWork instance with initialized repositories
        """
        self._session: AsyncSession = self._session_factory()

        self.companies = CompanyRepository(self._session)
        self.quotes = QuoteRepository(self._session)

        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Handle transaction completion and cleanup.

        Automatically commits the transaction if no exception occurred,
        otherwise rolls back. Always closes the session safely.
        """
        try:
            if exc_val:
                await self.rollback()
            else:
                await self.commit()
        finally:
            await self._close()

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._session.commit()

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        await self._session.rollback()

    async def create_schema(self) -> None:
        """Create missing tables for all registered models."""
        connection = await self._session.connection()
        await connection.run_sync(SQLModel.metadata.create_all)

    async def _close(self) -> None:
        """Close the session with cancellation protection.

        Uses asyncio.shield to ensure cleanup completes even if the task is cancelled,
        preventing connection leaks.
        """
        await asyncio.shield(self._session.close())
