from collections.abc import Sequence
from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from quote_board.shared.repositories.utils import get_by_id, get_ordered

M = TypeVar("M", bound=SQLModel)


class Repository(Generic[M]):
    _model: type[M]

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, record: M) -> M:
        """Adds the record and flushes so the database assigns its id."""
        self._session.add(record)
        await self._session.flush()
        return record

    async def get(self, record_id: int) -> M | None:
        return await get_by_id(self._session, self._model, record_id)

    async def get_for_update(self, record_id: int) -> M | None:
        """Row-locking read; the lock is a no-op on SQLite."""
        return await get_by_id(self._session, self._model, record_id, for_update=True)

    async def delete(self, record: M) -> None:
        await self._session.delete(record)
        await self._session.flush()

    async def list_by_id(self, descending: bool = False) -> Sequence[M]:
        return await get_ordered(self._session, self._model, "id", descending=descending)
