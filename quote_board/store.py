"""Quote store: validated writes with commit notifications."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from quote_board.errors import NotFoundError, ValidationError
from quote_board.events import CommitKind, CommitListener, QuoteSnapshot
from quote_board.infrastructure import RecordLocks
from quote_board.shared.models.company import Company
from quote_board.shared.models.quote import Quote
from quote_board.unit_of_work import UnitOfWork, UOWFactoryType

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "company_id"})


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


class QuoteStore:
    """Owns Quote records and notifies listeners after every committed write.

    Each successful create/update/delete commits first, then awaits every
    registered listener with ``(kind, snapshot)`` before returning to the
    caller. Writes to the same quote id are serialized through the commit and
    the notification, so listeners observe one event per commit in commit
    order. Failed writes neither commit nor notify.
    """

    def __init__(self, uow_factory: UOWFactoryType) -> None:
        self._uow_factory = uow_factory
        self._listeners: list[CommitListener] = []
        self._locks = RecordLocks()

    def subscribe(self, listener: CommitListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: CommitListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # Companies

    async def create_company(self, name: str) -> Company:
        if _is_blank(name):
            raise ValidationError({"name": ["can't be blank"]})

        async with self._uow_factory() as uow:
            company = await uow.companies.add(Company(name=name))
            await uow.commit()

        logger.info(f"Created company {company.id} ({company.name})")
        return company

    async def get_company(self, company_id: int) -> Company:
        async with self._uow_factory() as uow:
            company = await uow.companies.get(company_id)
        if company is None:
            raise NotFoundError("Company", company_id)
        return company

    async def list_companies(self) -> list[Company]:
        async with self._uow_factory() as uow:
            companies = await uow.companies.list_by_id()
        return list(companies)

    # Quotes

    async def create(self, name: str | None, company_id: int | None) -> Quote:
        """Insert a quote; raises ValidationError on a blank name or unknown company."""
        async with self._uow_factory() as uow:
            await self._validate(uow, name=name, company_id=company_id)
            quote = await uow.quotes.add(Quote(name=name, company_id=company_id))

            # The id is unknown to anyone else until commit, so this never waits.
            async with self._locks.hold(quote.id):  # type: ignore[arg-type]
                await uow.commit()
                snapshot = QuoteSnapshot.model_validate(quote)
                logger.info(f"Created quote {snapshot.id} for company {snapshot.company_id}")
                await self._notify(CommitKind.CREATED, snapshot)

        return quote

    async def update(self, quote_id: int, changes: Mapping[str, Any]) -> Quote:
        """Apply ``changes`` (name and/or company_id) and re-validate."""
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["is not an updatable attribute"] for field in unknown})

        async with self._locks.hold(quote_id):
            async with self._uow_factory() as uow:
                quote = await uow.quotes.get_for_update(quote_id)
                if quote is None:
                    raise NotFoundError("Quote", quote_id)

                name = changes.get("name", quote.name)
                company_id = changes.get("company_id", quote.company_id)
                await self._validate(uow, name=name, company_id=company_id)

                quote.name = name
                quote.company_id = company_id
                quote.touch()
                await uow.commit()
                snapshot = QuoteSnapshot.model_validate(quote)

            logger.info(f"Updated quote {snapshot.id}: {sorted(changes)}")
            await self._notify(CommitKind.UPDATED, snapshot)

        return quote

    async def delete(self, quote_id: int) -> None:
        async with self._locks.hold(quote_id):
            async with self._uow_factory() as uow:
                quote = await uow.quotes.get_for_update(quote_id)
                if quote is None:
                    raise NotFoundError("Quote", quote_id)

                snapshot = QuoteSnapshot.model_validate(quote)
                await uow.quotes.delete(quote)
                await uow.commit()

            logger.info(f"Deleted quote {snapshot.id}")
            await self._notify(CommitKind.DELETED, snapshot)

    async def get(self, quote_id: int) -> Quote:
        async with self._uow_factory() as uow:
            quote = await uow.quotes.get(quote_id)
        if quote is None:
            raise NotFoundError("Quote", quote_id)
        return quote

    async def list_ordered(self) -> Sequence[Quote]:
        """All quotes, newest (highest id) first."""
        async with self._uow_factory() as uow:
            quotes = await uow.quotes.list_ordered()
        return list(quotes)

    async def _validate(self, uow: UnitOfWork, *, name: object, company_id: object) -> None:
        errors: dict[str, list[str]] = {}
        if _is_blank(name):
            errors["name"] = ["can't be blank"]
        if (
            not isinstance(company_id, int)
            or isinstance(company_id, bool)
            or not await uow.companies.exists(company_id)
        ):
            errors["company"] = ["must exist"]
        if errors:
            raise ValidationError(errors)

    async def _notify(self, kind: CommitKind, snapshot: QuoteSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                await listener(kind, snapshot)
            except Exception as e:
                # NOTE: the write is already committed; a listener cannot undo it.
                logger.error(
                    f"Commit listener failed for quote {snapshot.id} ({kind}): {e}",
                    exc_info=True,
                )
