"""Domain events emitted by the quote store after each committed write."""

import datetime
from collections.abc import Awaitable, Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class CommitKind(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class QuoteSnapshot(BaseModel):
    """Immutable copy of a quote's committed state."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    company_id: int
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @property
    def dom_id(self) -> str:
        return f"quote_{self.id}"


# Called once per committed write, in commit order for a given quote id
CommitListener = Callable[[CommitKind, QuoteSnapshot], Awaitable[None]]
