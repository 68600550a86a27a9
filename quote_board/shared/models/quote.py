from sqlmodel import Field

from quote_board.shared.models.base import RecordModel


class Quote(RecordModel, table=True):
    """A named quote owned by exactly one company."""

    # Never reuse ids of deleted rows: id doubles as the list ordering key.
    __table_args__ = {"sqlite_autoincrement": True}

    name: str = Field(nullable=False)
    company_id: int = Field(foreign_key="company.id", index=True, nullable=False)
