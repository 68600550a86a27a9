from sqlmodel import Field

from quote_board.shared.models.base import RecordModel


class Company(RecordModel, table=True):
    """Owner of quotes. Only its identity matters to the quote store."""

    name: str = Field(index=True)
