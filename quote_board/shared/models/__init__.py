"""Database models for the quote board."""

from quote_board.shared.models.base import RecordModel
from quote_board.shared.models.company import Company
from quote_board.shared.models.quote import Quote

__all__ = [
    # Base classes
    "RecordModel",
    # Models
    "Company",
    "Quote",
]
