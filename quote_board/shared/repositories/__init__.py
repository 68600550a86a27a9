"""Repository layer for database access using the Repository pattern."""

from quote_board.shared.repositories.base import Repository
from quote_board.shared.repositories.company import CompanyRepository
from quote_board.shared.repositories.quote import QuoteRepository

__all__ = [
    # Base
    "Repository",
    # Repositories
    "CompanyRepository",
    "QuoteRepository",
]
