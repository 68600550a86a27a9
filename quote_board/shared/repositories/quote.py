from collections.abc import Sequence

from quote_board.shared.models.quote import Quote
from quote_board.shared.repositories.base import Repository


class QuoteRepository(Repository[Quote]):
    """Repository for managing quotes."""

    _model = Quote

    async def list_ordered(self) -> Sequence[Quote]:
        """Newest first (id descending)."""
        return await self.list_by_id(descending=True)
