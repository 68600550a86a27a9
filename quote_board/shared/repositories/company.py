from quote_board.shared.models.company import Company
from quote_board.shared.repositories.base import Repository


class CompanyRepository(Repository[Company]):
    _model = Company

    async def exists(self, company_id: int) -> bool:
        return await self.get(company_id) is not None
