from pydantic import Field

from roc_contracts.schemas.base import CamelModel
from roc_contracts.schemas.contract import Contract


class ContractSearchResponse(CamelModel):
    """One page of contract search results."""

    contracts: list[Contract]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_pages: int = Field(0, ge=0)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
