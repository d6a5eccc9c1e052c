from pydantic import Field

from roc_contracts.enums import TemplateCategory
from roc_contracts.schemas.base import CamelModel, UtcDatetime
from roc_contracts.schemas.contract import ContractClause, ContractTermsUpdate


class ContractTemplate(CamelModel):
    id: str
    name: str
    description: str = ""
    category: TemplateCategory = TemplateCategory.residential
    clauses: list[ContractClause] = []
    default_terms: ContractTermsUpdate = Field(default_factory=ContractTermsUpdate)
    is_active: bool = True
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None
