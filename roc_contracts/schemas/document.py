from pydantic import Field

from roc_contracts.enums import DocumentType
from roc_contracts.schemas.base import CamelModel, UtcDatetime


class ContractDocument(CamelModel):
    id: str
    name: str
    type: DocumentType = DocumentType.other
    url: str = ""
    uploaded_at: UtcDatetime
    uploaded_by: str = ""
    size: int = Field(0, ge=0, description="Size in bytes")
    mime_type: str = "application/octet-stream"
