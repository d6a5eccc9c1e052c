from pydantic import Field

from roc_contracts.enums import PaymentStatus, PaymentType
from roc_contracts.schemas.base import CamelModel, UtcDatetime


class ContractPayment(CamelModel):
    id: str
    type: PaymentType = PaymentType.rent
    amount: float = Field(..., ge=0)
    due_date: UtcDatetime
    paid_date: UtcDatetime | None = None
    status: PaymentStatus = PaymentStatus.pending
    description: str = ""
    reference: str | None = None


class PaymentCreate(CamelModel):
    type: PaymentType = PaymentType.rent
    amount: float = Field(..., ge=0)
    due_date: UtcDatetime
    paid_date: UtcDatetime | None = None
    status: PaymentStatus = PaymentStatus.pending
    description: str = ""
    reference: str | None = None


class PaymentUpdate(CamelModel):
    type: PaymentType | None = None
    amount: float | None = Field(None, ge=0)
    due_date: UtcDatetime | None = None
    paid_date: UtcDatetime | None = None
    status: PaymentStatus | None = None
    description: str | None = None
    reference: str | None = None
