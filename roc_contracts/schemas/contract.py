from typing import Any

from pydantic import Field, field_validator, model_validator

from roc_contracts.enums import (
    ClauseCategory,
    ContractStatus,
    MaintenanceResponsibility,
    PartyRole,
    PaymentFrequency,
    SignatureType,
    SortField,
    SortOrder,
)
from roc_contracts.schemas.base import CamelModel, UtcDatetime
from roc_contracts.schemas.document import ContractDocument
from roc_contracts.schemas.payment import ContractPayment


class ContractParty(CamelModel):
    id: str
    name: str
    email: str
    phone: str = ""
    id_number: str = Field("", description="Government-issued ID number")
    address: str = ""
    role: PartyRole


class PetPolicy(CamelModel):
    allowed: bool = False
    deposit: float | None = Field(None, ge=0)
    restrictions: str | None = None


class GuestPolicy(CamelModel):
    allowed: bool = True
    max_duration: int | None = Field(None, ge=0, description="Days")
    max_guests: int | None = Field(None, ge=0)


class RenewalTerms(CamelModel):
    automatic: bool = False
    notice_period: int = Field(30, ge=0, description="Days")
    rent_increase: float | None = Field(None, description="Percentage")


class ContractTerms(CamelModel):
    rent_amount: float = Field(..., gt=0, description="Rent amount must be greater than 0")
    deposit_amount: float = Field(0, ge=0)
    payment_frequency: PaymentFrequency = PaymentFrequency.monthly
    payment_due_day: int = Field(1, ge=1, le=31, description="Day of month (1-31)")
    late_fee_amount: float | None = Field(None, ge=0)
    late_fee_grace_period: int | None = Field(None, ge=0, description="Days")
    utilities_included: list[str] = []
    maintenance_responsibility: MaintenanceResponsibility = MaintenanceResponsibility.shared
    pet_policy: PetPolicy = Field(default_factory=PetPolicy)
    smoking_policy: bool = False
    guest_policy: GuestPolicy = Field(default_factory=GuestPolicy)
    renewal_terms: RenewalTerms | None = None

    @field_validator("utilities_included")
    @classmethod
    def dedupe_utilities(cls, v: list[str]) -> list[str]:
        """Utilities are a set; keep first occurrence order."""
        return list(dict.fromkeys(v))


class ContractTermsUpdate(CamelModel):
    """Partial terms; only the fields that are set are sent or merged."""

    rent_amount: float | None = Field(None, gt=0)
    deposit_amount: float | None = Field(None, ge=0)
    payment_frequency: PaymentFrequency | None = None
    payment_due_day: int | None = Field(None, ge=1, le=31)
    late_fee_amount: float | None = Field(None, ge=0)
    late_fee_grace_period: int | None = Field(None, ge=0)
    utilities_included: list[str] | None = None
    maintenance_responsibility: MaintenanceResponsibility | None = None
    pet_policy: PetPolicy | None = None
    smoking_policy: bool | None = None
    guest_policy: GuestPolicy | None = None
    renewal_terms: RenewalTerms | None = None


class ContractClause(CamelModel):
    id: str
    title: str
    content: str
    category: ClauseCategory = ClauseCategory.other
    mandatory: bool = False
    customizable: bool = True


class GuarantorSignature(CamelModel):
    signed: bool = False
    signed_at: UtcDatetime | None = None
    signature: str | None = None


class ContractSignatures(CamelModel):
    tenant_signed: bool = False
    tenant_signed_at: UtcDatetime | None = None
    tenant_signature: str | None = None
    hoster_signed: bool = False
    hoster_signed_at: UtcDatetime | None = None
    hoster_signature: str | None = None
    guarantors_signed: dict[str, GuarantorSignature] = {}


class Contract(CamelModel):
    id: str
    property_id: str
    property_title: str = ""
    property_address: str = ""

    tenant: ContractParty
    hoster: ContractParty
    guarantors: list[ContractParty] = []

    start_date: UtcDatetime
    end_date: UtcDatetime
    terms: ContractTerms
    clauses: list[ContractClause] = []

    status: ContractStatus = ContractStatus.draft
    created_at: UtcDatetime
    updated_at: UtcDatetime | None = None
    signed_at: UtcDatetime | None = None
    activated_at: UtcDatetime | None = None
    terminated_at: UtcDatetime | None = None
    termination_reason: str | None = None

    documents: list[ContractDocument] = []
    payments: list[ContractPayment] = []
    signatures: ContractSignatures = Field(default_factory=ContractSignatures)

    notes: str | None = None
    custom_fields: dict[str, Any] = {}

    @model_validator(mode="after")
    def validate_end_date_after_start_date(self):
        """Ensure end_date is strictly after start_date."""
        if self.end_date <= self.start_date:
            raise ValueError(f"end_date ({self.end_date}) must be after start_date ({self.start_date})")
        return self


class CreateContractRequest(CamelModel):
    property_id: str = Field(..., min_length=1)
    tenant_id: str = Field(..., min_length=1)
    guarantor_ids: list[str] = []
    template_id: str | None = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    terms: ContractTerms
    clauses: list[ContractClause] = []
    custom_fields: dict[str, Any] = {}

    @model_validator(mode="after")
    def validate_end_date_after_start_date(self):
        """Ensure end_date is strictly after start_date."""
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class UpdateContractRequest(CamelModel):
    terms: ContractTermsUpdate | None = None
    clauses: list[ContractClause] | None = None
    status: ContractStatus | None = None
    notes: str | None = None
    custom_fields: dict[str, Any] | None = None


class SignContractRequest(CamelModel):
    signature_type: SignatureType
    guarantor_id: str | None = None
    signature: str | None = None

    @model_validator(mode="after")
    def validate_guarantor_id(self):
        """A guarantor signature must name the guarantor, other parties must not."""
        if self.signature_type == SignatureType.guarantor and not self.guarantor_id:
            raise ValueError("guarantor_id is required for guarantor signatures")
        if self.signature_type != SignatureType.guarantor and self.guarantor_id is not None:
            raise ValueError("guarantor_id is only allowed for guarantor signatures")
        return self


class TerminateContractRequest(CamelModel):
    reason: str

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("A termination reason is required")
        return v.strip()


class RenewContractRequest(CamelModel):
    new_end_date: UtcDatetime
    new_terms: ContractTermsUpdate | None = None


class ContractSearchParams(CamelModel):
    status: ContractStatus | None = None
    property_id: str | None = None
    tenant_id: str | None = None
    hoster_id: str | None = None
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None
    page: int | None = Field(None, ge=1, description="Page number (1-indexed)")
    limit: int | None = Field(None, ge=1, le=100, description="Number of items per page")
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None

    def to_query_params(self) -> dict[str, str]:
        """Query-string parameters; unset values are omitted."""
        return {key: str(value) for key, value in self.to_payload(exclude_none=True).items()}


class ContractValidationResult(CamelModel):
    valid: bool
    errors: list[str] = []
