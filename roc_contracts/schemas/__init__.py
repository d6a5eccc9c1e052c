from roc_contracts.schemas.analytics import ContractAnalytics, MonthlyRevenue
from roc_contracts.schemas.contract import (
    Contract,
    ContractClause,
    ContractParty,
    ContractSearchParams,
    ContractSignatures,
    ContractTerms,
    ContractTermsUpdate,
    ContractValidationResult,
    CreateContractRequest,
    GuarantorSignature,
    GuestPolicy,
    PetPolicy,
    RenewContractRequest,
    RenewalTerms,
    SignContractRequest,
    TerminateContractRequest,
    UpdateContractRequest,
)
from roc_contracts.schemas.document import ContractDocument
from roc_contracts.schemas.error import ErrorResponse
from roc_contracts.schemas.event import ContractEvent, ContractNotification
from roc_contracts.schemas.pagination import ContractSearchResponse
from roc_contracts.schemas.payment import ContractPayment, PaymentCreate, PaymentUpdate
from roc_contracts.schemas.template import ContractTemplate

__all__ = [
    "Contract",
    "ContractAnalytics",
    "ContractClause",
    "ContractDocument",
    "ContractEvent",
    "ContractNotification",
    "ContractParty",
    "ContractPayment",
    "ContractSearchParams",
    "ContractSearchResponse",
    "ContractSignatures",
    "ContractTemplate",
    "ContractTerms",
    "ContractTermsUpdate",
    "ContractValidationResult",
    "CreateContractRequest",
    "ErrorResponse",
    "GuarantorSignature",
    "GuestPolicy",
    "MonthlyRevenue",
    "PaymentCreate",
    "PaymentUpdate",
    "PetPolicy",
    "RenewContractRequest",
    "RenewalTerms",
    "SignContractRequest",
    "TerminateContractRequest",
    "UpdateContractRequest",
]
