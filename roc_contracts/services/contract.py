import logging
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from roc_contracts.core.config import Settings
from roc_contracts.domain.contract_validation import errors_from_pydantic, validate_create_request
from roc_contracts.enums import DocumentType, SignatureType
from roc_contracts.errors import (
    INVALID_TRANSITION,
    ContractValidationError,
    NetworkError,
    NotFoundError,
    RemoteError,
    RemoteInvalidTransitionError,
)
from roc_contracts.schemas.analytics import ContractAnalytics
from roc_contracts.schemas.base import to_iso
from roc_contracts.schemas.contract import (
    Contract,
    ContractSearchParams,
    ContractTermsUpdate,
    ContractValidationResult,
    CreateContractRequest,
    RenewContractRequest,
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

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=Enum)

_payments_adapter = TypeAdapter(list[ContractPayment])
_templates_adapter = TypeAdapter(list[ContractTemplate])
_events_adapter = TypeAdapter(list[ContractEvent])
_notifications_adapter = TypeAdapter(list[ContractNotification])


def _build(model: type[M], **fields: Any) -> M:
    """Construct a request model, reporting bad input as ContractValidationError."""
    try:
        return model(**fields)
    except ValidationError as exc:
        raise ContractValidationError(errors_from_pydantic(exc)) from exc


def coerce_enum(enum_type: type[E], value: E | str, field: str) -> E:
    """Read ``value`` as a member of ``enum_type``, reporting unknown values as ContractValidationError."""
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ContractValidationError({field: f"'{value}' is not one of: {allowed}"}) from exc


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class ContractService:
    """Async client for the ``/contracts`` REST API.

    One coroutine per endpoint. Requests are single-shot: a non-2xx answer
    raises RemoteError (or a subclass) carrying the server's message, and a
    transport failure raises NetworkError. Nothing is retried.

    Use as ``async with ContractService(settings) as contracts: ...`` or pass
    an existing ``httpx.AsyncClient`` (which the service will not close).
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.request_timeout)

    async def __aenter__(self) -> "ContractService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"
        return headers

    def _url(self, *segments: str) -> str:
        path = "/".join(_segment(s) for s in segments)
        return f"{self.settings.api_base_url}/contracts" + (f"/{path}" if path else "")

    async def _request(
        self,
        method: str,
        url: str,
        *,
        action: str,
        lifecycle: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.debug("%s %s (%s)", method, url, action)
        try:
            response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.warning("Failed to %s: %s", action, e)
            raise NetworkError(
                f"Could not reach the contracts service to {action}. Check your connection and try again."
            ) from e

        if not response.is_success:
            raise self._error_from_response(response, action=action, lifecycle=lifecycle)
        return response

    def _error_from_response(self, response: httpx.Response, *, action: str, lifecycle: bool) -> RemoteError:
        try:
            body = ErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            body = ErrorResponse()

        message = body.best_message() or f"Failed to {action}"
        status_code = response.status_code
        logger.warning("Failed to %s: HTTP %d %s", action, status_code, message)

        if status_code == httpx.codes.NOT_FOUND:
            return NotFoundError(message, status_code=status_code, code=body.code)
        if body.code == INVALID_TRANSITION or (lifecycle and status_code == httpx.codes.CONFLICT):
            return RemoteInvalidTransitionError(message, status_code=status_code, code=body.code, action=action)
        return RemoteError(message, status_code=status_code, code=body.code)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create_contract(self, data: CreateContractRequest | dict[str, Any]) -> Contract:
        """Create a draft contract.

        The form is validated locally first (see validate_create_request); a
        ContractValidationError means nothing was sent.
        """
        request = validate_create_request(data, min_days=self.settings.min_contract_days)
        response = await self._request(
            "POST", self._url(), action="create contract", json=request.to_payload()
        )
        contract = Contract.model_validate(response.json())
        logger.info("Created contract %s", contract.id)
        return contract

    async def get_contract(self, contract_id: str) -> Contract:
        response = await self._request("GET", self._url(contract_id), action="fetch contract")
        return Contract.model_validate(response.json())

    async def update_contract(self, contract_id: str, data: UpdateContractRequest) -> Contract:
        """Partial update; only fields explicitly set on ``data`` are sent."""
        response = await self._request(
            "PUT",
            self._url(contract_id),
            action="update contract",
            lifecycle=data.status is not None,
            json=data.to_payload(exclude_unset=True),
        )
        return Contract.model_validate(response.json())

    async def delete_contract(self, contract_id: str) -> None:
        await self._request("DELETE", self._url(contract_id), action="delete contract")
        logger.info("Deleted contract %s", contract_id)

    async def search_contracts(self, params: ContractSearchParams | None = None) -> ContractSearchResponse:
        params = params or ContractSearchParams()
        response = await self._request(
            "GET", self._url(), action="search contracts", params=params.to_query_params()
        )
        return ContractSearchResponse.model_validate(response.json())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def sign_contract(
        self,
        contract_id: str,
        signature_type: SignatureType | str,
        guarantor_id: str | None = None,
        signature: str | None = None,
    ) -> Contract:
        request = _build(
            SignContractRequest,
            signature_type=signature_type,
            guarantor_id=guarantor_id,
            signature=signature,
        )
        response = await self._request(
            "POST",
            self._url(contract_id, "sign"),
            action="sign contract",
            lifecycle=True,
            json=request.to_payload(exclude_none=True),
        )
        return Contract.model_validate(response.json())

    async def activate_contract(self, contract_id: str) -> Contract:
        response = await self._request(
            "POST", self._url(contract_id, "activate"), action="activate contract", lifecycle=True
        )
        return Contract.model_validate(response.json())

    async def terminate_contract(self, contract_id: str, reason: str) -> Contract:
        """Terminate an active contract; a blank reason is rejected before sending."""
        request = _build(TerminateContractRequest, reason=reason)
        response = await self._request(
            "POST",
            self._url(contract_id, "terminate"),
            action="terminate contract",
            lifecycle=True,
            json=request.to_payload(),
        )
        return Contract.model_validate(response.json())

    async def renew_contract(
        self,
        contract_id: str,
        new_end_date: datetime,
        new_terms: ContractTermsUpdate | None = None,
    ) -> Contract:
        request = _build(RenewContractRequest, new_end_date=new_end_date, new_terms=new_terms)
        payload = {"newEndDate": to_iso(request.new_end_date)}
        if request.new_terms is not None:
            payload["newTerms"] = request.new_terms.to_payload(exclude_unset=True, exclude_none=True)
        response = await self._request(
            "POST",
            self._url(contract_id, "renew"),
            action="renew contract",
            lifecycle=True,
            json=payload,
        )
        return Contract.model_validate(response.json())

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    async def get_contract_payments(self, contract_id: str) -> list[ContractPayment]:
        response = await self._request("GET", self._url(contract_id, "payments"), action="fetch payments")
        return _payments_adapter.validate_python(response.json())

    async def record_payment(self, contract_id: str, data: PaymentCreate) -> ContractPayment:
        response = await self._request(
            "POST",
            self._url(contract_id, "payments"),
            action="record payment",
            json=data.to_payload(exclude_none=True),
        )
        return ContractPayment.model_validate(response.json())

    async def update_payment(self, contract_id: str, payment_id: str, data: PaymentUpdate) -> ContractPayment:
        response = await self._request(
            "PUT",
            self._url(contract_id, "payments", payment_id),
            action="update payment",
            json=data.to_payload(exclude_unset=True),
        )
        return ContractPayment.model_validate(response.json())

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def upload_document(
        self,
        contract_id: str,
        filename: str,
        content: bytes | BinaryIO,
        document_type: DocumentType | str,
        mime_type: str = "application/octet-stream",
    ) -> ContractDocument:
        document_type = coerce_enum(DocumentType, document_type, "document_type")
        response = await self._request(
            "POST",
            self._url(contract_id, "documents"),
            action="upload document",
            files={"file": (filename, content, mime_type)},
            data={"type": document_type.value},
        )
        document = ContractDocument.model_validate(response.json())
        logger.info("Uploaded document %s to contract %s", document.id, contract_id)
        return document

    async def delete_document(self, contract_id: str, document_id: str) -> None:
        await self._request(
            "DELETE", self._url(contract_id, "documents", document_id), action="delete document"
        )

    async def download_document(self, contract_id: str, document_id: str) -> bytes:
        response = await self._request(
            "GET",
            self._url(contract_id, "documents", document_id, "download"),
            action="download document",
        )
        return response.content

    # ------------------------------------------------------------------
    # Templates, reporting, notifications
    # ------------------------------------------------------------------

    async def get_contract_templates(self) -> list[ContractTemplate]:
        response = await self._request("GET", self._url("templates"), action="fetch templates")
        return _templates_adapter.validate_python(response.json())

    async def get_contract_template(self, template_id: str) -> ContractTemplate:
        response = await self._request("GET", self._url("templates", template_id), action="fetch template")
        return ContractTemplate.model_validate(response.json())

    async def get_contract_analytics(
        self,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> ContractAnalytics:
        params = {}
        if date_from is not None:
            params["dateFrom"] = to_iso(date_from)
        if date_to is not None:
            params["dateTo"] = to_iso(date_to)
        response = await self._request("GET", self._url("analytics"), action="fetch analytics", params=params)
        return ContractAnalytics.model_validate(response.json())

    async def get_contract_events(self, contract_id: str) -> list[ContractEvent]:
        response = await self._request("GET", self._url(contract_id, "events"), action="fetch contract events")
        return _events_adapter.validate_python(response.json())

    async def get_contract_notifications(self) -> list[ContractNotification]:
        response = await self._request("GET", self._url("notifications"), action="fetch notifications")
        return _notifications_adapter.validate_python(response.json())

    async def mark_notification_as_read(self, notification_id: str) -> None:
        await self._request(
            "PUT",
            self._url("notifications", notification_id, "read"),
            action="mark notification as read",
        )

    async def generate_contract_pdf(self, contract_id: str) -> bytes:
        response = await self._request("GET", self._url(contract_id, "pdf"), action="generate PDF")
        return response.content

    async def validate_contract(self, data: CreateContractRequest) -> ContractValidationResult:
        """Ask the server to validate a create request without persisting it."""
        response = await self._request(
            "POST", self._url("validate"), action="validate contract", json=data.to_payload()
        )
        return ContractValidationResult.model_validate(response.json())
