import json
import os
from datetime import datetime, timedelta, timezone

# Keep a developer's environment from leaking into the settings under test
for _var in list(os.environ):
    if _var.startswith("ROC_"):
        del os.environ[_var]

import httpx
import pytest

from roc_contracts.core.config import Settings
from roc_contracts.enums import ContractStatus, PartyRole
from roc_contracts.schemas.contract import Contract, ContractParty, ContractTerms
from roc_contracts.services.contract import ContractService

BASE_URL = "http://api.test/api"
FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def now() -> datetime:
    """Fixed instant used by the pure domain tests."""
    return FIXED_NOW


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url=BASE_URL,
        api_token="test-token",
        refetch_after_mutation=False,
    )


def party(party_id: str, role: PartyRole, name: str | None = None) -> ContractParty:
    return ContractParty(
        id=party_id,
        name=name or party_id.title(),
        email=f"{party_id}@example.com",
        phone="+52 55 0000 0000",
        id_number=f"ID-{party_id}",
        role=role,
    )


def build_contract(now: datetime, **overrides) -> Contract:
    """Build a valid contract around ``now``; keyword overrides replace fields."""
    fields = {
        "id": "ctr-1",
        "property_id": "prop-1",
        "property_title": "Loft in Roma Norte",
        "tenant": party("tenant", PartyRole.tenant),
        "hoster": party("hoster", PartyRole.hoster),
        "guarantors": [],
        "start_date": now - timedelta(days=30),
        "end_date": now + timedelta(days=335),
        "terms": ContractTerms(rent_amount=12000, deposit_amount=12000, payment_due_day=5),
        "status": ContractStatus.draft,
        "created_at": now - timedelta(days=40),
    }
    fields.update(overrides)
    return Contract(**fields)


@pytest.fixture
def make_contract(now):
    def _make(**overrides) -> Contract:
        return build_contract(now, **overrides)

    return _make


def contract_json(**overrides):
    """A contract body as the API sends it."""
    body = {
        "id": "ctr-1",
        "propertyId": "prop-1",
        "propertyTitle": "Loft in Roma Norte",
        "tenant": {"id": "t-1", "name": "Ana", "email": "ana@example.com", "role": "tenant"},
        "hoster": {"id": "h-1", "name": "Luis", "email": "luis@example.com", "role": "hoster"},
        "guarantors": [],
        "startDate": "2025-01-01T00:00:00.000Z",
        "endDate": "2026-01-01T00:00:00.000Z",
        "terms": {"rentAmount": 12000, "depositAmount": 12000, "paymentDueDay": 5},
        "status": "pending_signatures",
        "createdAt": "2024-12-20T09:30:15.250Z",
        "signatures": {
            "tenantSigned": True,
            "tenantSignedAt": "2024-12-21T10:00:00.000Z",
            "hosterSigned": False,
            "guarantorsSigned": {},
        },
        "payments": [
            {"id": "p-1", "type": "rent", "amount": 12000, "dueDate": "2025-01-05T00:00:00.000Z", "status": "paid"}
        ],
    }
    body.update(overrides)
    return body


class FakeContractsApi:
    """Canned responses keyed by (method, path); records every request it sees."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, dict]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int = 200, json_body=None, content: bytes | None = None, headers=None):
        if json_body is not None:
            kwargs = {"json": json_body, "headers": headers}
        else:
            kwargs = {"content": content or b"", "headers": headers}
        self.routes[(method, path)] = (status_code, kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        status_code, kwargs = self.routes[key]
        return httpx.Response(status_code, **kwargs)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def api() -> FakeContractsApi:
    return FakeContractsApi()


@pytest.fixture
def service(settings, api) -> ContractService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(api.handler))
    return ContractService(settings, client=client)
