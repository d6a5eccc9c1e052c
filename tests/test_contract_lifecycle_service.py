from datetime import timedelta

import pytest

from roc_contracts.enums import ContractAction, ContractStatus, SignatureType
from roc_contracts.errors import ContractValidationError, InvalidTransitionError
from roc_contracts.schemas import ContractSignatures, ContractTermsUpdate
from roc_contracts.services.contract_lifecycle import ContractLifecycleService
from tests.conftest import contract_json

pytestmark = pytest.mark.anyio

CONTRACT = "/api/contracts/ctr-1"


@pytest.fixture
def lifecycle(service, settings):
    return ContractLifecycleService(service, settings)


@pytest.fixture
def refetching(service, settings):
    return ContractLifecycleService(service, settings.model_copy(update={"refetch_after_mutation": True}))


async def test_send_for_signatures(lifecycle, api, make_contract):
    api.add("PUT", CONTRACT, json_body=contract_json(status="pending_signatures"))
    draft = make_contract()

    updated = await lifecycle.send_for_signatures(draft)

    assert api.last_json() == {"status": "pending_signatures"}
    assert updated.status == ContractStatus.pending_signatures
    assert draft.status == ContractStatus.draft


async def test_cancel(lifecycle, api, make_contract):
    api.add("PUT", CONTRACT, json_body=contract_json(status="cancelled"))

    updated = await lifecycle.cancel(make_contract(status=ContractStatus.pending_signatures))

    assert api.last_json() == {"status": "cancelled"}
    assert updated.status == ContractStatus.cancelled


async def test_sign(lifecycle, api, make_contract):
    api.add("POST", f"{CONTRACT}/sign", json_body=contract_json())

    await lifecycle.sign(make_contract(status=ContractStatus.pending_signatures), "tenant")

    assert api.last_json() == {"signatureType": "tenant"}


async def test_activate_blocked_locally(lifecycle, api, make_contract):
    """Missing signatures stop the action before any request goes out."""
    contract = make_contract(status=ContractStatus.pending_signatures)

    with pytest.raises(InvalidTransitionError):
        await lifecycle.activate(contract)

    assert api.requests == []


async def test_activate(lifecycle, api, make_contract):
    api.add("POST", f"{CONTRACT}/activate", json_body=contract_json(status="active"))
    contract = make_contract(
        status=ContractStatus.pending_signatures,
        signatures=ContractSignatures(tenant_signed=True, hoster_signed=True),
    )

    updated = await lifecycle.activate(contract)

    assert updated.status == ContractStatus.active


async def test_terminate_blank_reason_blocked_locally(lifecycle, api, make_contract):
    """The contract stays active and nothing is sent."""
    contract = make_contract(status=ContractStatus.active)

    with pytest.raises(ContractValidationError):
        await lifecycle.terminate(contract, "")

    assert contract.status == ContractStatus.active
    assert api.requests == []


async def test_terminate_wrong_state_blocked_locally(lifecycle, api, make_contract):
    with pytest.raises(InvalidTransitionError):
        await lifecycle.terminate(make_contract(status=ContractStatus.draft), "Changed plans")
    assert api.requests == []


async def test_renew(lifecycle, api, make_contract, now):
    api.add("POST", f"{CONTRACT}/renew", json_body=contract_json(status="active", endDate="2027-01-01T00:00:00.000Z"))
    contract = make_contract(status=ContractStatus.active, end_date=now + timedelta(days=10))

    updated = await lifecycle.renew(contract, now + timedelta(days=375), ContractTermsUpdate(rent_amount=12600))

    body = api.last_json()
    assert body["newTerms"] == {"rentAmount": 12600}
    assert updated.end_date.year == 2027


async def test_renew_earlier_date_blocked_locally(lifecycle, api, make_contract, now):
    contract = make_contract(status=ContractStatus.active, end_date=now + timedelta(days=10))

    with pytest.raises(ContractValidationError):
        await lifecycle.renew(contract, now + timedelta(days=5))

    assert api.requests == []


async def test_refetch_after_mutation(refetching, api, make_contract):
    """With refetching on, the returned snapshot is the one read back from the server."""
    api.add("POST", f"{CONTRACT}/terminate", json_body=contract_json(status="terminated"))
    api.add("GET", CONTRACT, json_body=contract_json(status="terminated", terminationReason="Sold"))

    updated = await refetching.terminate(make_contract(status=ContractStatus.active), "Sold")

    assert [r.method for r in api.requests] == ["POST", "GET"]
    assert updated.termination_reason == "Sold"


async def test_no_refetch_when_disabled(lifecycle, api, make_contract):
    api.add("POST", f"{CONTRACT}/terminate", json_body=contract_json(status="terminated"))

    await lifecycle.terminate(make_contract(status=ContractStatus.active), "Sold")

    assert [r.method for r in api.requests] == ["POST"]


async def test_available_actions_uses_configured_window(service, settings, make_contract, now):
    wide = ContractLifecycleService(service, settings.model_copy(update={"expiring_soon_days": 400}))
    contract = make_contract(status=ContractStatus.active)

    assert wide.available_actions(contract, now) == [ContractAction.renew, ContractAction.terminate]


async def test_sign_guarantor_not_on_contract(lifecycle, api, make_contract):
    with pytest.raises(ContractValidationError):
        await lifecycle.sign(
            make_contract(status=ContractStatus.pending_signatures), SignatureType.guarantor, guarantor_id="g-9"
        )
    assert api.requests == []


async def test_sign_unknown_party_blocked_locally(lifecycle, api, make_contract):
    """An unknown signature type is a validation error and nothing is sent."""
    with pytest.raises(ContractValidationError) as exc_info:
        await lifecycle.sign(make_contract(status=ContractStatus.pending_signatures), "witness")

    assert set(exc_info.value.errors) == {"signature_type"}
    assert api.requests == []


async def test_renew_ignores_null_terms(lifecycle, api, make_contract, now):
    """A term set to null keeps its current value and is not sent."""
    api.add("POST", f"{CONTRACT}/renew", json_body=contract_json(status="active"))
    contract = make_contract(status=ContractStatus.active, end_date=now + timedelta(days=10))

    await lifecycle.renew(contract, now + timedelta(days=400), ContractTermsUpdate.model_validate({"rentAmount": None}))

    assert api.last_json()["newTerms"] == {}
