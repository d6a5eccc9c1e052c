import pytest

from roc_contracts.errors import (
    INVALID_TRANSITION,
    NETWORK_ERROR,
    NOT_FOUND,
    REMOTE_ERROR,
    VALIDATION_ERROR,
    ContractsError,
    ContractValidationError,
    InvalidTransitionError,
    NetworkError,
    NotFoundError,
    RemoteError,
    RemoteInvalidTransitionError,
)


@pytest.mark.parametrize(
    "exc, code, retryable",
    [
        (ContractValidationError({"reason": "A termination reason is required"}), VALIDATION_ERROR, False),
        (InvalidTransitionError("Cannot terminate"), INVALID_TRANSITION, False),
        (RemoteError("Boom", status_code=500), REMOTE_ERROR, False),
        (NotFoundError("Contract not found", status_code=404), NOT_FOUND, False),
        (RemoteInvalidTransitionError("Not active", status_code=409), INVALID_TRANSITION, False),
        (NetworkError("Offline"), NETWORK_ERROR, True),
    ],
)
def test_codes(exc, code, retryable):
    assert isinstance(exc, ContractsError)
    assert exc.code == code
    assert exc.retryable is retryable


def test_remote_error_keeps_server_code():
    exc = RemoteError("Rate limited", status_code=429, code="RATE_LIMITED")
    assert exc.code == "RATE_LIMITED"
    assert RemoteError("Boom", status_code=500).code == REMOTE_ERROR


def test_validation_error_message_joins_fields():
    exc = ContractValidationError({"end_date": "End date must be in the future", "reason": "Required"})
    assert str(exc) == "End date must be in the future; Required"


def test_remote_invalid_transition_is_both():
    exc = RemoteInvalidTransitionError("Not active", status_code=409, action="terminate contract")
    assert isinstance(exc, RemoteError)
    assert isinstance(exc, InvalidTransitionError)
    assert exc.action == "terminate contract"
    assert exc.status_code == 409


def test_invalid_transition_details():
    exc = InvalidTransitionError("Cannot cancel", status="active", action="cancel")
    assert (exc.status, exc.action) == ("active", "cancel")
