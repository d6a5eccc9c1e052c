"""Client-side checks run before a contract form is submitted.

Static shape and ranges (positive rent, due day 1-31, ...) are enforced by the
pydantic schemas; this module adds the rules that depend on the current date
and folds everything into a single ContractValidationError keyed by field.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from roc_contracts.domain.contract_analytics import utcnow
from roc_contracts.errors import ContractValidationError
from roc_contracts.schemas.base import as_utc
from roc_contracts.schemas.contract import CreateContractRequest

DEFAULT_MIN_CONTRACT_DAYS = 30


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def contract_date_errors(
    start_date: datetime,
    end_date: datetime,
    now: datetime | None = None,
    min_days: int = DEFAULT_MIN_CONTRACT_DAYS,
) -> dict[str, str]:
    """Return field -> message for every date rule the pair breaks."""
    today = _start_of_day(as_utc(now or utcnow()))
    start_date, end_date = as_utc(start_date), as_utc(end_date)

    if start_date >= end_date:
        return {"end_date": "End date must be after start date"}

    errors = {}
    if end_date <= today:
        errors["end_date"] = "End date must be in the future"
    elif end_date - start_date < timedelta(days=min_days):
        errors["end_date"] = f"Contract must last at least {min_days} days"
    return errors


def validate_contract_dates(
    start_date: datetime,
    end_date: datetime,
    now: datetime | None = None,
    min_days: int = DEFAULT_MIN_CONTRACT_DAYS,
) -> None:
    errors = contract_date_errors(start_date, end_date, now, min_days)
    if errors:
        raise ContractValidationError(errors)


def errors_from_pydantic(exc: ValidationError) -> dict[str, str]:
    """Flatten pydantic errors into field -> first message, using snake_case dotted paths."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = ".".join(to_snake(str(part)) for part in error["loc"]) or "__root__"
        message = error["msg"].removeprefix("Value error, ")
        errors.setdefault(loc, message)
    return errors


def validate_create_request(
    data: CreateContractRequest | dict[str, Any],
    now: datetime | None = None,
    min_days: int = DEFAULT_MIN_CONTRACT_DAYS,
) -> CreateContractRequest:
    """Validate a create form and return the parsed request.

    Raises ContractValidationError carrying every field error found, so the
    form can flag all offending inputs at once.
    """
    if isinstance(data, CreateContractRequest):
        request = data
    else:
        try:
            request = CreateContractRequest.model_validate(data)
        except ValidationError as exc:
            errors = errors_from_pydantic(exc)
            # Model-level errors (date ordering) are reported against end_date
            if "__root__" in errors:
                errors["end_date"] = errors.pop("__root__")
            raise ContractValidationError(errors) from exc

    errors = contract_date_errors(request.start_date, request.end_date, now, min_days)
    if errors:
        raise ContractValidationError(errors)
    return request
