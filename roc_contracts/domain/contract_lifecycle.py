"""Status state machine for contracts.

States and the actions that move between them::

    draft --send_for_signatures--> pending_signatures --activate--> active
    pending_signatures --sign--> pending_signatures
    active --terminate--> terminated
    active --expire--> expired
    active | expired --renew--> active
    draft | pending_signatures --cancel--> cancelled

``terminated`` and ``cancelled`` are final. ``expired`` is final except for
renewal. Nothing ever returns to ``draft``.

Transitions never mutate the contract they are given: each one validates its
guard first and returns a new snapshot, so a rejected action leaves the
caller's state exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pydantic import ValidationError

from roc_contracts.domain.contract_analytics import (
    DEFAULT_EXPIRING_SOON_DAYS,
    all_signatures_collected,
    missing_signatures,
    utcnow,
)
from roc_contracts.domain.contract_validation import errors_from_pydantic
from roc_contracts.enums import ContractAction, ContractStatus, SignatureType
from roc_contracts.errors import ContractValidationError, InvalidTransitionError
from roc_contracts.schemas.base import as_utc
from roc_contracts.schemas.contract import (
    Contract,
    ContractTerms,
    ContractTermsUpdate,
    GuarantorSignature,
)

# action -> (allowed source statuses, target status)
TRANSITIONS: dict[ContractAction, tuple[frozenset[ContractStatus], ContractStatus]] = {
    ContractAction.send_for_signatures: (
        frozenset({ContractStatus.draft}),
        ContractStatus.pending_signatures,
    ),
    ContractAction.sign: (
        frozenset({ContractStatus.pending_signatures}),
        ContractStatus.pending_signatures,
    ),
    ContractAction.activate: (
        frozenset({ContractStatus.pending_signatures}),
        ContractStatus.active,
    ),
    ContractAction.terminate: (
        frozenset({ContractStatus.active}),
        ContractStatus.terminated,
    ),
    ContractAction.expire: (
        frozenset({ContractStatus.active}),
        ContractStatus.expired,
    ),
    ContractAction.renew: (
        frozenset({ContractStatus.active, ContractStatus.expired}),
        ContractStatus.active,
    ),
    ContractAction.cancel: (
        frozenset({ContractStatus.draft, ContractStatus.pending_signatures}),
        ContractStatus.cancelled,
    ),
}

TERMINAL_STATUSES = frozenset(
    {ContractStatus.expired, ContractStatus.terminated, ContractStatus.cancelled}
)


def is_terminal(status: ContractStatus) -> bool:
    return status in TERMINAL_STATUSES


def merge_terms(terms: ContractTerms, update: ContractTermsUpdate | None) -> ContractTerms:
    """Overlay the fields explicitly set on ``update`` and re-validate the result.

    A field set to None keeps its current value. Raises ContractValidationError,
    keyed under ``new_terms.<field>``, when the merged terms are invalid.
    """
    if update is None:
        return terms
    changes = update.model_dump(include=update.model_fields_set, exclude_none=True)
    try:
        return ContractTerms.model_validate({**terms.model_dump(), **changes})
    except ValidationError as exc:
        errors = errors_from_pydantic(exc)
        raise ContractValidationError({f"new_terms.{loc}": msg for loc, msg in errors.items()}) from exc


@dataclass(frozen=True, slots=True)
class ContractLifecyclePolicy:
    """Transition rules evaluated "as of" a given instant."""

    now: datetime = field(default_factory=utcnow)
    expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS

    def __post_init__(self) -> None:
        object.__setattr__(self, "now", as_utc(self.now))

    # --- queries -----------------------------------------------------------

    def can(self, contract: Contract, action: ContractAction) -> bool:
        sources, _ = TRANSITIONS[action]
        if contract.status not in sources:
            return False
        if action == ContractAction.activate:
            return all_signatures_collected(contract)
        if action == ContractAction.sign:
            return bool(missing_signatures(contract))
        if action == ContractAction.expire:
            return contract.end_date <= self.now
        return True

    def ensure_can(self, contract: Contract, action: ContractAction) -> None:
        """Raise InvalidTransitionError unless ``action`` is legal from the contract's status."""
        sources, _ = TRANSITIONS[action]
        if contract.status not in sources:
            allowed = ", ".join(sorted(s.value for s in sources))
            raise InvalidTransitionError(
                f"Cannot {action.value} a contract in status '{contract.status.value}' "
                f"(allowed from: {allowed})",
                status=contract.status.value,
                action=action.value,
            )
        if action == ContractAction.activate and not all_signatures_collected(contract):
            raise InvalidTransitionError(
                "Cannot activate contract: missing signatures from "
                + ", ".join(missing_signatures(contract)),
                status=contract.status.value,
                action=action.value,
            )

    def available_actions(self, contract: Contract) -> list[ContractAction]:
        """Bulk actions to offer for the contract; signing is per party and never listed."""
        status = contract.status
        if status == ContractStatus.draft:
            return [ContractAction.send_for_signatures]
        if status == ContractStatus.pending_signatures:
            return [ContractAction.activate] if all_signatures_collected(contract) else []
        if status == ContractStatus.active:
            actions = []
            if contract.end_date <= self.now + timedelta(days=self.expiring_soon_days):
                actions.append(ContractAction.renew)
            actions.append(ContractAction.terminate)
            return actions
        if status == ContractStatus.expired:
            return [ContractAction.renew]
        return []

    def effective_status(self, contract: Contract) -> ContractStatus:
        """Status as of ``now``: an active contract past its end date reads as expired."""
        if contract.status == ContractStatus.active and contract.end_date <= self.now:
            return ContractStatus.expired
        return contract.status

    # --- transitions -------------------------------------------------------

    def _move(self, contract: Contract, action: ContractAction, **changes) -> Contract:
        _, target = TRANSITIONS[action]
        return contract.model_copy(update={"status": target, "updated_at": self.now, **changes})

    def send_for_signatures(self, contract: Contract) -> Contract:
        self.ensure_can(contract, ContractAction.send_for_signatures)
        return self._move(contract, ContractAction.send_for_signatures)

    def sign(
        self,
        contract: Contract,
        signature_type: SignatureType,
        guarantor_id: str | None = None,
        signature: str | None = None,
    ) -> Contract:
        self.ensure_can(contract, ContractAction.sign)
        signature_type = SignatureType(signature_type)
        signatures = contract.signatures

        if signature_type == SignatureType.guarantor:
            if guarantor_id not in {g.id for g in contract.guarantors}:
                raise ContractValidationError(
                    {"guarantor_id": f"'{guarantor_id}' is not a guarantor of this contract"}
                )
            current = signatures.guarantors_signed.get(guarantor_id)
            if current is not None and current.signed:
                raise InvalidTransitionError(
                    f"Guarantor '{guarantor_id}' has already signed",
                    status=contract.status.value,
                    action=ContractAction.sign.value,
                )
            guarantors = dict(signatures.guarantors_signed)
            guarantors[guarantor_id] = GuarantorSignature(
                signed=True, signed_at=self.now, signature=signature
            )
            signatures = signatures.model_copy(update={"guarantors_signed": guarantors})
        else:
            party = signature_type.value
            if getattr(signatures, f"{party}_signed"):
                raise InvalidTransitionError(
                    f"The {party} has already signed",
                    status=contract.status.value,
                    action=ContractAction.sign.value,
                )
            signatures = signatures.model_copy(
                update={
                    f"{party}_signed": True,
                    f"{party}_signed_at": self.now,
                    f"{party}_signature": signature,
                }
            )

        signed = contract.model_copy(update={"signatures": signatures, "updated_at": self.now})
        if all_signatures_collected(signed) and signed.signed_at is None:
            signed = signed.model_copy(update={"signed_at": self.now})
        return signed

    def activate(self, contract: Contract) -> Contract:
        self.ensure_can(contract, ContractAction.activate)
        return self._move(
            contract,
            ContractAction.activate,
            activated_at=self.now,
            signed_at=contract.signed_at or self.now,
        )

    def terminate(self, contract: Contract, reason: str) -> Contract:
        self.ensure_can(contract, ContractAction.terminate)
        if not reason or not reason.strip():
            raise ContractValidationError({"reason": "A termination reason is required"})
        return self._move(
            contract,
            ContractAction.terminate,
            terminated_at=self.now,
            termination_reason=reason.strip(),
        )

    def renew(
        self,
        contract: Contract,
        new_end_date: datetime,
        new_terms: ContractTermsUpdate | None = None,
    ) -> Contract:
        """Extend the same contract: replace end_date, overlay terms, reactivate."""
        self.ensure_can(contract, ContractAction.renew)
        new_end_date = as_utc(new_end_date)
        threshold = contract.end_date
        if contract.status == ContractStatus.expired:
            threshold = max(threshold, self.now)
        if new_end_date <= threshold:
            raise ContractValidationError(
                {"new_end_date": f"New end date must be after {threshold.isoformat()}"}
            )
        return self._move(
            contract,
            ContractAction.renew,
            end_date=new_end_date,
            terms=merge_terms(contract.terms, new_terms),
            activated_at=contract.activated_at or self.now,
        )

    def cancel(self, contract: Contract) -> Contract:
        self.ensure_can(contract, ContractAction.cancel)
        return self._move(contract, ContractAction.cancel)

    def expire(self, contract: Contract) -> Contract:
        self.ensure_can(contract, ContractAction.expire)
        if contract.end_date > self.now:
            raise InvalidTransitionError(
                "Cannot expire contract before its end date",
                status=contract.status.value,
                action=ContractAction.expire.value,
            )
        return self._move(contract, ContractAction.expire)
