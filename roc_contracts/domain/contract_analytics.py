"""Figures derived from contract snapshots.

Everything here is a pure function of its arguments and the ``now`` it is
given; results are meant to be recomputed on every render, never stored.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from roc_contracts.enums import ContractStatus, PaymentFrequency, PaymentStatus, PaymentType
from roc_contracts.schemas.analytics import ContractAnalytics, MonthlyRevenue
from roc_contracts.schemas.base import as_utc
from roc_contracts.schemas.contract import Contract
from roc_contracts.schemas.payment import ContractPayment

DEFAULT_EXPIRING_SOON_DAYS = 30

PAYMENTS_PER_YEAR = {
    PaymentFrequency.weekly: 52,
    PaymentFrequency.biweekly: 26,
    PaymentFrequency.monthly: 12,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_of(now: datetime | None) -> datetime:
    """The instant to evaluate at: ``now`` read as UTC, or the current time."""
    return as_utc(now) if now is not None else utcnow()


@dataclass(frozen=True, slots=True)
class SignatureProgress:
    completed: int
    total: int

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def percentage(self) -> int:
        """Ratio as a whole percentage, rounded for display."""
        return round(self.ratio * 100)

    @property
    def is_complete(self) -> bool:
        return self.completed == self.total


def _guarantor_signed(contract: Contract, guarantor_id: str) -> bool:
    entry = contract.signatures.guarantors_signed.get(guarantor_id)
    return entry is not None and entry.signed


def signature_progress(contract: Contract) -> SignatureProgress:
    """Count collected signatures against the required set.

    Required = tenant + hoster + every guarantor listed on the contract. A
    guarantor counts as signed only through its own entry in the signature map,
    so stray map entries never push the ratio above 1.
    """
    signatures = contract.signatures
    completed = int(signatures.tenant_signed) + int(signatures.hoster_signed)
    completed += sum(1 for g in contract.guarantors if _guarantor_signed(contract, g.id))
    return SignatureProgress(completed=completed, total=2 + len(contract.guarantors))


def all_signatures_collected(contract: Contract) -> bool:
    return signature_progress(contract).is_complete


def missing_signatures(contract: Contract) -> list[str]:
    """Labels of the parties that still have to sign, in signing-panel order."""
    missing = []
    if not contract.signatures.tenant_signed:
        missing.append("tenant")
    if not contract.signatures.hoster_signed:
        missing.append("hoster")
    missing.extend(
        f"guarantor:{g.id}" for g in contract.guarantors if not _guarantor_signed(contract, g.id)
    )
    return missing


def days_until_expiration(contract: Contract, now: datetime | None = None) -> int:
    """Whole days left until end_date, rounded up; zero or negative means the term is over.

    This reads the dates only; the stored status may still say ``active`` if
    the server has not swept the contract yet.
    """
    now = _as_of(now)
    return math.ceil((contract.end_date - now) / timedelta(days=1))


def is_expiring_soon(
    contract: Contract,
    now: datetime | None = None,
    days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> bool:
    now = _as_of(now)
    return contract.status == ContractStatus.active and contract.end_date <= now + timedelta(days=days)


def is_payment_overdue(payment: ContractPayment, now: datetime | None = None) -> bool:
    now = _as_of(now)
    if payment.status == PaymentStatus.overdue:
        return True
    return payment.status == PaymentStatus.pending and payment.due_date < now


def overdue_payments(contract: Contract, now: datetime | None = None) -> list[ContractPayment]:
    now = _as_of(now)
    return [p for p in contract.payments if is_payment_overdue(p, now)]


def has_overdue_payments(contract: Contract, now: datetime | None = None) -> bool:
    now = _as_of(now)
    return any(is_payment_overdue(p, now) for p in contract.payments)


def next_payment_due(contract: Contract) -> ContractPayment | None:
    """Earliest pending payment; equal due dates keep their list order."""
    pending = [p for p in contract.payments if p.status == PaymentStatus.pending]
    if not pending:
        return None
    # min() returns the first of several equal keys
    return min(pending, key=lambda p: p.due_date)


def total_contract_value(contract: Contract) -> float:
    """Rent due over the whole term, by number of payment periods started."""
    duration_days = (contract.end_date - contract.start_date).days
    per_year = PAYMENTS_PER_YEAR[contract.terms.payment_frequency]
    total_payments = math.ceil(duration_days * per_year / 365)
    return total_payments * contract.terms.rent_amount


def summarize_portfolio(
    contracts: Iterable[Contract],
    now: datetime | None = None,
    expiring_soon_days: int = DEFAULT_EXPIRING_SOON_DAYS,
) -> ContractAnalytics:
    """Reproduce the portfolio figures the analytics endpoint reports.

    Rent collected only counts ``paid`` rent payments; monthly revenue groups
    those payments by the month of their paid date.
    """
    now = _as_of(now)
    contracts = list(contracts)
    if not contracts:
        return ContractAnalytics()

    by_status = Counter(c.status.value for c in contracts)
    active = by_status.get(ContractStatus.active.value, 0)

    revenue: dict[str, float] = {}
    collected = 0.0
    for contract in contracts:
        for payment in contract.payments:
            if payment.status != PaymentStatus.paid or payment.type != PaymentType.rent:
                continue
            collected += payment.amount
            paid_on = payment.paid_date or payment.due_date
            month = paid_on.strftime("%Y-%m")
            revenue[month] = revenue.get(month, 0.0) + payment.amount

    return ContractAnalytics(
        total_contracts=len(contracts),
        active_contracts=active,
        expiring_soon=sum(1 for c in contracts if is_expiring_soon(c, now, expiring_soon_days)),
        overdue_payments=sum(1 for c in contracts if has_overdue_payments(c, now)),
        total_rent_collected=collected,
        average_rent_amount=sum(c.terms.rent_amount for c in contracts) / len(contracts),
        occupancy_rate=active / len(contracts) * 100,
        contracts_by_status=dict(by_status),
        monthly_revenue=[MonthlyRevenue(month=m, amount=a) for m, a in sorted(revenue.items())],
    )
