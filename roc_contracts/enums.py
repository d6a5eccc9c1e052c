from enum import Enum


class ContractStatus(str, Enum):
    draft = "draft"
    pending_signatures = "pending_signatures"
    active = "active"
    expired = "expired"
    terminated = "terminated"
    cancelled = "cancelled"


class ContractAction(str, Enum):
    send_for_signatures = "send_for_signatures"
    sign = "sign"
    activate = "activate"
    terminate = "terminate"
    renew = "renew"
    cancel = "cancel"
    expire = "expire"


class SignatureType(str, Enum):
    tenant = "tenant"
    hoster = "hoster"
    guarantor = "guarantor"


class PartyRole(str, Enum):
    tenant = "tenant"
    hoster = "hoster"
    guarantor = "guarantor"


class PaymentType(str, Enum):
    rent = "rent"
    deposit = "deposit"
    utilities = "utilities"
    maintenance = "maintenance"
    penalty = "penalty"
    other = "other"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    overdue = "overdue"
    partial = "partial"


class PaymentFrequency(str, Enum):
    monthly = "monthly"
    biweekly = "biweekly"
    weekly = "weekly"


class MaintenanceResponsibility(str, Enum):
    tenant = "tenant"
    hoster = "hoster"
    shared = "shared"


class DocumentType(str, Enum):
    contract = "contract"
    addendum = "addendum"
    invoice = "invoice"
    receipt = "receipt"
    inspection = "inspection"
    other = "other"


class ClauseCategory(str, Enum):
    rent = "rent"
    deposit = "deposit"
    utilities = "utilities"
    maintenance = "maintenance"
    termination = "termination"
    rules = "rules"
    other = "other"


class TemplateCategory(str, Enum):
    residential = "residential"
    commercial = "commercial"
    short_term = "short_term"
    student = "student"


class EventType(str, Enum):
    created = "created"
    signed = "signed"
    activated = "activated"
    payment_due = "payment_due"
    payment_received = "payment_received"
    expired = "expired"
    terminated = "terminated"
    renewed = "renewed"


class NotificationType(str, Enum):
    payment_due = "payment_due"
    payment_overdue = "payment_overdue"
    contract_expiring = "contract_expiring"
    contract_expired = "contract_expired"
    signature_required = "signature_required"


class NotificationStatus(str, Enum):
    scheduled = "scheduled"
    sent = "sent"
    failed = "failed"


class SortField(str, Enum):
    created_at = "createdAt"
    start_date = "startDate"
    end_date = "endDate"
    rent_amount = "rentAmount"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"
