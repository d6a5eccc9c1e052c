from typing import Any

from roc_contracts.enums import EventType, NotificationStatus, NotificationType
from roc_contracts.schemas.base import CamelModel, UtcDatetime


class ContractEvent(CamelModel):
    """One entry of a contract's audit log."""

    id: str
    contract_id: str
    type: EventType
    description: str = ""
    timestamp: UtcDatetime
    user_id: str | None = None
    metadata: dict[str, Any] = {}


class ContractNotification(CamelModel):
    id: str
    contract_id: str
    type: NotificationType
    title: str = ""
    message: str = ""
    recipients: list[str] = []
    scheduled_for: UtcDatetime
    sent_at: UtcDatetime | None = None
    status: NotificationStatus = NotificationStatus.scheduled
