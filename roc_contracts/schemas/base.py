"""Shared pydantic configuration for the contracts wire format.

The API speaks camelCase JSON with ISO-8601 timestamps. Models expose
snake_case attributes and native ``datetime`` values; every timestamp is
normalised to UTC so that comparisons against ``datetime.now(timezone.utc)``
never mix naive and aware values.
"""

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self, **kwargs: Any) -> dict[str, Any]:
        """Dump to a JSON-ready dict using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


def to_iso(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix, matching how the models serialise."""
    return as_utc(value).isoformat().replace("+00:00", "Z")
