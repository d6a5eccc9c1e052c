"""Error body returned by the contracts API on non-2xx responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str | None = Field(None, description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")
    detail: Any = None

    def best_message(self) -> str | None:
        if self.message:
            return self.message
        if isinstance(self.detail, str) and self.detail:
            return self.detail
        return None
