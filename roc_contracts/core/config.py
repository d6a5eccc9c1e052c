from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    api_base_url: str = Field(default="http://localhost:5000/api", alias="ROC_API_BASE_URL")

    # Bearer token supplied by whoever authenticated the user
    api_token: str | None = Field(default=None, alias="ROC_API_TOKEN")

    # None means requests wait for the server indefinitely
    request_timeout: float | None = Field(default=None, alias="ROC_REQUEST_TIMEOUT")

    # Lifecycle windows (days)
    expiring_soon_days: int = Field(default=30, ge=0, alias="ROC_EXPIRING_SOON_DAYS")
    min_contract_days: int = Field(default=30, ge=1, alias="ROC_MIN_CONTRACT_DAYS")

    refetch_after_mutation: bool = Field(default=True, alias="ROC_REFETCH_AFTER_MUTATION")

    @field_validator("api_token", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("request_timeout", mode="before")
    @classmethod
    def empty_str_to_none_float(cls, v: str | float | None) -> float | None:
        """Convert empty strings to None for the optional timeout."""
        if v == "":
            return None
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
